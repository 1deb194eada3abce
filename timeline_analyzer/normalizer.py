"""Action type normalization into coarse event categories."""

from __future__ import annotations

from timeline_analyzer.schema import EventCategory

_MOUSE_ACTIONS = {"mousedown", "mouseup", "click"}
_KNOWN_LABELS = {
    EventCategory.KEYBOARD.value: EventCategory.KEYBOARD,
    EventCategory.MOUSE_MOVE.value: EventCategory.MOUSE_MOVE,
    EventCategory.MOUSE_ACTION.value: EventCategory.MOUSE_ACTION,
    EventCategory.SCROLL.value: EventCategory.SCROLL,
}


def normalize(action_type: str) -> str:
    """Map a raw action label to its category name, or return it unchanged."""

    folded = action_type.casefold()

    if "key" in folded:
        return EventCategory.KEYBOARD.value
    if folded == "mousemove":
        return EventCategory.MOUSE_MOVE.value
    if folded in _MOUSE_ACTIONS:
        return EventCategory.MOUSE_ACTION.value
    if folded == "scroll":
        return EventCategory.SCROLL.value
    return action_type


def categorize(label: str) -> EventCategory:
    """Return the category for a normalized label, OTHER for passthrough labels."""

    return _KNOWN_LABELS.get(normalize(label), EventCategory.OTHER)

"""JSON-object log line adapter."""

from __future__ import annotations

import json
import math
from typing import Any, Optional

from timeline_analyzer.schema import Coordinates, RawEvent

_REQUIRED_FIELDS = ("timestamp", "actionType")


def _coerce_timestamp(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        timestamp = float(value)
    except (TypeError, ValueError):
        return None
    return timestamp if math.isfinite(timestamp) else None


def _coerce_coordinates(item: dict) -> Optional[Coordinates]:
    if item.get("x") is None or item.get("y") is None:
        return None
    try:
        return Coordinates(x=int(item["x"]), y=int(item["y"]))
    except (TypeError, ValueError):
        return None


def parse_item(item: Any) -> Optional[RawEvent]:
    """Build an event from a decoded JSON object, or None if fields are missing."""

    if not isinstance(item, dict):
        return None
    if any(field not in item for field in _REQUIRED_FIELDS):
        return None

    action_type = item["actionType"]
    if not isinstance(action_type, str):
        return None

    timestamp = _coerce_timestamp(item["timestamp"])
    if timestamp is None:
        return None

    key = item.get("key")
    target = item.get("target")
    return RawEvent(
        timestamp=timestamp,
        action_type=action_type,
        coordinates=_coerce_coordinates(item),
        key=str(key) if key else None,
        target=str(target) if target else None,
    )


def parse_line(line: str) -> Optional[RawEvent]:
    """Parse one line as a JSON event object."""

    try:
        payload = json.loads(line)
    except ValueError:
        return None
    return parse_item(payload)

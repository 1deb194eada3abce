"""Core data schema for log events and critical points."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Optional


class EventCategory(str, Enum):
    """Coarse event categories used for transition detection."""

    KEYBOARD = "Keyboard"
    MOUSE_MOVE = "MouseMove"
    MOUSE_ACTION = "MouseAction"
    SCROLL = "Scroll"
    OTHER = "Other"


@dataclass(frozen=True)
class Coordinates:
    x: int
    y: int


@dataclass(frozen=True)
class RawEvent:
    """One parsed log line, before normalization."""

    timestamp: float
    action_type: str
    coordinates: Optional[Coordinates] = None
    key: Optional[str] = None
    target: Optional[str] = None


@dataclass(frozen=True)
class NormalizedEvent:
    """Raw event tagged with its normalized type label."""

    timestamp: float
    action_type: str
    normalized_type: str
    coordinates: Optional[Coordinates] = None
    key: Optional[str] = None
    target: Optional[str] = None

    @classmethod
    def from_raw(cls, raw: RawEvent) -> "NormalizedEvent":
        from timeline_analyzer.normalizer import normalize

        return cls(
            timestamp=raw.timestamp,
            action_type=raw.action_type,
            normalized_type=normalize(raw.action_type),
            coordinates=raw.coordinates,
            key=raw.key,
            target=raw.target,
        )

    @property
    def category(self) -> EventCategory:
        from timeline_analyzer.normalizer import categorize

        return categorize(self.normalized_type)


@dataclass(frozen=True)
class CriticalPoint(NormalizedEvent):
    """Normalized event selected by the reducer, optionally mapped onto video time."""

    video_timestamp: Optional[float] = None

    @classmethod
    def from_event(cls, event: NormalizedEvent) -> "CriticalPoint":
        return cls(
            timestamp=event.timestamp,
            action_type=event.action_type,
            normalized_type=event.normalized_type,
            coordinates=event.coordinates,
            key=event.key,
            target=event.target,
        )

    def with_video_time(self, video_timestamp: float) -> "CriticalPoint":
        return replace(self, video_timestamp=video_timestamp)

    @property
    def display_time(self) -> float:
        """Video time when mapped, log time otherwise."""
        return self.video_timestamp if self.video_timestamp is not None else self.timestamp

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "timestamp": self.timestamp,
            "actionType": self.action_type,
            "normalizedType": self.normalized_type,
        }
        if self.video_timestamp is not None:
            payload["videoTimestamp"] = self.video_timestamp
        if self.coordinates is not None:
            payload["coordinates"] = {"x": self.coordinates.x, "y": self.coordinates.y}
        if self.key:
            payload["key"] = self.key
        if self.target:
            payload["target"] = self.target
        return payload

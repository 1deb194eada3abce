"""Timeline display helpers: time formatting, colours, positions and hit testing."""

from __future__ import annotations

import math
from typing import Optional

from timeline_analyzer.config import TIMELINE_CONFIG
from timeline_analyzer.schema import CriticalPoint

_DEFAULT_COLOR = "#6b7280"
_CATEGORY_COLORS = {
    "keyboard": "#8b5cf6",
    "mousemove": "#10b981",
    "mouseaction": "#ef4444",
    "scroll": "#f59e0b",
    # raw labels, for points shown without normalization
    "keypress": "#8b5cf6",
    "keydown": "#8b5cf6",
    "keyup": "#8b5cf6",
    "keyrelease": "#8b5cf6",
    "mousedown": "#ef4444",
    "mouseup": "#dc2626",
    "click": "#b91c1c",
}


def format_time(seconds: float) -> str:
    """Format seconds as ``m:ss.mmm``."""

    if not math.isfinite(seconds):
        return "0:00.000"
    mins = int(seconds // 60)
    secs = int(seconds % 60)
    ms = int((seconds % 1) * 1000)
    return f"{mins}:{secs:02d}.{ms:03d}"


def format_video_time(seconds: float) -> str:
    if not math.isfinite(seconds):
        return "0:00"
    return f"{int(seconds // 60)}:{int(seconds % 60):02d}"


def format_duration(seconds: float) -> str:
    if seconds < 1:
        return f"{int(seconds * 1000)}ms"
    return f"{int(seconds)}s {int((seconds % 1) * 1000)}ms"


def category_color(label: str) -> str:
    return _CATEGORY_COLORS.get(label.casefold(), _DEFAULT_COLOR)


def timeline_window(points: list[CriticalPoint], buffer_seconds: Optional[float] = None) -> tuple[float, float]:
    """Return ``(start, duration)`` of the visible timeline, padded at the end."""

    if not points:
        return 0.0, 0.0
    buffer = TIMELINE_CONFIG['buffer_seconds'] if buffer_seconds is None else buffer_seconds
    start = points[0].display_time
    return start, points[-1].display_time - start + buffer


def position_percent(point: CriticalPoint, start: float, duration: float) -> float:
    if duration <= 0:
        return 0.0
    return (point.display_time - start) / duration * 100.0


def nearest_point(points: list[CriticalPoint], time_s: float) -> Optional[CriticalPoint]:
    """Closest point to ``time_s``; ties resolve to the earlier point."""

    if not points:
        return None
    return min(points, key=lambda p: abs(p.display_time - time_s))


def type_changes(points: list[CriticalPoint]) -> list[int]:
    """Indices of points whose category differs from the previous point."""

    return [
        index
        for index in range(1, len(points))
        if points[index].normalized_type != points[index - 1].normalized_type
    ]

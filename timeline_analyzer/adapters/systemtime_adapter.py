"""Adapter for ``SystemTime { tv_sec, tv_nsec }`` log lines."""

from __future__ import annotations

import re
from typing import Optional

from timeline_analyzer.schema import Coordinates, RawEvent

_PATTERN = re.compile(
    r"SystemTime\s*\{\s*tv_sec:\s*(\d+),\s*tv_nsec:\s*(\d+)\s*\}:\s*(\w+)(?:\s+(.+))?"
)
_KEY_ACTIONS = {"KeyPress", "KeyRelease"}


def _parse_coordinates(data: str) -> Optional[Coordinates]:
    parts = data.split(",")
    if len(parts) < 2:
        return None
    try:
        return Coordinates(x=int(parts[0].strip()), y=int(parts[1].strip()))
    except ValueError:
        return None


def parse_line(line: str) -> Optional[RawEvent]:
    """Parse a SystemTime line; nanoseconds collapse into float seconds."""

    match = _PATTERN.search(line)
    if not match:
        return None

    sec_raw, nsec_raw, action_type, data = match.groups()
    timestamp = int(sec_raw) + int(nsec_raw) / 1e9

    coordinates = None
    key = None
    if action_type == "MouseMove" and data:
        coordinates = _parse_coordinates(data)
    elif action_type in _KEY_ACTIONS and data:
        key = data.strip()

    return RawEvent(timestamp=timestamp, action_type=action_type, coordinates=coordinates, key=key)

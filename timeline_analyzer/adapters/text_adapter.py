"""Plain-text log line adapters: bracketed and bare-space timestamps."""

from __future__ import annotations

import re
from typing import Optional

from timeline_analyzer.schema import Coordinates, RawEvent

# [12.5] MouseMove (100, 200)
_BRACKET_PATTERN = re.compile(r"\[(\d+\.\d+)\]\s+(\w+)(?:\s+\((\d+),\s*(\d+)\))?")
# 12.5 MouseMove 100 200
_SPACE_PATTERN = re.compile(r"(\d+\.\d+)\s+(\w+)(?:\s+(\d+)\s+(\d+))?")


def _build(match: re.Match) -> RawEvent:
    timestamp, action_type, x, y = match.groups()
    coordinates = Coordinates(x=int(x), y=int(y)) if x and y else None
    return RawEvent(timestamp=float(timestamp), action_type=action_type, coordinates=coordinates)


def parse_bracketed(line: str) -> Optional[RawEvent]:
    match = _BRACKET_PATTERN.search(line)
    return _build(match) if match else None


def parse_spaced(line: str) -> Optional[RawEvent]:
    match = _SPACE_PATTERN.search(line)
    return _build(match) if match else None

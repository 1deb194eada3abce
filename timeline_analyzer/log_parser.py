"""Log text parsing: heterogeneous lines into ordered normalized events."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional

from timeline_analyzer.adapters import json_adapter, systemtime_adapter, text_adapter
from timeline_analyzer.reducer import reduce_critical_points
from timeline_analyzer.schema import CriticalPoint, NormalizedEvent, RawEvent

logger = logging.getLogger(__name__)

LineParser = Callable[[str], Optional[RawEvent]]

# Trial order matters: the bare-space pattern also matches most bracketed lines.
GRAMMARS: tuple[tuple[str, LineParser], ...] = (
    ("json", json_adapter.parse_line),
    ("systemtime", systemtime_adapter.parse_line),
    ("bracketed", text_adapter.parse_bracketed),
    ("spaced", text_adapter.parse_spaced),
)


def parse_line(line: str) -> Optional[RawEvent]:
    """Parse one log line with the first grammar that accepts it, or return None."""

    for name, grammar in GRAMMARS:
        try:
            event = grammar(line)
        except Exception:  # noqa: BLE001
            logger.warning("[parse] %s grammar failed on line %r", name, line, exc_info=True)
            return None
        if event is not None:
            return event

    logger.debug("[parse] dropped unrecognized line %r", line)
    return None


def parse_events(content: str) -> list[NormalizedEvent]:
    """Parse log text into normalized events sorted by timestamp."""

    events: list[NormalizedEvent] = []
    dropped = 0
    for line in content.split("\n"):
        if not line.strip():
            continue
        raw = parse_line(line)
        if raw is None:
            dropped += 1
            continue
        events.append(NormalizedEvent.from_raw(raw))

    events.sort(key=lambda e: e.timestamp)
    logger.info("[parse] events=%d dropped=%d", len(events), dropped)
    return events


def parse_log(content: str) -> list[CriticalPoint]:
    """Parse log text and reduce it to critical points."""

    return reduce_critical_points(parse_events(content))


def parse_file(file_path: str) -> list[CriticalPoint]:
    """Parse a UTF-8 log file into critical points."""

    content = Path(file_path).read_text(encoding="utf-8", errors="replace")
    return parse_log(content)

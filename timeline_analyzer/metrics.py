"""Parse and reduction summary metrics."""

from __future__ import annotations

from collections import Counter

from timeline_analyzer.schema import CriticalPoint, NormalizedEvent


def compute_metrics(events: list[NormalizedEvent], points: list[CriticalPoint]) -> dict:
    """Compute event counts per category, log span and reduction ratio."""

    if not events:
        return {
            "total_events": 0,
            "critical_points": len(points),
            "reduction_ratio": 0.0,
            "events_by_category": {},
            "log_start": 0.0,
            "log_end": 0.0,
            "log_duration": 0.0,
        }

    by_category = Counter(event.normalized_type for event in events)
    log_start = min(event.timestamp for event in events)
    log_end = max(event.timestamp for event in events)

    return {
        "total_events": len(events),
        "critical_points": len(points),
        "reduction_ratio": len(points) / len(events),
        "events_by_category": dict(by_category),
        "log_start": log_start,
        "log_end": log_end,
        "log_duration": log_end - log_start,
    }

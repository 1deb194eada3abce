"""Critical point selection over normalized event runs."""

from __future__ import annotations

import logging

from timeline_analyzer.schema import CriticalPoint, NormalizedEvent

logger = logging.getLogger(__name__)


def reduce_critical_points(events: list[NormalizedEvent]) -> list[CriticalPoint]:
    """Keep the first and last event of every run of same-type events.

    The global first and last events are always kept. Points are unique by
    timestamp and returned in ascending timestamp order.
    """

    if not events:
        return []

    ordered = sorted(events, key=lambda e: e.timestamp)
    selected: dict[float, NormalizedEvent] = {}

    def include(event: NormalizedEvent) -> None:
        if event.timestamp not in selected:
            selected[event.timestamp] = event

    first = ordered[0]
    include(first)

    current_type = first.normalized_type
    last_index_by_type = {current_type: 0}

    for index in range(1, len(ordered)):
        event = ordered[index]
        if event.normalized_type != current_type:
            include(ordered[last_index_by_type[current_type]])
            include(event)
            current_type = event.normalized_type
        last_index_by_type[event.normalized_type] = index

    include(ordered[-1])

    points = [CriticalPoint.from_event(event) for event in selected.values()]
    points.sort(key=lambda p: p.timestamp)
    logger.debug("[reduce] events=%d critical_points=%d", len(ordered), len(points))
    return points

"""Linear mapping between log time and video time."""

from __future__ import annotations

import math
from dataclasses import dataclass

from timeline_analyzer.schema import CriticalPoint


@dataclass(frozen=True)
class TimeMapper:
    """Re-projects log timestamps onto the video time axis.

    The log range ``[log_start_time, log_end_time]`` is stretched linearly over
    ``[0, video_duration]``. Mapping into video time is clamped to the video
    bounds; mapping back into log time is not.
    """

    log_start_time: float
    log_end_time: float
    video_duration: float

    @classmethod
    def from_points(cls, points: list[CriticalPoint], video_duration: float) -> "TimeMapper":
        if not points:
            raise ValueError("Cannot build a time mapping without critical points")
        return cls(points[0].timestamp, points[-1].timestamp, float(video_duration))

    @property
    def log_duration(self) -> float:
        return self.log_end_time - self.log_start_time

    def map_to_video_time(self, log_time: float) -> float:
        log_duration = self.log_duration
        # A single-instant log maps everything to the start of the video.
        if log_duration == 0:
            return 0.0

        relative = (log_time - self.log_start_time) / log_duration
        video_time = relative * self.video_duration
        if math.isnan(video_time):
            return video_time
        return max(0.0, min(video_time, self.video_duration))

    def map_to_log_time(self, video_time: float) -> float:
        if self.video_duration == 0:
            relative = video_time * float("inf") if video_time else float("nan")
        else:
            relative = video_time / self.video_duration
        return self.log_start_time + relative * self.log_duration

    def is_within_video_duration(self, log_time: float) -> bool:
        video_time = self.map_to_video_time(log_time)
        return 0 <= video_time <= self.video_duration


def map_critical_points(points: list[CriticalPoint], mapper: TimeMapper) -> list[CriticalPoint]:
    """Return copies of ``points`` carrying their mapped video timestamps."""

    return [point.with_video_time(mapper.map_to_video_time(point.timestamp)) for point in points]

"""Analysis session: ties parsed critical points, time mapping and frames together."""

from __future__ import annotations

import logging
from typing import Optional

from timeline_analyzer.frames import FrameExtractor, ProgressCallback, VideoSource
from timeline_analyzer.log_parser import parse_events
from timeline_analyzer.reducer import reduce_critical_points
from timeline_analyzer.schema import CriticalPoint, NormalizedEvent
from timeline_analyzer.time_mapper import TimeMapper, map_critical_points

logger = logging.getLogger(__name__)

MODES = ("image", "video")


class AnalysisSession:
    """State for one log + recording pair.

    ``load`` and ``reset`` abandon any frame extraction in progress; frames produced by an
    abandoned run are never stored.
    """

    def __init__(self, seek_timeout: Optional[float] = None):
        self.seek_timeout = seek_timeout
        self._generation = 0
        self._extractor: Optional[FrameExtractor] = None
        self._clear()

    def _clear(self) -> None:
        self.events: list[NormalizedEvent] = []
        self.points: list[CriticalPoint] = []
        self.mapper: Optional[TimeMapper] = None
        self.selected: Optional[CriticalPoint] = None
        self.frames: dict[float, str] = {}
        self.progress = 0.0
        self.extracting = False
        self.mode = "image"

    @property
    def generation(self) -> int:
        return self._generation

    def load(self, log_text: str, video_duration: float) -> list[CriticalPoint]:
        """Parse the log and map its critical points onto the video.

        Loading replaces the previous log: any extraction in progress is
        abandoned and its frames are discarded.
        """

        mode = self.mode
        self._abandon()
        self.mode = mode

        self.events = parse_events(log_text)
        points = reduce_critical_points(self.events)
        if points:
            self.mapper = TimeMapper.from_points(points, video_duration)
            self.points = map_critical_points(points, self.mapper)
            self.selected = self.points[0]
        else:
            self.mapper = None
            self.points = []
            self.selected = None
        logger.info("[session] loaded | points=%d video_duration=%ss", len(self.points), video_duration)
        return self.points

    def set_mode(self, mode: str) -> None:
        if mode not in MODES:
            raise ValueError(f"Unknown mode '{mode}', expected one of {MODES}")
        self.mode = mode

    def index_of(self, timestamp: float) -> int:
        for index, point in enumerate(self.points):
            if point.timestamp == timestamp:
                return index
        return -1

    def select(self, timestamp: float) -> Optional[CriticalPoint]:
        index = self.index_of(timestamp)
        if index >= 0:
            self.selected = self.points[index]
        return self.selected

    def _step(self, offset: int) -> Optional[CriticalPoint]:
        if self.selected is None or not self.points:
            return self.selected
        index = self.index_of(self.selected.timestamp) + offset
        if 0 <= index < len(self.points):
            self.selected = self.points[index]
        return self.selected

    def select_next(self) -> Optional[CriticalPoint]:
        return self._step(1)

    def select_previous(self) -> Optional[CriticalPoint]:
        return self._step(-1)

    def position(self) -> int:
        """1-based position of the selected point, 0 when nothing is selected."""
        if self.selected is None:
            return 0
        return self.index_of(self.selected.timestamp) + 1

    def current_frame(self) -> Optional[str]:
        if self.selected is None:
            return None
        return self.frames.get(self.selected.timestamp)

    @staticmethod
    def seek_target(point: CriticalPoint) -> float:
        return point.display_time

    async def extract_frames(
        self,
        source: VideoSource,
        on_progress: Optional[ProgressCallback] = None,
    ) -> dict[float, str]:
        """Extract frames for all points; results are dropped if the session was reset meanwhile."""

        if not self.points:
            return {}

        generation = self._generation
        extractor = FrameExtractor(source, timeout=self.seek_timeout)
        self._extractor = extractor
        self.extracting = True
        self.progress = 0.0

        def report(ratio: float) -> None:
            if generation == self._generation:
                self.progress = ratio
                if on_progress is not None:
                    on_progress(ratio)

        try:
            frames = await extractor.extract_all(self.points, on_progress=report)
        finally:
            await extractor.aclose()
            if self._extractor is extractor:
                self._extractor = None
            if generation == self._generation:
                self.extracting = False

        if generation != self._generation or extractor.cancelled:
            logger.info("[session] discarded frames from an abandoned extraction")
            return {}

        self.frames = frames
        return frames

    def _abandon(self) -> None:
        if self._extractor is not None:
            self._extractor.cancel()
            self._extractor = None
        self._generation += 1
        self._clear()

    def reset(self) -> None:
        self._abandon()
        logger.info("[session] reset")

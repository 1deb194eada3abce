"""Frame extraction from the screen recording at mapped video times."""

from __future__ import annotations

import asyncio
import base64
import logging
import math
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional, Protocol

import cv2
import numpy as np

from timeline_analyzer.config import FRAME_CONFIG
from timeline_analyzer.schema import CriticalPoint

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]


class FrameExtractionError(RuntimeError):
    """Raised when a frame cannot be captured at the requested time."""


class FrameExtractionTimeout(FrameExtractionError):
    """Raised when a seek does not complete within the configured timeout."""


class VideoSource(Protocol):
    """A seekable video with a single shared position cursor."""

    duration: float

    def seek(self, time_s: float) -> None: ...

    def capture(self) -> bytes: ...

    def close(self) -> None: ...


class OpenCVVideoSource:
    """VideoSource backed by ``cv2.VideoCapture``; captures are JPEG encoded."""

    def __init__(self, video_path: str, jpeg_quality: Optional[int] = None):
        self.video_path = video_path
        self.jpeg_quality = int(jpeg_quality if jpeg_quality is not None else FRAME_CONFIG['jpeg_quality'])

        self.cap = cv2.VideoCapture(str(video_path))
        if not self.cap.isOpened():
            raise ValueError(f"Could not open video file: {video_path}")

        self.fps = self.cap.get(cv2.CAP_PROP_FPS)
        self.total_frames = int(self.cap.get(cv2.CAP_PROP_FRAME_COUNT) or 0)
        if self.fps <= 0 or self.total_frames <= 0:
            self.cap.release()
            raise ValueError(f"Video metadata unavailable for {video_path}: fps={self.fps} frames={self.total_frames}")

        self.duration = self.total_frames / self.fps
        self._lock = threading.Lock()
        self._closed = False

    def seek(self, time_s: float) -> None:
        frame_num = int(time_s * self.fps)
        frame_num = max(0, min(frame_num, self.total_frames - 1))
        with self._lock:
            self._check_open()
            if not self.cap.set(cv2.CAP_PROP_POS_FRAMES, frame_num):
                raise FrameExtractionError(f"Seek to {time_s:.3f}s failed")

    def capture(self) -> bytes:
        with self._lock:
            self._check_open()
            ok, frame = self.cap.read()
        if not ok or frame is None:
            raise FrameExtractionError("No frame available at the current position")
        return self._encode(frame)

    def _encode(self, frame: np.ndarray) -> bytes:
        ok, buffer = cv2.imencode(".jpg", frame, [int(cv2.IMWRITE_JPEG_QUALITY), self.jpeg_quality])
        if not ok:
            raise FrameExtractionError("JPEG encoding failed")
        return np.asarray(buffer).tobytes()

    def _check_open(self) -> None:
        if self._closed:
            raise FrameExtractionError(f"Video source is closed: {self.video_path}")

    def close(self) -> None:
        # waits for an in-flight read; release must not race it
        with self._lock:
            self._closed = True
            self.cap.release()


def to_data_uri(jpeg_bytes: bytes) -> str:
    return "data:image/jpeg;base64," + base64.b64encode(jpeg_bytes).decode("utf-8")


class FrameExtractor:
    """Runs seek-then-capture transactions one at a time on a single worker thread.

    The source exposes one position cursor, so only one transaction may be in
    flight. A timed-out transaction still occupies the worker until the source
    returns, which keeps later seeks queued behind it. ``close`` joins the
    worker, so the source may be closed safely once it returns.
    """

    def __init__(self, source: VideoSource, timeout: Optional[float] = None):
        self.source = source
        self.timeout = FRAME_CONFIG['seek_timeout'] if timeout is None else timeout
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="frame-extractor")
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        """Abandon the current batch; pending points are skipped and results discarded."""
        self._cancelled = True

    def close(self) -> None:
        self._executor.shutdown(wait=True, cancel_futures=True)

    async def aclose(self) -> None:
        await asyncio.get_running_loop().run_in_executor(None, self.close)

    def _seek_and_capture(self, target_time: float) -> bytes:
        self.source.seek(target_time)
        return self.source.capture()

    async def extract(self, target_time: float) -> str:
        loop = asyncio.get_running_loop()
        future = loop.run_in_executor(self._executor, self._seek_and_capture, target_time)
        try:
            jpeg = await asyncio.wait_for(future, self.timeout if self.timeout and self.timeout > 0 else None)
        except asyncio.TimeoutError as exc:
            raise FrameExtractionTimeout(f"Seek to {target_time:.3f}s timed out after {self.timeout}s") from exc
        return to_data_uri(jpeg)

    async def extract_all(
        self,
        points: list[CriticalPoint],
        on_progress: Optional[ProgressCallback] = None,
    ) -> dict[float, str]:
        """Extract a frame per critical point, keyed by the point's log timestamp."""

        frames: dict[float, str] = {}
        total = len(points)
        duration = self.source.duration
        ordered = sorted(points, key=lambda p: p.display_time)

        logger.info("[frames] extracting | points=%d duration=%.3fs", total, duration)
        for completed, point in enumerate(ordered, start=1):
            if self._cancelled:
                logger.info("[frames] cancelled after %d/%d points", completed - 1, total)
                return {}

            video_time = point.display_time
            if not math.isfinite(video_time) or video_time > duration:
                logger.warning(
                    "[frames] skipping point at %ss: exceeds video duration %ss", video_time, duration
                )
            else:
                try:
                    frames[point.timestamp] = await self.extract(video_time)
                except FrameExtractionError as exc:
                    logger.warning("[frames] skipping point at %.3fs: %s", video_time, exc)

            if self._cancelled:
                logger.info("[frames] cancelled after %d/%d points", completed, total)
                return {}
            if on_progress is not None:
                on_progress(completed / total)

        logger.info("[frames] done | extracted=%d skipped=%d", len(frames), total - len(frames))
        return frames


async def extract_frame(source: VideoSource, target_time: float, timeout: Optional[float] = None) -> str:
    """Capture one frame at ``target_time`` as a JPEG data URI."""

    extractor = FrameExtractor(source, timeout=timeout)
    try:
        return await extractor.extract(target_time)
    finally:
        await extractor.aclose()

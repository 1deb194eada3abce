import asyncio

import pytest

from timeline_analyzer.session import AnalysisSession


LOG = "\n".join(
    [
        '{"timestamp": 10.0, "actionType": "mousemove", "x": 1, "y": 1}',
        '{"timestamp": 11.0, "actionType": "mousemove", "x": 2, "y": 2}',
        '{"timestamp": 12.0, "actionType": "keydown", "key": "a"}',
        '{"timestamp": 14.0, "actionType": "scroll"}',
        '{"timestamp": 20.0, "actionType": "scroll"}',
    ]
)


class FakeSource:
    def __init__(self, duration):
        self.duration = duration
        self.position = None

    def seek(self, time_s):
        self.position = time_s

    def capture(self):
        return b"jpeg"

    def close(self):
        pass


def test_load_maps_points_and_selects_first():
    session = AnalysisSession()
    points = session.load(LOG, video_duration=100.0)
    assert [p.timestamp for p in points] == [10.0, 11.0, 12.0, 14.0, 20.0]
    assert [p.video_timestamp for p in points] == [0.0, 10.0, 20.0, 40.0, 100.0]
    assert session.selected.timestamp == 10.0
    assert session.position() == 1


def test_load_empty_log_is_not_an_error():
    session = AnalysisSession()
    assert session.load("no events here", video_duration=30.0) == []
    assert session.mapper is None
    assert session.selected is None
    assert session.position() == 0
    assert session.select_next() is None
    assert asyncio.run(session.extract_frames(FakeSource(30.0))) == {}


def test_navigation_stops_at_the_ends():
    session = AnalysisSession()
    session.load(LOG, video_duration=100.0)
    assert session.select_previous().timestamp == 10.0
    for _ in range(10):
        session.select_next()
    assert session.selected.timestamp == 20.0
    assert session.position() == 5
    assert session.select_previous().timestamp == 14.0
    assert session.select(12.0).key == "a"
    assert session.select(99.0).timestamp == 12.0


def test_seek_target_prefers_video_time():
    session = AnalysisSession()
    points = session.load(LOG, video_duration=50.0)
    assert session.seek_target(points[2]) == 10.0


def test_extract_frames_stores_frames_and_progress():
    session = AnalysisSession(seek_timeout=1.0)
    session.load(LOG, video_duration=100.0)
    progress = []
    frames = asyncio.run(session.extract_frames(FakeSource(100.0), on_progress=progress.append))

    assert len(frames) == 5
    assert session.frames == frames
    assert session.progress == 1.0
    assert session.extracting is False
    assert progress[-1] == 1.0
    assert session.current_frame().startswith("data:image/jpeg;base64,")


def test_reset_during_extraction_discards_frames():
    session = AnalysisSession(seek_timeout=1.0)
    session.load(LOG, video_duration=100.0)

    def on_progress(ratio):
        session.reset()

    frames = asyncio.run(session.extract_frames(FakeSource(100.0), on_progress=on_progress))
    assert frames == {}
    assert session.frames == {}
    assert session.points == []
    assert session.extracting is False
    assert session.generation == 2


def test_set_mode():
    session = AnalysisSession()
    session.set_mode("video")
    assert session.mode == "video"
    with pytest.raises(ValueError):
        session.set_mode("audio")
    session.reset()
    assert session.mode == "image"


class LabelledSource(FakeSource):
    def __init__(self, duration, label):
        super().__init__(duration)
        self.label = label

    def capture(self):
        return self.label


def test_load_replaces_frames_from_previous_log():
    session = AnalysisSession(seek_timeout=1.0)
    session.load("[1.0] click\n[2.0] scroll", video_duration=10.0)
    asyncio.run(session.extract_frames(LabelledSource(10.0, b"old")))
    assert set(session.frames) == {1.0, 2.0}

    session.set_mode("video")
    points = session.load("[1.0] KeyPress\n[3.0] KeyPress", video_duration=10.0)
    assert [p.timestamp for p in points] == [1.0, 3.0]
    assert session.frames == {}
    assert session.current_frame() is None
    assert session.mode == "video"
    assert [e.timestamp for e in session.events] == [1.0, 3.0]


def test_load_during_extraction_discards_old_frames():
    session = AnalysisSession(seek_timeout=1.0)
    session.load(LOG, video_duration=100.0)

    def on_progress(ratio):
        if ratio < 1.0 and session.points[0].timestamp == 10.0:
            session.load("[1.0] scroll\n[2.0] click", video_duration=5.0)

    frames = asyncio.run(session.extract_frames(LabelledSource(100.0, b"old"), on_progress=on_progress))
    assert frames == {}
    assert session.frames == {}
    assert [p.timestamp for p in session.points] == [1.0, 2.0]

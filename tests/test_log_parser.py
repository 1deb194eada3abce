import logging

import pytest

from timeline_analyzer.log_parser import parse_events, parse_file, parse_line, parse_log
from timeline_analyzer.schema import Coordinates
from timeline_analyzer.session import AnalysisSession


def test_json_wins_over_spaced_grammar():
    event = parse_line('{"timestamp": 2.0, "actionType": "scroll", "note": "1.5 click"}')
    assert event.timestamp == 2.0
    assert event.action_type == "scroll"


def test_json_without_action_type_falls_through():
    event = parse_line('{"timestamp": "3.5 scroll"}')
    assert event.timestamp == 3.5
    assert event.action_type == "scroll"


def test_systemtime_is_not_misparsed():
    event = parse_line("SystemTime { tv_sec: 5, tv_nsec: 0 }: KeyPress 1.5 x")
    assert event.timestamp == 5.0
    assert event.action_type == "KeyPress"
    assert event.key == "1.5 x"


def test_bracketed_wins_over_spaced_grammar():
    # spaced-style coordinates after a bracketed timestamp are not picked up
    event = parse_line("[2.5] MouseMove 5 6")
    assert event.timestamp == 2.5
    assert event.action_type == "MouseMove"
    assert event.coordinates is None


def test_spaced_line_with_parenthesized_coordinates():
    event = parse_line("1.5 click (10, 20)")
    assert event.timestamp == 1.5
    assert event.action_type == "click"
    assert event.coordinates is None


def test_unrecognized_line_is_dropped(caplog):
    with caplog.at_level(logging.DEBUG, logger="timeline_analyzer.log_parser"):
        assert parse_line("hello world") is None
    assert "dropped" in caplog.text


def test_parse_events_skips_blank_and_bad_lines():
    content = "\n   \n[1.5] scroll\ngarbage\n{\"timestamp\": 0.5, \"actionType\": \"click\"}\n\t\n"
    events = parse_events(content)
    assert [e.timestamp for e in events] == [0.5, 1.5]
    assert [e.normalized_type for e in events] == ["MouseAction", "Scroll"]


def test_parse_log_end_to_end():
    content = "\n".join(
        [
            "[0.0] MouseMove (10,20)",
            "[0.5] MouseMove (12,22)",
            "[1.0] KeyPress",
            "[1.2] KeyPress",
        ]
    )
    points = parse_log(content)
    assert [p.timestamp for p in points] == [0.0, 0.5, 1.0, 1.2]
    assert points[0].coordinates == Coordinates(10, 20)
    assert [p.normalized_type for p in points] == ["MouseMove", "MouseMove", "Keyboard", "Keyboard"]

    session = AnalysisSession()
    mapped = session.load(content, video_duration=10.0)
    assert [p.video_timestamp for p in mapped] == pytest.approx([0.0, 50 / 12, 100 / 12, 10.0])


def test_parse_log_mixed_formats():
    content = "\n".join(
        [
            "SystemTime { tv_sec: 100, tv_nsec: 500000000 }: KeyPress a",
            '{"timestamp": 100.0, "actionType": "mousemove", "x": 1, "y": 2}',
            "101.0 scroll",
            "[100.8] click",
        ]
    )
    points = parse_log(content)
    assert [p.timestamp for p in points] == [100.0, 100.5, 100.8, 101.0]


def test_parse_log_empty():
    assert parse_log("") == []
    assert parse_log("\n\n  \n") == []


def test_parse_file(tmp_path):
    path = tmp_path / "events.log"
    path.write_text("[0.1] click\n[0.2] click\n[0.3] click\n", encoding="utf-8")
    points = parse_file(str(path))
    assert [p.timestamp for p in points] == [0.1, 0.3]

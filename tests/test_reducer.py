from timeline_analyzer.reducer import reduce_critical_points
from timeline_analyzer.schema import NormalizedEvent


def make_events(types, timestamps=None):
    timestamps = timestamps if timestamps is not None else range(len(types))
    return [NormalizedEvent(float(ts), kind, kind) for ts, kind in zip(timestamps, types)]


def test_empty_input():
    assert reduce_critical_points([]) == []


def test_single_event():
    points = reduce_critical_points(make_events(["A"]))
    assert [p.timestamp for p in points] == [0.0]


def test_single_run_keeps_first_and_last():
    points = reduce_critical_points(make_events(["A", "A", "A", "A"]))
    assert [p.timestamp for p in points] == [0.0, 3.0]


def test_known_run():
    points = reduce_critical_points(make_events(["A", "A", "A", "B", "B", "C"]))
    assert [p.timestamp for p in points] == [0.0, 2.0, 3.0, 4.0, 5.0]


def test_runs_of_length_one_are_not_duplicated():
    points = reduce_critical_points(make_events(["A", "B", "A", "B"]))
    assert [p.timestamp for p in points] == [0.0, 1.0, 2.0, 3.0]


def test_invariants_hold_on_mixed_input():
    types = ["A", "B", "B", "C", "C", "C", "A", "A", "D", "B", "B", "B"]
    events = make_events(types, [0.1 * i for i in range(len(types))])
    points = reduce_critical_points(events)
    timestamps = [p.timestamp for p in points]

    assert timestamps == sorted(timestamps)
    assert len(set(timestamps)) == len(timestamps)
    assert timestamps[0] == events[0].timestamp
    assert timestamps[-1] == events[-1].timestamp
    # every run contributes its first and last member
    for index in range(1, len(events)):
        if events[index].normalized_type != events[index - 1].normalized_type:
            assert events[index - 1].timestamp in timestamps
            assert events[index].timestamp in timestamps


def test_unsorted_input_is_sorted_first():
    events = make_events(["B", "A", "A"], [5.0, 1.0, 2.0])
    points = reduce_critical_points(events)
    assert [(p.timestamp, p.normalized_type) for p in points] == [(1.0, "A"), (2.0, "A"), (5.0, "B")]


def test_points_carry_event_fields():
    event = NormalizedEvent(1.0, "KeyPress", "Keyboard", key="a")
    (point,) = reduce_critical_points([event])
    assert point.key == "a"
    assert point.action_type == "KeyPress"
    assert point.video_timestamp is None

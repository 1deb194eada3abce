"""Streamlit demo UI for timeline-analyzer."""

from __future__ import annotations

import asyncio
import base64
import tempfile
from pathlib import Path
from typing import Any, Optional

from timeline_analyzer.frames import OpenCVVideoSource
from timeline_analyzer.logging_utils import setup_logging
from timeline_analyzer.metrics import compute_metrics
from timeline_analyzer.schema import CriticalPoint, EventCategory
from timeline_analyzer.session import AnalysisSession
from timeline_analyzer.timeline import (
    category_color,
    format_duration,
    format_time,
    format_video_time,
    nearest_point,
    position_percent,
    timeline_window,
    type_changes,
)


LEGEND = [
    (EventCategory.KEYBOARD.value, "Keyboard Events"),
    (EventCategory.MOUSE_MOVE.value, "Mouse Movement"),
    (EventCategory.MOUSE_ACTION.value, "Mouse Actions"),
    (EventCategory.SCROLL.value, "Scroll"),
]


def _save_uploaded(uploaded_file) -> str:
    suffix = Path(uploaded_file.name).suffix.lower()
    with tempfile.NamedTemporaryFile(delete=False, suffix=suffix) as handle:
        handle.write(uploaded_file.getbuffer())
        return handle.name


def _frame_bytes(data_uri: Optional[str]) -> Optional[bytes]:
    if not data_uri:
        return None
    return base64.b64decode(data_uri.split(",", maxsplit=1)[1])


def _point_details(point: CriticalPoint) -> dict[str, Any]:
    details = {
        "Log Timestamp": format_time(point.timestamp),
        "Video Timestamp": format_time(point.video_timestamp) if point.video_timestamp is not None else "Not mapped",
        "Event Type": point.action_type,
        "Category": point.normalized_type,
    }
    if point.coordinates is not None:
        details["Coordinates"] = f"X: {point.coordinates.x}, Y: {point.coordinates.y}"
    if point.key:
        details["Key"] = point.key
    if point.target:
        details["Target Element"] = point.target
    return details


def run_analysis(log_text: str, video_path: str, on_progress=None) -> dict[str, Any]:
    """Parse, map and extract frames; return a UI-friendly result payload."""

    source = OpenCVVideoSource(video_path)
    session = AnalysisSession()
    try:
        session.load(log_text, source.duration)
        asyncio.run(session.extract_frames(source, on_progress=on_progress))
    finally:
        source.close()

    return {
        "session": session,
        "summary": compute_metrics(session.events, session.points),
        "video_path": video_path,
        "video_duration": source.duration,
    }


def _render_timeline(st, session: AnalysisSession) -> None:
    start, duration = timeline_window(session.points)
    st.caption(
        f"Critical Points Timeline ({len(session.points)} points) | "
        f"{format_time(start)} - {format_time(start + duration)}"
    )
    changes = set(type_changes(session.points))
    rows = []
    for index, point in enumerate(session.points):
        since_previous = point.display_time - session.points[index - 1].display_time if index else 0.0
        rows.append(
            {
                "#": index + 1,
                "video": format_time(point.display_time),
                "position %": round(position_percent(point, start, duration), 1),
                "category": point.normalized_type,
                "category change": index in changes,
                "event": point.action_type,
                "since previous": format_duration(since_previous) if index else "",
                "color": category_color(point.normalized_type),
            }
        )
    st.dataframe(rows, hide_index=True, use_container_width=True)


def main() -> None:
    import streamlit as st

    setup_logging()
    st.set_page_config(page_title="Timeline Analyzer", layout="wide")
    st.title("Timelines")

    with st.sidebar:
        st.header("Inputs")
        uploaded_video = st.file_uploader("Screen recording", type=["mp4", "webm", "mov", "mkv"])
        uploaded_log = st.file_uploader("Event log", type=["txt", "log", "json", "jsonl"])
        run = st.button("Analyze", type="primary")
        if st.button("New Conversion"):
            if "result" in st.session_state:
                st.session_state["result"]["session"].reset()
            st.session_state.pop("result", None)

    if run:
        if uploaded_video is None or uploaded_log is None:
            st.error("Please upload both a screen recording and an event log.")
            return
        try:
            log_text = uploaded_log.getvalue().decode("utf-8", errors="replace")
            video_path = _save_uploaded(uploaded_video)
            bar = st.progress(0.0, text="Extracting frames from video...")
            st.session_state["result"] = run_analysis(
                log_text, video_path, on_progress=lambda ratio: bar.progress(ratio, text=f"{ratio:.0%} complete")
            )
            bar.empty()
        except ValueError as exc:
            st.error(f"Input error: {exc}")
            return
        except Exception:
            st.error("Something went wrong while analyzing the inputs. Please verify the file formats.")
            return

    result = st.session_state.get("result")
    if result is None:
        st.info("Upload a recording and an event log in the sidebar and click **Analyze**.")
        return

    session: AnalysisSession = result["session"]
    summary = result["summary"]
    c1, c2, c3 = st.columns(3)
    c1.metric("Parsed events", summary["total_events"])
    c2.metric("Critical points", summary["critical_points"])
    c3.metric("Log span", format_duration(summary["log_duration"]))

    if not session.points:
        st.warning("No critical points were found in the event log.")
        return

    st.markdown(
        " ".join(f"<span style='color:{category_color(label)}'>&#9679;</span> {name}" for label, name in LEGEND),
        unsafe_allow_html=True,
    )

    mode = st.radio("Mode", options=["image", "video"], format_func=str.title, horizontal=True)
    session.set_mode(mode)

    if mode == "image":
        left, right = st.columns(2)
        frame = _frame_bytes(session.current_frame())
        if frame is not None:
            left.image(frame, use_container_width=True)
        else:
            left.info("No frame available for this point.")
        right.subheader("Event Details")
        right.table([_point_details(session.selected)])

        p1, p2, p3 = st.columns([1, 2, 1])
        if p1.button("Previous", disabled=session.position() <= 1):
            session.select_previous()
            st.rerun()
        p2.write(f"Point {session.position()} of {len(session.points)}")
        if p3.button("Next", disabled=session.position() >= len(session.points)):
            session.select_next()
            st.rerun()
        _render_timeline(st, session)
    else:
        start, _ = timeline_window(session.points)
        picked = st.slider(
            "Seek", min_value=0.0, max_value=float(result["video_duration"]), value=float(start), step=0.1
        )
        point = nearest_point(session.points, picked)
        seek_to = session.seek_target(point)
        st.video(result["video_path"], start_time=int(seek_to))
        st.caption(
            f"Nearest critical point: {point.action_type} at {format_time(seek_to)} "
            f"({format_video_time(seek_to)} / {format_video_time(result['video_duration'])})"
        )
        _render_timeline(st, session)


if __name__ == "__main__":
    main()

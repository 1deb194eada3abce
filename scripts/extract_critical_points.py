"""Extract critical points from an event log and capture their frames from a recording."""

from __future__ import annotations

import argparse
import asyncio
import base64
import json
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from timeline_analyzer.config import FRAME_CONFIG, TIMELINE_CONFIG
from timeline_analyzer.frames import OpenCVVideoSource
from timeline_analyzer.logging_utils import setup_logging
from timeline_analyzer.metrics import compute_metrics
from timeline_analyzer.session import AnalysisSession
from timeline_analyzer.timeline import format_time


def _write_frames(frames: dict[float, str], frames_dir: Path) -> dict[float, str]:
    frames_dir.mkdir(parents=True, exist_ok=True)
    written = {}
    for index, (timestamp, data_uri) in enumerate(sorted(frames.items()), start=1):
        payload = data_uri.split(",", maxsplit=1)[1]
        path = frames_dir / f"point_{index:04d}.jpg"
        path.write_bytes(base64.b64decode(payload))
        written[timestamp] = str(path)
    return written


async def _run(args: argparse.Namespace) -> dict:
    log_text = Path(args.log).read_text(encoding="utf-8", errors="replace")
    source = OpenCVVideoSource(args.video, jpeg_quality=args.jpeg_quality)
    try:
        session = AnalysisSession(seek_timeout=args.timeout)
        points = session.load(log_text, source.duration)
        metrics = compute_metrics(session.events, points)
        frames = {} if args.no_frames else await session.extract_frames(source)
    finally:
        source.close()

    frame_paths = _write_frames(frames, Path(args.outputs) / "frames") if frames else {}
    report_points = []
    for point in points:
        entry = point.to_dict()
        entry["videoTime"] = format_time(point.display_time)
        entry["frame"] = frame_paths.get(point.timestamp)
        report_points.append(entry)

    return {
        "log": args.log,
        "video": args.video,
        "video_duration": source.duration,
        "metrics": metrics,
        "points": report_points,
    }


def main() -> None:
    parser = argparse.ArgumentParser(description="Extract critical points and their video frames")
    parser.add_argument("--log", required=True, help="Path to the event log")
    parser.add_argument("--video", required=True, help="Path to the screen recording")
    parser.add_argument("--outputs", default=TIMELINE_CONFIG['outputs_folder'], help="Output directory")
    parser.add_argument("--timeout", type=float, default=FRAME_CONFIG['seek_timeout'], help="Per-frame seek timeout")
    parser.add_argument("--jpeg-quality", type=int, default=FRAME_CONFIG['jpeg_quality'])
    parser.add_argument("--no-frames", action="store_true", help="Only map points, skip frame capture")
    parser.add_argument("--log-level", default=None)
    args = parser.parse_args()

    outputs_dir = Path(args.outputs)
    setup_logging(args.log_level, log_file=outputs_dir / "run.log")

    try:
        report = asyncio.run(_run(args))
    except ValueError as exc:
        print(f"Input error: {exc}", file=sys.stderr)
        sys.exit(1)

    print(json.dumps(report, indent=2))

    outputs_dir.mkdir(parents=True, exist_ok=True)
    out_path = outputs_dir / "critical_points.json"
    out_path.write_text(json.dumps(report, indent=2), encoding="utf-8")
    print(f"Saved critical point report to {out_path}")


if __name__ == "__main__":
    main()

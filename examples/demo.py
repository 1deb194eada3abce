"""Demo script for timeline-analyzer."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from timeline_analyzer.session import AnalysisSession
from timeline_analyzer.timeline import format_time


def main() -> None:
    log_text = Path("examples/sample_log.txt").read_text(encoding="utf-8")
    session = AnalysisSession()
    points = session.load(log_text, video_duration=30.0)
    print(f"Critical points: {len(points)}")
    for point in points:
        print(f"  log={point.timestamp:.3f} video={format_time(point.display_time)} {point.normalized_type} ({point.action_type})")


if __name__ == "__main__":
    main()

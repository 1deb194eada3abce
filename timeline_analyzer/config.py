"""Runtime configuration for timeline-analyzer."""

from __future__ import annotations

import os


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw in (None, ""):
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc


def _env_str(name: str, default: str) -> str:
    raw = os.environ.get(name)
    return raw.strip() if raw else default


# Frame extraction settings
FRAME_CONFIG = {
    'jpeg_quality': int(_env_float('TIMELINE_ANALYZER_JPEG_QUALITY', 95)),
    'seek_timeout': _env_float('TIMELINE_ANALYZER_SEEK_TIMEOUT', 10.0),
}

# Logging settings
LOGGING_CONFIG = {
    'level': _env_str('TIMELINE_ANALYZER_LOG_LEVEL', 'INFO'),
    'format': '%(asctime)s | %(levelname)s | %(message)s',
}

# Timeline display settings
TIMELINE_CONFIG = {
    'buffer_seconds': 5.0,
    'outputs_folder': _env_str('TIMELINE_ANALYZER_OUTPUTS', 'outputs'),
}

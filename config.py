"""
Runtime settings for the live rep tracker.

Values come from the environment (a local .env is loaded first), falling
back to the defaults below.  Bad numeric values print a warning and keep
the default so a typo in .env never stops a workout from starting.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

DEFAULT_ANALYSIS_URL = "http://localhost:5000"


def _env_number(name: str, default, cast=float):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        print(f"Warning: {name}={raw!r} is not a valid number – using {default}.")
        return default


@dataclass
class TrackerConfig:
    """Knobs for sampling, analysis and feedback."""
    analysis_url: str = DEFAULT_ANALYSIS_URL
    frame_interval_ms: int = 800
    frame_width: int = 640
    frame_height: int = 480
    jpeg_quality: int = 60
    request_timeout: float = 10.0
    camera_index: int = 0
    no_person_tolerance: int = 2
    voice_cooldown: float = 5.0
    target_reps: int = 0

    @property
    def frame_interval(self) -> float:
        return self.frame_interval_ms / 1000.0

    @staticmethod
    def from_env() -> "TrackerConfig":
        return TrackerConfig(
            analysis_url=(os.getenv("ANALYSIS_URL") or DEFAULT_ANALYSIS_URL).rstrip("/"),
            frame_interval_ms=_env_number("FRAME_INTERVAL_MS", 800, int),
            frame_width=_env_number("FRAME_WIDTH", 640, int),
            frame_height=_env_number("FRAME_HEIGHT", 480, int),
            jpeg_quality=_env_number("JPEG_QUALITY", 60, int),
            request_timeout=_env_number("ANALYSIS_TIMEOUT", 10.0),
            camera_index=_env_number("CAMERA_INDEX", 0, int),
            no_person_tolerance=_env_number("NO_PERSON_TOLERANCE", 2, int),
            voice_cooldown=_env_number("VOICE_COOLDOWN", 5.0),
            target_reps=_env_number("TARGET_REPS", 0, int),
        )

"""
Tests for configuration loading, command-line overrides and HUD helpers.
"""

import numpy as np

from config import DEFAULT_ANALYSIS_URL, TrackerConfig
from hud import draw_counter_panel, format_time
from live_capture import parse_args
from session_state import Session


class TestTrackerConfig:
    def test_defaults(self):
        config = TrackerConfig()
        assert config.frame_interval == 0.8
        assert (config.frame_width, config.frame_height) == (640, 480)
        assert config.jpeg_quality == 60
        assert config.no_person_tolerance == 2

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("ANALYSIS_URL", "http://10.0.0.5:8000/")
        monkeypatch.setenv("FRAME_INTERVAL_MS", "500")
        monkeypatch.setenv("TARGET_REPS", "12")
        config = TrackerConfig.from_env()
        assert config.analysis_url == "http://10.0.0.5:8000"
        assert config.frame_interval == 0.5
        assert config.target_reps == 12

    def test_bad_number_keeps_default(self, monkeypatch, capsys):
        monkeypatch.delenv("ANALYSIS_URL", raising=False)
        monkeypatch.setenv("JPEG_QUALITY", "high")
        config = TrackerConfig.from_env()
        assert config.jpeg_quality == 60
        assert config.analysis_url == DEFAULT_ANALYSIS_URL
        assert "JPEG_QUALITY" in capsys.readouterr().out


class TestParseArgs:
    def test_flags_override_env(self, monkeypatch):
        monkeypatch.setenv("TARGET_REPS", "3")
        config = parse_args(["--target-reps", "10", "--url", "http://x:1/", "--camera", "2"])
        assert config.target_reps == 10
        assert config.analysis_url == "http://x:1"
        assert config.camera_index == 2

    def test_env_used_without_flags(self, monkeypatch):
        monkeypatch.setenv("TARGET_REPS", "7")
        assert parse_args([]).target_reps == 7


class TestHud:
    def test_format_time(self):
        assert format_time(0) == "00:00"
        assert format_time(75) == "01:15"
        assert format_time(3600) == "60:00"

    def test_counter_panel_draws(self):
        frame = np.zeros((480, 640, 3), dtype=np.uint8)
        session = Session(target_reps=10)
        session.state.reps = 4
        session.state.guidance = "Keep your elbows tucked in close to your body"
        draw_counter_panel(frame, session)
        assert frame.any()

"""
Configuration Tests
===================
"""

import pytest
import yaml

from rle_player.config import Settings, load_config


ENV_VARS = (
    "RLE_PLAYER_CONFIG",
    "RLE_PLAYER_SETTLE_DELAY_MS",
    "RLE_PLAYER_LAG_THRESHOLD",
    "RLE_PLAYER_SINK_BACKEND",
    "RLE_PLAYER_WINDOW_TITLE",
    "RLE_PLAYER_EMIT_SEPARATOR",
    "RLE_PLAYER_LOG_LEVEL",
    "RLE_PLAYER_LOG_FORMAT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    """Isolate each test from the caller's environment and working directory."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


def write_yaml(path, data):
    path.write_text(yaml.safe_dump(data))
    return str(path)


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults(self):
        """Verify defaults when no file or environment is present."""
        settings = load_config()

        assert settings == Settings()
        assert settings.playback.settle_delay_ms == 1000
        assert settings.playback.lag_warning_threshold == 2
        assert settings.grading.is_neutral
        assert settings.decode.suffix_digits == 5
        assert settings.decode.emit_frame_separator is False
        assert settings.sink.backend == "opencv"

    def test_yaml_file(self, tmp_path):
        """Verify values are read from an explicit path."""
        path = write_yaml(
            tmp_path / "custom.yaml",
            {
                "playback": {"settle_delay_ms": 250},
                "grading": {"brightness": 70, "contrast": 40, "saturation": 50},
                "sink": {"backend": "null"},
            },
        )

        settings = load_config(path)

        assert settings.playback.settle_delay_ms == 250
        assert settings.grading.brightness == 70
        assert settings.sink.backend == "null"
        assert settings.decode.chunk_size == 64 * 1024

    def test_working_directory_file(self, tmp_path):
        """Verify config.yaml in the working directory is picked up."""
        write_yaml(tmp_path / "config.yaml", {"logging": {"level": "DEBUG"}})

        assert load_config().logging.level == "DEBUG"

    def test_config_env_var(self, tmp_path, monkeypatch):
        """Verify RLE_PLAYER_CONFIG names the file."""
        path = write_yaml(tmp_path / "elsewhere.yaml", {"decode": {"suffix_digits": 3}})
        monkeypatch.setenv("RLE_PLAYER_CONFIG", path)

        assert load_config().decode.suffix_digits == 3

    def test_missing_file_uses_defaults(self, tmp_path):
        """Verify a missing explicit path falls back to defaults."""
        settings = load_config(str(tmp_path / "nope.yaml"))

        assert settings == Settings()

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        """Verify environment variables win over the YAML file."""
        path = write_yaml(tmp_path / "config.yaml", {"playback": {"settle_delay_ms": 250}})
        monkeypatch.setenv("RLE_PLAYER_SETTLE_DELAY_MS", "0")
        monkeypatch.setenv("RLE_PLAYER_EMIT_SEPARATOR", "yes")
        monkeypatch.setenv("RLE_PLAYER_SINK_BACKEND", "null")

        settings = load_config(path)

        assert settings.playback.settle_delay_ms == 0
        assert settings.decode.emit_frame_separator is True
        assert settings.sink.backend == "null"

    def test_out_of_range_grading_resets(self, tmp_path):
        """Verify bad grading values in YAML fall back to neutral."""
        path = write_yaml(
            tmp_path / "config.yaml",
            {"grading": {"brightness": 150, "contrast": 10, "saturation": 10}},
        )

        assert load_config(path).grading.is_neutral

    def test_invalid_value_rejected(self, tmp_path):
        """Verify pydantic validation errors surface."""
        path = write_yaml(tmp_path / "config.yaml", {"playback": {"lag_warning_threshold": 0}})

        with pytest.raises(ValueError):
            load_config(path)

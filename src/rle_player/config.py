"""
rle-player Configuration
========================

This module handles configuration loading for the decoder and player.

Configuration Sources (in order of precedence):
    1. Command-line flags (applied by main.py)
    2. Environment variables
    3. config.yaml file
    4. Default values (lowest priority)

Environment Variable Mapping:
    RLE_PLAYER_CONFIG            -> path of the YAML file
    RLE_PLAYER_SETTLE_DELAY_MS   -> playback.settle_delay_ms
    RLE_PLAYER_LAG_THRESHOLD     -> playback.lag_warning_threshold
    RLE_PLAYER_SINK_BACKEND      -> sink.backend
    RLE_PLAYER_WINDOW_TITLE      -> sink.window_title
    RLE_PLAYER_EMIT_SEPARATOR    -> decode.emit_frame_separator
    RLE_PLAYER_LOG_LEVEL         -> logging.level
    RLE_PLAYER_LOG_FORMAT        -> logging.format

Example:
    from rle_player.config import load_config

    settings = load_config()
    print(settings.playback.settle_delay_ms)
"""

import os
import logging
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field

from rle_player.models.grading import ColorGradingParams


logger = logging.getLogger(__name__)


# =============================================================================
# Configuration Models
# =============================================================================

class PlaybackConfig(BaseModel):
    """Playback loop configuration."""

    settle_delay_ms: int = Field(
        default=1000,
        ge=0,
        description="How long the last frame stays visible after playback stops",
    )
    lag_warning_threshold: int = Field(
        default=2,
        ge=1,
        description="Lag events before the one-time frame rate warning",
    )


class DecodeConfig(BaseModel):
    """Decode stage configuration."""

    suffix_digits: int = Field(
        default=5,
        ge=1,
        le=12,
        description="Zero-padding width of per-frame file sequence numbers",
    )
    emit_frame_separator: bool = Field(
        default=False,
        description="Append FF FF FF FF after each frame when streaming",
    )
    chunk_size: int = Field(
        default=64 * 1024,
        ge=1,
        description="Bytes requested from the input per read",
    )


class SinkConfig(BaseModel):
    """Frame sink configuration."""

    backend: str = Field(
        default="opencv",
        description="Frame sink backend: 'opencv' or 'null'",
    )
    window_title: str = Field(
        default="rle player video",
        description="Title of the playback window",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="text", description="Log format: json or text")


class Settings(BaseModel):
    """
    Main settings class for rle-player.

    Loads configuration from YAML file and environment variables.
    Environment variables take precedence over file values.
    """

    playback: PlaybackConfig = Field(default_factory=PlaybackConfig)
    grading: ColorGradingParams = Field(default_factory=ColorGradingParams)
    decode: DecodeConfig = Field(default_factory=DecodeConfig)
    sink: SinkConfig = Field(default_factory=SinkConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration from YAML file and environment variables.

    Priority (highest to lowest):
        1. Environment variables
        2. YAML config file
        3. Default values

    Args:
        config_path: Path to config.yaml. If None, uses RLE_PLAYER_CONFIG
            or searches the working directory.

    Returns:
        Settings: Loaded configuration
    """
    if config_path is None:
        config_path = os.environ.get("RLE_PLAYER_CONFIG")

    if config_path is None:
        for path in (Path("config.yaml"), Path("config.yml")):
            if path.exists():
                config_path = str(path)
                break

    config_data = {}
    if config_path and Path(config_path).exists():
        logger.info(f"Loading config from: {config_path}")
        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f) or {}
    elif config_path:
        logger.warning(f"Config file not found: {config_path}, using defaults")
    else:
        logger.debug("No config file found, using defaults and environment variables")

    _apply_env_overrides(config_data)

    return Settings.model_validate(config_data)


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


def _apply_env_overrides(config_data: dict) -> None:
    """Apply environment variable overrides to config data."""

    # Playback settings
    if env_settle := os.environ.get("RLE_PLAYER_SETTLE_DELAY_MS"):
        config_data.setdefault("playback", {})["settle_delay_ms"] = int(env_settle)
    if env_lag := os.environ.get("RLE_PLAYER_LAG_THRESHOLD"):
        config_data.setdefault("playback", {})["lag_warning_threshold"] = int(env_lag)

    # Sink settings
    if env_backend := os.environ.get("RLE_PLAYER_SINK_BACKEND"):
        config_data.setdefault("sink", {})["backend"] = env_backend
    if env_title := os.environ.get("RLE_PLAYER_WINDOW_TITLE"):
        config_data.setdefault("sink", {})["window_title"] = env_title

    # Decode settings
    if env_sep := os.environ.get("RLE_PLAYER_EMIT_SEPARATOR"):
        config_data.setdefault("decode", {})["emit_frame_separator"] = _parse_bool(env_sep)

    # Logging settings
    if env_log := os.environ.get("RLE_PLAYER_LOG_LEVEL"):
        config_data.setdefault("logging", {})["level"] = env_log
    if env_fmt := os.environ.get("RLE_PLAYER_LOG_FORMAT"):
        config_data.setdefault("logging", {})["format"] = env_fmt


def setup_logging(settings: Settings) -> None:
    """Configure logging based on settings. Output goes to stderr."""
    log_level = getattr(logging, settings.logging.level.upper(), logging.INFO)

    if settings.logging.format == "json":
        log_format = '{"time": "%(asctime)s", "level": "%(levelname)s", "module": "%(name)s", "message": "%(message)s"}'
    else:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
    )

"""
Pointillist Configuration
=========================

This module handles configuration loading for the pointillist converter.

Configuration Sources (in order of precedence):
    1. Command-line arguments (applied by main.py)
    2. Environment variables
    3. pointillist.yaml file
    4. Default values (lowest priority)

Environment Variable Mapping:
    POINTILLIST_BLOCK_SIZE -> pipeline.block_size
    POINTILLIST_PADDING    -> pipeline.padding
    POINTILLIST_RADIUS     -> pipeline.radius
    POINTILLIST_DELAY      -> pipeline.delay
    POINTILLIST_KEY        -> pipeline.key
    POINTILLIST_LOG_LEVEL  -> logging.level

Example:
    from pointillist.config import load_config

    settings = load_config()
    print(settings.pipeline.block_size)
"""

import os
import logging
from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from pointillist.pipeline.keys import KEY_FUNCTIONS


logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


# =============================================================================
# Configuration Models
# =============================================================================

class PipelineConfig(BaseModel):
    """Pixel pipeline parameters."""

    block_size: int = Field(
        default=8,
        ge=1,
        description="Size of the blocks to cluster pixels into",
    )
    padding: int = Field(
        default=2,
        ge=0,
        description="Padding in pixels between the circles",
    )
    radius: int = Field(
        default=8,
        ge=0,
        description="Maximum radius of the circles in pixels",
    )
    delay: int = Field(
        default=5,
        ge=0,
        le=65535,
        description="Per-frame delay in hundredths of a second",
    )
    key: str = Field(
        default="brightness",
        description="Key function driving the circle radius",
    )

    @field_validator("key")
    @classmethod
    def _known_key(cls, value: str) -> str:
        if value not in KEY_FUNCTIONS:
            raise ValueError(
                f"unknown key '{value}', expected one of: {', '.join(sorted(KEY_FUNCTIONS))}"
            )
        return value

    @model_validator(mode="after")
    def _canvas_not_empty(self) -> "PipelineConfig":
        # canvas side is grid * (2 * radius + padding) + padding
        if self.radius == 0 and self.padding == 0:
            raise ValueError("radius and padding cannot both be 0, the canvas would be empty")
        return self


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")
    format: Literal["text", "json"] = Field(default="text", description="Log format: json or text")

    @field_validator("level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"unknown log level '{value}', expected one of: {', '.join(LOG_LEVELS)}")
        return level


class Settings(BaseModel):
    """
    Main settings class for the pointillist converter.

    Loads configuration from YAML file and environment variables.
    Environment variables take precedence over file values.
    """

    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)
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
        config_path: Path to pointillist.yaml. If None, searches the
            working directory.

    Returns:
        Settings: Loaded configuration

    Raises:
        OSError: If an explicit config_path cannot be read
        ValueError: If a numeric environment variable is not an integer
        pydantic.ValidationError: If a value is out of range
    """
    if config_path is None:
        for path in (Path("pointillist.yaml"), Path("pointillist.yml")):
            if path.exists():
                config_path = str(path)
                break

    config_data = {}
    if config_path:
        logger.debug(f"Loading config from: {config_path}")
        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f) or {}
    else:
        logger.debug("No config file found, using defaults and environment variables")

    _apply_env_overrides(config_data)

    return Settings.model_validate(config_data)


def _env_int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got '{value}'") from None


def _apply_env_overrides(config_data: dict) -> None:
    """Apply environment variable overrides to config data."""

    # Pipeline settings
    for name, field in (
        ("POINTILLIST_BLOCK_SIZE", "block_size"),
        ("POINTILLIST_PADDING", "padding"),
        ("POINTILLIST_RADIUS", "radius"),
        ("POINTILLIST_DELAY", "delay"),
    ):
        if env_value := os.environ.get(name):
            config_data.setdefault("pipeline", {})[field] = _env_int(name, env_value)
    if env_key := os.environ.get("POINTILLIST_KEY"):
        config_data.setdefault("pipeline", {})["key"] = env_key

    # Logging settings
    if env_log := os.environ.get("POINTILLIST_LOG_LEVEL"):
        config_data.setdefault("logging", {})["level"] = env_log


def setup_logging(settings: Settings) -> None:
    """Configure logging based on settings."""
    log_level = getattr(logging, settings.logging.level)

    if settings.logging.format == "json":
        log_format = '{"time": "%(asctime)s", "level": "%(levelname)s", "module": "%(name)s", "message": "%(message)s"}'
    else:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        datefmt="%Y-%m-%dT%H:%M:%S",
    )

"""Configuration management for photobooth.

Loads settings from a YAML configuration file with environment variable
overrides (``PHOTOBOOTH_`` prefix, ``__`` for nested sections). Supports
.env files.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings

from photobooth.domain.models import OverlapPolicy

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config/photobooth.yaml")


class CaptureConfig(BaseModel):
    device_index: int = Field(default=0, description="OpenCV camera device index")
    snap_scale: float = Field(default=0.6, gt=0, le=1.0, description="Center crop fraction")
    snap_width: int = Field(default=360, gt=0)
    snap_height: int = Field(default=270, gt=0)
    resolution_width: int | None = Field(default=None)
    resolution_height: int | None = Field(default=None)


class MotionConfig(BaseModel):
    sample_size: int = Field(default=20, gt=0, description="Grid stride in pixels")
    diff_threshold: int = Field(default=100 * 1_000_000, ge=0)
    fraction_threshold: float = Field(default=0.01, ge=0, le=1.0)
    interval: float = Field(default=0.1, gt=0)


class FaceConfig(BaseModel):
    model_path: str = Field(default="models/face_detection_yunet_2023mar.onnx")
    confidence_threshold: float = Field(default=0.95, ge=0, le=1.0)
    interval: float = Field(default=0.05, gt=0)
    overlap_policy: OverlapPolicy = Field(default=OverlapPolicy.ALLOW)
    suppress_while_capturing: bool = Field(default=True)
    drain_timeout: float = Field(default=2.0, ge=0)


class CountdownConfig(BaseModel):
    steps: int = Field(default=3, gt=0)
    interval: float = Field(default=1.0, gt=0)
    settle_delay: float = Field(default=1.0, ge=0)


class SceneConfig(BaseModel):
    interval: float = Field(default=0.05, gt=0)


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO")
    format: str = Field(
        default="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    file: str | None = Field(default=None)


class Settings(BaseSettings):
    """Root configuration for the photobooth system.

    Loads from YAML file and supports environment variable overrides.
    Reads .env files automatically.
    """

    model_config = {
        "env_prefix": "PHOTOBOOTH_",
        "env_nested_delimiter": "__",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    capture: CaptureConfig = Field(default_factory=CaptureConfig)
    motion: MotionConfig = Field(default_factory=MotionConfig)
    faces: FaceConfig = Field(default_factory=FaceConfig)
    countdown: CountdownConfig = Field(default_factory=CountdownConfig)
    scene: SceneConfig = Field(default_factory=SceneConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_settings(config_path: Path | str | None = None) -> Settings:
    """Load settings from YAML + .env + environment variables.

    Priority: init values (YAML) > env vars > .env file > defaults
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    yaml_data = {}
    if path.exists():
        with open(path) as f:
            yaml_data = yaml.safe_load(f) or {}
        logger.info("Loaded configuration from %s", path)
    else:
        logger.warning("Config file %s not found, using defaults + env vars", path)

    return Settings(**yaml_data)

"""Configuration management for photobooth.

Loads and validates YAML-based configuration with Pydantic models.
Supports environment variable overrides for every setting.
"""

from photobooth.config.settings import Settings, load_settings

__all__ = ["Settings", "load_settings"]

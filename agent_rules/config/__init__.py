"""Configuration management for agent-rules."""

from .config import Config, ConfigData, ConfigError, InstallDefaults, PlatformEntry

__all__ = ["Config", "ConfigData", "ConfigError", "InstallDefaults", "PlatformEntry"]

"""Configuration management class for agent-rules.

Schema::

    install:
      backup: true
      force: false
      skip_conflicts: false
    platforms:
      <id>:
        project_dir: .tool
        global_dir: ~/.tool      # null disables global installs
        label: Tool
"""

import os
import sys
from pathlib import Path
from typing import Any, TypedDict

import yaml

from agent_rules.core.platforms import PLATFORMS, PlatformConfig, build_platform_table
from agent_rules.output import MessageType, VerbosityLevel, message

# Environment variable overriding the config directory
CONFIG_HOME_ENV = "AGENT_RULES_HOME"

INSTALL_FLAGS = ("backup", "force", "skip_conflicts")
PLATFORM_KEYS = ("project_dir", "global_dir", "label")


class InstallDefaults(TypedDict, total=False):
    """Type definition for the ``install`` section."""

    backup: bool
    force: bool
    skip_conflicts: bool


class PlatformEntry(TypedDict, total=False):
    """Type definition for one ``platforms`` entry."""

    project_dir: str
    global_dir: str | None
    label: str


class ConfigData(TypedDict, total=False):
    """Type definition for the configuration structure."""

    install: InstallDefaults
    platforms: dict[str, PlatformEntry]


DEFAULT_INSTALL: InstallDefaults = {
    "backup": True,
    "force": False,
    "skip_conflicts": False,
}


class ConfigError(Exception):
    """Exception raised for configuration validation errors.

    Can contain multiple error messages.
    """

    def __init__(self, errors: str | list[str]):
        """Initialize ConfigError.

        Args:
            errors: Single error message or list of error messages
        """
        if isinstance(errors, str):
            self.errors = [errors]
        else:
            self.errors = errors
        super().__init__(self._format_errors())

    def _format_errors(self) -> str:
        """Format errors for display."""
        if len(self.errors) == 1:
            return self.errors[0]
        else:
            error_list = "\n".join(f"  - {err}" for err in self.errors)
            return f"Configuration has {len(self.errors)} errors:\n{error_list}"


class Config:
    """Manages configuration for agent-rules."""

    def __init__(self, config_dir: Path | None = None):
        """Initialize the Config manager.

        Args:
            config_dir: Optional custom config directory.
                       Defaults to $AGENT_RULES_HOME or ~/.agent-rules
        """
        if config_dir is None:
            env_dir = os.environ.get(CONFIG_HOME_ENV)
            config_dir = Path(env_dir).expanduser() if env_dir else Path.home() / ".agent-rules"

        self.config_directory = config_dir
        self.config_file = self.config_directory / "config.yaml"

    def exists(self) -> bool:
        """Check if the configuration file exists.

        Returns:
            True if config file exists, False otherwise
        """
        return self.config_file.exists()

    @staticmethod
    def validate(config: dict[str, Any]) -> list[str]:
        """Validate the configuration structure.

        Collects all validation errors before raising an exception.

        Args:
            config: The configuration dictionary to validate

        Returns:
            List of warnings (non-fatal issues)

        Raises:
            ConfigError: If the configuration is invalid, with all errors
        """
        errors: list[str] = []
        warnings: list[str] = []

        if not isinstance(config, dict):
            raise ConfigError("Configuration must be a mapping")

        for key in config:
            if key not in ("install", "platforms"):
                warnings.append(f"Unknown top-level key '{key}' is ignored")

        # --- install ---
        if config.get("install") is not None:
            install = config["install"]
            if not isinstance(install, dict):
                errors.append("'install' must be a dictionary")
            else:
                for key, value in install.items():
                    if key not in INSTALL_FLAGS:
                        errors.append(
                            f"Unknown install option '{key}' "
                            f"(expected one of: {', '.join(INSTALL_FLAGS)})"
                        )
                    elif not isinstance(value, bool):
                        errors.append(f"install '{key}' must be true or false")

        # --- platforms ---
        if config.get("platforms") is not None:
            platforms = config["platforms"]
            if not isinstance(platforms, dict):
                errors.append("'platforms' must be a dictionary")
            else:
                for platform_id, entry in platforms.items():
                    if not isinstance(platform_id, str) or not platform_id:
                        errors.append("Platform ids must be non-empty strings")
                        continue

                    if entry is None:
                        entry = {}
                    if not isinstance(entry, dict):
                        errors.append(f"Platform '{platform_id}' must be a dictionary")
                        continue

                    for key in entry:
                        if key not in PLATFORM_KEYS:
                            errors.append(f"Platform '{platform_id}' has unknown key '{key}'")

                    for key in ("project_dir", "label"):
                        if key in entry and (not isinstance(entry[key], str) or not entry[key]):
                            errors.append(f"Platform '{platform_id}' '{key}' must be a non-empty string")

                    if "global_dir" in entry and entry["global_dir"] is not None:
                        if not isinstance(entry["global_dir"], str) or not entry["global_dir"]:
                            errors.append(
                                f"Platform '{platform_id}' 'global_dir' must be a non-empty string or null"
                            )

                    project_dir = entry.get("project_dir")
                    if isinstance(project_dir, str) and (
                        project_dir.startswith(("/", "~")) or ".." in project_dir.split("/")
                    ):
                        errors.append(
                            f"Platform '{platform_id}' 'project_dir' must be a relative path inside the project"
                        )

                    if platform_id.lower() not in PLATFORMS and "project_dir" not in entry:
                        errors.append(f"New platform '{platform_id}' must define 'project_dir'")

        if errors:
            raise ConfigError(errors)

        return warnings

    def read(self) -> ConfigData:
        """Load the configuration file with error handling.

        A missing file yields an empty configuration (all defaults).

        Returns:
            The loaded and validated configuration dictionary

        Raises:
            SystemExit: If the file cannot be read or config is invalid
        """
        if not self.exists():
            message(
                f"No configuration file at {self.config_file}; using defaults",
                MessageType.DEBUG,
                VerbosityLevel.DEBUG,
            )
            return {}

        try:
            with open(self.config_file) as f:
                config = yaml.safe_load(f)
            if config is None:
                return {}

            warnings = self.validate(config)
            for warning in warnings:
                message(f"Warning: {warning}", MessageType.WARNING, VerbosityLevel.ALWAYS)

            message(f"Configuration loaded from {self.config_file}", MessageType.DEBUG, VerbosityLevel.DEBUG)
            return config
        except ConfigError as e:
            message(f"Invalid configuration - {e}", MessageType.ERROR, VerbosityLevel.ALWAYS)
            sys.exit(1)
        except yaml.YAMLError as e:
            message(f"Failed to parse configuration file: {e}", MessageType.ERROR, VerbosityLevel.ALWAYS)
            sys.exit(1)
        except OSError as e:
            message(f"Failed to read configuration file: {e}", MessageType.ERROR, VerbosityLevel.ALWAYS)
            sys.exit(1)

    def write(self, config: ConfigData) -> None:
        """Validate and write the configuration file.

        Raises:
            SystemExit: If validation fails or the file cannot be written
        """
        try:
            self.validate(config)
            self.config_directory.mkdir(parents=True, exist_ok=True)
            with open(self.config_file, "w") as f:
                yaml.dump(dict(config), f, default_flow_style=False, sort_keys=False)
            message(f"Configuration saved to {self.config_file}", MessageType.SUCCESS, VerbosityLevel.ALWAYS)
        except ConfigError as e:
            message(f"Invalid configuration - {e}", MessageType.ERROR, VerbosityLevel.ALWAYS)
            sys.exit(1)
        except OSError as e:
            message(f"Failed to write configuration file: {e}", MessageType.ERROR, VerbosityLevel.ALWAYS)
            sys.exit(1)

    # ------------------------------------------------------------------
    # Typed accessors
    # ------------------------------------------------------------------
    @staticmethod
    def install_defaults(config: ConfigData) -> InstallDefaults:
        """Return the ``install`` section merged over the built-in defaults."""
        merged: InstallDefaults = dict(DEFAULT_INSTALL)
        merged.update(config.get("install") or {})
        return merged

    @staticmethod
    def platform_table(config: ConfigData) -> dict[str, PlatformConfig]:
        """Return the built-in platform table with config entries applied."""
        return build_platform_table(config.get("platforms"))

    @staticmethod
    def generate_template() -> str:
        """Generate a commented YAML template for a new configuration.

        Returns:
            Template string suitable for writing to stdout or a file
        """
        return """# agent-rules configuration

install:
  # Keep a <file>.bak copy when --force overwrites a file
  backup: true
  force: false
  skip_conflicts: false

# Add platforms or override the built-in ones (opencode, codex, claude, cursor)
platforms:
  # windsurf:
  #   label: Windsurf
  #   project_dir: .windsurf
  #   global_dir: ~/.codeium/windsurf
  # cursor:
  #   global_dir: null   # disable global installs
"""

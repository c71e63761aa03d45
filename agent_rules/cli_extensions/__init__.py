"""CLI command extensions for agent-rules."""

from .add_commands import AddCommands
from .config_commands import ConfigCommands
from .platform_commands import PlatformCommands

__all__ = [
    "AddCommands",
    "ConfigCommands",
    "PlatformCommands",
]

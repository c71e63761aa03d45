"""CLI command for listing supported platforms."""

import argparse

from agent_rules.config import Config
from agent_rules.output import MessageType, VerbosityLevel, message


class PlatformCommands:
    """Shows the platform table, including config-file overrides."""

    @staticmethod
    def add_cli_arguments(subparsers) -> None:
        """Register the ``platforms`` command."""
        subparsers.add_parser(
            "platforms",
            help="List supported platforms",
            description="List every supported platform with its project and global directories.",
        )

    @staticmethod
    def process_cli_command(
        args: argparse.Namespace,
        config: Config,
    ) -> None:
        table = Config.platform_table(config.read())

        message("\n=== Platforms ===\n", MessageType.NORMAL, VerbosityLevel.ALWAYS)
        for platform_id, platform in table.items():
            message(
                f"  {platform_id} ({platform.display_name})",
                MessageType.NORMAL,
                VerbosityLevel.ALWAYS,
            )
            message(
                f"    project: {platform.project_dir}",
                MessageType.NORMAL,
                VerbosityLevel.ALWAYS,
            )
            if platform.supports_global:
                message(
                    f"    global:  {platform.global_dir}",
                    MessageType.NORMAL,
                    VerbosityLevel.ALWAYS,
                )
            else:
                message(
                    "    global:  (not supported)",
                    MessageType.WARNING,
                    VerbosityLevel.ALWAYS,
                )
        message("", MessageType.NORMAL, VerbosityLevel.ALWAYS)

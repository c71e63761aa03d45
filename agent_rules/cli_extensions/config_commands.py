"""CLI commands for inspecting the configuration file."""

import argparse
import sys

from agent_rules.config import Config
from agent_rules.output import MessageType, VerbosityLevel, message


class ConfigCommands:
    """Manages configuration-related CLI commands."""

    @staticmethod
    def add_cli_arguments(subparsers) -> None:
        """Add config subcommands to the argument parser.

        Args:
            subparsers: The subparsers object to add commands to
        """
        config_parser = subparsers.add_parser("config", help="Manage configuration")
        config_subparsers = config_parser.add_subparsers(dest="config_command", help="Configuration commands")

        # config show
        config_subparsers.add_parser(
            "show",
            help="Display current configuration",
            description="Display the effective install defaults and platform overrides.",
        )

        # config validate
        config_subparsers.add_parser(
            "validate",
            help="Validate configuration",
            description="Validate the configuration file structure and the resulting platform table.",
        )

        # config template
        config_subparsers.add_parser(
            "template",
            help="Dump a starter configuration template to stdout",
            description="Print a commented YAML template to stdout that can be redirected to a config file.",
        )

        # config where
        config_subparsers.add_parser(
            "where",
            help="Show configuration file location",
            description="Show the file paths for the configuration file and config directory.",
        )

    @staticmethod
    def process_cli_command(args: argparse.Namespace, config: Config) -> None:
        """Process config CLI commands.

        Args:
            args: Parsed command-line arguments
            config: Config instance to operate on
        """
        if args.config_command is None:
            message("Usage: agent-rules config <command>", MessageType.NORMAL, VerbosityLevel.ALWAYS)
            message("", MessageType.NORMAL, VerbosityLevel.ALWAYS)
            message("Available commands:", MessageType.NORMAL, VerbosityLevel.ALWAYS)
            message("  show       Display current configuration", MessageType.NORMAL, VerbosityLevel.ALWAYS)
            message("  validate   Validate configuration", MessageType.NORMAL, VerbosityLevel.ALWAYS)
            message("  template   Dump starter template to stdout", MessageType.NORMAL, VerbosityLevel.ALWAYS)
            message("  where      Show configuration file location", MessageType.NORMAL, VerbosityLevel.ALWAYS)
            return
        elif args.config_command == "show":
            ConfigCommands.display(config)
        elif args.config_command == "validate":
            ConfigCommands.validate_all(config)
        elif args.config_command == "template":
            ConfigCommands.template()
        elif args.config_command == "where":
            ConfigCommands.show_location(config)
        else:
            message("Unknown config command", MessageType.ERROR, VerbosityLevel.ALWAYS)
            sys.exit(1)

    @staticmethod
    def display(config: Config) -> None:
        """Display the effective configuration.

        Args:
            config: Config instance
        """
        if not config.exists():
            message(
                f"No configuration file at {config.config_file}; showing built-in defaults.",
                MessageType.INFO,
                VerbosityLevel.ALWAYS,
            )

        config_data = config.read()

        message("\n=== Install Defaults ===\n", MessageType.NORMAL, VerbosityLevel.ALWAYS)
        for key, value in Config.install_defaults(config_data).items():
            message(f"  {key}: {str(value).lower()}", MessageType.NORMAL, VerbosityLevel.ALWAYS)

        overrides = config_data.get("platforms") or {}
        message("\n=== Platform Overrides ===\n", MessageType.NORMAL, VerbosityLevel.ALWAYS)
        if overrides:
            for platform_id, entry in overrides.items():
                message(f"  {platform_id}", MessageType.NORMAL, VerbosityLevel.ALWAYS)
                for key, value in (entry or {}).items():
                    shown = "(none)" if value is None else value
                    message(f"    {key}: {shown}", MessageType.NORMAL, VerbosityLevel.ALWAYS)
        else:
            message("  (none)", MessageType.NORMAL, VerbosityLevel.ALWAYS)

        message("", MessageType.NORMAL, VerbosityLevel.ALWAYS)

    @staticmethod
    def validate_all(config: Config) -> None:
        """Validate configuration structure and the merged platform table.

        Args:
            config: Config instance
        """
        if not config.exists():
            message(
                f"No configuration file at {config.config_file}; built-in defaults are in use.",
                MessageType.INFO,
                VerbosityLevel.ALWAYS,
            )
            return

        # read() exits on structural errors
        config_data = config.read()

        try:
            table = Config.platform_table(config_data)
        except ValueError as e:
            message(f"Invalid configuration - {e}", MessageType.ERROR, VerbosityLevel.ALWAYS)
            sys.exit(1)

        message(
            f"Configuration is valid ({len(table)} platforms available).",
            MessageType.SUCCESS,
            VerbosityLevel.ALWAYS,
        )

    @staticmethod
    def template() -> None:
        """Dump a starter configuration template to stdout."""
        print(Config.generate_template())

    @staticmethod
    def show_location(config: Config) -> None:
        """Show the location of the configuration file and directory.

        Args:
            config: Config instance
        """
        message("\nConfiguration Locations:\n", MessageType.NORMAL, VerbosityLevel.ALWAYS)

        message(f"  Config directory: {config.config_directory}", MessageType.NORMAL, VerbosityLevel.ALWAYS)
        message(f"  Config file:      {config.config_file}", MessageType.NORMAL, VerbosityLevel.ALWAYS)

        message("\nStatus:", MessageType.NORMAL, VerbosityLevel.ALWAYS)
        if config.config_file.exists():
            message("  Config file exists", MessageType.SUCCESS, VerbosityLevel.ALWAYS)
        else:
            message("  Config file does not exist", MessageType.WARNING, VerbosityLevel.ALWAYS)

        message("", MessageType.NORMAL, VerbosityLevel.ALWAYS)


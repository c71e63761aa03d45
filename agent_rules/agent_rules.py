#!/usr/bin/env python

"""Package manager for AI-agent presets and rules."""

import argparse
import sys

from agent_rules.cli_extensions import AddCommands, ConfigCommands, PlatformCommands
from agent_rules.config import Config
from agent_rules.output import MessageType, VerbosityLevel, get_output, message

# Grouped command help text
COMMAND_GROUPS = """
install commands:
  add                 Install a preset bundle into a project or global directory

information commands:
  platforms           List supported platforms

configuration file commands:
  config              Manage the configuration file
"""


class GroupedHelpFormatter(argparse.RawDescriptionHelpFormatter):
    """Custom formatter that hides the subparser choices from positional arguments."""

    def _metavar_formatter(self, action, default_metavar):
        if action.choices is not None:
            result = action.metavar if action.metavar is not None else ""

            def format_fn(tuple_size):
                if isinstance(result, tuple):
                    return result
                return (result,) * tuple_size

            return format_fn
        return super()._metavar_formatter(action, default_metavar)

    def _format_action(self, action):
        # Command list lives in the epilog
        if isinstance(action, argparse._SubParsersAction):
            return ""
        return super()._format_action(action)


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level argument parser with every command registered."""
    parser = argparse.ArgumentParser(
        prog="agent-rules",
        description="Install AI-agent presets and rules for your coding tools",
        formatter_class=GroupedHelpFormatter,
        epilog=COMMAND_GROUPS,
    )
    parser.add_argument(
        "-v", "--verbose", action="count", default=0,
        help="Increase verbosity (-v, -vv, -vvv)",
    )
    parser.add_argument(
        "--no-color", action="store_true",
        help="Disable colored output",
    )

    subparsers = parser.add_subparsers(dest="command", metavar="<command>")

    AddCommands.add_cli_arguments(subparsers)       # add
    PlatformCommands.add_cli_arguments(subparsers)  # platforms
    ConfigCommands.add_cli_arguments(subparsers)    # config

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the agent-rules CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # Configure output system
    output_mgr = get_output()
    output_mgr.verbosity = args.verbose
    output_mgr.use_color = not args.no_color and sys.stdout.isatty()

    message(
        f"Verbosity level: {args.verbose}",
        MessageType.DEBUG,
        VerbosityLevel.DEBUG,
    )
    message(
        f"Command: {args.command}",
        MessageType.DEBUG,
        VerbosityLevel.DEBUG,
    )

    config = Config()

    if args.command == "add":
        AddCommands.process_cli_command(args, config)
        return

    if args.command == "platforms":
        PlatformCommands.process_cli_command(args, config)
        return

    if args.command == "config":
        ConfigCommands.process_cli_command(args, config)
        return

    parser.print_help()
    if args.command is not None:
        sys.exit(1)


if __name__ == "__main__":
    main()

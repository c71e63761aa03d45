"""CLI command for installing a bundle."""

import argparse
import sys

from agent_rules.config import Config, InstallDefaults
from agent_rules.core import (
    BlockingConflictError,
    Bundle,
    FileStatus,
    InstallError,
    InstallOptions,
    InstallReport,
    install,
    load_bundle,
    normalize_platform_input,
    raise_for_conflicts,
    resolve_install_target,
)
from agent_rules.core.errors import CONFLICT_PREVIEW_LIMIT
from agent_rules.output import MessageType, VerbosityLevel, message, print_diff
from agent_rules.utils import is_file_url, resolve_file_path

# Status word and symbol shown for each outcome
STATUS_DISPLAY = {
    FileStatus.CREATED: ("+", "created", MessageType.SUCCESS),
    FileStatus.OVERWRITTEN: ("~", "updated", MessageType.WARNING),
    FileStatus.UNCHANGED: ("=", "unchanged", MessageType.NORMAL),
    FileStatus.CONFLICT: ("!", "conflict", MessageType.ERROR),
    FileStatus.SKIPPED: ("-", "skipped", MessageType.NORMAL),
}


class AddCommands:
    """Installs a bundle file into a project, global or custom directory."""

    @staticmethod
    def add_cli_arguments(subparsers) -> None:
        """Add the ``add`` command to the argument parser."""
        add_parser = subparsers.add_parser(
            "add",
            help="Install a preset bundle",
            description="Install a checksum-verified bundle file into the "
            "current project, the platform's global directory, or a custom directory.",
        )
        add_parser.add_argument(
            "bundle",
            help="Bundle JSON file (path or file:// URL)",
        )
        add_parser.add_argument(
            "-p", "--platform",
            help="Platform the bundle must target (defaults to the bundle's own)",
        )

        location = add_parser.add_mutually_exclusive_group()
        location.add_argument(
            "-g", "--global",
            dest="global_install",
            action="store_true",
            help="Install into the platform's global directory",
        )
        location.add_argument(
            "--dir",
            dest="directory",
            metavar="DIR",
            help="Install into a custom directory",
        )

        add_parser.add_argument(
            "-f", "--force",
            action="store_true",
            help="Overwrite conflicting files (a .bak copy is kept)",
        )
        add_parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Show what would change without writing anything",
        )
        add_parser.add_argument(
            "--skip-conflicts",
            action="store_true",
            help="Leave conflicting files untouched instead of failing",
        )
        add_parser.add_argument(
            "--no-backup",
            action="store_true",
            help="Do not keep .bak copies of overwritten files",
        )

    @staticmethod
    def build_options(
        args: argparse.Namespace, defaults: InstallDefaults,
    ) -> InstallOptions:
        """Combine command-line flags with the config file defaults."""
        return InstallOptions(
            force=bool(getattr(args, "force", False)) or defaults.get("force", False),
            dry_run=bool(getattr(args, "dry_run", False)),
            skip_conflicts=(
                bool(getattr(args, "skip_conflicts", False))
                or defaults.get("skip_conflicts", False)
            ),
            backup=not getattr(args, "no_backup", False) and defaults.get("backup", True),
        )

    @staticmethod
    def load(location: str) -> Bundle:
        """Load a bundle from a local path or file:// URL.

        Raises:
            InstallError: If the location is remote
        """
        if not is_file_url(location):
            raise InstallError(
                f"Cannot read bundle from '{location}': only local paths "
                f"and file:// URLs are supported"
            )
        return load_bundle(resolve_file_path(location))

    @classmethod
    def process_cli_command(
        cls,
        args: argparse.Namespace,
        config: Config,
    ) -> None:
        """Run ``add`` and exit non-zero on errors or blocking conflicts."""
        config_data = config.read()
        options = cls.build_options(args, Config.install_defaults(config_data))
        platforms = Config.platform_table(config_data)

        try:
            bundle = cls.load(args.bundle)
            platform_id = bundle.platform
            requested = getattr(args, "platform", None)
            if requested:
                platform_id = normalize_platform_input(requested, platforms)
                if platform_id != bundle.platform:
                    raise InstallError(
                        f"Bundle '{bundle.slug}' targets '{bundle.platform}', "
                        f"not '{platform_id}'"
                    )

            target = resolve_install_target(
                platform_id,
                global_install=getattr(args, "global_install", False),
                directory=getattr(args, "directory", None),
                platforms=platforms,
            )
            report = install(bundle, target, options)
        except InstallError as e:
            message(str(e), MessageType.ERROR, VerbosityLevel.ALWAYS)
            sys.exit(1)
        except (OSError, ValueError) as e:
            message(f"Installation failed: {e}", MessageType.ERROR, VerbosityLevel.ALWAYS)
            sys.exit(1)

        cls.print_report(bundle, report)

        try:
            raise_for_conflicts(report)
        except BlockingConflictError as e:
            cls.print_conflicts(report, e)
            sys.exit(1)

    # ------------------------------------------------------------------
    # Presentation
    # ------------------------------------------------------------------
    @staticmethod
    def print_report(bundle: Bundle, report: InstallReport) -> None:
        """Print one status line per file plus backups and a summary."""
        version = f"@{bundle.version}" if bundle.version else ""
        prefix = "Dry run: would install" if report.dry_run else "Installing"
        message(
            f"{prefix} {bundle.slug}{version} ({bundle.platform}) to {report.target.label}",
            MessageType.NORMAL,
            VerbosityLevel.ALWAYS,
        )

        for outcome in report.outcomes:
            symbol, label, msg_type = STATUS_DISPLAY[outcome.status]
            line = f"  {symbol} {label:<9} {outcome.path}"
            if outcome.status == FileStatus.SKIPPED and outcome.reason:
                line += f" ({outcome.reason})"
            level = (
                VerbosityLevel.VERBOSE
                if outcome.status == FileStatus.UNCHANGED
                else VerbosityLevel.ALWAYS
            )
            message(line, msg_type, level)

        for record in report.backups:
            verb = "Would back up" if report.dry_run else "Backed up"
            message(
                f"  {verb} {record.original_path} → {record.backup_path}",
                MessageType.INFO,
                VerbosityLevel.ALWAYS,
            )

        counts = report.counts()
        summary = ", ".join(
            f"{count} {STATUS_DISPLAY[status][1]}"
            for status, count in counts.items()
            if count
        )
        message(f"[{len(report.outcomes)}] {summary or 'no files'}", MessageType.NORMAL, VerbosityLevel.ALWAYS)

        skipped_conflicts = [
            o for o in report.by_status(FileStatus.SKIPPED) if o.diff is not None
        ]
        if skipped_conflicts:
            noun = "file" if len(skipped_conflicts) == 1 else "files"
            message(
                f"{len(skipped_conflicts)} conflicting {noun} skipped",
                MessageType.WARNING,
                VerbosityLevel.ALWAYS,
            )

    @staticmethod
    def print_conflicts(report: InstallReport, error: BlockingConflictError) -> None:
        """Print the blocking-conflict error with diff previews."""
        message(str(error), MessageType.ERROR, VerbosityLevel.ALWAYS)
        for outcome in report.conflicts[:CONFLICT_PREVIEW_LIMIT]:
            message(f"\n  • {outcome.path}", MessageType.NORMAL, VerbosityLevel.ALWAYS)
            if outcome.diff:
                print_diff(outcome.diff)

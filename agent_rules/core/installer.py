"""Installation orchestrator.

Drives the per-file loop for one bundle: translate the path, compare
with what is on disk, back up and write when allowed, and collect one
:class:`FileOutcome` per bundle file.

Files are processed strictly in bundle order, one at a time.  Writes
happen as each file is processed, so when conflicts block an install
the files handled before them are already on disk.  Re-running with the
same bundle reports those as unchanged.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path

from agent_rules.core.backup import BackupRecord, maybe_backup, plan_backup
from agent_rules.core.bundle import Bundle, BundleFile
from agent_rules.core.differ import Classification, classify
from agent_rules.core.errors import BlockingConflictError, MalformedBundleError
from agent_rules.core.paths import normalize_bundle_path, relativize
from agent_rules.core.target import InstallMode, InstallTarget
from agent_rules.core.translator import destination as translate
from agent_rules.output import MessageType, VerbosityLevel, message


@dataclass(frozen=True)
class InstallOptions:
    """Behaviour switches for one install.

    Attributes:
        force: Overwrite conflicting files
        dry_run: Classify everything, write nothing
        skip_conflicts: Leave conflicting files alone without failing
        backup: Keep a ``.bak`` copy of each overwritten file
    """

    force: bool = False
    dry_run: bool = False
    skip_conflicts: bool = False
    backup: bool = True


class FileStatus:
    """Terminal status of one bundle file."""

    CREATED = "created"
    OVERWRITTEN = "overwritten"
    UNCHANGED = "unchanged"
    CONFLICT = "conflict"
    SKIPPED = "skipped"

    ALL = (CREATED, OVERWRITTEN, UNCHANGED, CONFLICT, SKIPPED)


@dataclass(frozen=True)
class FileOutcome:
    """What happened (or, in dry-run, would happen) to one bundle file.

    Attributes:
        path: Root-relative destination, or the bundle path when the
            translator skipped the file
        status: One of the :class:`FileStatus` constants
        destination: Absolute destination, ``None`` for translator skips
        diff: Diff preview for conflicting files
        backup: Backup record for overwritten files
        reason: Why a file was skipped
    """

    path: str
    status: str
    destination: Path | None = None
    diff: str | None = None
    backup: BackupRecord | None = None
    reason: str | None = None


@dataclass
class InstallReport:
    """Aggregate result of :func:`install`."""

    target: InstallTarget
    outcomes: list[FileOutcome] = field(default_factory=list)
    dry_run: bool = False

    @property
    def had_blocking_conflicts(self) -> bool:
        return any(o.status == FileStatus.CONFLICT for o in self.outcomes)

    @property
    def conflicts(self) -> list[FileOutcome]:
        return self.by_status(FileStatus.CONFLICT)

    @property
    def backups(self) -> list[BackupRecord]:
        return [o.backup for o in self.outcomes if o.backup is not None]

    def by_status(self, status: str) -> list[FileOutcome]:
        return [o for o in self.outcomes if o.status == status]

    def counts(self) -> dict[str, int]:
        """Number of outcomes per status, including zero counts."""
        counter = Counter(o.status for o in self.outcomes)
        return {status: counter.get(status, 0) for status in FileStatus.ALL}


# ------------------------------------------------------------------
# Orchestration
# ------------------------------------------------------------------
def _plan_destinations(
    bundle: Bundle, target: InstallTarget,
) -> list[tuple[BundleFile, Path | None]]:
    """Translate every path before anything is written.

    Path-safety and malformed-path errors therefore abort the install
    with no files touched.  So do destinations that collide, including a
    file planned where another file needs a directory.
    """
    planned: list[tuple[BundleFile, Path | None]] = []
    seen: dict[Path, str] = {}
    # Directories implied by planned files, mapped to the first such file
    directories: dict[Path, str] = {}

    for bundle_file in bundle.files:
        dest = translate(bundle_file.path, target)
        if dest is not None:
            if dest in seen:
                raise MalformedBundleError(
                    f"Bundle files '{seen[dest]}' and '{bundle_file.path}' "
                    f"both install to {dest}"
                )
            if dest in directories:
                raise MalformedBundleError(
                    f"Bundle file '{bundle_file.path}' installs to {dest}, "
                    f"which must be a directory for '{directories[dest]}'"
                )
            for parent in dest.parents:
                if parent in seen:
                    raise MalformedBundleError(
                        f"Bundle file '{bundle_file.path}' needs {parent} to be "
                        f"a directory, but '{seen[parent]}' installs a file there"
                    )
                directories.setdefault(parent, bundle_file.path)
            seen[dest] = bundle_file.path
        planned.append((bundle_file, dest))

    return planned


def _write(dest: Path, content: bytes, options: InstallOptions) -> None:
    if not options.dry_run:
        dest.write_bytes(content)


def _process_file(
    bundle_file: BundleFile,
    dest: Path,
    target: InstallTarget,
    options: InstallOptions,
) -> FileOutcome:
    if not options.dry_run:
        dest.parent.mkdir(parents=True, exist_ok=True)

    relative_path = relativize(dest, target.root)
    result = classify(dest, bundle_file.content, relative_path)

    if result.kind == Classification.CREATED:
        _write(dest, bundle_file.content, options)
        message(f"Created: {relative_path}", MessageType.DEBUG, VerbosityLevel.DEBUG)
        return FileOutcome(relative_path, FileStatus.CREATED, dest)

    if result.kind == Classification.UNCHANGED:
        message(f"Unchanged: {relative_path}", MessageType.DEBUG, VerbosityLevel.DEBUG)
        return FileOutcome(relative_path, FileStatus.UNCHANGED, dest)

    if options.force:
        if options.dry_run:
            record = plan_backup(relative_path, options)
        else:
            record = maybe_backup(dest, relative_path, options)
        _write(dest, bundle_file.content, options)
        message(f"Overwritten: {relative_path}", MessageType.DEBUG, VerbosityLevel.DEBUG)
        return FileOutcome(
            relative_path, FileStatus.OVERWRITTEN, dest,
            diff=result.diff, backup=record,
        )

    if options.skip_conflicts:
        message(f"Skipped: {relative_path}", MessageType.DEBUG, VerbosityLevel.DEBUG)
        return FileOutcome(
            relative_path, FileStatus.SKIPPED, dest,
            diff=result.diff, reason="conflicts with existing file",
        )

    message(f"Conflict: {relative_path}", MessageType.DEBUG, VerbosityLevel.DEBUG)
    return FileOutcome(relative_path, FileStatus.CONFLICT, dest, diff=result.diff)


def install(
    bundle: Bundle,
    target: InstallTarget,
    options: InstallOptions | None = None,
) -> InstallReport:
    """Install *bundle* into *target*.

    The bundle must already be checksum-verified.  Each file ends in
    exactly one :class:`FileStatus`; conflicts are resolved by
    ``force`` (overwrite, with backup), ``skip_conflicts`` (skip) or
    left as blocking ``conflict`` outcomes.  A dry run performs the same
    classification and touches nothing.

    Args:
        bundle: Verified bundle
        target: Resolved install target
        options: Install options (defaults to :class:`InstallOptions`)

    Returns:
        :class:`InstallReport` with one outcome per bundle file

    Raises:
        PathSafetyViolation: If any file would land outside the root
        MalformedBundleError: On empty or colliding destinations
        OSError: On any filesystem failure other than a missing file
    """
    if options is None:
        options = InstallOptions()

    if bundle.platform.lower() != target.platform:
        raise MalformedBundleError(
            f"Bundle '{bundle.slug}' is for platform '{bundle.platform}', "
            f"not '{target.platform}'"
        )

    bundle.validate()
    planned = _plan_destinations(bundle, target)

    message(
        f"{'Checking' if options.dry_run else 'Writing'} "
        f"{len(planned)} file(s) in {target.root}",
        MessageType.DEBUG,
        VerbosityLevel.DEBUG,
    )

    report = InstallReport(target=target, dry_run=options.dry_run)
    for bundle_file, dest in planned:
        if dest is None:
            skipped_path = normalize_bundle_path(bundle_file.path)
            report.outcomes.append(FileOutcome(
                skipped_path,
                FileStatus.SKIPPED,
                reason=f"not installed in {InstallMode.GLOBAL} mode",
            ))
            message(
                f"Skipped (not supported for {target.mode}): {skipped_path}",
                MessageType.DEBUG,
                VerbosityLevel.DEBUG,
            )
            continue

        report.outcomes.append(_process_file(bundle_file, dest, target, options))

    return report


def raise_for_conflicts(report: InstallReport) -> None:
    """Raise :class:`BlockingConflictError` if the report has conflicts."""
    if report.had_blocking_conflicts:
        raise BlockingConflictError([o.path for o in report.conflicts])

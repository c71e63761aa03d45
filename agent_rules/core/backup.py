"""Backups of files about to be overwritten.

A backup is a plain copy named ``<file>.bak`` next to the original.
There is one backup slot per file; a second overwrite replaces it.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from agent_rules.output import MessageType, VerbosityLevel, message

if TYPE_CHECKING:
    from agent_rules.core.installer import InstallOptions

BACKUP_SUFFIX = ".bak"


@dataclass(frozen=True)
class BackupRecord:
    """A backup made (or planned, in dry-run) before an overwrite.

    Attributes:
        original_path: Root-relative path of the overwritten file
        backup_path: Root-relative path of its ``.bak`` copy
    """

    original_path: str
    backup_path: str


def backup_path_for(destination: Path) -> Path:
    """Return the ``.bak`` sibling of *destination*."""
    return destination.with_name(destination.name + BACKUP_SUFFIX)


def plan_backup(relative_path: str, options: InstallOptions) -> BackupRecord | None:
    """Return the record :func:`maybe_backup` would produce, without I/O."""
    if not options.backup:
        return None
    return BackupRecord(relative_path, relative_path + BACKUP_SUFFIX)


def maybe_backup(
    destination: Path,
    relative_path: str,
    options: InstallOptions,
) -> BackupRecord | None:
    """Copy *destination* to ``<destination>.bak`` if backups are enabled.

    Must be called before the overwrite.  Any :class:`OSError` from the
    copy propagates so that the caller never overwrites a file whose
    backup failed.

    Args:
        destination: Absolute path of the file about to be overwritten
        relative_path: Root-relative path, used in the record
        options: Install options; ``options.backup`` gates the copy

    Returns:
        :class:`BackupRecord`, or ``None`` if backups are disabled
    """
    record = plan_backup(relative_path, options)
    if record is None:
        return None

    shutil.copyfile(destination, backup_path_for(destination))
    message(
        f"Backed up: {record.original_path} → {record.backup_path}",
        MessageType.DEBUG,
        VerbosityLevel.DEBUG,
    )
    return record

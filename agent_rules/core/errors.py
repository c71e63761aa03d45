"""Exception hierarchy for the installation engine."""

from __future__ import annotations

from typing import Any

# Number of conflicting files listed in a BlockingConflictError message
CONFLICT_PREVIEW_LIMIT = 3


class InstallError(Exception):
    """Base class for every fatal installation error."""


class PathSafetyViolation(InstallError):
    """A bundle path resolves outside the install root."""

    def __init__(self, path: str, root: Any = None, reason: str = ""):
        self.path = path
        self.root = root
        if not reason:
            reason = (
                f"Refusing to write outside of {root}. Derived path: {path}"
            )
        super().__init__(reason)


class MalformedBundleError(InstallError):
    """The bundle content cannot be installed as-is."""


class ChecksumMismatchError(MalformedBundleError):
    """A bundled file does not match its declared checksum."""

    def __init__(self, path: str, expected: str, received: str):
        self.path = path
        self.expected = expected
        self.received = received
        super().__init__(
            f"Checksum mismatch for {path}. "
            f"Expected {expected}, received {received}."
        )


class UnknownPlatformError(InstallError):
    """The requested platform id is not in the platform table."""


class UnsupportedInstallModeError(InstallError):
    """The platform cannot be installed in the requested mode."""


class BlockingConflictError(InstallError):
    """One or more files conflict and neither force nor skip was set.

    Files processed before the conflicts were found stay on disk; the
    message lists the first few conflicting paths, the total count and
    how to re-run.
    """

    def __init__(
        self,
        conflicts: list[str],
        preview_limit: int = CONFLICT_PREVIEW_LIMIT,
    ):
        self.conflicts = list(conflicts)
        self.total = len(self.conflicts)
        self.preview_limit = preview_limit
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.total == 1:
            header = "1 file has conflicts."
        else:
            header = f"{self.total} files have conflicts."

        lines = [header]
        lines.extend(f"  - {path}" for path in self.conflicts[: self.preview_limit])
        if self.total > self.preview_limit:
            lines.append(f"  ...and {self.total - self.preview_limit} more")
        lines.append(
            "Re-run with --force to overwrite (a .bak copy is kept) "
            "or --skip-conflicts to leave these files untouched."
        )
        return "\n".join(lines)

"""Path helpers shared by the translator and the orchestrator.

Bundle paths are always POSIX-style and relative.  Everything in here is
string/path manipulation, except the root containment check, which
resolves symlinks that already exist on disk.
"""

from __future__ import annotations

import os
import re
from pathlib import Path

from agent_rules.core.errors import PathSafetyViolation

_LEADING_DOT_SLASH = re.compile(r"^\./+")
_LEADING_SLASH = re.compile(r"^/+")


def normalize_bundle_path(value: str) -> str:
    """Normalize a bundle path to forward slashes with no leading ``./`` or ``/``.

    >>> normalize_bundle_path("./foo\\\\bar/baz.ts")
    'foo/bar/baz.ts'
    """
    normalized = value.replace("\\", "/")
    normalized = _LEADING_DOT_SLASH.sub("", normalized)
    return _LEADING_SLASH.sub("", normalized)


def strip_prefix(path: str, prefix: str | None) -> str:
    """Remove a leading ``prefix/`` directory from *path*.

    Returns an empty string when *path* is the prefix itself and *path*
    unchanged when it does not start with the prefix.
    """
    if not prefix:
        return path
    if path == prefix:
        return ""
    if path.startswith(f"{prefix}/"):
        return path[len(prefix) + 1:]
    return path


def has_prefix(path: str, prefix: str) -> bool:
    """Return ``True`` if *path* is *prefix* or lives under it."""
    return path == prefix or path.startswith(f"{prefix}/")


def validate_bundle_path(normalized: str, original: str | None = None) -> None:
    """Reject traversal segments and home-directory references.

    Args:
        normalized: Path as returned by :func:`normalize_bundle_path`
        original: Path as it appeared in the bundle, for the message

    Raises:
        PathSafetyViolation: If the path is unsafe
    """
    shown = original if original is not None else normalized
    segments = normalized.split("/")

    if ".." in segments:
        raise PathSafetyViolation(
            shown,
            reason=f"Refusing to install file with path traversal: {shown}",
        )

    if segments[0].startswith("~"):
        raise PathSafetyViolation(
            shown,
            reason=(
                f"Refusing to install file with home directory "
                f"reference: {shown}"
            ),
        )

    if "~" in segments[1:]:
        raise PathSafetyViolation(
            shown,
            reason=(
                f"Refusing to install file with embedded home directory "
                f"reference: {shown}"
            ),
        )


def join_under_root(root: Path, relative_path: str) -> Path:
    """Join *relative_path* onto *root* and collapse ``.`` segments."""
    return Path(os.path.normpath(root / relative_path))


def is_within_root(candidate: Path, root: Path) -> bool:
    """Return ``True`` if *candidate* equals *root* or is a descendant.

    Both paths are compared in resolved form, so a symlinked directory
    under *root* that points elsewhere counts as outside.  Missing path
    components are fine; they resolve lexically.
    """
    candidate = Path(candidate).resolve()
    root = Path(root).resolve()
    return candidate == root or candidate.is_relative_to(root)


def ensure_within_root(candidate: Path, root: Path) -> None:
    """Raise :class:`PathSafetyViolation` unless *candidate* is under *root*."""
    if not is_within_root(candidate, root):
        raise PathSafetyViolation(str(candidate), root)


def relativize(path: Path, root: Path) -> str:
    """Return *path* relative to *root* in POSIX form.

    Falls back to the absolute path when *path* is not under *root* or
    is the root itself.
    """
    try:
        relative = Path(path).relative_to(root)
    except ValueError:
        return str(path)
    if relative == Path("."):
        return str(path)
    return relative.as_posix()


def expand_home(value: str) -> str:
    """Expand a leading ``~`` to the user's home directory."""
    return os.path.expanduser(value)

"""Path translation from bundle paths to install destinations.

Layout rule (version 2, the ``config/`` namespace):

    config/agent.md  ->  <root>/.claude/agent.md   (project, custom)
                     ->  <root>/agent.md           (global)
    README.md        ->  <root>/README.md          (project, custom)
                     ->  skipped                   (global)

Files under ``config/`` belong to the platform's own directory; every
other file is a project-root file that has no meaning in a global
install.

Only this single rule is applied. Per-type destination templates (separate
project and global locations for instructions, agents, commands and so on)
are not generated; a bundle places each file through its own path.
"""

from __future__ import annotations

import posixpath
from pathlib import Path

from agent_rules.core.errors import MalformedBundleError
from agent_rules.core.paths import (
    ensure_within_root,
    has_prefix,
    join_under_root,
    normalize_bundle_path,
    strip_prefix,
    validate_bundle_path,
)
from agent_rules.core.target import InstallMode, InstallTarget

PATH_LAYOUT_VERSION = 2

# Bundle files under this directory map to the platform directory
CONFIG_DIR_NAME = "config"


def _empty_path_error(original: str) -> MalformedBundleError:
    return MalformedBundleError(
        f"Unable to derive destination for {original}. "
        f"The computed relative path is empty."
    )


def _collapse(path: str) -> str:
    # "." and "a/." name a directory, never a file
    collapsed = posixpath.normpath(path) if path else ""
    return "" if collapsed == "." else collapsed


def relative_destination(bundle_path: str, target: InstallTarget) -> str | None:
    """Compute the root-relative destination of a bundle path.

    Args:
        bundle_path: Path as it appears in the bundle
        target: Resolved install target

    Returns:
        POSIX path relative to ``target.root``, or ``None`` if the file is
        not installed in this mode

    Raises:
        MalformedBundleError: If the path (or its stripped form) is empty
            or collapses to ``.``
        PathSafetyViolation: If the path contains traversal or ``~``
    """
    normalized = normalize_bundle_path(bundle_path)
    if not normalized:
        raise _empty_path_error(bundle_path)

    validate_bundle_path(normalized, bundle_path)
    normalized = _collapse(normalized)
    if not normalized:
        raise _empty_path_error(bundle_path)

    if has_prefix(normalized, CONFIG_DIR_NAME):
        inner = strip_prefix(normalized, CONFIG_DIR_NAME)
        if not inner:
            raise _empty_path_error(bundle_path)
        if target.mode == InstallMode.GLOBAL:
            return inner
        return f"{target.project_dir}/{inner}"

    if target.mode == InstallMode.GLOBAL:
        return None
    return normalized


def destination(bundle_path: str, target: InstallTarget) -> Path | None:
    """Map a bundle path to an absolute destination under ``target.root``.

    Returns ``None`` when the file is skipped for this install mode (root
    files in a global install).  The caller reports the skip.

    Raises:
        MalformedBundleError: If the translated path is empty
        PathSafetyViolation: If the destination is outside ``target.root``
    """
    relative = relative_destination(bundle_path, target)
    if relative is None:
        return None

    resolved = join_under_root(target.root, relative)
    ensure_within_root(resolved, target.root)
    return resolved

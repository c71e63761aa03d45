"""Install target resolution (project, global or custom directory)."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from agent_rules.core.errors import UnsupportedInstallModeError
from agent_rules.core.paths import expand_home
from agent_rules.core.platforms import PlatformConfig, get_platform


class InstallMode:
    """Where a bundle is installed."""

    PROJECT = "project"
    GLOBAL = "global"
    CUSTOM = "custom"

    ALL = (PROJECT, GLOBAL, CUSTOM)


@dataclass(frozen=True)
class InstallTarget:
    """Resolved destination for one install command.

    Attributes:
        root: Absolute root directory; nothing is written outside it
        mode: One of the :class:`InstallMode` constants
        platform: Platform id
        project_dir: Platform's project subdirectory (e.g. ``".claude"``)
        label: Human-readable description for status output
    """

    root: Path
    mode: str
    platform: str
    project_dir: str
    label: str = ""

    def __post_init__(self):
        if self.mode not in InstallMode.ALL:
            raise ValueError(f"Unknown install mode '{self.mode}'")


def resolve_install_target(
    platform_id: str,
    *,
    global_install: bool = False,
    directory: str | Path | None = None,
    cwd: Path | None = None,
    platforms: Mapping[str, PlatformConfig] | None = None,
) -> InstallTarget:
    """Build the :class:`InstallTarget` for a platform and CLI choices.

    - ``directory`` given: custom mode rooted at that directory
    - ``global_install``: global mode rooted at the platform's global dir
    - otherwise: project mode rooted at *cwd* (default: current directory)

    Raises:
        UnsupportedInstallModeError: On a global install for a platform
            without a global directory
        ValueError: If both ``global_install`` and ``directory`` are set
    """
    platform = get_platform(platform_id, platforms)

    if global_install and directory is not None:
        raise ValueError("A global install cannot also target a custom directory")

    if directory is not None:
        root = Path(expand_home(str(directory))).resolve()
        return InstallTarget(
            root=root,
            mode=InstallMode.CUSTOM,
            platform=platform.id,
            project_dir=platform.project_dir,
            label=f"custom directory {root}",
        )

    if global_install:
        if not platform.supports_global:
            raise UnsupportedInstallModeError(
                f'Platform "{platform.id}" does not support global installation'
            )
        root = Path(expand_home(platform.global_dir)).resolve()
        return InstallTarget(
            root=root,
            mode=InstallMode.GLOBAL,
            platform=platform.id,
            project_dir=platform.project_dir,
            label=f"global path {root}",
        )

    root = (cwd or Path.cwd()).resolve()
    return InstallTarget(
        root=root,
        mode=InstallMode.PROJECT,
        platform=platform.id,
        project_dir=platform.project_dir,
        label=f"project root {root}",
    )

"""Platform table.

Each supported agent tool is described by one :class:`PlatformConfig`
entry.  Adding a platform is a data change: add an entry to
``PLATFORMS`` or declare it under ``platforms:`` in the config file.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from agent_rules.core.errors import UnknownPlatformError


@dataclass(frozen=True)
class PlatformConfig:
    """Directory conventions for one platform.

    Attributes:
        id: Platform identifier (e.g. ``"claude"``)
        project_dir: Directory name used inside a project (``".claude"``)
        global_dir: User-level directory, or ``None`` if the platform
            has no global install location
        label: Human-readable name
    """

    id: str
    project_dir: str
    global_dir: str | None = None
    label: str = ""

    @property
    def supports_global(self) -> bool:
        return self.global_dir is not None

    @property
    def display_name(self) -> str:
        return self.label or self.id


PLATFORMS: dict[str, PlatformConfig] = {
    "opencode": PlatformConfig(
        "opencode", ".opencode", "~/.config/opencode", "OpenCode",
    ),
    "codex": PlatformConfig("codex", ".codex", "~/.codex", "Codex"),
    "claude": PlatformConfig("claude", ".claude", "~/.claude", "Claude Code"),
    "cursor": PlatformConfig("cursor", ".cursor", "~/.cursor", "Cursor"),
}


def build_platform_table(
    overrides: Mapping[str, Any] | None = None,
    base: Mapping[str, PlatformConfig] | None = None,
) -> dict[str, PlatformConfig]:
    """Merge config-file platform entries over the built-in table.

    An override entry may set any of ``project_dir``, ``global_dir`` and
    ``label``; missing keys keep the built-in value.  ``global_dir: null``
    disables global installs for that platform.  New platform ids must
    provide ``project_dir``.

    Args:
        overrides: ``platforms`` mapping from the config file
        base: Table to start from (defaults to :data:`PLATFORMS`)

    Returns:
        New platform table

    Raises:
        ValueError: If a new platform has no ``project_dir``
    """
    table = dict(PLATFORMS if base is None else base)

    for platform_id, entry in (overrides or {}).items():
        key = platform_id.lower()
        entry = entry or {}
        existing = table.get(key)

        if existing is None:
            if not entry.get("project_dir"):
                raise ValueError(
                    f"Platform '{key}' must define 'project_dir'"
                )
            table[key] = PlatformConfig(
                id=key,
                project_dir=entry["project_dir"],
                global_dir=entry.get("global_dir"),
                label=entry.get("label", ""),
            )
            continue

        table[key] = PlatformConfig(
            id=key,
            project_dir=entry.get("project_dir", existing.project_dir),
            global_dir=entry.get("global_dir", existing.global_dir),
            label=entry.get("label", existing.label),
        )

    return table


def platform_ids(platforms: Mapping[str, PlatformConfig] | None = None) -> list[str]:
    """Return the supported platform ids in table order."""
    return list((PLATFORMS if platforms is None else platforms).keys())


def is_supported_platform(
    value: str,
    platforms: Mapping[str, PlatformConfig] | None = None,
) -> bool:
    return value in (PLATFORMS if platforms is None else platforms)


def normalize_platform_input(
    value: str,
    platforms: Mapping[str, PlatformConfig] | None = None,
) -> str:
    """Lower-case and validate a platform id from user input.

    Raises:
        UnknownPlatformError: If the platform is not in the table
    """
    normalized = value.strip().lower()
    if is_supported_platform(normalized, platforms):
        return normalized
    supported = ", ".join(platform_ids(platforms))
    raise UnknownPlatformError(
        f'Unknown platform "{value}". Supported platforms: {supported}.'
    )


def get_platform(
    platform_id: str,
    platforms: Mapping[str, PlatformConfig] | None = None,
) -> PlatformConfig:
    """Look up a platform entry by id (case-insensitive)."""
    table = PLATFORMS if platforms is None else platforms
    return table[normalize_platform_input(platform_id, table)]

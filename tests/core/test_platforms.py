"""Tests for core/platforms.py - platform table and lookups."""

import pytest

from agent_rules.core.errors import UnknownPlatformError
from agent_rules.core.platforms import (
    PLATFORMS,
    PlatformConfig,
    build_platform_table,
    get_platform,
    is_supported_platform,
    normalize_platform_input,
    platform_ids,
)


# ===========================================================================
# PlatformConfig / PLATFORMS
# ===========================================================================
class TestBuiltinPlatforms:

    def test_known_platforms(self):
        assert platform_ids() == ["opencode", "codex", "claude", "cursor"]

    def test_project_dirs(self):
        assert PLATFORMS["claude"].project_dir == ".claude"
        assert PLATFORMS["opencode"].project_dir == ".opencode"

    def test_global_dirs(self):
        assert PLATFORMS["opencode"].global_dir == "~/.config/opencode"
        assert PLATFORMS["codex"].global_dir == "~/.codex"

    def test_all_builtins_support_global(self):
        assert all(p.supports_global for p in PLATFORMS.values())

    def test_display_name_falls_back_to_id(self):
        assert PlatformConfig("tool", ".tool").display_name == "tool"
        assert PLATFORMS["claude"].display_name == "Claude Code"


# ===========================================================================
# build_platform_table
# ===========================================================================
class TestBuildPlatformTable:

    def test_no_overrides_copies_builtin(self):
        table = build_platform_table()
        assert table == PLATFORMS
        assert table is not PLATFORMS

    def test_adds_new_platform(self):
        table = build_platform_table({
            "Windsurf": {"project_dir": ".windsurf", "label": "Windsurf"},
        })
        assert table["windsurf"] == PlatformConfig("windsurf", ".windsurf", None, "Windsurf")
        assert not table["windsurf"].supports_global

    def test_new_platform_requires_project_dir(self):
        with pytest.raises(ValueError, match="project_dir"):
            build_platform_table({"windsurf": {"label": "Windsurf"}})

    def test_partial_override_keeps_builtin_values(self):
        table = build_platform_table({"claude": {"global_dir": "/opt/claude"}})
        assert table["claude"].global_dir == "/opt/claude"
        assert table["claude"].project_dir == ".claude"
        assert table["claude"].label == "Claude Code"

    def test_null_global_dir_disables_global(self):
        table = build_platform_table({"cursor": {"global_dir": None}})
        assert not table["cursor"].supports_global

    def test_empty_entry_keeps_builtin(self):
        table = build_platform_table({"codex": None})
        assert table["codex"] == PLATFORMS["codex"]

    def test_does_not_mutate_builtin(self):
        build_platform_table({"claude": {"project_dir": ".other"}})
        assert PLATFORMS["claude"].project_dir == ".claude"


# ===========================================================================
# normalize_platform_input / get_platform
# ===========================================================================
class TestPlatformLookup:

    def test_normalizes_case_and_whitespace(self):
        assert normalize_platform_input("  Claude ") == "claude"

    def test_unknown_platform_lists_supported(self):
        with pytest.raises(UnknownPlatformError) as exc_info:
            normalize_platform_input("vim")
        assert "opencode, codex, claude, cursor" in str(exc_info.value)

    def test_custom_table(self):
        table = build_platform_table({"zed": {"project_dir": ".zed"}})
        assert normalize_platform_input("ZED", table) == "zed"
        assert is_supported_platform("zed", table)
        assert not is_supported_platform("zed")

    def test_get_platform(self):
        assert get_platform("CODEX") is PLATFORMS["codex"]

"""Tests for core/paths.py - bundle path normalization and root checks."""

from pathlib import Path

import pytest

from agent_rules.core.errors import PathSafetyViolation
from agent_rules.core.paths import (
    ensure_within_root,
    expand_home,
    has_prefix,
    is_within_root,
    join_under_root,
    normalize_bundle_path,
    relativize,
    strip_prefix,
    validate_bundle_path,
)


# ===========================================================================
# normalize_bundle_path
# ===========================================================================
class TestNormalizeBundlePath:

    def test_converts_backslashes(self):
        assert normalize_bundle_path("config\\rules\\style.md") == "config/rules/style.md"

    def test_strips_leading_dot_slash(self):
        assert normalize_bundle_path("./config/agent.md") == "config/agent.md"

    def test_strips_leading_slashes(self):
        assert normalize_bundle_path("//AGENTS.md") == "AGENTS.md"

    def test_strips_dot_slash_then_slash(self):
        assert normalize_bundle_path(".//AGENTS.md") == "AGENTS.md"

    def test_leaves_plain_path_alone(self):
        assert normalize_bundle_path("docs/guide.md") == "docs/guide.md"

    def test_empty_stays_empty(self):
        assert normalize_bundle_path("") == ""
        assert normalize_bundle_path("./") == ""


# ===========================================================================
# strip_prefix / has_prefix
# ===========================================================================
class TestPrefixHelpers:

    def test_strip_prefix_removes_directory(self):
        assert strip_prefix("config/agent.md", "config") == "agent.md"

    def test_strip_prefix_exact_match_is_empty(self):
        assert strip_prefix("config", "config") == ""

    def test_strip_prefix_requires_segment_boundary(self):
        assert strip_prefix("configs/agent.md", "config") == "configs/agent.md"

    def test_strip_prefix_without_prefix(self):
        assert strip_prefix("agent.md", None) == "agent.md"

    def test_has_prefix(self):
        assert has_prefix("config/a.md", "config")
        assert has_prefix("config", "config")
        assert not has_prefix("configuration/a.md", "config")


# ===========================================================================
# validate_bundle_path
# ===========================================================================
class TestValidateBundlePath:

    def test_accepts_normal_path(self):
        validate_bundle_path("config/rules/style.md")

    def test_accepts_tilde_inside_name(self):
        validate_bundle_path("config/notes~draft.md")

    @pytest.mark.parametrize("path", ["../evil.md", "config/../../evil.md", "a/.."])
    def test_rejects_traversal(self, path):
        with pytest.raises(PathSafetyViolation, match="path traversal"):
            validate_bundle_path(path)

    def test_rejects_leading_home_reference(self):
        with pytest.raises(PathSafetyViolation, match="home directory"):
            validate_bundle_path("~/.bashrc")

    def test_rejects_user_home_reference(self):
        with pytest.raises(PathSafetyViolation, match="home directory"):
            validate_bundle_path("~root/.bashrc")

    def test_rejects_embedded_home_segment(self):
        with pytest.raises(PathSafetyViolation, match="embedded home"):
            validate_bundle_path("config/~/secrets")

    def test_message_uses_original_path(self):
        with pytest.raises(PathSafetyViolation) as exc_info:
            validate_bundle_path("../x.md", "./..\\x.md")
        assert exc_info.value.path == "./..\\x.md"


# ===========================================================================
# Root containment
# ===========================================================================
class TestRootContainment:

    def test_join_collapses_dot_segments(self, tmp_path):
        assert join_under_root(tmp_path, "./a/./b.md") == tmp_path / "a" / "b.md"

    def test_descendant_is_within_root(self, tmp_path):
        assert is_within_root(tmp_path / "a" / "b.md", tmp_path)

    def test_root_itself_is_within_root(self, tmp_path):
        assert is_within_root(tmp_path, tmp_path)

    def test_sibling_with_shared_prefix_is_outside(self, tmp_path):
        root = tmp_path / "proj"
        assert not is_within_root(tmp_path / "project" / "x.md", root)

    def test_parent_is_outside(self, tmp_path):
        assert not is_within_root(tmp_path / "proj" / ".." / "x.md", tmp_path / "proj")

    def test_ensure_within_root_raises(self, tmp_path):
        root = tmp_path / "proj"
        with pytest.raises(PathSafetyViolation, match="Refusing to write outside"):
            ensure_within_root(tmp_path / "other.md", root)

    def test_ensure_within_root_passes(self, tmp_path):
        ensure_within_root(tmp_path / "ok.md", tmp_path)

    def test_symlink_escaping_root_is_outside(self, tmp_path):
        root = tmp_path / "proj"
        root.mkdir()
        (tmp_path / "secrets").mkdir()
        (root / "link").symlink_to(tmp_path / "secrets", target_is_directory=True)
        assert not is_within_root(root / "link" / "key.pem", root)

    def test_missing_components_resolve_lexically(self, tmp_path):
        assert is_within_root(tmp_path / "not" / "yet" / "there.md", tmp_path)


# ===========================================================================
# relativize / expand_home
# ===========================================================================
class TestRelativize:

    def test_relative_posix_path(self, tmp_path):
        assert relativize(tmp_path / ".claude" / "agent.md", tmp_path) == ".claude/agent.md"

    def test_outside_root_returns_absolute(self, tmp_path):
        other = Path("/elsewhere/file.md")
        assert relativize(other, tmp_path) == str(other)

    def test_root_itself_returns_absolute(self, tmp_path):
        assert relativize(tmp_path, tmp_path) == str(tmp_path)


class TestExpandHome:

    def test_expands_tilde(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HOME", str(tmp_path))
        assert expand_home("~/.codex") == str(tmp_path / ".codex")

    def test_plain_path_unchanged(self):
        assert expand_home("/opt/tools") == "/opt/tools"

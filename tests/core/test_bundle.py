"""Tests for core/bundle.py - bundle model, checksums and loading."""

import json
from unittest.mock import patch

import pytest

from agent_rules.core.bundle import (
    Bundle,
    BundleFile,
    load_bundle,
    parse_bundle,
    sha256_hex,
    verify_checksum,
)
from agent_rules.core.errors import ChecksumMismatchError, MalformedBundleError


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def _file_entry(path: str, contents: str, checksum: str | None = None) -> dict:
    return {
        "path": path,
        "contents": contents,
        "checksum": checksum or sha256_hex(contents.encode("utf-8")),
    }


def _bundle_data(**overrides) -> dict:
    data = {
        "slug": "team-rules",
        "platform": "claude",
        "version": "1.2.0",
        "files": [
            _file_entry("config/agent.md", "# Agent\n"),
            _file_entry("AGENTS.md", "root file\n"),
        ],
    }
    data.update(overrides)
    return data


# ===========================================================================
# BundleFile / verify_checksum
# ===========================================================================
class TestBundleFile:

    def test_from_text_computes_checksum(self):
        bundle_file = BundleFile.from_text("a.md", "hello")
        assert bundle_file.content == b"hello"
        assert bundle_file.checksum == sha256_hex(b"hello")

    def test_from_bytes(self):
        bundle_file = BundleFile.from_bytes("logo.bin", b"\x00\x01")
        assert bundle_file.checksum == sha256_hex(b"\x00\x01")

    def test_sha256_hex_is_lowercase(self):
        digest = sha256_hex(b"x")
        assert digest == digest.lower()
        assert len(digest) == 64


class TestVerifyChecksum:

    def test_matching(self):
        verify_checksum(BundleFile.from_text("a.md", "hello"))

    def test_uppercase_checksum_accepted(self):
        bundle_file = BundleFile("a.md", b"hello", sha256_hex(b"hello").upper())
        verify_checksum(bundle_file)

    def test_mismatch(self):
        bundle_file = BundleFile("a.md", b"hello", "0" * 64)
        with pytest.raises(ChecksumMismatchError) as exc_info:
            verify_checksum(bundle_file)
        assert exc_info.value.path == "a.md"
        assert exc_info.value.received == sha256_hex(b"hello")
        assert isinstance(exc_info.value, MalformedBundleError)

    def test_explicit_data(self):
        bundle_file = BundleFile.from_text("a.md", "hello")
        with pytest.raises(ChecksumMismatchError):
            verify_checksum(bundle_file, b"tampered")


# ===========================================================================
# Bundle.validate
# ===========================================================================
class TestBundleValidate:

    def test_unique_paths(self):
        Bundle("s", "claude", (BundleFile.from_text("a.md", "1"), BundleFile.from_text("b.md", "2"))).validate()

    def test_duplicate_after_normalization(self):
        bundle = Bundle("s", "claude", (
            BundleFile.from_text("config/a.md", "1"),
            BundleFile.from_text("./config\\a.md", "2"),
        ))
        with pytest.raises(MalformedBundleError, match="duplicate path"):
            bundle.validate()


# ===========================================================================
# parse_bundle / load_bundle
# ===========================================================================
class TestParseBundle:

    def test_parses_fields(self):
        bundle = parse_bundle(_bundle_data())
        assert bundle.slug == "team-rules"
        assert bundle.platform == "claude"
        assert bundle.version == "1.2.0"
        assert [f.path for f in bundle.files] == ["config/agent.md", "AGENTS.md"]
        assert bundle.files[0].content == b"# Agent\n"

    def test_platform_is_lower_cased(self):
        assert parse_bundle(_bundle_data(platform="Claude")).platform == "claude"

    def test_version_optional(self):
        data = _bundle_data()
        del data["version"]
        assert parse_bundle(data).version is None

    def test_numeric_version_becomes_string(self):
        assert parse_bundle(_bundle_data(version=3)).version == "3"

    def test_missing_slug(self):
        data = _bundle_data()
        del data["slug"]
        with pytest.raises(MalformedBundleError, match="slug"):
            parse_bundle(data)

    def test_not_an_object(self):
        with pytest.raises(MalformedBundleError):
            parse_bundle([])

    def test_files_not_a_list(self):
        with pytest.raises(MalformedBundleError, match="must be a list"):
            parse_bundle(_bundle_data(files={"a": 1}))

    def test_file_missing_checksum(self):
        with pytest.raises(MalformedBundleError, match="checksum"):
            parse_bundle(_bundle_data(files=[{"path": "a.md", "contents": "x"}]))

    def test_file_contents_must_be_string(self):
        entry = {"path": "a.md", "contents": 5, "checksum": "0"}
        with pytest.raises(MalformedBundleError, match="must be strings"):
            parse_bundle(_bundle_data(files=[entry]))

    def test_checksum_mismatch(self):
        files = [_file_entry("a.md", "x", checksum="f" * 64)]
        with pytest.raises(ChecksumMismatchError):
            parse_bundle(_bundle_data(files=files))

    def test_duplicate_paths(self):
        files = [_file_entry("a.md", "1"), _file_entry("./a.md", "2")]
        with pytest.raises(MalformedBundleError, match="duplicate"):
            parse_bundle(_bundle_data(files=files))


class TestLoadBundle:

    def test_loads_json_file(self, tmp_path):
        path = tmp_path / "bundle.json"
        path.write_text(json.dumps(_bundle_data()))
        with patch("agent_rules.core.bundle.message"):
            bundle = load_bundle(path)
        assert bundle.slug == "team-rules"
        assert len(bundle.files) == 2

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bundle.json"
        path.write_text("{not json")
        with (
            patch("agent_rules.core.bundle.message"),
            pytest.raises(MalformedBundleError, match="Invalid bundle JSON"),
        ):
            load_bundle(path)

    def test_missing_file(self, tmp_path):
        with (
            patch("agent_rules.core.bundle.message"),
            pytest.raises(FileNotFoundError),
        ):
            load_bundle(tmp_path / "missing.json")

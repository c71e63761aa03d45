"""Bundle model, checksum verification and bundle-file loading.

A bundle is the resolved file set for one preset variant on one
platform.  Registry bundles are JSON documents::

    {
      "slug": "my-preset",
      "platform": "claude",
      "version": "1.2",
      "files": [
        {"path": "config/agent.md", "contents": "...", "checksum": "<sha256>"}
      ]
    }

Every file is checksum-verified by :func:`load_bundle` before a
:class:`Bundle` is handed to the installer.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from agent_rules.core.errors import ChecksumMismatchError, MalformedBundleError
from agent_rules.core.paths import normalize_bundle_path
from agent_rules.output import MessageType, VerbosityLevel, message


def sha256_hex(data: bytes) -> str:
    """Return the lowercase hex SHA-256 digest of *data*."""
    return hashlib.sha256(data).hexdigest()


@dataclass(frozen=True)
class BundleFile:
    """One file of a bundle.

    Attributes:
        path: Bundle-relative POSIX path
        content: File bytes
        checksum: Lowercase hex SHA-256 of ``content``
    """

    path: str
    content: bytes
    checksum: str

    @classmethod
    def from_text(cls, path: str, text: str) -> BundleFile:
        """Build a file from UTF-8 text, computing its checksum."""
        data = text.encode("utf-8")
        return cls(path, data, sha256_hex(data))

    @classmethod
    def from_bytes(cls, path: str, data: bytes) -> BundleFile:
        return cls(path, data, sha256_hex(data))


@dataclass(frozen=True)
class Bundle:
    """Resolved, ordered file set for one preset variant."""

    slug: str
    platform: str
    files: tuple[BundleFile, ...] = field(default_factory=tuple)
    version: str | None = None

    def validate(self) -> None:
        """Check the bundle-level invariants.

        Raises:
            MalformedBundleError: If two files normalize to the same path
        """
        seen: set[str] = set()
        for bundle_file in self.files:
            normalized = normalize_bundle_path(bundle_file.path)
            if normalized in seen:
                raise MalformedBundleError(
                    f"Bundle '{self.slug}' contains duplicate path: "
                    f"{bundle_file.path}"
                )
            seen.add(normalized)


def verify_checksum(bundle_file: BundleFile, data: bytes | None = None) -> None:
    """Verify *data* (default: the file's content) against its checksum.

    Raises:
        ChecksumMismatchError: On mismatch
    """
    payload = bundle_file.content if data is None else data
    computed = sha256_hex(payload)
    if computed != bundle_file.checksum.lower():
        raise ChecksumMismatchError(
            bundle_file.path, bundle_file.checksum, computed,
        )


def _require(entry: dict[str, Any], key: str, where: str) -> Any:
    if key not in entry:
        raise MalformedBundleError(f"{where} is missing required key '{key}'")
    return entry[key]


def parse_bundle(data: dict[str, Any]) -> Bundle:
    """Build and verify a :class:`Bundle` from its JSON structure.

    Raises:
        MalformedBundleError: On missing keys, wrong types, duplicate
            paths or checksum mismatch
    """
    if not isinstance(data, dict):
        raise MalformedBundleError("Bundle must be a JSON object")

    slug = _require(data, "slug", "Bundle")
    platform = _require(data, "platform", "Bundle")
    raw_files = data.get("files", [])
    if not isinstance(raw_files, list):
        raise MalformedBundleError("Bundle 'files' must be a list")

    files: list[BundleFile] = []
    for idx, entry in enumerate(raw_files):
        where = f"Bundle file {idx}"
        if not isinstance(entry, dict):
            raise MalformedBundleError(f"{where} must be an object")

        path = _require(entry, "path", where)
        contents = _require(entry, "contents", where)
        checksum = _require(entry, "checksum", where)
        if not isinstance(path, str) or not isinstance(contents, str):
            raise MalformedBundleError(
                f"{where} 'path' and 'contents' must be strings"
            )

        bundle_file = BundleFile(path, contents.encode("utf-8"), str(checksum))
        verify_checksum(bundle_file)
        files.append(bundle_file)

    version = data.get("version")
    bundle = Bundle(
        slug=str(slug),
        platform=str(platform).lower(),
        files=tuple(files),
        version=str(version) if version is not None else None,
    )
    bundle.validate()
    return bundle


def load_bundle(path: Path) -> Bundle:
    """Read a bundle JSON file from disk and verify it.

    Raises:
        MalformedBundleError: If the file is not a valid bundle
        OSError: If the file cannot be read
    """
    message(f"Loading bundle from {path}", MessageType.DEBUG, VerbosityLevel.DEBUG)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise MalformedBundleError(f"Invalid bundle JSON in {path}: {exc}") from exc

    bundle = parse_bundle(data)
    message(
        f"Verified {len(bundle.files)} file(s) in bundle '{bundle.slug}'",
        MessageType.DEBUG,
        VerbosityLevel.DEBUG,
    )
    return bundle

"""Conflict classification and diff previews.

Compares the bytes already on disk with the incoming bundle bytes and
reports whether the file would be created, is unchanged, or conflicts.
Deciding what to do about a conflict is the orchestrator's job.
"""

from __future__ import annotations

import difflib
from pathlib import Path

BINARY_DIFF_MARKER = "(binary file differs)"

DEFAULT_CONTEXT = 2
DEFAULT_MAX_LINES = 40

# Bytes inspected by the text heuristic
TEXT_SAMPLE_SIZE = 8000
# Share of control bytes above which a sample is treated as binary
BINARY_CONTROL_RATIO = 0.3

_TEXT_CONTROL_BYTES = frozenset(b"\t\n\r\f\v\x1b")


# ------------------------------------------------------------------
# Classification
# ------------------------------------------------------------------
class Classification:
    """Result of comparing one destination with incoming content."""

    CREATED = "created"
    UNCHANGED = "unchanged"
    CONFLICT = "conflict"

    def __init__(
        self,
        kind: str,
        destination: Path,
        diff: str | None = None,
        existing: bytes | None = None,
    ):
        self.kind = kind
        self.destination = destination
        self.diff = diff
        self.existing = existing

    @property
    def is_conflict(self) -> bool:
        return self.kind == self.CONFLICT

    def __repr__(self) -> str:
        return f"Classification({self.kind!r}, {str(self.destination)!r})"


def read_existing(destination: Path) -> bytes | None:
    """Read the current bytes of *destination*.

    Returns:
        File content, or ``None`` if the file does not exist

    Raises:
        OSError: For any failure other than "not found"
    """
    try:
        return destination.read_bytes()
    except FileNotFoundError:
        return None


def classify(
    destination: Path,
    incoming: bytes,
    display_path: str | None = None,
) -> Classification:
    """Classify *incoming* against whatever is at *destination*.

    Args:
        destination: Absolute path the file would be written to
        incoming: Bundle bytes for the file
        display_path: Path used in diff headers (defaults to the
            destination)

    Returns:
        :class:`Classification` with kind ``created``, ``unchanged`` or
        ``conflict`` (the latter carrying a diff preview)
    """
    existing = read_existing(destination)

    if existing is None:
        return Classification(Classification.CREATED, destination)

    if existing == incoming:
        return Classification(
            Classification.UNCHANGED, destination, existing=existing,
        )

    label = display_path if display_path is not None else str(destination)
    return Classification(
        Classification.CONFLICT,
        destination,
        diff=render_diff(label, existing, incoming),
        existing=existing,
    )


# ------------------------------------------------------------------
# Diff rendering
# ------------------------------------------------------------------
def is_likely_text(data: bytes) -> bool:
    """Guess whether *data* is text.

    A NUL byte anywhere in the sample means binary, as does a high share
    of control characters other than common whitespace.
    """
    sample = data[:TEXT_SAMPLE_SIZE]
    if not sample:
        return True
    if b"\x00" in sample:
        return False

    control = sum(
        1 for byte in sample
        if (byte < 0x20 or byte == 0x7F) and byte not in _TEXT_CONTROL_BYTES
    )
    return control / len(sample) <= BINARY_CONTROL_RATIO


def create_diff_preview(
    path: str,
    current_text: str,
    incoming_text: str,
    context: int = DEFAULT_CONTEXT,
    max_lines: int = DEFAULT_MAX_LINES,
) -> str:
    """Build a truncated unified diff between two texts.

    At most *max_lines* lines are kept; a final ``...`` line marks
    truncation.
    """
    diff = difflib.unified_diff(
        current_text.splitlines(),
        incoming_text.splitlines(),
        fromfile=f"{path} (current)",
        tofile=f"{path} (incoming)",
        n=context,
        lineterm="",
    )
    lines = list(diff)
    limited = lines[:max_lines]
    if len(lines) > max_lines:
        limited.append("...")
    return "\n".join(limited)


def render_diff(path: str, existing: bytes, incoming: bytes) -> str:
    """Diff preview for two byte strings, or the binary marker."""
    if not (is_likely_text(existing) and is_likely_text(incoming)):
        return BINARY_DIFF_MARKER

    preview = create_diff_preview(
        path,
        existing.decode("utf-8", errors="replace"),
        incoming.decode("utf-8", errors="replace"),
    )
    # Same lines, different bytes (line endings, trailing newline)
    return preview or f"{path}: contents differ only in whitespace or line endings"

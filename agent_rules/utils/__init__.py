"""Utility functions for agent-rules."""

from .url import is_file_url, resolve_file_path

__all__ = [
    "is_file_url",
    "resolve_file_path",
]

"""Bundle location utilities for agent-rules."""

from pathlib import Path

REMOTE_SCHEMES = ("http://", "https://")


def is_file_url(url: str) -> bool:
    """Check if a location is a file:// URL or a plain filesystem path.

    Args:
        url: The location to check

    Returns:
        True if it's a file:// URL or a path, False for remote URLs
    """
    # Reject locations with leading/trailing whitespace
    if url != url.strip() or not url:
        return False

    if url.startswith("file://"):
        return True

    if url.startswith(REMOTE_SCHEMES):
        return False

    # Any other scheme ("s3://", "git@host:...") is not a local path
    return "://" not in url


def resolve_file_path(url: str) -> Path:
    """Resolve a file:// URL or plain path to an absolute path.

    Args:
        url: The file:// URL to resolve (or plain path)

    Returns:
        Resolved absolute Path
    """
    path_str = url[7:] if url.startswith("file://") else url
    return Path(path_str).expanduser().resolve()

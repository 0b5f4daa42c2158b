"""Utility functions for sftpsync."""

import posixpath
from datetime import datetime
from typing import Optional

# =============================================================================
# Constants for connections
# =============================================================================

# Retry configuration for transient connection errors
DEFAULT_MAX_RETRIES: int = 3
DEFAULT_RETRY_DELAY: float = 2.0  # seconds

# Timeout for establishing the SSH connection
DEFAULT_CONNECT_TIMEOUT: float = 30.0  # seconds


# =============================================================================
# Remote path utilities
# =============================================================================


def normalize_remote_path(remote_path: str) -> str:
    """Normalize a remote directory path.

    Trailing slashes are removed, except for the root directory itself.

    Args:
        remote_path: Remote path as given by the user

    Returns:
        Normalized path

    Examples:
        >>> normalize_remote_path("/srv/data/")
        '/srv/data'
        >>> normalize_remote_path("/")
        '/'
        >>> normalize_remote_path("backup//")
        'backup'
    """
    if not remote_path:
        raise ValueError("Remote path must not be empty")
    stripped = remote_path.rstrip("/")
    return stripped or "/"


def join_remote_path(directory: str, name: str) -> str:
    """Join a remote directory and an entry name with POSIX separators.

    Examples:
        >>> join_remote_path("/srv/data", "a.txt")
        '/srv/data/a.txt'
        >>> join_remote_path("/", "a.txt")
        '/a.txt'
    """
    return posixpath.join(directory, name)


# =============================================================================
# Formatting utilities
# =============================================================================


def format_timestamp(mtime: Optional[float]) -> str:
    """Format a modification time for display.

    Args:
        mtime: Seconds since the epoch, or None

    Returns:
        Local time as "YYYY-MM-DD HH:MM:SS", or "-" when missing
    """
    if mtime is None:
        return "-"
    return datetime.fromtimestamp(mtime).strftime("%Y-%m-%d %H:%M:%S")

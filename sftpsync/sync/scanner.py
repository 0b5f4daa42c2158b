"""Directory listing for sync operations."""

import logging
from collections.abc import Iterable
from typing import Optional

from ..models import TreeEntry
from ..transport import FileSystem
from .state import SYNC_DATA_FILE

logger = logging.getLogger(__name__)

SPECIAL_NAMES = frozenset({".", ".."})


class DirectoryScanner:
    """Lists one directory level of either side, applying exclusions.

    The history document name is always excluded so that it is never
    transferred or deleted.

    Examples:
        >>> scanner = DirectoryScanner(exclude=[".DS_Store"])
        >>> entries = scanner.scan(LocalFilesystem(), "/home/user/site")
    """

    def __init__(self, exclude: Optional[Iterable[str]] = None):
        """Initialize directory scanner.

        Args:
            exclude: Additional entry names to exclude at every level
        """
        self.exclude = frozenset(exclude or ()) | {SYNC_DATA_FILE}

    def should_ignore(self, name: str) -> bool:
        """Check if an entry name is excluded from comparison."""
        return name in SPECIAL_NAMES or name in self.exclude

    def scan(self, filesystem: FileSystem, directory: str) -> list[TreeEntry]:
        """List a directory and drop excluded entries.

        Args:
            filesystem: Side to list (local filesystem or remote transport)
            directory: Directory to list

        Returns:
            List of TreeEntry objects
        """
        entries = [
            entry
            for entry in filesystem.list(directory)
            if not self.should_ignore(entry.name)
        ]
        logger.debug(f"Listed {len(entries)} entr(ies) in {directory}")
        return entries

"""Removal of stale destination entries."""

import logging
from collections.abc import Iterable
from typing import Callable, Optional

from ..exceptions import SftpSyncError
from ..models import TreeEntry
from ..transport import FileSystem
from ..utils import join_remote_path
from .observer import SyncObserver

logger = logging.getLogger(__name__)


class Reconciler:
    """Deletes destination entries that no longer exist on the source.

    Directories are removed depth-first: every descendant is deleted before
    the directory itself, so destinations that refuse to remove non-empty
    directories are handled. Symbolic links are removed as links and never
    followed.
    """

    def __init__(
        self,
        filesystem: FileSystem,
        join: Callable[[str, str], str] = join_remote_path,
        observer: Optional[SyncObserver] = None,
    ):
        """Initialize the reconciler.

        Args:
            filesystem: Destination side to delete from
            join: Path join function for the destination side
            observer: Receives deletion and error events
        """
        self.filesystem = filesystem
        self.join = join
        self.observer = observer or SyncObserver()

    def reconcile(
        self,
        destination_only_entries: Iterable[TreeEntry],
        destination_root: str,
        delete_enabled: bool,
    ) -> int:
        """Remove stale entries from a destination directory.

        Args:
            destination_only_entries: Entries present only on the destination
            destination_root: Directory containing those entries
            delete_enabled: When False nothing is removed

        Returns:
            Number of removed entries, descendants included
        """
        if not delete_enabled:
            return 0

        removed = 0
        for entry in destination_only_entries:
            removed += self.remove_entry(self.join(destination_root, entry.name), entry)
        return removed

    def remove_entry(self, path: str, entry: TreeEntry) -> int:
        """Remove a single file, link or directory tree."""
        if entry.is_directory and not entry.is_link:
            return self.remove_tree(path)

        self._call("remove", path, self.filesystem.remove_file, path)
        self.observer.on_delete(path, False)
        return 1

    def remove_tree(self, path: str) -> int:
        """Remove a directory after all of its descendants."""
        removed = 0
        children = self._call("list", path, self.filesystem.list, path)
        for child in children:
            if child.name in (".", ".."):
                continue
            removed += self.remove_entry(self.join(path, child.name), child)

        self._call("rmdir", path, self.filesystem.remove_directory, path)
        self.observer.on_delete(path, True)
        return removed + 1

    def _call(self, operation: str, path: str, func: Callable, *args):
        try:
            return func(*args)
        except SftpSyncError as e:
            self.observer.on_error(e, operation, path)
            raise

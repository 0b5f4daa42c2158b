"""Core sync engine for executing push and pull passes."""

import logging
import os
from collections.abc import Iterable
from contextlib import AbstractContextManager, ExitStack
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Union

from ..exceptions import (
    EntryTypeConflictError,
    LocalIOError,
    NotFoundError,
    SftpSyncError,
)
from ..transport import FileSystem, RemoteTransport
from ..utils import join_remote_path, normalize_remote_path
from .comparator import FileComparator
from .differ import TreeDiffer
from .modes import SyncDirection
from .observer import (
    CompositeSyncObserver,
    LoggingSyncObserver,
    StatsSyncObserver,
    SyncObserver,
)
from .operations import LocalFilesystem, SyncOperations
from .reconciler import Reconciler
from .scanner import DirectoryScanner
from .state import SyncHistory, SyncHistoryStore

logger = logging.getLogger(__name__)

TransportFactory = Callable[[], AbstractContextManager[RemoteTransport]]


class SyncState(str, Enum):
    """Lifecycle of a single sync pass."""

    INIT = "init"
    HISTORY_LOADED = "history_loaded"
    WALKING = "walking"
    HISTORY_SAVED = "history_saved"
    DONE = "done"


class SyncEngine:
    """Core sync engine that orchestrates one-directional synchronization.

    Each pass loads the sync history from the local root, opens one
    transport connection, walks the tree depth-first and saves the history
    once at the end. A pass that fails does not save its history.

    Examples:
        >>> engine = SyncEngine(lambda: connect_sftp("host", "user", "pw"))
        >>> stats = engine.push("/srv/site", "/home/user/site", delete=True)
        >>> print(f"Uploaded {stats['transfers']} file(s)")
    """

    def __init__(
        self,
        connect: TransportFactory,
        observer: Optional[SyncObserver] = None,
        history_store: Optional[SyncHistoryStore] = None,
        exclude: Optional[Iterable[str]] = None,
        local: Optional[FileSystem] = None,
    ):
        """Initialize sync engine.

        Args:
            connect: Returns a context manager yielding an open transport
            observer: Receives sync events (defaults to logging them)
            history_store: Loads and saves the sync history
            exclude: Entry names never synced or deleted, in addition to
                the history document
            local: Local filesystem implementation
        """
        self.connect = connect
        self.observer = observer or LoggingSyncObserver()
        self.history_store = history_store or SyncHistoryStore()
        self.scanner = DirectoryScanner(
            exclude=set(exclude or ()) | {self.history_store.file_name}
        )
        self.differ = TreeDiffer()
        self.comparator = FileComparator()
        self.local = local or LocalFilesystem()
        self.state = SyncState.INIT

    def push(
        self, remote_path: str, local_path: Union[str, Path], delete: bool = False
    ) -> dict:
        """Upload the local tree to the remote path.

        Args:
            remote_path: Remote destination directory
            local_path: Local source directory
            delete: Remove remote entries that are not present locally

        Returns:
            Dictionary with sync statistics
        """
        return self.sync(SyncDirection.PUSH, remote_path, local_path, delete)

    def pull(
        self, remote_path: str, local_path: Union[str, Path], delete: bool = False
    ) -> dict:
        """Download the remote tree to the local path.

        Args:
            remote_path: Remote source directory
            local_path: Local destination directory
            delete: Remove local entries that are not present remotely

        Returns:
            Dictionary with sync statistics
        """
        return self.sync(SyncDirection.PULL, remote_path, local_path, delete)

    def sync(
        self,
        direction: SyncDirection,
        remote_path: str,
        local_path: Union[str, Path],
        delete: bool = False,
    ) -> dict:
        """Run one full sync pass.

        Args:
            direction: PUSH or PULL
            remote_path: Remote root directory
            local_path: Local root directory
            delete: Remove stale destination entries

        Returns:
            Dictionary with sync statistics

        Raises:
            HistoryCorruptError: If the history document is malformed
            SftpSyncError: If any transfer, listing or deletion fails
        """
        self.state = SyncState.INIT
        remote_root = normalize_remote_path(remote_path)
        local_root = os.fspath(local_path)

        stats = StatsSyncObserver()
        observer = CompositeSyncObserver(stats, self.observer)

        if direction is SyncDirection.PUSH and not os.path.isdir(local_root):
            error = LocalIOError("Local directory does not exist", local_root, "push")
            observer.on_error(error, "push", local_root)
            raise error

        history = _report(
            observer, "load", local_root, self.history_store.load, local_root
        )
        self.state = SyncState.HISTORY_LOADED

        logger.debug(
            f"Starting {direction.value}: {local_root} <-> {remote_root} "
            f"(delete={delete})"
        )

        with ExitStack() as stack:
            transport = _report(
                observer, "connect", remote_root, self._open_transport, stack
            )
            self.state = SyncState.WALKING
            sync_pass = _SyncPass(
                direction=direction,
                operations=SyncOperations(transport, self.local),
                history=history,
                observer=observer,
                scanner=self.scanner,
                differ=self.differ,
                comparator=self.comparator,
                delete=delete,
            )
            sync_pass.run(remote_root, local_root)

        _report(
            observer, "save", local_root, self.history_store.save, local_root, history
        )
        self.state = SyncState.HISTORY_SAVED

        logger.debug(
            f"Finished {direction.value}: {stats.stats['transfers']} transferred, "
            f"{stats.stats['skips']} skipped, {stats.stats['deletes']} deleted"
        )
        self.state = SyncState.DONE
        return stats.stats

    def _open_transport(self, stack: ExitStack) -> RemoteTransport:
        return stack.enter_context(self.connect())


def _report(
    observer: SyncObserver, operation: str, path: str, func: Callable, *args
):
    """Call func, reporting a failure to the observer before re-raising it."""
    try:
        return func(*args)
    except SftpSyncError as e:
        observer.on_error(e, operation, path)
        raise


class _SyncPass:
    """Recursive walk of one sync pass.

    Each directory level is processed completely (transfers, then
    subdirectories, then deletions) before returning to the parent.
    """

    def __init__(
        self,
        direction: SyncDirection,
        operations: SyncOperations,
        history: SyncHistory,
        observer: SyncObserver,
        scanner: DirectoryScanner,
        differ: TreeDiffer,
        comparator: FileComparator,
        delete: bool,
    ):
        self.direction = direction
        self.operations = operations
        self.history = history
        self.observer = observer
        self.scanner = scanner
        self.differ = differ
        self.comparator = comparator
        self.delete = delete

        self.source = operations.source(direction)
        self.destination = operations.destination(direction)
        if direction.source_is_local:
            self.source_join, self.destination_join = os.path.join, join_remote_path
        else:
            self.source_join, self.destination_join = join_remote_path, os.path.join

        self.reconciler = Reconciler(
            self.destination, join=self.destination_join, observer=observer
        )

    def run(self, remote_root: str, local_root: str) -> None:
        if self.direction is SyncDirection.PUSH:
            source_root, destination_root = local_root, remote_root
        else:
            source_root, destination_root = remote_root, local_root

        self._call(
            "mkdir", destination_root, self.destination.make_directory, destination_root
        )
        self.sync_directory(source_root, destination_root, destination_exists=True)

    def sync_directory(
        self, source_dir: str, destination_dir: str, destination_exists: bool
    ) -> None:
        """Sync one directory pair and everything below it.

        Args:
            source_dir: Source directory
            destination_dir: Destination directory
            destination_exists: False when the destination was just created,
                in which case it is treated as empty without listing it
        """
        self.observer.on_directory(self.direction, source_dir, destination_dir)

        source_entries = self._call(
            "list", source_dir, self.scanner.scan, self.source, source_dir
        )
        if destination_exists:
            destination_entries = self._call(
                "list",
                destination_dir,
                self.scanner.scan,
                self.destination,
                destination_dir,
            )
        else:
            destination_entries = []

        diff = self.differ.diff(source_entries, destination_entries)

        conflicts = diff.type_conflicts()
        for name in sorted(conflicts):
            path = self.destination_join(destination_dir, name)
            if not self.delete:
                error = EntryTypeConflictError(
                    "Entry is a directory on one side and a file on the other",
                    path,
                    "sync",
                )
                self.observer.on_error(error, "sync", path)
                raise error
            self.reconciler.remove_entry(path, diff.destination[name])

        for name in sorted(diff.source):
            entry = diff.source[name]
            source_path = self.source_join(source_dir, name)
            destination_path = self.destination_join(destination_dir, name)
            present = name in diff.common and name not in conflicts

            if entry.is_directory:
                if not present:
                    self._call(
                        "mkdir",
                        destination_path,
                        self.destination.make_directory,
                        destination_path,
                    )
                self.sync_directory(
                    source_path, destination_path, destination_exists=present
                )
            else:
                self.sync_file(source_path, destination_path, destination_exists=present)

        self.reconciler.reconcile(diff.stale_entries(), destination_dir, self.delete)

    def sync_file(
        self, source_path: str, destination_path: str, destination_exists: bool
    ) -> None:
        """Decide on and perform the transfer of a single file."""
        if self.direction is SyncDirection.PUSH:
            remote_path, local_path = destination_path, source_path
        else:
            remote_path, local_path = source_path, destination_path

        source_mtime = self._call(
            "stat", source_path, self.source.stat_mtime, source_path
        )
        destination_mtime = (
            self._stat_destination(destination_path) if destination_exists else None
        )

        decision = self.comparator.decide(
            self.direction,
            source_mtime,
            destination_mtime,
            self.history.last_record(self.direction, remote_path),
        )

        if not decision.should_transfer:
            self.observer.on_skip(
                self.direction, source_path, destination_path, decision.reason
            )
            return

        record = self._call(
            "upload" if self.direction is SyncDirection.PUSH else "download",
            source_path,
            self.operations.transfer_file,
            self.direction,
            remote_path,
            local_path,
        )
        self.history.record(self.direction, remote_path, record)
        self.observer.on_transfer(self.direction, source_path, destination_path)

    def _stat_destination(self, path: str) -> Optional[float]:
        try:
            return self.destination.stat_mtime(path)
        except NotFoundError:
            logger.debug(f"Destination {path} cannot be stat'd, treating as absent")
            return None
        except SftpSyncError as e:
            self.observer.on_error(e, "stat", path)
            raise

    def _call(self, operation: str, path: str, func: Callable, *args):
        return _report(self.observer, operation, path, func, *args)

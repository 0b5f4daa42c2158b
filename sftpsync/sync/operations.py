"""Local filesystem access and unified transfer operations."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from ..exceptions import LocalIOError, NotFoundError
from ..models import TreeEntry
from ..transport import FileSystem, RemoteTransport
from .modes import SyncDirection
from .state import SyncRecord

logger = logging.getLogger(__name__)


class LocalFilesystem:
    """FileSystem implementation for the local disk.

    Every method takes explicit paths; the process working directory is
    never used or changed.
    """

    def list(self, path: str) -> list[TreeEntry]:
        try:
            with os.scandir(path) as it:
                return [
                    TreeEntry(
                        name=entry.name,
                        is_directory=entry.is_dir(),
                        is_link=entry.is_symlink(),
                    )
                    for entry in it
                ]
        except FileNotFoundError as e:
            raise NotFoundError("No such directory", path, "list") from e
        except OSError as e:
            raise LocalIOError(str(e), path, "list") from e

    def stat_mtime(self, path: str) -> float:
        try:
            return os.stat(path).st_mtime
        except FileNotFoundError as e:
            raise NotFoundError("No such file", path, "stat") from e
        except OSError as e:
            raise LocalIOError(str(e), path, "stat") from e

    def make_directory(self, path: str) -> None:
        try:
            Path(path).mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise LocalIOError(str(e), path, "mkdir") from e

    def remove_file(self, path: str) -> None:
        try:
            os.remove(path)
        except OSError as e:
            raise LocalIOError(str(e), path, "remove") from e

    def remove_directory(self, path: str) -> None:
        try:
            os.rmdir(path)
        except OSError as e:
            raise LocalIOError(str(e), path, "rmdir") from e


class SyncOperations:
    """Unified operations for push/pull with a common interface.

    Maps the abstract source/destination of a sync direction onto the
    local filesystem and the remote transport.
    """

    def __init__(self, transport: RemoteTransport, local: FileSystem):
        """Initialize sync operations.

        Args:
            transport: Remote transport
            local: Local filesystem
        """
        self.transport = transport
        self.local = local

    def source(self, direction: SyncDirection) -> FileSystem:
        """Return the side files are read from."""
        return self.local if direction.source_is_local else self.transport

    def destination(self, direction: SyncDirection) -> FileSystem:
        """Return the side files are written to."""
        return self.transport if direction.source_is_local else self.local

    def transfer_file(
        self, direction: SyncDirection, remote_path: str, local_path: str
    ) -> SyncRecord:
        """Copy one file in the given direction.

        Args:
            direction: PUSH uploads, PULL downloads
            remote_path: Remote file path
            local_path: Local file path

        Returns:
            SyncRecord with both modification times read back after the copy
        """
        if direction is SyncDirection.PUSH:
            self.transport.upload(local_path, remote_path)
        else:
            self.transport.download(remote_path, local_path)

        return SyncRecord(
            local_mtime=self.local.stat_mtime(local_path),
            remote_mtime=self.transport.stat_mtime(remote_path),
        )

"""Exception hierarchy for sftpsync."""

from typing import Optional


class SftpSyncError(Exception):
    """Base exception for all sftpsync errors.

    Carries the path and the operation that failed, when known, so that an
    aborted sync pass can tell the user exactly where it stopped.
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        operation: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.path = path
        self.operation = operation

    def __str__(self) -> str:
        if self.operation and self.path:
            return f"{self.operation} failed for {self.path}: {self.message}"
        if self.path:
            return f"{self.path}: {self.message}"
        return self.message


class TransportError(SftpSyncError):
    """Connection or I/O failure on the remote side."""


class TransportAuthenticationError(TransportError):
    """Authentication against the remote host was rejected."""


class LocalIOError(SftpSyncError):
    """Local filesystem failure (permissions, disk space, ...)."""


class NotFoundError(SftpSyncError):
    """A stat or list targeted a path that does not exist.

    Used as a signal: a missing destination file is an expected case and is
    handled by the caller rather than aborting the pass.
    """


class HistoryCorruptError(SftpSyncError):
    """The persisted sync history document is unreadable or malformed."""


class EntryTypeConflictError(SftpSyncError):
    """A name is a directory on one side and a file on the other."""


class ConfigError(SftpSyncError):
    """Configuration is missing or invalid."""

"""sftpsync - one-directional directory synchronization over SFTP."""

from .client import SftpSyncClient
from .exceptions import (
    ConfigError,
    EntryTypeConflictError,
    HistoryCorruptError,
    LocalIOError,
    NotFoundError,
    SftpSyncError,
    TransportAuthenticationError,
    TransportError,
)
from .sync import SyncDirection, SyncEngine
from .transport import SftpTransport, connect_sftp

__version__ = "0.1.0"

__all__ = [
    "SftpSyncClient",
    "SyncEngine",
    "SyncDirection",
    "SftpTransport",
    "connect_sftp",
    "SftpSyncError",
    "TransportError",
    "TransportAuthenticationError",
    "LocalIOError",
    "NotFoundError",
    "HistoryCorruptError",
    "EntryTypeConflictError",
    "ConfigError",
]

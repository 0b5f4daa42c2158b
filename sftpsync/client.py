"""High-level client for synchronizing a local directory with an SFTP server."""

from collections.abc import Iterable
from functools import partial
from typing import Optional

from .config import config
from .exceptions import ConfigError
from .sync.engine import SyncEngine
from .sync.observer import SyncObserver
from .sync.state import SyncHistoryStore
from .transport import connect_sftp
from .utils import DEFAULT_CONNECT_TIMEOUT, DEFAULT_MAX_RETRIES, DEFAULT_RETRY_DELAY


class SftpSyncClient(SyncEngine):
    """Sync engine bound to one SFTP server.

    A new connection is opened for every ``push`` or ``pull`` and closed
    when the pass ends, whether it succeeds or fails.

    Examples:
        >>> client = SftpSyncClient("example.com", "alice", password="s3cret")
        >>> client.pull("/srv/site", "/home/alice/site", delete=False)
    """

    def __init__(
        self,
        host: Optional[str] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        port: Optional[int] = None,
        key_file: Optional[str] = None,
        observer: Optional[SyncObserver] = None,
        exclude: Optional[Iterable[str]] = None,
        history_store: Optional[SyncHistoryStore] = None,
        timeout: float = DEFAULT_CONNECT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        retry_delay: float = DEFAULT_RETRY_DELAY,
    ):
        """Initialize the client.

        Args:
            host: Remote host (uses config if not provided)
            username: Login user name (uses config if not provided)
            password: Login password (uses config if not provided)
            port: SSH port (uses config if not provided)
            key_file: Private key file (uses config if not provided)
            observer: Receives sync events
            exclude: Entry names never synced or deleted
            history_store: Loads and saves the sync history
            timeout: Connection timeout in seconds
            max_retries: Maximum number of connection retries
            retry_delay: Initial delay between connection retries in seconds
        """
        self.host = host or config.host
        self.username = username or config.username
        self.password = password or config.password
        self.port = port or config.port
        self.key_file = key_file or config.key_file

        if not self.host:
            raise ConfigError(
                "Remote host not configured. Please set SFTPSYNC_HOST or run "
                "'sftpsync init'."
            )
        if not self.username:
            raise ConfigError(
                "Username not configured. Please set SFTPSYNC_USERNAME or run "
                "'sftpsync init'."
            )

        super().__init__(
            connect=partial(
                connect_sftp,
                self.host,
                self.username,
                password=self.password,
                port=self.port,
                key_file=self.key_file,
                timeout=timeout,
                max_retries=max_retries,
                retry_delay=retry_delay,
            ),
            observer=observer,
            history_store=history_store,
            exclude=exclude,
        )

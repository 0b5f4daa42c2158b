"""Remote filesystem transport over SFTP."""

from __future__ import annotations

import logging
import os
import socket
import stat
import time
from contextlib import contextmanager, suppress
from typing import Iterator, Optional, Protocol, runtime_checkable

import paramiko

from .exceptions import (
    LocalIOError,
    NotFoundError,
    TransportAuthenticationError,
    TransportError,
)
from .models import TreeEntry
from .utils import (
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_MAX_RETRIES,
    DEFAULT_RETRY_DELAY,
    join_remote_path,
)

logger = logging.getLogger(__name__)

TMP_FILE_SUFFIX = ".sftpsync.tmp"
"""Suffix of the partial file a download is written to before it replaces the target"""


@runtime_checkable
class FileSystem(Protocol):
    """Directory operations shared by the local and the remote side."""

    def list(self, path: str) -> list[TreeEntry]:
        """List the entries of a directory ('.' and '..' excluded)."""
        ...

    def stat_mtime(self, path: str) -> float:
        """Return the modification time; raise NotFoundError if missing."""
        ...

    def make_directory(self, path: str) -> None:
        """Create a directory; no-op if it already exists."""
        ...

    def remove_file(self, path: str) -> None:
        """Remove a file."""
        ...

    def remove_directory(self, path: str) -> None:
        """Remove an empty directory."""
        ...


@runtime_checkable
class RemoteTransport(FileSystem, Protocol):
    """Remote filesystem capability consumed by the sync engine."""

    def upload(self, local_path: str, remote_path: str) -> None:
        """Copy a local file to the remote path."""
        ...

    def download(self, remote_path: str, local_path: str) -> None:
        """Copy a remote file to the local path."""
        ...

    def close(self) -> None:
        """Release the connection."""
        ...


class SftpTransport:
    """RemoteTransport implementation backed by a paramiko SFTP session."""

    def __init__(
        self,
        sftp: paramiko.SFTPClient,
        ssh_client: Optional[paramiko.SSHClient] = None,
    ):
        """Initialize the transport.

        Args:
            sftp: Open SFTP session
            ssh_client: SSH client owning the session, closed with the transport
        """
        self.sftp = sftp
        self.ssh_client = ssh_client
        self._closed = False

    def _translate_error(
        self, e: Exception, path: str, operation: str
    ) -> TransportError | NotFoundError:
        """Map a paramiko/socket error onto the sftpsync hierarchy."""
        if isinstance(e, FileNotFoundError):
            return NotFoundError("No such file or directory", path, operation)
        return TransportError(str(e) or type(e).__name__, path, operation)

    def list(self, path: str) -> list[TreeEntry]:
        """List a directory, following symbolic links to classify entries.

        A link to a directory is reported as a directory with ``is_link``
        set, the same way the local side reports it. Dangling links are
        reported as files.
        """
        try:
            attrs = self.sftp.listdir_attr(path)
        except (OSError, paramiko.SSHException) as e:
            raise self._translate_error(e, path, "list") from e

        entries = []
        for attr in attrs:
            if attr.filename in (".", ".."):
                continue
            mode = attr.st_mode or 0
            is_link = stat.S_ISLNK(mode)
            if is_link:
                mode = self._link_target_mode(join_remote_path(path, attr.filename))
            entries.append(
                TreeEntry(
                    name=attr.filename,
                    is_directory=stat.S_ISDIR(mode),
                    is_link=is_link,
                )
            )
        return entries

    def _link_target_mode(self, path: str) -> int:
        try:
            return self.sftp.stat(path).st_mode or 0
        except FileNotFoundError:
            logger.debug(f"Dangling link {path}")
            return 0
        except (OSError, paramiko.SSHException) as e:
            raise self._translate_error(e, path, "list") from e

    def stat_mtime(self, path: str) -> float:
        try:
            attr = self.sftp.stat(path)
        except (OSError, paramiko.SSHException) as e:
            raise self._translate_error(e, path, "stat") from e
        if attr.st_mtime is None:
            raise TransportError("Server did not report a modification time", path)
        return float(attr.st_mtime)

    def upload(self, local_path: str, remote_path: str) -> None:
        try:
            self.sftp.put(local_path, remote_path)
        except OSError as e:
            # Errors opening the local file carry its name
            if e.filename == local_path:
                raise LocalIOError(str(e), local_path, "upload") from e
            raise self._translate_error(e, remote_path, "upload") from e
        except paramiko.SSHException as e:
            raise TransportError(str(e), remote_path, "upload") from e

    def download(self, remote_path: str, local_path: str) -> None:
        """Download a file, replacing the local file only once it is complete.

        The data is written to a sibling file with TMP_FILE_SUFFIX first, so
        a failed transfer leaves an existing local file untouched.
        """
        tmp_path = local_path + TMP_FILE_SUFFIX
        try:
            self.sftp.get(remote_path, tmp_path)
            os.replace(tmp_path, local_path)
        except OSError as e:
            self._discard(tmp_path)
            if e.filename in (local_path, tmp_path):
                raise LocalIOError(str(e), local_path, "download") from e
            raise self._translate_error(e, remote_path, "download") from e
        except paramiko.SSHException as e:
            self._discard(tmp_path)
            raise TransportError(str(e), remote_path, "download") from e

    @staticmethod
    def _discard(path: str) -> None:
        with suppress(FileNotFoundError):
            os.remove(path)

    def make_directory(self, path: str) -> None:
        try:
            attr = self.sftp.stat(path)
        except FileNotFoundError:
            attr = None
        except (OSError, paramiko.SSHException) as e:
            raise TransportError(str(e), path, "mkdir") from e

        if attr is not None:
            if stat.S_ISDIR(attr.st_mode or 0):
                return
            raise TransportError("Path exists and is not a directory", path, "mkdir")

        try:
            self.sftp.mkdir(path)
        except (OSError, paramiko.SSHException) as e:
            raise self._translate_error(e, path, "mkdir") from e
        logger.debug(f"Created remote directory {path}")

    def remove_file(self, path: str) -> None:
        try:
            self.sftp.remove(path)
        except (OSError, paramiko.SSHException) as e:
            raise self._translate_error(e, path, "remove") from e

    def remove_directory(self, path: str) -> None:
        try:
            self.sftp.rmdir(path)
        except (OSError, paramiko.SSHException) as e:
            raise self._translate_error(e, path, "rmdir") from e

    def close(self) -> None:
        """Close the SFTP session and its SSH connection."""
        if self._closed:
            return
        self._closed = True
        try:
            self.sftp.close()
        finally:
            if self.ssh_client is not None:
                self.ssh_client.close()
        logger.debug("SFTP connection closed")

    def __enter__(self) -> SftpTransport:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def _calculate_retry_delay(retry_delay: float, attempt: int) -> float:
    """Exponential backoff delay for a given attempt number."""
    return retry_delay * (2**attempt)


def open_ssh_client(
    host: str,
    username: str,
    password: Optional[str] = None,
    port: int = 22,
    key_file: Optional[str] = None,
    timeout: float = DEFAULT_CONNECT_TIMEOUT,
    max_retries: int = DEFAULT_MAX_RETRIES,
    retry_delay: float = DEFAULT_RETRY_DELAY,
) -> paramiko.SSHClient:
    """Open an authenticated SSH connection with retry logic.

    Transient network and protocol failures are retried with exponential
    backoff. Authentication failures are raised immediately.

    Args:
        host: Remote host name
        username: Login user name
        password: Login password (optional with a key file)
        port: SSH port
        key_file: Private key file
        timeout: Connection timeout in seconds
        max_retries: Maximum number of retry attempts
        retry_delay: Initial delay between retries in seconds

    Returns:
        Connected SSH client

    Raises:
        TransportAuthenticationError: If the server rejects the credentials
        TransportError: If the connection fails after all retries
    """
    last_exception: Optional[TransportError] = None

    for attempt in range(max_retries + 1):
        client = paramiko.SSHClient()
        client.load_system_host_keys()
        client.set_missing_host_key_policy(paramiko.AutoAddPolicy())
        try:
            logger.debug(f"Connecting to {username}@{host}:{port}")
            client.connect(
                hostname=host,
                port=port,
                username=username,
                password=password,
                key_filename=key_file,
                timeout=timeout,
            )
            return client
        except paramiko.AuthenticationException as e:
            client.close()
            raise TransportAuthenticationError(
                f"Authentication failed for {username}@{host}", operation="connect"
            ) from e
        except (paramiko.SSHException, socket.error) as e:
            client.close()
            last_exception = TransportError(
                f"Cannot connect to {host}:{port}: {e}", operation="connect"
            )
            if attempt < max_retries:
                delay = _calculate_retry_delay(retry_delay, attempt)
                logger.debug(
                    f"Connection attempt {attempt + 1}/{max_retries + 1} failed, "
                    f"retrying in {delay:.1f}s: {e}"
                )
                time.sleep(delay)
                continue
            raise last_exception from e

    # Only reached when max_retries is negative
    raise last_exception or TransportError("Connection failed", operation="connect")


@contextmanager
def connect_sftp(
    host: str,
    username: str,
    password: Optional[str] = None,
    port: int = 22,
    key_file: Optional[str] = None,
    timeout: float = DEFAULT_CONNECT_TIMEOUT,
    max_retries: int = DEFAULT_MAX_RETRIES,
    retry_delay: float = DEFAULT_RETRY_DELAY,
) -> Iterator[SftpTransport]:
    """Open an SFTP transport that is closed on every exit path.

    Examples:
        >>> with connect_sftp("example.com", "alice", password="s3cret") as t:
        ...     entries = t.list("/srv/data")
    """
    client = open_ssh_client(
        host,
        username,
        password=password,
        port=port,
        key_file=key_file,
        timeout=timeout,
        max_retries=max_retries,
        retry_delay=retry_delay,
    )
    try:
        sftp = client.open_sftp()
    except (paramiko.SSHException, OSError) as e:
        client.close()
        raise TransportError(f"Cannot open SFTP session: {e}", operation="connect") from e

    transport = SftpTransport(sftp, ssh_client=client)
    try:
        yield transport
    finally:
        transport.close()

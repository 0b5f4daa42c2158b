"""Persistent sync history.

The history remembers, per direction and per remote path, the local and
remote modification times observed right after the last successful
transfer. It is stored as a hidden JSON document in the root of the local
tree and is read and written once per sync pass.
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

from ..exceptions import HistoryCorruptError, LocalIOError
from .modes import SyncDirection

logger = logging.getLogger(__name__)

SYNC_DATA_FILE = ".sftp_sync_data"
"""Name of the history document inside the local root"""

HISTORY_FORMAT_VERSION = 1


@dataclass(frozen=True)
class SyncRecord:
    """State of one path immediately after its last transfer."""

    local_mtime: float
    """Local modification time after the transfer"""

    remote_mtime: float
    """Remote modification time after the transfer"""

    def to_list(self) -> list[float]:
        """Convert to the ``[local_mtime, remote_mtime]`` document form."""
        return [self.local_mtime, self.remote_mtime]

    @classmethod
    def from_list(cls, data: Any) -> "SyncRecord":
        """Create a SyncRecord from its document form."""
        if not isinstance(data, (list, tuple)) or len(data) != 2:
            raise ValueError(f"expected [local_mtime, remote_mtime], got {data!r}")
        local_mtime, remote_mtime = data
        for value in (local_mtime, remote_mtime):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"timestamp must be a number, got {value!r}")
        return cls(local_mtime=float(local_mtime), remote_mtime=float(remote_mtime))


@dataclass
class SyncHistory:
    """Last transfer results for both directions, keyed by remote path."""

    push: dict[str, SyncRecord] = field(default_factory=dict)
    pull: dict[str, SyncRecord] = field(default_factory=dict)

    def records(self, direction: SyncDirection) -> dict[str, SyncRecord]:
        """Return the mapping for one direction."""
        return self.push if direction is SyncDirection.PUSH else self.pull

    def last_record(
        self, direction: SyncDirection, remote_path: str
    ) -> Optional[SyncRecord]:
        """Return the last record for a path, or None if it was never synced."""
        return self.records(direction).get(remote_path)

    def record(
        self, direction: SyncDirection, remote_path: str, record: SyncRecord
    ) -> None:
        """Store a transfer result, replacing any previous one."""
        self.records(direction)[remote_path] = record

    def to_dict(self) -> dict:
        """Convert history to dictionary for JSON serialization."""
        return {
            "version": HISTORY_FORMAT_VERSION,
            "push": {path: rec.to_list() for path, rec in sorted(self.push.items())},
            "pull": {path: rec.to_list() for path, rec in sorted(self.pull.items())},
        }

    @classmethod
    def from_dict(cls, data: Any) -> "SyncHistory":
        """Create SyncHistory from dictionary.

        Raises:
            ValueError: If the structure is not a valid history document
        """
        if not isinstance(data, dict):
            raise ValueError("history document must be a mapping")

        version = data.get("version", HISTORY_FORMAT_VERSION)
        if version != HISTORY_FORMAT_VERSION:
            raise ValueError(f"unsupported history version {version!r}")

        history = cls()
        for direction in SyncDirection:
            section = data.get(direction.value, {})
            if not isinstance(section, dict):
                raise ValueError(f"'{direction.value}' must be a mapping")
            for path, value in section.items():
                history.record(direction, path, SyncRecord.from_list(value))
        return history


class SyncHistoryStore:
    """Loads and saves SyncHistory documents in a local root directory."""

    def __init__(self, file_name: str = SYNC_DATA_FILE):
        """Initialize the store.

        Args:
            file_name: Name of the history document inside the local root
        """
        self.file_name = file_name

    def get_history_file(self, local_root: Union[str, Path]) -> Path:
        """Return the path of the history document for a local root."""
        return Path(local_root) / self.file_name

    def load(self, local_root: Union[str, Path]) -> SyncHistory:
        """Load the history for a local root.

        An absent document yields an empty history. A document that exists
        but cannot be parsed is never replaced by an empty history.

        Args:
            local_root: Local directory holding the history document

        Returns:
            Loaded SyncHistory

        Raises:
            HistoryCorruptError: If the document is unreadable or malformed
        """
        history_file = self.get_history_file(local_root)

        if not history_file.exists():
            logger.debug(f"No sync history found at {history_file}")
            return SyncHistory()

        try:
            with open(history_file, encoding="utf-8") as f:
                data = json.load(f)
            history = SyncHistory.from_dict(data)
        except (OSError, UnicodeDecodeError) as e:
            raise HistoryCorruptError(
                f"Cannot read sync history: {e}", str(history_file), "load"
            ) from e
        except ValueError as e:
            # json.JSONDecodeError is a ValueError too
            raise HistoryCorruptError(
                f"Malformed sync history: {e}", str(history_file), "load"
            ) from e

        logger.debug(
            f"Loaded sync history with {len(history.push)} push and "
            f"{len(history.pull)} pull record(s)"
        )
        return history

    def save(self, local_root: Union[str, Path], history: SyncHistory) -> None:
        """Save the history to a local root.

        Args:
            local_root: Local directory that receives the history document
            history: History to persist

        Raises:
            LocalIOError: If the document cannot be written
        """
        history_file = self.get_history_file(local_root)

        try:
            with open(history_file, "w", encoding="utf-8") as f:
                json.dump(history.to_dict(), f, indent=2)
        except OSError as e:
            raise LocalIOError(
                f"Cannot write sync history: {e}", str(history_file), "save"
            ) from e

        logger.debug(f"Saved sync history to {history_file}")

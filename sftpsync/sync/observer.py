"""Callbacks for reporting sync progress.

The sync engine never writes output itself. It reports every decision to a
SyncObserver, which may log it, count it or render it in a terminal.
"""

import logging
from typing import Optional

from .modes import SyncDirection

logger = logging.getLogger(__name__)


class SyncObserver:
    """Receives sync events. All methods are no-ops by default."""

    def on_directory(
        self, direction: SyncDirection, source: str, destination: str
    ) -> None:
        """A directory pair is about to be walked."""

    def on_transfer(
        self, direction: SyncDirection, source: str, destination: str
    ) -> None:
        """A file was transferred."""

    def on_skip(
        self, direction: SyncDirection, source: str, destination: str, reason: str
    ) -> None:
        """A file was left untouched."""

    def on_delete(self, path: str, is_directory: bool) -> None:
        """A stale destination entry was removed."""

    def on_error(self, error: Exception, operation: str, path: str) -> None:
        """An operation failed; the pass is about to abort."""


class LoggingSyncObserver(SyncObserver):
    """Writes sync events to the standard logging system."""

    def __init__(self, log: Optional[logging.Logger] = None):
        self.log = log or logger

    def on_directory(
        self, direction: SyncDirection, source: str, destination: str
    ) -> None:
        self.log.debug(f"Syncing dir {source} -> {destination}")

    def on_transfer(
        self, direction: SyncDirection, source: str, destination: str
    ) -> None:
        self.log.debug(f"{direction.verb} file {source}")

    def on_skip(
        self, direction: SyncDirection, source: str, destination: str, reason: str
    ) -> None:
        self.log.debug(f"Skipped file {source} ({reason})")

    def on_delete(self, path: str, is_directory: bool) -> None:
        kind = "dir" if is_directory else "file"
        self.log.debug(f"Deleted {kind} {path}")

    def on_error(self, error: Exception, operation: str, path: str) -> None:
        self.log.error(f"{operation} failed for {path}: {error}")


class StatsSyncObserver(SyncObserver):
    """Counts sync events."""

    def __init__(self) -> None:
        self.stats = create_empty_stats()

    def on_directory(
        self, direction: SyncDirection, source: str, destination: str
    ) -> None:
        self.stats["directories"] += 1

    def on_transfer(
        self, direction: SyncDirection, source: str, destination: str
    ) -> None:
        self.stats["transfers"] += 1

    def on_skip(
        self, direction: SyncDirection, source: str, destination: str, reason: str
    ) -> None:
        self.stats["skips"] += 1

    def on_delete(self, path: str, is_directory: bool) -> None:
        self.stats["deletes"] += 1

    def on_error(self, error: Exception, operation: str, path: str) -> None:
        self.stats["errors"] += 1


class CompositeSyncObserver(SyncObserver):
    """Forwards every event to several observers in order."""

    def __init__(self, *observers: SyncObserver):
        self.observers = [o for o in observers if o is not None]

    def on_directory(
        self, direction: SyncDirection, source: str, destination: str
    ) -> None:
        for observer in self.observers:
            observer.on_directory(direction, source, destination)

    def on_transfer(
        self, direction: SyncDirection, source: str, destination: str
    ) -> None:
        for observer in self.observers:
            observer.on_transfer(direction, source, destination)

    def on_skip(
        self, direction: SyncDirection, source: str, destination: str, reason: str
    ) -> None:
        for observer in self.observers:
            observer.on_skip(direction, source, destination, reason)

    def on_delete(self, path: str, is_directory: bool) -> None:
        for observer in self.observers:
            observer.on_delete(path, is_directory)

    def on_error(self, error: Exception, operation: str, path: str) -> None:
        for observer in self.observers:
            observer.on_error(error, operation, path)


def create_empty_stats() -> dict:
    """Create an empty statistics dictionary.

    Returns:
        Dictionary with zero counts for all stat categories
    """
    return {
        "directories": 0,
        "transfers": 0,
        "skips": 0,
        "deletes": 0,
        "errors": 0,
    }

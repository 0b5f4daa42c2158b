"""Sync engine for sftpsync - one-directional push/pull of directory trees."""

from .comparator import FileComparator, SyncAction, SyncDecision
from .differ import DirectoryDiff, TreeDiffer
from .engine import SyncEngine, SyncState
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
from .state import SYNC_DATA_FILE, SyncHistory, SyncHistoryStore, SyncRecord

__all__ = [
    "SyncEngine",
    "SyncState",
    "SyncDirection",
    "SyncOperations",
    "LocalFilesystem",
    "DirectoryScanner",
    "TreeDiffer",
    "DirectoryDiff",
    "FileComparator",
    "SyncAction",
    "SyncDecision",
    "Reconciler",
    "SyncObserver",
    "LoggingSyncObserver",
    "StatsSyncObserver",
    "CompositeSyncObserver",
    "SyncRecord",
    "SyncHistory",
    "SyncHistoryStore",
    "SYNC_DATA_FILE",
]

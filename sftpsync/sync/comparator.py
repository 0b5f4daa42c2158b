"""Transfer/skip decision for a single file."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .modes import SyncDirection
from .state import SyncRecord


class SyncAction(str, Enum):
    """Actions that can be taken for a source file."""

    TRANSFER = "transfer"
    """Copy the source file over the destination"""

    SKIP = "skip"
    """Leave the destination untouched"""


@dataclass(frozen=True)
class SyncDecision:
    """Represents a decision about how to sync a file."""

    action: SyncAction
    """Action to take"""

    reason: str
    """Human-readable reason for this decision"""

    @property
    def should_transfer(self) -> bool:
        return self.action is SyncAction.TRANSFER


class FileComparator:
    """Decides whether a source file must be transferred.

    The policy is the same for both directions with source and destination
    swapped. Only the destination is looked at: a file is transferred when
    the destination is missing, when it has never been synced in this
    direction, or when the destination changed since the last sync. The
    source and destination timestamps are never compared with each other.
    """

    def decide(
        self,
        direction: SyncDirection,
        source_mtime: float,
        destination_mtime: Optional[float],
        last_record: Optional[SyncRecord],
    ) -> SyncDecision:
        """Decide between TRANSFER and SKIP.

        Args:
            direction: Direction of the sync pass
            source_mtime: Current modification time of the source file
            destination_mtime: Current modification time of the destination
                file, or None if it is absent or cannot be stat'd
            last_record: Last sync record for this path in this direction

        Returns:
            SyncDecision for this file
        """
        if destination_mtime is None:
            return SyncDecision(SyncAction.TRANSFER, "Destination file missing")

        if last_record is None:
            return SyncDecision(SyncAction.TRANSFER, "No sync history")

        recorded = self._recorded_destination_mtime(direction, last_record)
        if destination_mtime > recorded:
            return SyncDecision(
                SyncAction.TRANSFER, "Destination changed since last sync"
            )

        return SyncDecision(SyncAction.SKIP, "Unchanged since last sync")

    @staticmethod
    def _recorded_destination_mtime(
        direction: SyncDirection, record: SyncRecord
    ) -> float:
        if direction is SyncDirection.PUSH:
            return record.remote_mtime
        return record.local_mtime

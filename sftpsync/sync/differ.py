"""Per-directory comparison of source and destination listings."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from ..models import TreeEntry


@dataclass(frozen=True)
class DirectoryDiff:
    """Classification of the entries of one directory level.

    Names are matched exactly (case-sensitive).
    """

    common: frozenset[str]
    """Names present on both sides"""

    source_only: frozenset[str]
    """Names present only on the source side"""

    destination_only: frozenset[str]
    """Names present only on the destination side (stale entries)"""

    source: Mapping[str, TreeEntry]
    """Source entries by name"""

    destination: Mapping[str, TreeEntry]
    """Destination entries by name"""

    def type_conflicts(self) -> frozenset[str]:
        """Common names that are a directory on one side and a file on the other."""
        return frozenset(
            name
            for name in self.common
            if self.source[name].is_directory != self.destination[name].is_directory
        )

    def stale_entries(self) -> list[TreeEntry]:
        """Destination-only entries, sorted by name."""
        return [self.destination[name] for name in sorted(self.destination_only)]


class TreeDiffer:
    """Compares the listings of a source and a destination directory."""

    def diff(
        self,
        source_entries: Iterable[TreeEntry],
        destination_entries: Iterable[TreeEntry],
    ) -> DirectoryDiff:
        """Classify entries into common, source-only and destination-only.

        Args:
            source_entries: Entries listed on the source side
            destination_entries: Entries listed on the destination side

        Returns:
            Immutable DirectoryDiff for this level
        """
        source = {entry.name: entry for entry in source_entries}
        destination = {entry.name: entry for entry in destination_entries}

        source_names = source.keys()
        destination_names = destination.keys()

        return DirectoryDiff(
            common=frozenset(source_names & destination_names),
            source_only=frozenset(source_names - destination_names),
            destination_only=frozenset(destination_names - source_names),
            source=source,
            destination=destination,
        )

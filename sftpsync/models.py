"""Data models shared by the transport and the sync engine."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TreeEntry:
    """A single directory entry as listed on either side."""

    name: str
    """Entry name (no directory component)"""

    is_directory: bool = False
    """Whether the entry is (or links to) a directory"""

    is_link: bool = False
    """Whether the entry itself is a symbolic link"""

    def __str__(self) -> str:
        return f"{self.name}/" if self.is_directory else self.name

"""Sync directions."""

from enum import Enum


class SyncDirection(str, Enum):
    """Direction of a sync pass.

    Only one direction is synced per invocation; there is no two-way merge.
    """

    PUSH = "push"
    """Local tree is the source, remote tree is the destination"""

    PULL = "pull"
    """Remote tree is the source, local tree is the destination"""

    @classmethod
    def from_string(cls, value: str) -> "SyncDirection":
        """Parse a direction name (case-insensitive).

        Examples:
            >>> SyncDirection.from_string("Push")
            <SyncDirection.PUSH: 'push'>
        """
        try:
            return cls(value.lower())
        except ValueError:
            valid = ", ".join(d.value for d in cls)
            raise ValueError(
                f"Invalid sync direction: {value!r}. Must be one of: {valid}"
            ) from None

    @property
    def source_is_local(self) -> bool:
        """Whether files flow from the local tree."""
        return self is SyncDirection.PUSH

    @property
    def verb(self) -> str:
        """Past-tense verb used in log messages."""
        return "Pushed" if self is SyncDirection.PUSH else "Pulled"

"""Shared fixtures for sftpsync tests."""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Optional

import pytest

from sftpsync.exceptions import NotFoundError, TransportError
from sftpsync.models import TreeEntry
from sftpsync.sync import SyncEngine, SyncObserver


class FakeTransport:
    """RemoteTransport backed by a temporary directory.

    Remote paths such as ``/srv/site/a.txt`` are mapped below ``root``.
    Every call is recorded in ``calls`` and selected calls can be made to
    fail through ``failures``.
    """

    def __init__(self, root: Path):
        self.root = root
        self.calls: list[tuple[str, str]] = []
        self.failures: dict[tuple[str, str], Exception] = {}
        self.open_count = 0
        self.close_count = 0

    def path(self, remote_path: str) -> Path:
        return self.root / remote_path.lstrip("/")

    def _record(self, operation: str, remote_path: str) -> None:
        self.calls.append((operation, remote_path))
        error = self.failures.get((operation, remote_path))
        if error is not None:
            raise error

    def list(self, path: str) -> list[TreeEntry]:
        self._record("list", path)
        target = self.path(path)
        if not target.is_dir():
            raise NotFoundError("No such directory", path, "list")
        return [
            TreeEntry(
                name=child.name,
                is_directory=child.is_dir(),
                is_link=child.is_symlink(),
            )
            for child in target.iterdir()
        ]

    def stat_mtime(self, path: str) -> float:
        self._record("stat", path)
        target = self.path(path)
        if not target.exists():
            raise NotFoundError("No such file", path, "stat")
        return target.stat().st_mtime

    def upload(self, local_path: str, remote_path: str) -> None:
        self._record("upload", remote_path)
        shutil.copyfile(local_path, self.path(remote_path))

    def download(self, remote_path: str, local_path: str) -> None:
        self._record("download", remote_path)
        shutil.copyfile(self.path(remote_path), local_path)

    def make_directory(self, path: str) -> None:
        self._record("mkdir", path)
        self.path(path).mkdir(exist_ok=True)

    def remove_file(self, path: str) -> None:
        self._record("remove", path)
        self.path(path).unlink()

    def remove_directory(self, path: str) -> None:
        self._record("rmdir", path)
        try:
            self.path(path).rmdir()
        except OSError as e:
            raise TransportError(str(e), path, "rmdir") from e

    def close(self) -> None:
        self.close_count += 1

    def __enter__(self) -> "FakeTransport":
        self.open_count += 1
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def operations(self, operation: str) -> list[str]:
        """Paths of all recorded calls of one kind."""
        return [path for op, path in self.calls if op == operation]


class RecordingObserver(SyncObserver):
    """Observer that keeps every event for assertions."""

    def __init__(self) -> None:
        self.events: list[tuple] = []

    def on_directory(self, direction, source, destination) -> None:
        self.events.append(("directory", source, destination))

    def on_transfer(self, direction, source, destination) -> None:
        self.events.append(("transfer", source, destination))

    def on_skip(self, direction, source, destination, reason) -> None:
        self.events.append(("skip", source, destination))

    def on_delete(self, path, is_directory) -> None:
        self.events.append(("delete", path, is_directory))

    def on_error(self, error, operation, path) -> None:
        self.events.append(("error", operation, path))

    def of_kind(self, kind: str) -> list[tuple]:
        return [event for event in self.events if event[0] == kind]


def write_file(path: Path, content: str = "data", mtime: Optional[float] = None) -> Path:
    """Create a file (and its parents) with an optional fixed mtime."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    if mtime is not None:
        os.utime(path, (mtime, mtime))
    return path


@pytest.fixture
def remote_dir(tmp_path):
    """Directory backing the fake remote filesystem."""
    root = tmp_path / "remote"
    root.mkdir()
    return root


@pytest.fixture
def local_root(tmp_path):
    """Local root of the synced tree."""
    root = tmp_path / "local"
    root.mkdir()
    return root


@pytest.fixture
def transport(remote_dir):
    """Fake remote transport."""
    return FakeTransport(remote_dir)


@pytest.fixture
def remote_root(transport):
    """Remote root path; its backing directory exists."""
    transport.path("/srv/site").mkdir(parents=True)
    return "/srv/site"


@pytest.fixture
def observer():
    """Observer recording all sync events."""
    return RecordingObserver()


@pytest.fixture
def engine(transport, observer):
    """Sync engine wired to the fake transport."""
    return SyncEngine(lambda: transport, observer=observer)

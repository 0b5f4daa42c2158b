"""Tests for sync observers and the CLI progress display."""

import io
import logging

from rich.console import Console

from sftpsync.cli_progress import SyncProgressDisplay
from sftpsync.exceptions import TransportError
from sftpsync.output import OutputFormatter
from sftpsync.sync import (
    CompositeSyncObserver,
    LoggingSyncObserver,
    StatsSyncObserver,
    SyncDirection,
    SyncObserver,
)


def _output(quiet=False):
    buffer = io.StringIO()
    console = Console(file=buffer, width=120, highlight=False)
    return OutputFormatter(quiet=quiet, console=console, err_console=console), buffer


class TestStatsSyncObserver:
    """Tests for StatsSyncObserver."""

    def test_counts_events(self):
        stats = StatsSyncObserver()

        stats.on_directory(SyncDirection.PUSH, "/home/u", "/srv")
        stats.on_transfer(SyncDirection.PUSH, "/home/u/a", "/srv/a")
        stats.on_transfer(SyncDirection.PUSH, "/home/u/b", "/srv/b")
        stats.on_skip(SyncDirection.PUSH, "/home/u/c", "/srv/c", "Unchanged")
        stats.on_delete("/srv/old", True)
        stats.on_error(TransportError("x"), "upload", "/srv/a")

        assert stats.stats == {
            "directories": 1,
            "transfers": 2,
            "skips": 1,
            "deletes": 1,
            "errors": 1,
        }


class TestLoggingSyncObserver:
    """Tests for LoggingSyncObserver."""

    def test_logs_transfers_and_skips(self, caplog):
        observer = LoggingSyncObserver()

        with caplog.at_level(logging.DEBUG, logger="sftpsync"):
            observer.on_transfer(SyncDirection.PULL, "/srv/a.txt", "/home/u/a.txt")
            observer.on_skip(
                SyncDirection.PULL, "/srv/b.txt", "/home/u/b.txt", "No sync history"
            )
            observer.on_delete("/home/u/old", True)

        assert "Pulled file /srv/a.txt" in caplog.text
        assert "Skipped file /srv/b.txt (No sync history)" in caplog.text
        assert "Deleted dir /home/u/old" in caplog.text

    def test_logs_errors(self, caplog):
        observer = LoggingSyncObserver()

        with caplog.at_level(logging.ERROR, logger="sftpsync"):
            observer.on_error(TransportError("denied"), "remove", "/srv/a.txt")

        assert "remove failed for /srv/a.txt: denied" in caplog.text


class TestCompositeSyncObserver:
    """Tests for CompositeSyncObserver."""

    def test_forwards_in_order(self):
        calls = []

        class Recorder(SyncObserver):
            def __init__(self, name):
                self.name = name

            def on_delete(self, path, is_directory):
                calls.append((self.name, path))

        composite = CompositeSyncObserver(Recorder("first"), None, Recorder("second"))
        composite.on_delete("/srv/x", False)

        assert calls == [("first", "/srv/x"), ("second", "/srv/x")]


class TestSyncProgressDisplay:
    """Tests for the Rich progress display."""

    def test_prints_transfers_and_deletes(self):
        output, buffer = _output()

        with SyncProgressDisplay(output) as display:
            display.on_transfer(SyncDirection.PUSH, "docs/a.txt", "/srv/docs/a.txt")
            display.on_transfer(SyncDirection.PULL, "/srv/b.txt", "b.txt")
            display.on_delete("/srv/old", True)
            display.on_skip(SyncDirection.PUSH, "c.txt", "/srv/c.txt", "Unchanged")

        text = buffer.getvalue()
        assert "↑ docs/a.txt" in text
        assert "↓ /srv/b.txt" in text
        assert "✗ /srv/old/" in text
        assert "c.txt" not in text

    def test_show_skips(self):
        output, buffer = _output()

        with SyncProgressDisplay(output, show_skips=True) as display:
            display.on_skip(SyncDirection.PUSH, "c.txt", "/srv/c.txt", "Unchanged")

        assert "c.txt" in buffer.getvalue()

    def test_quiet_prints_nothing(self):
        output, buffer = _output(quiet=True)

        with SyncProgressDisplay(output) as display:
            display.on_directory(SyncDirection.PUSH, "/home/u", "/srv")
            display.on_transfer(SyncDirection.PUSH, "a.txt", "/srv/a.txt")

        assert buffer.getvalue() == ""

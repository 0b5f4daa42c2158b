"""Tests for the transfer/skip decision."""

import pytest

from sftpsync.sync import FileComparator, SyncAction, SyncDirection, SyncRecord


@pytest.fixture
def comparator():
    return FileComparator()


class TestDestinationMissing:
    """A missing destination always forces a transfer."""

    @pytest.mark.parametrize("direction", list(SyncDirection))
    def test_missing_destination_transfers(self, comparator, direction):
        decision = comparator.decide(
            direction, 100.0, None, SyncRecord(local_mtime=100.0, remote_mtime=200.0)
        )

        assert decision.action == SyncAction.TRANSFER
        assert decision.should_transfer
        assert decision.reason == "Destination file missing"


class TestNoHistory:
    """Without a record for the path the file is transferred."""

    def test_no_record_transfers_even_if_destination_is_newer(self, comparator):
        decision = comparator.decide(SyncDirection.PUSH, 100.0, 500.0, None)

        assert decision.action == SyncAction.TRANSFER
        assert decision.reason == "No sync history"


class TestPushDecision:
    """Push compares the remote mtime with the recorded remote mtime."""

    def test_unchanged_remote_skips(self, comparator):
        record = SyncRecord(local_mtime=100.0, remote_mtime=200.0)

        decision = comparator.decide(SyncDirection.PUSH, 100.0, 200.0, record)

        assert decision.action == SyncAction.SKIP
        assert not decision.should_transfer
        assert decision.reason == "Unchanged since last sync"

    def test_newer_remote_transfers(self, comparator):
        record = SyncRecord(local_mtime=100.0, remote_mtime=200.0)

        decision = comparator.decide(SyncDirection.PUSH, 100.0, 201.0, record)

        assert decision.action == SyncAction.TRANSFER
        assert decision.reason == "Destination changed since last sync"

    def test_older_remote_skips(self, comparator):
        record = SyncRecord(local_mtime=100.0, remote_mtime=200.0)

        decision = comparator.decide(SyncDirection.PUSH, 100.0, 150.0, record)

        assert decision.action == SyncAction.SKIP

    def test_source_change_alone_does_not_transfer(self, comparator):
        """Only the destination side is consulted."""
        record = SyncRecord(local_mtime=100.0, remote_mtime=200.0)

        decision = comparator.decide(SyncDirection.PUSH, 999.0, 200.0, record)

        assert decision.action == SyncAction.SKIP

    def test_recorded_local_mtime_is_ignored(self, comparator):
        """A remote mtime above the recorded local one does not matter for push."""
        record = SyncRecord(local_mtime=100.0, remote_mtime=300.0)

        decision = comparator.decide(SyncDirection.PUSH, 100.0, 200.0, record)

        assert decision.action == SyncAction.SKIP


class TestPullDecision:
    """Pull compares the local mtime with the recorded local mtime."""

    def test_unchanged_local_skips(self, comparator):
        record = SyncRecord(local_mtime=100.0, remote_mtime=200.0)

        decision = comparator.decide(SyncDirection.PULL, 200.0, 100.0, record)

        assert decision.action == SyncAction.SKIP

    def test_newer_local_transfers(self, comparator):
        record = SyncRecord(local_mtime=100.0, remote_mtime=200.0)

        decision = comparator.decide(SyncDirection.PULL, 200.0, 100.5, record)

        assert decision.action == SyncAction.TRANSFER

    def test_recorded_remote_mtime_is_ignored(self, comparator):
        record = SyncRecord(local_mtime=100.0, remote_mtime=50.0)

        decision = comparator.decide(SyncDirection.PULL, 200.0, 100.0, record)

        assert decision.action == SyncAction.SKIP

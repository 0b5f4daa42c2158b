"""Tests for the high-level SFTP sync client."""

from unittest.mock import patch

import pytest

from sftpsync.client import SftpSyncClient
from sftpsync.exceptions import ConfigError, TransportError
from sftpsync.sync import SYNC_DATA_FILE, SyncHistoryStore


@pytest.fixture
def mock_config():
    """Mock the config module."""
    with patch("sftpsync.client.config") as mock:
        mock.host = None
        mock.username = None
        mock.password = None
        mock.port = 22
        mock.key_file = None
        yield mock


class TestSftpSyncClient:
    """Tests for SftpSyncClient."""

    def test_explicit_settings(self, mock_config):
        client = SftpSyncClient("example.com", "alice", password="pw", port=2222)

        assert client.host == "example.com"
        assert client.username == "alice"
        assert client.password == "pw"
        assert client.port == 2222

    def test_settings_from_config(self, mock_config):
        mock_config.host = "config.example.com"
        mock_config.username = "bob"
        mock_config.key_file = "/home/bob/.ssh/id_ed25519"

        client = SftpSyncClient()

        assert client.host == "config.example.com"
        assert client.username == "bob"
        assert client.port == 22
        assert client.key_file == "/home/bob/.ssh/id_ed25519"

    def test_missing_host(self, mock_config):
        with pytest.raises(ConfigError, match="host"):
            SftpSyncClient(username="alice")

    def test_missing_username(self, mock_config):
        with pytest.raises(ConfigError, match="Username"):
            SftpSyncClient(host="example.com")

    @patch("sftpsync.client.connect_sftp")
    def test_connect_opens_sftp_session(self, mock_connect, mock_config):
        client = SftpSyncClient(
            "example.com", "alice", password="pw", max_retries=1, retry_delay=0.5
        )

        client.connect()

        mock_connect.assert_called_once_with(
            "example.com",
            "alice",
            password="pw",
            port=22,
            key_file=None,
            timeout=30.0,
            max_retries=1,
            retry_delay=0.5,
        )

    def test_exclusions_include_history_file(self, mock_config):
        client = SftpSyncClient(
            "example.com",
            "alice",
            exclude=[".DS_Store"],
            history_store=SyncHistoryStore(file_name=".state"),
        )

        assert client.scanner.should_ignore(".DS_Store")
        assert client.scanner.should_ignore(".state")
        assert client.scanner.should_ignore(SYNC_DATA_FILE)

    @patch("sftpsync.client.connect_sftp")
    def test_connection_failure_leaves_history_unsaved(
        self, mock_connect, mock_config, tmp_path
    ):
        """A failing connection aborts the pass without writing history."""
        mock_connect.side_effect = TransportError("No route to host")
        client = SftpSyncClient("example.com", "alice")

        with pytest.raises(TransportError, match="No route to host"):
            client.pull("/srv/site", tmp_path)

        assert not (tmp_path / SYNC_DATA_FILE).exists()

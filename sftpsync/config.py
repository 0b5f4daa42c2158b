"""Configuration management for sftpsync.

Connection settings are resolved from environment variables first and then
from a ``KEY=value`` config file in ``~/.config/sftpsync/config``.
Options given on the command line override both.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_PORT = 22

ENV_PREFIX = "SFTPSYNC_"

CONFIG_KEYS = ("HOST", "PORT", "USERNAME", "PASSWORD", "KEY_FILE")


class Config:
    """Connection settings for the SFTP server."""

    def __init__(self, config_path: Optional[Path] = None):
        """Initialize configuration.

        Args:
            config_path: Location of the config file. Defaults to
                ~/.config/sftpsync/config
        """
        self._config_path = config_path
        self._file_values: Optional[dict[str, str]] = None

    def get_config_path(self) -> Path:
        """Return the path of the config file."""
        if self._config_path is not None:
            return self._config_path
        return Path.home() / ".config" / "sftpsync" / "config"

    def _load_file(self) -> dict[str, str]:
        """Read the config file once and cache its values."""
        if self._file_values is not None:
            return self._file_values

        values: dict[str, str] = {}
        path = self.get_config_path()
        if path.exists():
            try:
                text = path.read_text(encoding="utf-8")
            except OSError as e:
                raise ConfigError(
                    f"Cannot read config file: {e}", path=str(path)
                ) from e
            for line_no, raw_line in enumerate(text.splitlines(), start=1):
                line = raw_line.strip()
                if not line or line.startswith("#"):
                    continue
                if "=" not in line:
                    raise ConfigError(
                        f"Line {line_no} is not in KEY=value format", path=str(path)
                    )
                key, value = line.split("=", 1)
                values[key.strip().upper()] = value.strip()
            logger.debug(f"Loaded {len(values)} setting(s) from {path}")

        self._file_values = values
        return values

    def _get(self, key: str) -> Optional[str]:
        value = os.environ.get(ENV_PREFIX + key)
        if value:
            return value
        return self._load_file().get(key) or None

    @property
    def host(self) -> Optional[str]:
        """Remote host name."""
        return self._get("HOST")

    @property
    def port(self) -> int:
        """Remote SSH port."""
        value = self._get("PORT")
        if value is None:
            return DEFAULT_PORT
        try:
            port = int(value)
        except ValueError as e:
            raise ConfigError(f"Invalid port: {value!r}") from e
        if not 0 < port < 65536:
            raise ConfigError(f"Port out of range: {port}")
        return port

    @property
    def username(self) -> Optional[str]:
        """Login user name."""
        return self._get("USERNAME")

    @property
    def password(self) -> Optional[str]:
        """Login password (optional when a key file is used)."""
        return self._get("PASSWORD")

    @property
    def key_file(self) -> Optional[str]:
        """Private key file used for authentication."""
        return self._get("KEY_FILE")

    def is_configured(self) -> bool:
        """Check whether enough settings exist to open a connection."""
        return bool(self.host and self.username)

    def save(self, **settings: Optional[str]) -> Path:
        """Write settings to the config file.

        Existing keys not given here are kept. The file is created with
        owner-only permissions because it may hold a password.

        Args:
            **settings: Lower-case setting names (host, port, username,
                password, key_file) mapped to values; None values are dropped

        Returns:
            Path of the written config file
        """
        values = dict(self._load_file())
        for name, value in settings.items():
            key = name.upper()
            if key not in CONFIG_KEYS:
                raise ConfigError(f"Unknown setting: {name}")
            if value is None:
                values.pop(key, None)
            else:
                values[key] = str(value)

        path = self.get_config_path()
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "w", encoding="utf-8") as f:
                f.write("# sftpsync configuration\n")
                for key in CONFIG_KEYS:
                    if key in values:
                        f.write(f"{key}={values[key]}\n")
            path.chmod(0o600)
        except OSError as e:
            raise ConfigError(f"Cannot write config file: {e}", path=str(path)) from e

        self._file_values = values
        return path


config = Config()

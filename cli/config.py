"""Configuration management for the speed test CLI."""

import json
import os
import shutil
from pathlib import Path

from common.constants import DEFAULT_SERVER_PORT, MIB

DEFAULT_CONFIG_PATH = Path.home() / '.speedtest' / 'config.json'


class Config:
    """Manages CLI configuration stored in JSON file."""

    DEFAULT_CONFIG = {
        "server_host": os.environ.get("SPEEDTEST_SERVER_HOST", "localhost"),
        "server_port": int(os.environ.get("SPEEDTEST_SERVER_PORT", str(DEFAULT_SERVER_PORT))),
        "scheme": "http",
        "api_prefix": "",
        "timeout": 30,
        "ping_count": 5,
        "ping_interval": 0.2,
        "download_size": 10 * MIB,
        "upload_size": 5 * MIB,
    }

    def __init__(self, config_path: Path = DEFAULT_CONFIG_PATH):
        """
        Initialize configuration manager.

        Args:
            config_path: Path to config JSON file (typically ~/.speedtest/config.json)
        """
        self.config_path = config_path
        self.data = self._load()

    def _load(self) -> dict:
        """
        Load configuration from file, creating defaults if necessary.

        Returns:
            Configuration dictionary
        """
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
        except PermissionError:
            import tempfile
            self.config_path = Path(tempfile.gettempdir()) / '.speedtest' / 'config.json'
            self.config_path.parent.mkdir(parents=True, exist_ok=True)

        if self.config_path.exists():
            try:
                with open(self.config_path, 'r') as f:
                    data = json.load(f)
                if not isinstance(data, dict):
                    raise ValueError("config root must be an object")
                config = self.DEFAULT_CONFIG.copy()
                config.update(data)
                return config
            except (json.JSONDecodeError, ValueError, IOError):
                backup_path = self.config_path.with_suffix('.json.bak')
                try:
                    shutil.copy(self.config_path, backup_path)
                except OSError:
                    pass
                return self.DEFAULT_CONFIG.copy()
        else:
            config = self.DEFAULT_CONFIG.copy()
            try:
                with open(self.config_path, 'w') as f:
                    json.dump(config, f, indent=2)
            except IOError:
                pass
            return config

    def save(self) -> None:
        """Save current configuration to file."""
        try:
            with open(self.config_path, 'w') as f:
                json.dump(self.data, f, indent=2)
        except IOError:
            pass

    def set_server(self, host: str, port: int) -> None:
        """
        Set target server and save to file.

        Args:
            host: Server hostname or IP address
            port: Server TCP port
        """
        self.data['server_host'] = host
        self.data['server_port'] = port
        self.save()

    def get_base_url(self) -> str:
        """
        Get server base URL including the API prefix.

        Returns:
            Base URL string (e.g., "http://localhost:8000" or "https://edge.example/api")
        """
        scheme = self.data.get('scheme', 'http')
        host = self.data.get('server_host', 'localhost')
        port = self.data.get('server_port', DEFAULT_SERVER_PORT)
        prefix = (self.data.get('api_prefix') or '').rstrip('/')
        return f"{scheme}://{host}:{port}{prefix}"

    def get_timeout(self) -> float:
        """
        Get request timeout in seconds.

        Returns:
            Timeout value in seconds
        """
        return self.data.get('timeout', 30)

    def get_ping_settings(self) -> dict:
        """
        Get latency probe settings.

        Returns:
            Dictionary with 'count' and 'interval'
        """
        return {
            'count': self.data.get('ping_count', 5),
            'interval': self.data.get('ping_interval', 0.2),
        }

    def get_download_size(self) -> int:
        return self.data.get('download_size', 10 * MIB)

    def get_upload_size(self) -> int:
        return self.data.get('upload_size', 5 * MIB)

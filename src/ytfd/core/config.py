#!/usr/bin/env python3
"""
Centralized Configuration Manager

Provides a single source of truth for daemon configuration: fixed protocol
constants, environment variables (optionally seeded from a .env file) and
command-line overrides, with validation.
"""

import os
import logging
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List
from pathlib import Path

logger = logging.getLogger(__name__)

# Number of endpoints, and therefore the capacity of the listener pool
LISTENERS_SIZE = 8

# Videos retained per channel
MAX_FEED_SIZE = 7

# A request is exactly one read of at most this many bytes
REQUEST_SIZE = 128

CHANNEL_URL_BASE = "https://www.youtube.com/@"
CHANNEL_URL_BY_ID_BASE = "https://www.youtube.com/channel/"
FEED_URL_BASE = "https://www.youtube.com/feeds/videos.xml?channel_id="
WATCH_URL_BASE = "https://www.youtube.com/watch?v="
SEARCH_URL_BASE = "https://www.youtube.com/results?search_query="

# Operation name -> socket file name, in the order endpoints are started
SOCKET_NAMES = {
    'fetch': 'ytfd.fetch.sock',
    'add': 'ytfd.add.sock',
    'get': 'ytfd.get.sock',
    'rm': 'ytfd.rm.sock',
    'refresh': 'ytfd.refresh.sock',
    'search': 'ytfd.search.sock',
    'subs': 'ytfd.subs.sock',
    'health': 'ytfd.health.sock',
}

VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']


@dataclass
class NetworkConfig:
    """Outbound HTTP settings for resolver, fetcher and search."""
    http_timeout: int = 10
    user_agent: str = "Mozilla/5.0 (compatible; ytfd/0.1)"


@dataclass
class DaemonConfig:
    """Core daemon settings."""
    notify: bool = True
    subs_file: Optional[str] = None
    refresh_rate_minutes: int = 15
    socket_dir: str = "/tmp"

    # Logging
    debug: bool = False
    log_file: str = "/tmp/ytfd.log"
    log_level: str = "INFO"

    def socket_path(self, operation: str) -> str:
        """Absolute socket path for an operation name."""
        return str(Path(self.socket_dir) / SOCKET_NAMES[operation])


@dataclass
class Config:
    """Master configuration container."""
    daemon: DaemonConfig = field(default_factory=DaemonConfig)
    network: NetworkConfig = field(default_factory=NetworkConfig)

    @property
    def refresh_interval_seconds(self) -> float:
        return self.daemon.refresh_rate_minutes * 60.0


def _env_bool(value: Optional[str], default: bool) -> bool:
    if value is None or value == '':
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class ConfigManager:
    """Manages daemon configuration with validation and environment loading."""

    def __init__(self, env_file_path: str = ".env", environ: Optional[Dict[str, str]] = None):
        """
        Initialize configuration manager.

        Args:
            env_file_path: Path to .env file relative to project root
            environ: Mapping to read variables from (defaults to os.environ)
        """
        self._config: Optional[Config] = None
        self._env_file_path = env_file_path
        self._environ = environ if environ is not None else os.environ
        if environ is None:
            self._load_environment()

    def _load_environment(self) -> None:
        """Load environment variables from .env file."""
        project_root = Path(__file__).resolve().parents[3]
        env_path = project_root / self._env_file_path

        if env_path.exists():
            self._load_env_file(env_path)
        else:
            logger.debug(f"No .env file found at {env_path}")

    def _load_env_file(self, env_path: Path) -> None:
        """Load YTFD_* variables from .env file."""
        try:
            with open(env_path, 'r', encoding='utf-8') as f:
                lines = f.readlines()
        except OSError as e:
            logger.error(f"Error loading .env file {env_path}: {e}")
            return

        loaded_count = 0
        for line_num, line in enumerate(lines, 1):
            line = line.strip()

            if not line or line.startswith('#'):
                continue

            if '=' not in line:
                logger.warning(f"Invalid .env format at line {line_num}: {line}")
                continue

            key, value = line.split('=', 1)
            key = key.strip()
            value = value.strip().strip('"').strip("'")

            # Real environment takes precedence
            if key not in self._environ:
                self._environ[key] = value
                loaded_count += 1

        logger.debug(f"Loaded {loaded_count} variables from {env_path}")

    def get_config(self, overrides: Optional[Dict[str, Any]] = None, force_reload: bool = False) -> Config:
        """
        Get daemon configuration.

        Args:
            overrides: DaemonConfig field values taken from the command line;
                None values are ignored
            force_reload: Force rebuilding configuration from environment

        Returns:
            Complete configuration object

        Raises:
            ValueError: If validation fails
        """
        if self._config is None or force_reload or overrides:
            self._config = self._build_config(overrides or {})
        return self._config

    def _build_config(self, overrides: Dict[str, Any]) -> Config:
        """Build configuration from environment variables and overrides."""
        env = self._environ

        daemon_config = DaemonConfig(
            notify=_env_bool(env.get('YTFD_NOTIFY'), True),
            subs_file=env.get('YTFD_SUBS_FILE') or None,
            refresh_rate_minutes=int(env.get('YTFD_REFRESH_RATE', '15')),
            socket_dir=env.get('YTFD_SOCKET_DIR', '/tmp'),
            debug=_env_bool(env.get('YTFD_DEBUG'), False),
            log_file=env.get('YTFD_LOG_FILE', '/tmp/ytfd.log'),
            log_level=env.get('YTFD_LOG_LEVEL', 'INFO').upper(),
        )
        for name, value in overrides.items():
            if value is None:
                continue
            if not hasattr(daemon_config, name):
                raise ValueError(f"Unknown configuration override: {name}")
            setattr(daemon_config, name, value)

        network_config = NetworkConfig(
            http_timeout=int(env.get('YTFD_HTTP_TIMEOUT', '10')),
            user_agent=env.get('YTFD_USER_AGENT', NetworkConfig.user_agent),
        )

        config = Config(daemon=daemon_config, network=network_config)
        self._validate_config(config)
        return config

    def _validate_config(self, config: Config) -> None:
        """Validate configuration values."""
        errors: List[str] = []

        if config.daemon.refresh_rate_minutes < 1:
            errors.append("YTFD_REFRESH_RATE must be at least 1 minute")

        if config.network.http_timeout < 1:
            errors.append("YTFD_HTTP_TIMEOUT must be at least 1 second")

        if config.daemon.log_level not in VALID_LOG_LEVELS:
            errors.append(f"YTFD_LOG_LEVEL must be one of: {', '.join(VALID_LOG_LEVELS)}")

        if not config.daemon.socket_dir:
            errors.append("YTFD_SOCKET_DIR must not be empty")

        if errors:
            raise ValueError(f"Configuration validation failed: {'; '.join(errors)}")

        logger.debug("Configuration validation passed")


# Global configuration manager instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager() -> ConfigManager:
    """Get global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def reset_config() -> None:
    """Reset configuration manager (useful for testing)."""
    global _config_manager
    _config_manager = None

"""
Configuration management for urlhash.
"""

import hashlib
import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


class ConfigError(ValueError):
    """Invalid or unreadable configuration."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


@dataclass
class FetcherConfig:
    """Configuration for fetching and hashing."""
    max_workers: int = 10
    request_timeout: float = 30
    max_body_size: int = 10 * 1024
    user_agent: str = "urlhash/1.0"
    hash_algorithm: str = "md5"


@dataclass
class LoggingConfig:
    """Configuration for logging."""
    level: str = "WARNING"
    file: Optional[str] = None
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    json: bool = False


@dataclass
class MonitoringConfig:
    """Configuration for monitoring."""
    metrics_enabled: bool = False
    prometheus_port: int = 8000


@dataclass
class Config:
    """Main configuration class."""
    fetcher: FetcherConfig = field(default_factory=FetcherConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    monitoring: MonitoringConfig = field(default_factory=MonitoringConfig)


def _build_section(section_cls, data: Optional[Dict[str, Any]], name: str):
    if data is None:
        return section_cls()
    if not isinstance(data, dict):
        raise ConfigError(f"Section '{name}' must be a mapping")

    known = {f.name for f in fields(section_cls)}
    unknown = sorted(str(key) for key in set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown keys in section '{name}': {', '.join(unknown)}")
    return section_cls(**data)


class ConfigManager:
    """Manages configuration loading and validation."""

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = Path(config_path) if config_path else None
        self._config: Optional[Config] = None

    def load_config(self) -> Config:
        """Load configuration from the YAML file, or defaults when no file is set."""
        if self.config_path is None:
            self._config = Config()
        else:
            self._config = self._load_file(self.config_path)

        self._validate_config()
        return self._config

    def _load_file(self, path: Path) -> Config:
        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}", str(path))

        try:
            with open(path, 'r') as file:
                config_data = yaml.safe_load(file) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in configuration file: {e}", str(path)) from e

        if not isinstance(config_data, dict):
            raise ConfigError("Configuration root must be a mapping", str(path))

        unknown = sorted(str(key) for key in set(config_data) - {'fetcher', 'logging', 'monitoring'})
        if unknown:
            raise ConfigError(f"Unknown configuration sections: {', '.join(unknown)}", str(path))

        return Config(
            fetcher=_build_section(FetcherConfig, config_data.get('fetcher'), 'fetcher'),
            logging=_build_section(LoggingConfig, config_data.get('logging'), 'logging'),
            monitoring=_build_section(MonitoringConfig, config_data.get('monitoring'), 'monitoring'),
        )

    def _validate_config(self):
        """Validate configuration values."""
        if not self._config:
            raise ConfigError("Configuration not loaded")

        fetcher = self._config.fetcher
        if isinstance(fetcher.max_workers, bool) or not isinstance(fetcher.max_workers, int) \
                or fetcher.max_workers < 1:
            raise ConfigError("max_workers must be at least 1")

        if not isinstance(fetcher.request_timeout, (int, float)) or fetcher.request_timeout <= 0:
            raise ConfigError("request_timeout must be positive")

        if not isinstance(fetcher.max_body_size, int) or fetcher.max_body_size < 0:
            raise ConfigError("max_body_size must be non-negative")

        if (fetcher.hash_algorithm not in hashlib.algorithms_available
                or hashlib.new(fetcher.hash_algorithm).digest_size == 0):
            raise ConfigError(f"Unsupported hash algorithm: {fetcher.hash_algorithm}")

        if str(self._config.logging.level).upper() not in LOG_LEVELS:
            raise ConfigError(f"Unknown log level: {self._config.logging.level}")

        try:
            logging.Formatter(self._config.logging.format)
        except (ValueError, TypeError) as e:
            raise ConfigError(f"Invalid log format: {e}") from e

        port = self._config.monitoring.prometheus_port
        if isinstance(port, bool) or not isinstance(port, int) or not 1 <= port <= 65535:
            raise ConfigError("prometheus_port must be between 1 and 65535")

        logging.getLogger(__name__).debug("Configuration validation passed")

    @property
    def config(self) -> Config:
        """Get the loaded configuration."""
        if not self._config:
            raise ConfigError("Configuration not loaded. Call load_config() first.")
        return self._config


def load_config(config_path: Optional[str] = None) -> Config:
    """Load configuration from file, falling back to defaults when no path is given."""
    manager = ConfigManager(config_path)
    manager.load_config()
    return manager.config

"""Configuration loading for the course catalog service."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

ENV_PREFIX = "COURSECATALOG_"


class ConfigError(Exception):
    """Raised when configuration is invalid."""


def _int_setting(env: Mapping[str, str], name: str, default: int, minimum: int = 1) -> int:
    raw = env.get(f"{ENV_PREFIX}{name}")
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from None
    if value < minimum:
        raise ConfigError(f"{ENV_PREFIX}{name} must be >= {minimum}, got {value}")
    return value


@dataclass
class Settings:
    """Service settings.

    Attributes:
        db_path: SQLite database file, or ":memory:".
        host: Interface the HTTP server binds to.
        port: Port the HTTP server listens on.
        default_page_size: Search page size when the request gives none.
        max_page_size: Largest search page size accepted.
        log_dir: Directory for rotating log files.
        log_level: Root log level name.
    """

    db_path: str = "coursecatalog.db"
    host: str = "127.0.0.1"
    port: int = 8000
    default_page_size: int = 20
    max_page_size: int = 100
    log_dir: str = "logs"
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.default_page_size > self.max_page_size:
            raise ConfigError(
                f"default_page_size ({self.default_page_size}) exceeds "
                f"max_page_size ({self.max_page_size})"
            )

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> Settings:
        """Build settings from COURSECATALOG_* environment variables.

        Args:
            env: Mapping to read instead of os.environ.

        Raises:
            ConfigError: If a value is malformed.
        """
        if env is None:
            env = os.environ
        defaults = cls()
        return cls(
            db_path=env.get(f"{ENV_PREFIX}DB_PATH", defaults.db_path),
            host=env.get(f"{ENV_PREFIX}HOST", defaults.host),
            port=_int_setting(env, "PORT", defaults.port),
            default_page_size=_int_setting(env, "DEFAULT_PAGE_SIZE", defaults.default_page_size),
            max_page_size=_int_setting(env, "MAX_PAGE_SIZE", defaults.max_page_size),
            log_dir=env.get(f"{ENV_PREFIX}LOG_DIR", defaults.log_dir),
            log_level=env.get(f"{ENV_PREFIX}LOG_LEVEL", defaults.log_level),
        )

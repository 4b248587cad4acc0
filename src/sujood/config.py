"""Configuration management."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Self


def _get_default_settings_path() -> Path:
    """Get default settings path."""
    return Path.home() / ".config" / "sujood" / "settings.json"


def _get_default_cache_path() -> Path:
    """Get default cache database path."""
    return Path.home() / ".local" / "share" / "sujood" / "cache.db"


@dataclass
class AppConfig:
    """Application configuration."""

    # Server settings
    host: str = "127.0.0.1"
    port: int = 8080
    log_level: str = "INFO"

    # File paths
    settings_path: Path = field(default_factory=_get_default_settings_path)
    cache_path: Path = field(default_factory=_get_default_cache_path)

    # Cache policy
    cache_retention_days: int = 90
    cache_days_ahead: int = 7

    @classmethod
    def from_env(cls) -> Self:
        """Load configuration from environment variables."""
        return cls(
            host=os.getenv("SUJOOD_HOST", "127.0.0.1"),
            port=int(os.getenv("SUJOOD_PORT", "8080")),
            log_level=os.getenv("SUJOOD_LOG_LEVEL", "INFO"),
            settings_path=Path(
                os.getenv("SUJOOD_SETTINGS_PATH", str(_get_default_settings_path()))
            ),
            cache_path=Path(os.getenv("SUJOOD_CACHE_PATH", str(_get_default_cache_path()))),
            cache_retention_days=int(os.getenv("SUJOOD_CACHE_RETENTION_DAYS", "90")),
            cache_days_ahead=int(os.getenv("SUJOOD_CACHE_DAYS_AHEAD", "7")),
        )


_config: AppConfig | None = None


def get_config() -> AppConfig:
    """Get application configuration."""
    global _config
    if _config is None:
        _config = AppConfig.from_env()
    return _config


def setup_logging(level: str = "INFO") -> None:
    """Setup application logging."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

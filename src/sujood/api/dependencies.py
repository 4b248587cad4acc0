"""Application state and dependencies."""

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from sujood.domain.settings import SalahSettings
from sujood.infrastructure.cache_repository import SqlitePrayerTimeCache
from sujood.infrastructure.event_bus import InMemoryEventBus
from sujood.infrastructure.settings_repository import JsonSettingsRepository
from sujood.services.prayer_service import PrayerService

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    """Application state container."""

    settings: SalahSettings
    settings_repository: JsonSettingsRepository
    cache: SqlitePrayerTimeCache
    prayer_service: PrayerService
    event_bus: InMemoryEventBus
    started_at: datetime
    retention_days: int = 90


# Global application state (singleton)
_app_state: AppState | None = None


async def initialize_app_state(
    settings_path: Path | None = None,
    cache_path: Path | None = None,
    *,
    retention_days: int = 90,
    days_ahead: int = 7,
) -> AppState:
    """
    Initialize application state.

    Args:
        settings_path: Settings file path
        cache_path: Cache database path
        retention_days: Cached days kept behind today
        days_ahead: Days computed ahead of today at startup

    Returns:
        Initialized AppState
    """
    global _app_state

    if _app_state is not None:
        return _app_state

    settings_repo = JsonSettingsRepository(settings_path)
    settings = await settings_repo.load()

    event_bus = InMemoryEventBus()
    cache = SqlitePrayerTimeCache(cache_path)

    prayer_service = PrayerService(settings, cache=cache, event_bus=event_bus)
    prayer_service.sync_cache_fingerprint()
    prayer_service.prune_cache(retention_days=retention_days)
    available = prayer_service.ensure_cached(days_ahead=days_ahead)
    logger.info(f"{available} days of prayer times available")

    _app_state = AppState(
        settings=settings,
        settings_repository=settings_repo,
        cache=cache,
        prayer_service=prayer_service,
        event_bus=event_bus,
        started_at=datetime.now(),
        retention_days=retention_days,
    )

    return _app_state


def get_app_state() -> AppState:
    """Get current application state."""
    if _app_state is None:
        raise RuntimeError("Application state not initialized")
    return _app_state


async def shutdown_app_state() -> None:
    """Shutdown application state."""
    global _app_state

    if _app_state is not None:
        _app_state.event_bus.clear_all()
        _app_state.cache.close()
        _app_state = None

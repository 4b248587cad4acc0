"""Infrastructure layer - Adapters and implementations."""

from sujood.infrastructure.cache_repository import SqlitePrayerTimeCache
from sujood.infrastructure.event_bus import InMemoryEventBus
from sujood.infrastructure.settings_repository import JsonSettingsRepository

__all__ = [
    "InMemoryEventBus",
    "JsonSettingsRepository",
    "SqlitePrayerTimeCache",
]

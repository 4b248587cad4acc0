"""Service layer - Business logic."""

from sujood.services.calculator import compute
from sujood.services.hijri import from_hijri, to_hijri
from sujood.services.ports import (
    EventBusPort,
    PrayerTimeCachePort,
    PrayerTimeCalculatorPort,
    SettingsRepositoryPort,
)
from sujood.services.prayer_service import PrayerService
from sujood.services.resolver import resolve
from sujood.services.timezone import suggest_utc_offset

__all__ = [
    "EventBusPort",
    "PrayerService",
    "PrayerTimeCachePort",
    "PrayerTimeCalculatorPort",
    "SettingsRepositoryPort",
    "compute",
    "from_hijri",
    "resolve",
    "suggest_utc_offset",
    "to_hijri",
]

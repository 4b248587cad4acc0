"""Prayer time service: cache-backed calculation and derived views."""

import logging
from datetime import date, datetime, timedelta, tzinfo

from sujood.domain.errors import InvalidInput, UnreachableSolarEvent
from sujood.domain.events import (
    CacheInvalidatedEvent,
    DomainEvent,
    PrayerMissedEvent,
    SettingsChangedEvent,
)
from sujood.domain.methods import CalculationMethodParams
from sujood.domain.models import HijriDate, Location, NextPrayer, PrayerName, PrayerTimes, UtcOffset
from sujood.domain.settings import TIME_AFFECTING_FIELDS, CacheKey, SalahSettings
from sujood.services import calculator, hijri, resolver
from sujood.services.ports import EventBusPort, PrayerTimeCachePort, PrayerTimeCalculatorPort

logger = logging.getLogger(__name__)


class PrayerService(PrayerTimeCalculatorPort):
    """Prayer time calculation service."""

    def __init__(
        self,
        settings: SalahSettings,
        *,
        cache: PrayerTimeCachePort | None = None,
        event_bus: EventBusPort | None = None,
    ) -> None:
        """
        Initialize prayer service.

        Args:
            settings: Location, method, madhab and offsets
            cache: Persistent cache (optional)
            event_bus: Event bus (optional)
        """
        self._params = settings.calculation_params()
        self._settings = settings
        self._cache = cache
        self._event_bus = event_bus

    @property
    def settings(self) -> SalahSettings:
        """Current settings."""
        return self._settings

    @property
    def params(self) -> CalculationMethodParams:
        """Resolved method parameters."""
        return self._params

    @property
    def location(self) -> Location:
        """Observer location."""
        return self._settings.location

    @property
    def utc_offset(self) -> UtcOffset:
        """Local clock offset."""
        return self._settings.utc_offset

    @property
    def timezone(self) -> tzinfo:
        """Fixed-offset timezone of the local clock."""
        return self._settings.utc_offset.tzinfo

    def _publish(self, event: DomainEvent) -> None:
        if self._event_bus is not None:
            self._event_bus.publish(event)

    def _local(self, now: datetime | None) -> datetime:
        """``now`` as an aware datetime on the local clock."""
        if now is None:
            return datetime.now(self.timezone)
        if now.tzinfo is None:
            return now.replace(tzinfo=self.timezone)
        return now.astimezone(self.timezone)

    def sync_cache_fingerprint(self) -> bool:
        """
        Claim the cache for the current settings.

        Call this only for persisted settings: rows written by another process
        under other persisted settings are dropped. One-off overrides should
        not call it, since cache keys already separate their rows.
        Returns True when the cache had been written under other settings.
        """
        if self._cache is None:
            return False
        return self._cache.ensure_fingerprint(self._settings.fingerprint())

    def calculate(self, target_date: date) -> PrayerTimes:
        """Prayer times for the given date, from the cache when possible."""
        key = CacheKey.for_settings(self._settings, target_date) if self._cache is not None else None
        if key is not None:
            cached = self._cache.get(key)
            if cached is not None:
                return cached

        times = calculator.compute(
            target_date,
            self._settings.location,
            self._params,
            self._settings.madhab,
            self._settings.utc_offset,
        )
        if key is not None:
            self._cache.put(key, times)
        return times

    def calculate_range(self, start_date: date, days: int) -> list[PrayerTimes]:
        """Prayer times for ``days`` consecutive days."""
        return [self.calculate(start_date + timedelta(days=i)) for i in range(days)]

    def ensure_cached(self, today: date | None = None, days_ahead: int = 7) -> int:
        """
        Warm the cache from today through ``days_ahead`` days.

        Days with an unreachable boundary are skipped with a warning; asking
        for such a day through ``calculate`` still raises.
        Returns the number of days available afterwards.
        """
        today = today or self._local(None).date()
        available = 0
        for i in range(days_ahead + 1):
            day = today + timedelta(days=i)
            try:
                self.calculate(day)
            except UnreachableSolarEvent as e:
                logger.warning(f"Skipping {day}: {e}")
                continue
            available += 1
        return available

    def hijri_date(self, target_date: date | None = None) -> HijriDate:
        """Hijri date, honouring the configured sighting offset."""
        target_date = target_date or self._local(None).date()
        return hijri.to_hijri(target_date, self._settings.hijri_mode)

    def get_next_prayer(self, now: datetime | None = None) -> NextPrayer:
        """Current and next prayer with the countdown."""
        now = self._local(now)
        today_times = self.calculate(now.date())

        tomorrow_times = None
        if now >= today_times.isha:
            tomorrow_times = self.calculate(now.date() + timedelta(days=1))
        return resolver.resolve(now, today_times, tomorrow_times)

    def get_current_prayer(self, now: datetime | None = None) -> PrayerName:
        """The boundary most recently passed."""
        return self.get_next_prayer(now).current_prayer

    def get_time_until_next_prayer(self, now: datetime | None = None) -> timedelta:
        """Countdown to the next boundary."""
        return self.get_next_prayer(now).countdown

    def apply_settings(self, settings: SalahSettings) -> tuple[str, ...]:
        """
        Replace settings.

        Any change to a field that affects computed times drops the whole
        cache before the new settings take effect. Returns the changed fields.
        """
        params = settings.calculation_params()
        changed = settings.changed_fields(self._settings)
        if not changed:
            return changed

        invalidate = any(name in TIME_AFFECTING_FIELDS for name in changed)
        if invalidate and self._cache is not None:
            removed = self._cache.invalidate_all()
            self._publish(CacheInvalidatedEvent(reason="settings changed", removed=removed))

        self._settings = settings
        self._params = params
        if self._cache is not None:
            self._cache.ensure_fingerprint(settings.fingerprint())

        logger.info(f"Settings updated: {', '.join(changed)}")
        self._publish(SettingsChangedEvent(changed_fields=changed, cache_invalidated=invalidate))
        return changed

    def mark_missed(self, prayer: PrayerName, on: date) -> PrayerMissedEvent:
        """Publish a missed-prayer event carrying the prayer's window."""
        if not prayer.is_salah:
            raise InvalidInput("Sunrise is not a prayer")
        times = self.calculate(on)
        tomorrow = self.calculate(on + timedelta(days=1)) if prayer is PrayerName.ISHA else None
        start, end = times.window(prayer, tomorrow)

        event = PrayerMissedEvent(prayer=prayer, date=on, window_start=start, window_end=end)
        logger.info(f"{prayer.display_name} on {on} marked missed")
        self._publish(event)
        return event

    def prune_cache(self, today: date | None = None, retention_days: int = 90) -> int:
        """Drop cached days older than the retention horizon."""
        if self._cache is None:
            return 0
        today = today or self._local(None).date()
        removed = self._cache.prune_older_than(today - timedelta(days=retention_days))
        if removed:
            self._publish(CacheInvalidatedEvent(reason="retention", removed=removed))
        return removed

"""Service layer interfaces (ports)."""

from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import date

from sujood.domain.events import DomainEvent
from sujood.domain.models import Location, PrayerTimes
from sujood.domain.settings import CacheKey, SalahSettings


class PrayerTimeCalculatorPort(ABC):
    """Prayer time calculation interface (port)."""

    @abstractmethod
    def calculate(self, target_date: date) -> PrayerTimes:
        """Prayer times for the given date."""

    @abstractmethod
    def calculate_range(self, start_date: date, days: int) -> list[PrayerTimes]:
        """Prayer times for ``days`` consecutive days."""


class PrayerTimeCachePort(ABC):
    """Computed prayer times store (port)."""

    @abstractmethod
    def get(self, key: CacheKey) -> PrayerTimes | None:
        """Cached times, or None on a miss."""

    @abstractmethod
    def put(self, key: CacheKey, times: PrayerTimes) -> None:
        """Store times under the key."""

    @abstractmethod
    def invalidate_all(self) -> int:
        """Drop every entry. Returns the number removed."""

    @abstractmethod
    def invalidate_location(self, location: Location) -> int:
        """Drop every entry for a location. Returns the number removed."""

    @abstractmethod
    def prune_older_than(self, cutoff: date) -> int:
        """Drop entries dated before ``cutoff``. Returns the number removed."""

    @abstractmethod
    def ensure_fingerprint(self, fingerprint: str) -> bool:
        """Adopt a first fingerprint; invalidate everything if a stored one differs. True if invalidated."""


class SettingsRepositoryPort(ABC):
    """Settings store interface (port)."""

    @abstractmethod
    async def load(self) -> SalahSettings:
        """Load settings."""

    @abstractmethod
    async def save(self, settings: SalahSettings) -> None:
        """Save settings."""


class EventBusPort(ABC):
    """Event bus interface (port)."""

    @abstractmethod
    def publish(self, event: DomainEvent) -> None:
        """Publish an event."""

    @abstractmethod
    def subscribe(
        self,
        event_type: type[DomainEvent],
        handler: Callable[[DomainEvent], None],
    ) -> None:
        """Subscribe to an event type."""

"""Domain events for event-driven architecture."""

from dataclasses import dataclass, field
from datetime import date, datetime
from uuid import UUID, uuid4

from sujood.domain.models import PrayerName


@dataclass(frozen=True, kw_only=True)
class DomainEvent:
    """Base class for domain events."""

    event_id: UUID = field(default_factory=uuid4)
    occurred_at: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True, kw_only=True)
class SettingsChangedEvent(DomainEvent):
    """Settings were replaced."""

    changed_fields: tuple[str, ...]
    cache_invalidated: bool


@dataclass(frozen=True, kw_only=True)
class CacheInvalidatedEvent(DomainEvent):
    """Cached days were dropped."""

    reason: str
    removed: int


@dataclass(frozen=True, kw_only=True)
class PrayerMissedEvent(DomainEvent):
    """A prayer's window passed without it being performed."""

    prayer: PrayerName
    date: date
    window_start: datetime
    window_end: datetime

"""Domain errors."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sujood.domain.models import PrayerName, PrayerTimes


class SujoodError(Exception):
    """Base class for all errors raised by the engine."""


class InvalidInput(SujoodError, ValueError):
    """Input rejected at the boundary, before any computation."""


class InvalidLocation(InvalidInput):
    """Latitude, longitude or elevation out of range."""


class UnknownMethod(InvalidInput):
    """Unrecognized calculation method name."""

    def __init__(self, name: str) -> None:
        """Initialize with the offending name."""
        super().__init__(f"Unknown calculation method: {name!r}")
        self.name = name


class UnknownMadhab(InvalidInput):
    """Unrecognized madhab name."""

    def __init__(self, name: str) -> None:
        """Initialize with the offending name."""
        super().__init__(f"Unknown madhab: {name!r}")
        self.name = name


class InvalidOffset(InvalidInput):
    """Unparseable or out-of-range UTC offset."""


class InvalidMethodParameters(InvalidInput):
    """Caller supplied angles or intervals outside the plausible range."""


class CalculationError(SujoodError):
    """A computation could not produce a valid result."""


class UnreachableSolarEvent(CalculationError):
    """The sun never reaches the angle a boundary requires on this day."""

    def __init__(self, prayer: PrayerName, on: date, latitude: float) -> None:
        """Initialize with the failing boundary, date and latitude."""
        super().__init__(
            f"{prayer.display_name} cannot be computed on {on.isoformat()} "
            f"at latitude {latitude:.4f}: the sun does not reach the required angle"
        )
        self.prayer = prayer
        self.date = on
        self.latitude = latitude


class OrderingViolation(CalculationError):
    """Computed boundaries are not strictly increasing."""

    def __init__(self, times: PrayerTimes) -> None:
        """Initialize with the offending result."""
        super().__init__(f"Prayer times out of order for {times.date.isoformat()}: {times.to_dict()}")
        self.times = times


class MissingTomorrowTimes(SujoodError):
    """Next prayer falls on the following day but its times were not supplied."""


class CacheCorrupted(SujoodError):
    """A cache row could not be decoded."""

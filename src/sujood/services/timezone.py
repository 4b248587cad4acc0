"""Offline UTC offset suggestion for a coordinate."""

import logging
from datetime import date, datetime, time
from functools import lru_cache
from zoneinfo import ZoneInfo

from timezonefinder import TimezoneFinder

from sujood.domain.models import Location, UtcOffset

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _finder() -> TimezoneFinder:
    """TimezoneFinder loads its polygon data once per process."""
    return TimezoneFinder()


def timezone_name(location: Location) -> str:
    """IANA zone at the coordinate, "UTC" when none is found (e.g. open sea)."""
    name = _finder().timezone_at(lat=location.latitude, lng=location.longitude)
    if name is None:
        logger.warning(f"No timezone found for {location.latitude}, {location.longitude}; using UTC")
        return "UTC"
    return name


def suggest_utc_offset(location: Location, on: date | None = None) -> UtcOffset:
    """UTC offset in effect at the coordinate on the given day (noon, local)."""
    tz = ZoneInfo(timezone_name(location))
    on = on or date.today()
    offset = datetime.combine(on, time(12, 0), tzinfo=tz).utcoffset()
    if offset is None:
        return UtcOffset(0)
    return UtcOffset.from_timedelta(offset)

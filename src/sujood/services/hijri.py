"""Gregorian <-> Hijri conversion.

Uses the 30-year tabular (Kuwaiti) arithmetic on Julian day numbers, so no
location or network lookup is involved. A local sighting offset shifts the
result by whole days.
"""

from datetime import date, timedelta

from sujood.domain.errors import InvalidInput
from sujood.domain.models import HijriDate, HijriOffsetMode

# Julian day number of 1 Muharram 1 AH minus one.
HIJRI_EPOCH = 1948439
# date.toordinal() + this = Julian day number
_ORDINAL_TO_JDN = 1721425


def is_leap_year(year: int) -> bool:
    """Leap years have 355 days, with a 30-day Dhu al-Hijjah."""
    return (11 * year + 14) % 30 < 11


def month_length(year: int, month: int) -> int:
    """Days in a tabular Hijri month."""
    if not 1 <= month <= 12:
        raise InvalidInput(f"Invalid Hijri month: {month}")
    if month == 12 and is_leap_year(year):
        return 30
    return 30 if month % 2 == 1 else 29


def _to_jdn(hijri: HijriDate) -> int:
    return (
        hijri.day
        + (59 * (hijri.month - 1) + 1) // 2
        + (hijri.year - 1) * 354
        + (3 + 11 * hijri.year) // 30
        + HIJRI_EPOCH
    )


def _from_jdn(jdn: int) -> HijriDate:
    l_val = jdn - 1948440 + 10632
    n = (l_val - 1) // 10631
    l2 = l_val - 10631 * n + 354
    j = ((10985 - l2) // 5316) * ((50 * l2) // 17719) + (l2 // 5670) * ((43 * l2) // 15238)
    l3 = l2 - ((30 - j) // 15) * ((17719 * j) // 50) - (j // 16) * ((15238 * j) // 43) + 29
    month = (24 * l3) // 709
    day = l3 - (709 * month) // 24
    year = 30 * n + j - 30
    return HijriDate(year=year, month=month, day=day)


def to_hijri(calendar_date: date, mode: HijriOffsetMode | None = None) -> HijriDate:
    """
    Convert a Gregorian date.

    Args:
        calendar_date: Gregorian date
        mode: Astronomical by default; a local sighting mode shifts the day count
    """
    offset = mode.offset_days if mode is not None else 0
    return _from_jdn(calendar_date.toordinal() + _ORDINAL_TO_JDN + offset)


def from_hijri(hijri: HijriDate) -> date:
    """Gregorian date of a tabular Hijri date."""
    if hijri.day > month_length(hijri.year, hijri.month):
        raise InvalidInput(f"{hijri.month_name} {hijri.year} has no day {hijri.day}")
    return date.fromordinal(_to_jdn(hijri) - _ORDINAL_TO_JDN)


def add_days(hijri: HijriDate, days: int) -> HijriDate:
    """Shift a Hijri date, rolling over month and year boundaries."""
    return _from_jdn(_to_jdn(hijri) + days)


def hijri_range(start: date, days: int, mode: HijriOffsetMode | None = None) -> list[HijriDate]:
    """Hijri dates for ``days`` consecutive Gregorian days."""
    return [to_hijri(start + timedelta(days=i), mode) for i in range(days)]

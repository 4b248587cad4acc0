"""Tests for Gregorian <-> Hijri conversion."""

from datetime import date, timedelta

import pytest

from sujood.domain.errors import InvalidInput
from sujood.domain.models import HijriDate, HijriOffsetMode
from sujood.services.hijri import (
    add_days,
    from_hijri,
    hijri_range,
    is_leap_year,
    month_length,
    to_hijri,
)


class TestToHijri:
    """Gregorian to Hijri."""

    def test_ramadan_1445(self) -> None:
        """15 March 2024 is 5 Ramadan 1445."""
        hijri = to_hijri(date(2024, 3, 15))
        assert hijri == HijriDate(1445, 9, 5)
        assert hijri.formatted() == "5 Ramadan 1445"

    def test_first_of_ramadan(self) -> None:
        """11 March 2024 opens Ramadan in the tabular calendar."""
        assert to_hijri(date(2024, 3, 11)) == HijriDate(1445, 9, 1)

    def test_epoch(self) -> None:
        """1 Muharram 1 AH is 19 July 622 (proleptic Gregorian)."""
        assert to_hijri(date(622, 7, 19)) == HijriDate(1, 1, 1)

    def test_year_boundary(self) -> None:
        """1445 is a leap year, so Dhu al-Hijjah has 30 days."""
        assert to_hijri(date(2024, 7, 7)) == HijriDate(1445, 12, 30)
        assert to_hijri(date(2024, 7, 8)) == HijriDate(1446, 1, 1)

    def test_consecutive_days_advance_by_one(self) -> None:
        """Each Gregorian day is exactly one Hijri day after the previous."""
        day = date(2023, 1, 1)
        previous = to_hijri(day)
        for _ in range(800):
            day += timedelta(days=1)
            current = to_hijri(day)
            if current.day == 1:
                assert previous.day == month_length(previous.year, previous.month)
                expected_month = previous.month % 12 + 1
                assert current.month == expected_month
                assert current.year == previous.year + (1 if expected_month == 1 else 0)
            else:
                assert (current.year, current.month, current.day) == (
                    previous.year,
                    previous.month,
                    previous.day + 1,
                )
            previous = current


class TestOffsetModes:
    """Local sighting corrections."""

    def test_astronomical_is_default(self) -> None:
        """No mode and the astronomical mode agree."""
        day = date(2024, 3, 15)
        assert to_hijri(day, HijriOffsetMode.astronomical()) == to_hijri(day)

    def test_local_sighting_minus_one(self) -> None:
        """Sighting a day late keeps Sha'ban one day longer."""
        assert to_hijri(date(2024, 3, 11), HijriOffsetMode.local_sighting(-1)) == HijriDate(1445, 8, 29)

    def test_local_sighting_shifts_by_whole_days(self) -> None:
        """Astronomical on a day equals a -1 sighting on the following day."""
        day = date(2024, 3, 15)
        late = HijriOffsetMode.local_sighting(-1)
        assert to_hijri(day + timedelta(days=1), late) == to_hijri(day)
        assert to_hijri(day, HijriOffsetMode.local_sighting(2)) == to_hijri(day + timedelta(days=2))


class TestFromHijri:
    """Hijri to Gregorian."""

    def test_new_year_1446(self) -> None:
        """1 Muharram 1446."""
        assert from_hijri(HijriDate(1446, 1, 1)) == date(2024, 7, 8)

    def test_inverse_of_to_hijri(self) -> None:
        """Conversion is exact in both directions."""
        day = date(2024, 3, 15)
        assert from_hijri(to_hijri(day)) == day

    def test_day_thirty_of_short_month(self) -> None:
        """Even months have 29 days."""
        with pytest.raises(InvalidInput):
            from_hijri(HijriDate(1445, 8, 30))


class TestCalendarArithmetic:
    """Month lengths and day arithmetic."""

    def test_leap_years_in_cycle(self) -> None:
        """Eleven leap years in each thirty-year cycle."""
        assert sum(is_leap_year(year) for year in range(1, 31)) == 11
        assert is_leap_year(1445)
        assert not is_leap_year(1446)

    def test_month_lengths(self) -> None:
        """Odd months 30, even months 29, Dhu al-Hijjah 30 in leap years."""
        assert month_length(1446, 1) == 30
        assert month_length(1446, 2) == 29
        assert month_length(1446, 12) == 29
        assert month_length(1445, 12) == 30
        with pytest.raises(InvalidInput):
            month_length(1446, 13)

    def test_add_days_rolls_over(self) -> None:
        """Adding days crosses month and year boundaries."""
        assert add_days(HijriDate(1445, 8, 29), 1) == HijriDate(1445, 9, 1)
        assert add_days(HijriDate(1445, 12, 30), 1) == HijriDate(1446, 1, 1)
        assert add_days(HijriDate(1446, 1, 1), -1) == HijriDate(1445, 12, 30)

    def test_hijri_range(self) -> None:
        """Consecutive days."""
        days = hijri_range(date(2024, 3, 10), 3)
        assert days == [HijriDate(1445, 8, 29), HijriDate(1445, 9, 1), HijriDate(1445, 9, 2)]

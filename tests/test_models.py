"""Tests for domain models."""

import math
from datetime import date, datetime, timedelta, timezone

import pytest

from sujood.domain.errors import InvalidInput, InvalidLocation, InvalidOffset, UnknownMadhab
from sujood.domain.models import (
    HijriDate,
    HijriOffsetMode,
    Location,
    Madhab,
    NextPrayer,
    PrayerName,
    PrayerTimes,
    UtcOffset,
)
from sujood.domain.settings import CacheKey, SalahSettings


def _times(day: date, offset: UtcOffset, *clock: str) -> PrayerTimes:
    tz = offset.tzinfo
    instants = [
        datetime.combine(day, datetime.strptime(value, "%H:%M").time(), tzinfo=tz) for value in clock
    ]
    return PrayerTimes(day, offset, *instants)


class TestLocation:
    """Location model tests."""

    def test_valid_location(self) -> None:
        """Test valid location creation."""
        loc = Location(latitude=21.4225, longitude=39.8262, elevation=277, name="Mecca")
        assert loc.latitude == 21.4225
        assert loc.longitude == 39.8262
        assert loc.elevation == 277
        assert loc.name == "Mecca"

    @pytest.mark.parametrize(
        ("latitude", "longitude", "elevation"),
        [
            (91.0, 0.0, 0.0),
            (-90.5, 0.0, 0.0),
            (0.0, 180.1, 0.0),
            (math.nan, 0.0, 0.0),
            (0.0, math.inf, 0.0),
        ],
    )
    def test_invalid_location(self, latitude: float, longitude: float, elevation: float) -> None:
        """Out-of-range or non-finite values are rejected."""
        with pytest.raises(InvalidLocation):
            Location(latitude=latitude, longitude=longitude, elevation=elevation)

    def test_below_sea_level(self) -> None:
        """Places below sea level, e.g. the Dead Sea shore."""
        loc = Location(latitude=31.5, longitude=35.5, elevation=-430.0)
        assert loc.elevation == -430.0
        assert Location.from_dict(loc.to_dict()) == loc

    def test_poles_and_antimeridian_accepted(self) -> None:
        """Range limits are inclusive."""
        Location(latitude=90, longitude=-180)
        Location(latitude=-90, longitude=180)

    def test_invalid_location_is_value_error(self) -> None:
        """Validation errors are also ValueErrors."""
        with pytest.raises(ValueError):
            Location(latitude=100, longitude=0)

    def test_location_immutable(self) -> None:
        """Test location is immutable."""
        loc = Location(latitude=41.0, longitude=29.0)
        with pytest.raises(Exception):  # FrozenInstanceError
            loc.latitude = 42.0  # type: ignore

    def test_dict_roundtrip(self) -> None:
        """from_dict inverts to_dict."""
        loc = Location(latitude=33.6938, longitude=73.0651, elevation=540, name="Islamabad")
        assert Location.from_dict(loc.to_dict()) == loc


class TestPrayerName:
    """PrayerName enum tests."""

    def test_chronological_order(self) -> None:
        """Iteration follows the order of the day."""
        assert [p.value for p in PrayerName] == ["fajr", "sunrise", "zuhr", "asr", "maghrib", "isha"]

    def test_sunrise_is_not_salah(self) -> None:
        """Sunrise is a boundary, not a prayer."""
        assert not PrayerName.SUNRISE.is_salah
        assert all(p.is_salah for p in PrayerName if p is not PrayerName.SUNRISE)

    @pytest.mark.parametrize("name", ["Dhuhr", "zuhr", " ZUHR ", "duhr"])
    def test_zuhr_spellings(self, name: str) -> None:
        """Common transliterations of Zuhr are accepted."""
        assert PrayerName.from_name(name) is PrayerName.ZUHR

    def test_unknown_prayer(self) -> None:
        """Unknown names raise InvalidInput."""
        with pytest.raises(InvalidInput):
            PrayerName.from_name("tahajjud")


class TestMadhab:
    """Madhab tests."""

    def test_shadow_factor(self) -> None:
        """Hanafi doubles the shadow length."""
        assert Madhab.SHAFI.shadow_factor == 1
        assert Madhab.HANAFI.shadow_factor == 2

    def test_from_name(self) -> None:
        """Both spellings of Shafi'i parse."""
        assert Madhab.from_name("Shafi") is Madhab.SHAFI
        assert Madhab.from_name("Shafi'i") is Madhab.SHAFI
        assert Madhab.from_name("Hanafi") is Madhab.HANAFI

    def test_unknown_madhab(self) -> None:
        """Other schools are not supported for Asr."""
        with pytest.raises(UnknownMadhab) as exc_info:
            Madhab.from_name("Maliki")
        assert exc_info.value.name == "Maliki"


class TestUtcOffset:
    """UtcOffset tests."""

    @pytest.mark.parametrize(
        ("text", "minutes"),
        [
            ("+5:30", 330),
            ("5", 300),
            ("-3", -180),
            ("-03:00", -180),
            ("+5.5", 330),
            ("+5.75", 345),
            ("0", 0),
            ("+14", 840),
            ("-12", -720),
        ],
    )
    def test_parse(self, text: str, minutes: int) -> None:
        """Textual forms parse to minutes."""
        assert UtcOffset.parse(text).minutes == minutes

    @pytest.mark.parametrize("text", ["", "abc", "+5:60", "+15", "-13", "5:3:0"])
    def test_parse_invalid(self, text: str) -> None:
        """Garbage and out-of-range values raise InvalidOffset."""
        with pytest.raises(InvalidOffset):
            UtcOffset.parse(text)

    def test_range_limits(self) -> None:
        """Minutes must lie in [-720, 840]."""
        UtcOffset(-720)
        UtcOffset(840)
        with pytest.raises(InvalidOffset):
            UtcOffset(841)
        with pytest.raises(InvalidOffset):
            UtcOffset(-721)

    def test_str(self) -> None:
        """Compact display."""
        assert str(UtcOffset(330)) == "+5:30"
        assert str(UtcOffset(-180)) == "-3"
        assert str(UtcOffset(0)) == "+0"

    def test_tzinfo(self) -> None:
        """Fixed-offset tzinfo."""
        assert UtcOffset(330).tzinfo == timezone(timedelta(hours=5, minutes=30))
        assert UtcOffset.from_timedelta(timedelta(hours=-3)).minutes == -180


class TestPrayerTimes:
    """PrayerTimes tests."""

    @pytest.fixture
    def times(self) -> PrayerTimes:
        """A plausible day."""
        return _times(date(2024, 3, 15), UtcOffset(180), "05:13", "06:29", "12:30", "15:54", "18:30", "20:00")

    def test_is_ordered(self, times: PrayerTimes) -> None:
        """Strictly increasing boundaries."""
        assert times.is_ordered()

    def test_equal_boundaries_are_not_ordered(self) -> None:
        """Ties break the strict order."""
        times = _times(date(2024, 3, 15), UtcOffset(180), "05:13", "05:13", "12:30", "15:54", "18:30", "20:00")
        assert not times.is_ordered()

    def test_windows(self, times: PrayerTimes) -> None:
        """Each window ends at the following boundary."""
        assert times.window(PrayerName.FAJR) == (times.fajr, times.sunrise)
        assert times.window(PrayerName.ZUHR) == (times.zuhr, times.asr)
        assert times.window(PrayerName.MAGHRIB) == (times.maghrib, times.isha)

    def test_isha_window_needs_tomorrow(self, times: PrayerTimes) -> None:
        """Isha ends at the next day's Fajr."""
        with pytest.raises(InvalidInput):
            times.window(PrayerName.ISHA)
        tomorrow = _times(date(2024, 3, 16), UtcOffset(180), "05:12", "06:18", "12:30", "15:54", "18:31", "20:01")
        assert times.window(PrayerName.ISHA, tomorrow) == (times.isha, tomorrow.fajr)

    def test_sunrise_has_no_window(self, times: PrayerTimes) -> None:
        """Sunrise is not a prayer."""
        with pytest.raises(InvalidInput):
            times.window(PrayerName.SUNRISE)

    def test_dict_roundtrip(self, times: PrayerTimes) -> None:
        """Serialized form keeps the offset."""
        data = times.to_dict()
        assert data["utc_offset"] == 180
        assert data["fajr"] == "2024-03-15T05:13:00+03:00"
        assert PrayerTimes.from_dict(data) == times

    def test_time_str(self, times: PrayerTimes) -> None:
        """HH:MM display."""
        assert times.get_prayer_time(PrayerName.ASR).time_str == "15:54"
        assert [pt.name for pt in times.all_prayer_times()] == list(PrayerName)


class TestHijriDate:
    """HijriDate tests."""

    def test_formatted(self) -> None:
        """Day, month name and year."""
        assert HijriDate(1445, 9, 5).formatted() == "5 Ramadan 1445"
        assert HijriDate(1445, 12, 10).month_name == "Dhu al-Hijjah"

    @pytest.mark.parametrize(("year", "month", "day"), [(0, 1, 1), (1445, 13, 1), (1445, 1, 31), (1445, 1, 0)])
    def test_invalid(self, year: int, month: int, day: int) -> None:
        """Out-of-range fields are rejected."""
        with pytest.raises(InvalidInput):
            HijriDate(year, month, day)

    def test_ordering(self) -> None:
        """Dates compare chronologically."""
        assert HijriDate(1445, 8, 29) < HijriDate(1445, 9, 1) < HijriDate(1446, 1, 1)


class TestHijriOffsetMode:
    """HijriOffsetMode tests."""

    def test_astronomical(self) -> None:
        """Zero offset."""
        assert HijriOffsetMode.astronomical().is_astronomical

    def test_local_sighting_must_shift(self) -> None:
        """A sighting mode with zero days is meaningless."""
        assert HijriOffsetMode.local_sighting(-1).offset_days == -1
        with pytest.raises(InvalidInput):
            HijriOffsetMode.local_sighting(0)


class TestNextPrayer:
    """NextPrayer tests."""

    def test_to_dict(self) -> None:
        """Countdown is serialized in seconds."""
        at = datetime(2024, 3, 15, 12, 30, tzinfo=timezone(timedelta(hours=3)))
        result = NextPrayer(PrayerName.SUNRISE, PrayerName.ZUHR, at, timedelta(minutes=95))
        assert result.to_dict() == {
            "current_prayer": "sunrise",
            "next_prayer": "zuhr",
            "next_at": "2024-03-15T12:30:00+03:00",
            "countdown_seconds": 5700,
            "before_fajr": False,
        }


class TestSalahSettings:
    """SalahSettings tests."""

    def test_defaults(self) -> None:
        """Islamabad, MWL, Hanafi, +5:00."""
        settings = SalahSettings()
        assert settings.location.name == "Islamabad"
        assert settings.method.value == "MuslimWorldLeague"
        assert settings.madhab is Madhab.HANAFI
        assert settings.utc_offset.minutes == 300
        assert settings.hijri_mode.is_astronomical

    def test_dict_roundtrip(self, mecca_settings: SalahSettings) -> None:
        """from_dict inverts to_dict."""
        assert SalahSettings.from_dict(mecca_settings.to_dict()) == mecca_settings

    def test_from_dict_parses_offset_text(self) -> None:
        """Offsets may be stored as text."""
        settings = SalahSettings.from_dict({"utc_offset": "+5:30"})
        assert settings.utc_offset.minutes == 330

    def test_from_dict_custom_location_keeps_its_name(self) -> None:
        """Custom coordinates are not labelled with the default city."""
        settings = SalahSettings.from_dict({"location": {"latitude": 51.5, "longitude": -0.12}})
        assert settings.location.name == ""

    def test_changed_fields(self, mecca_settings: SalahSettings) -> None:
        """Only the differing fields are reported."""
        other = SalahSettings(
            location=mecca_settings.location,
            method=mecca_settings.method,
            madhab=Madhab.HANAFI,
            utc_offset=mecca_settings.utc_offset,
            hijri_offset=-1,
        )
        assert other.changed_fields(mecca_settings) == ("madhab", "hijri_offset")

    def test_fingerprint_ignores_hijri_offset(self, mecca_settings: SalahSettings) -> None:
        """Hijri offset does not affect computed times."""
        shifted = SalahSettings.from_dict({**mecca_settings.to_dict(), "hijri_offset": 1})
        assert shifted.fingerprint() == mecca_settings.fingerprint()

    def test_fingerprint_tracks_madhab(self, mecca_settings: SalahSettings) -> None:
        """Madhab changes Asr."""
        hanafi = SalahSettings.from_dict({**mecca_settings.to_dict(), "madhab": "Hanafi"})
        assert hanafi.fingerprint() != mecca_settings.fingerprint()


class TestCacheKey:
    """CacheKey tests."""

    def test_digest_depends_on_every_component(self, mecca_settings: SalahSettings) -> None:
        """Any component change changes the digest."""
        day = date(2024, 3, 15)
        base = CacheKey.for_settings(mecca_settings, day).digest
        assert CacheKey.for_settings(mecca_settings, day).digest == base
        assert CacheKey.for_settings(mecca_settings, day + timedelta(days=1)).digest != base

        hanafi = SalahSettings.from_dict({**mecca_settings.to_dict(), "madhab": "Hanafi"})
        assert CacheKey.for_settings(hanafi, day).digest != base

        shifted = SalahSettings.from_dict({**mecca_settings.to_dict(), "utc_offset": 240})
        assert CacheKey.for_settings(shifted, day).digest != base

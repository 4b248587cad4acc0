"""Domain models and value objects."""

import math
import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from enum import Enum
from typing import Self

from sujood.domain.errors import InvalidInput, InvalidLocation, InvalidOffset, UnknownMadhab

MIN_UTC_OFFSET = -720
MAX_UTC_OFFSET = 840

_OFFSET_PATTERN = re.compile(r"^([+-]?)(\d{1,2})(?::(\d{1,2})|\.(\d+))?$")


class PrayerName(str, Enum):
    """The six daily boundaries, in chronological order."""

    FAJR = "fajr"
    SUNRISE = "sunrise"
    ZUHR = "zuhr"
    ASR = "asr"
    MAGHRIB = "maghrib"
    ISHA = "isha"

    @property
    def display_name(self) -> str:
        """Human readable name."""
        names = {
            PrayerName.FAJR: "Fajr",
            PrayerName.SUNRISE: "Sunrise",
            PrayerName.ZUHR: "Zuhr",
            PrayerName.ASR: "Asr",
            PrayerName.MAGHRIB: "Maghrib",
            PrayerName.ISHA: "Isha",
        }
        return names[self]

    @property
    def is_salah(self) -> bool:
        """Sunrise marks the end of Fajr; it is not a prayer itself."""
        return self is not PrayerName.SUNRISE

    @classmethod
    def from_name(cls, name: str) -> Self:
        """Parse a prayer name, accepting the common Zuhr spellings."""
        key = name.strip().lower()
        if key in ("dhuhr", "dhuhur", "duhr"):
            key = "zuhr"
        try:
            return cls(key)
        except ValueError:
            raise InvalidInput(f"Unknown prayer: {name!r}") from None


class Madhab(str, Enum):
    """Jurisprudential school. Only the Asr shadow factor depends on it."""

    SHAFI = "Shafi"
    HANAFI = "Hanafi"

    @property
    def shadow_factor(self) -> int:
        """Object shadow length, in multiples of its height, that starts Asr."""
        return 2 if self is Madhab.HANAFI else 1

    @classmethod
    def from_name(cls, name: str) -> Self:
        """Parse a madhab name."""
        if name == "Shafi'i":
            return cls.SHAFI
        try:
            return cls(name)
        except ValueError:
            raise UnknownMadhab(name) from None


@dataclass(frozen=True)
class Location:
    """Observer position (immutable value object)."""

    latitude: float
    longitude: float
    elevation: float = 0.0
    name: str = ""

    def __post_init__(self) -> None:
        """Coordinate validation."""
        for label, value in (
            ("latitude", self.latitude),
            ("longitude", self.longitude),
            ("elevation", self.elevation),
        ):
            if not isinstance(value, (int, float)) or not math.isfinite(value):
                raise InvalidLocation(f"Invalid {label}: {value!r}")
        if not -90 <= self.latitude <= 90:
            raise InvalidLocation(f"Invalid latitude: {self.latitude}")
        if not -180 <= self.longitude <= 180:
            raise InvalidLocation(f"Invalid longitude: {self.longitude}")

    def to_dict(self) -> dict[str, float | str]:
        """Dictionary representation."""
        return {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "elevation": self.elevation,
            "name": self.name,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Self:
        """Build from a dictionary."""
        return cls(
            latitude=data["latitude"],
            longitude=data["longitude"],
            elevation=data.get("elevation", 0.0),
            name=data.get("name", ""),
        )


@dataclass(frozen=True)
class UtcOffset:
    """Signed offset from UTC in whole minutes."""

    minutes: int

    def __post_init__(self) -> None:
        """Range validation."""
        if isinstance(self.minutes, bool) or not isinstance(self.minutes, int):
            raise InvalidOffset(f"UTC offset must be an integer number of minutes: {self.minutes!r}")
        if not MIN_UTC_OFFSET <= self.minutes <= MAX_UTC_OFFSET:
            raise InvalidOffset(f"UTC offset out of range: {self.minutes} minutes")

    @classmethod
    def parse(cls, text: str) -> Self:
        """
        Parse a textual offset into minutes.

        Accepts "+5:30", "-3", "+5.5", "5", "-03:00".
        """
        match = _OFFSET_PATTERN.match(text.strip())
        if match is None:
            raise InvalidOffset(f"Cannot parse UTC offset: {text!r}")
        sign, hours, minutes, fraction = match.groups()
        if minutes is not None:
            if int(minutes) >= 60:
                raise InvalidOffset(f"Cannot parse UTC offset: {text!r}")
            total = int(hours) * 60 + int(minutes)
        elif fraction is not None:
            total = round(float(f"{hours}.{fraction}") * 60)
        else:
            total = int(hours) * 60
        return cls(-total if sign == "-" else total)

    @classmethod
    def from_timedelta(cls, delta: timedelta) -> Self:
        """Build from a timedelta (e.g. a ZoneInfo utcoffset)."""
        return cls(int(delta.total_seconds() // 60))

    @property
    def hours(self) -> float:
        """Offset in fractional hours."""
        return self.minutes / 60

    @property
    def tzinfo(self) -> timezone:
        """Fixed-offset timezone."""
        return timezone(timedelta(minutes=self.minutes))

    def __str__(self) -> str:
        sign = "-" if self.minutes < 0 else "+"
        hours, minutes = divmod(abs(self.minutes), 60)
        if minutes == 0:
            return f"{sign}{hours}"
        return f"{sign}{hours}:{minutes:02d}"


@dataclass(frozen=True)
class PrayerAdjustments:
    """Per-boundary corrections (minutes) applied after the astronomical solve."""

    fajr: int = 0
    sunrise: int = 0
    zuhr: int = 0
    asr: int = 0
    maghrib: int = 0
    isha: int = 0

    def get_adjustment(self, prayer: PrayerName) -> int:
        """Adjustment for the given boundary."""
        mapping = {
            PrayerName.FAJR: self.fajr,
            PrayerName.SUNRISE: self.sunrise,
            PrayerName.ZUHR: self.zuhr,
            PrayerName.ASR: self.asr,
            PrayerName.MAGHRIB: self.maghrib,
            PrayerName.ISHA: self.isha,
        }
        return mapping[prayer]


@dataclass(frozen=True)
class SolarDay:
    """Sun position for one calendar date."""

    declination: float
    equation_of_time: float  # minutes, positive when the sundial is ahead of the clock
    julian_day: float


@dataclass(frozen=True)
class PrayerTime:
    """A single boundary instant."""

    name: PrayerName
    at: datetime

    @property
    def date(self) -> date:
        """Local calendar date of the instant."""
        return self.at.date()

    @property
    def time_str(self) -> str:
        """HH:MM format."""
        return self.at.strftime("%H:%M")


@dataclass(frozen=True)
class PrayerTimes:
    """All boundaries of one day, as timezone-aware instants."""

    date: date
    utc_offset: UtcOffset
    fajr: datetime
    sunrise: datetime
    zuhr: datetime
    asr: datetime
    maghrib: datetime
    isha: datetime

    def get_time(self, prayer: PrayerName) -> datetime:
        """Instant of the given boundary."""
        mapping = {
            PrayerName.FAJR: self.fajr,
            PrayerName.SUNRISE: self.sunrise,
            PrayerName.ZUHR: self.zuhr,
            PrayerName.ASR: self.asr,
            PrayerName.MAGHRIB: self.maghrib,
            PrayerName.ISHA: self.isha,
        }
        return mapping[prayer]

    def get_prayer_time(self, prayer: PrayerName) -> PrayerTime:
        """Boundary as a PrayerTime."""
        return PrayerTime(name=prayer, at=self.get_time(prayer))

    def all_prayer_times(self) -> list[PrayerTime]:
        """All boundaries in chronological order."""
        return [self.get_prayer_time(prayer) for prayer in PrayerName]

    def is_ordered(self) -> bool:
        """True when every boundary is strictly later than the previous one."""
        instants = [self.get_time(prayer) for prayer in PrayerName]
        return all(a < b for a, b in zip(instants, instants[1:]))

    def window(self, prayer: PrayerName, tomorrow: "PrayerTimes | None" = None) -> tuple[datetime, datetime]:
        """
        Start and end of a prayer's window.

        Fajr ends at sunrise, Zuhr at Asr, Asr at Maghrib, Maghrib at Isha and
        Isha at the next day's Fajr, which needs ``tomorrow``.
        """
        if prayer is PrayerName.SUNRISE:
            raise InvalidInput("Sunrise has no prayer window")
        if prayer is PrayerName.ISHA:
            if tomorrow is None:
                raise InvalidInput("The Isha window needs the following day's times")
            return self.isha, tomorrow.fajr
        order = list(PrayerName)
        following = order[order.index(prayer) + 1]
        return self.get_time(prayer), self.get_time(following)

    def to_dict(self) -> dict[str, str | int]:
        """Serializable representation with ISO-8601 instants."""
        data: dict[str, str | int] = {
            "date": self.date.isoformat(),
            "utc_offset": self.utc_offset.minutes,
        }
        for prayer in PrayerName:
            data[prayer.value] = self.get_time(prayer).isoformat()
        return data

    @classmethod
    def from_dict(cls, data: dict) -> Self:
        """Inverse of ``to_dict``."""
        return cls(
            date=date.fromisoformat(data["date"]),
            utc_offset=UtcOffset(data["utc_offset"]),
            **{prayer.value: datetime.fromisoformat(data[prayer.value]) for prayer in PrayerName},
        )


@dataclass(frozen=True)
class HijriOffsetMode:
    """Astronomical conversion, optionally shifted for local moon sighting."""

    offset_days: int = 0

    @property
    def is_astronomical(self) -> bool:
        """No sighting correction."""
        return self.offset_days == 0

    @classmethod
    def astronomical(cls) -> Self:
        """Pure tabular conversion."""
        return cls(0)

    @classmethod
    def local_sighting(cls, offset_days: int) -> Self:
        """Tabular conversion shifted by a signed number of days."""
        if offset_days == 0:
            raise InvalidInput("A local sighting offset must be non-zero")
        return cls(offset_days)


HIJRI_MONTH_NAMES = (
    "Muharram",
    "Safar",
    "Rabi' al-Awwal",
    "Rabi' al-Thani",
    "Jumada al-Awwal",
    "Jumada al-Thani",
    "Rajab",
    "Sha'ban",
    "Ramadan",
    "Shawwal",
    "Dhu al-Qi'dah",
    "Dhu al-Hijjah",
)


@dataclass(frozen=True, order=True)
class HijriDate:
    """A date in the Islamic lunar calendar. Always derived, never edited."""

    year: int
    month: int
    day: int

    def __post_init__(self) -> None:
        """Field validation."""
        if self.year < 1:
            raise InvalidInput(f"Invalid Hijri year: {self.year}")
        if not 1 <= self.month <= 12:
            raise InvalidInput(f"Invalid Hijri month: {self.month}")
        if not 1 <= self.day <= 30:
            raise InvalidInput(f"Invalid Hijri day: {self.day}")

    @property
    def month_name(self) -> str:
        """English transliteration of the month."""
        return HIJRI_MONTH_NAMES[self.month - 1]

    def formatted(self) -> str:
        """E.g. "5 Ramadan 1445"."""
        return f"{self.day} {self.month_name} {self.year}"

    def to_dict(self) -> dict[str, int | str]:
        """Dictionary representation."""
        return {
            "year": self.year,
            "month": self.month,
            "day": self.day,
            "month_name": self.month_name,
        }


@dataclass(frozen=True)
class NextPrayer:
    """Where "now" sits between the day's boundaries."""

    current_prayer: PrayerName
    next_prayer: PrayerName
    next_at: datetime
    countdown: timedelta
    before_fajr: bool = False

    def to_dict(self) -> dict[str, str | int | bool]:
        """Dictionary representation."""
        return {
            "current_prayer": self.current_prayer.value,
            "next_prayer": self.next_prayer.value,
            "next_at": self.next_at.isoformat(),
            "countdown_seconds": int(self.countdown.total_seconds()),
            "before_fajr": self.before_fajr,
        }

"""Calculation method registry.

Each named method is a constant parameter record. Methods are selected by
name and never mutated; ``Other`` is the only variant whose angles come from
the caller.
"""

from dataclasses import dataclass, field
from enum import Enum

from sujood.domain.errors import InvalidMethodParameters, UnknownMethod
from sujood.domain.models import PrayerAdjustments

MAX_ANGLE = 30.0
MAX_ISHA_INTERVAL = 300


class CalculationMethod(str, Enum):
    """Supported method identifiers (case-sensitive)."""

    MUSLIM_WORLD_LEAGUE = "MuslimWorldLeague"
    EGYPTIAN = "Egyptian"
    KARACHI = "Karachi"
    UMM_AL_QURA = "UmmAlQura"
    DUBAI = "Dubai"
    MOONSIGHTING_COMMITTEE = "MoonsightingCommittee"
    NORTH_AMERICA = "NorthAmerica"
    KUWAIT = "Kuwait"
    QATAR = "Qatar"
    SINGAPORE = "Singapore"
    TEHRAN = "Tehran"
    TURKEY = "Turkey"
    OTHER = "Other"

    @classmethod
    def from_name(cls, name: str) -> "CalculationMethod":
        """Parse an identifier, raising UnknownMethod for anything else."""
        try:
            return cls(name)
        except ValueError:
            raise UnknownMethod(name) from None


@dataclass(frozen=True)
class IshaRule:
    """Isha starts either at a depression angle or a fixed time after Maghrib."""

    angle: float | None = None
    interval_minutes: int | None = None

    def __post_init__(self) -> None:
        """Exactly one of the two must be set."""
        if (self.angle is None) == (self.interval_minutes is None):
            raise InvalidMethodParameters("Isha needs exactly one of an angle or an interval")

    @classmethod
    def by_angle(cls, angle: float) -> "IshaRule":
        """Angle-based Isha."""
        return cls(angle=angle)

    @classmethod
    def after_maghrib(cls, minutes: int) -> "IshaRule":
        """Interval-based Isha."""
        return cls(interval_minutes=minutes)

    @property
    def is_interval(self) -> bool:
        """True for interval-based rules."""
        return self.interval_minutes is not None

    def describe(self) -> str:
        """Short human readable form."""
        if self.is_interval:
            return f"{self.interval_minutes} min after Maghrib"
        return f"{self.angle:g}°"


@dataclass(frozen=True)
class CalculationMethodParams:
    """Parameters of one calculation method."""

    method: CalculationMethod
    display_name: str
    fajr_angle: float
    isha: IshaRule
    adjustments: PrayerAdjustments = field(default_factory=PrayerAdjustments)
    maghrib_angle: float | None = None
    high_latitude_note: str = ""

    @property
    def maghrib_offset_minutes(self) -> int:
        """Minutes added to sunset for Maghrib."""
        return self.adjustments.maghrib

    @property
    def dhuhr_offset_minutes(self) -> int:
        """Fixed correction added to solar noon for Zuhr."""
        return self.adjustments.zuhr

    def to_dict(self) -> dict:
        """Dictionary representation."""
        return {
            "method": self.method.value,
            "display_name": self.display_name,
            "fajr_angle": self.fajr_angle,
            "isha_angle": self.isha.angle,
            "isha_interval_minutes": self.isha.interval_minutes,
            "maghrib_angle": self.maghrib_angle,
            "adjustments": {
                "fajr": self.adjustments.fajr,
                "sunrise": self.adjustments.sunrise,
                "zuhr": self.adjustments.zuhr,
                "asr": self.adjustments.asr,
                "maghrib": self.adjustments.maghrib,
                "isha": self.adjustments.isha,
            },
            "high_latitude_note": self.high_latitude_note,
        }


_ANGLE_NOTE = "Fajr/Isha angles may be unreachable above ~48° latitude in summer"
_INTERVAL_NOTE = "Isha is interval-based; Fajr may be unreachable above ~48° latitude in summer"

METHODS: dict[CalculationMethod, CalculationMethodParams] = {
    CalculationMethod.MUSLIM_WORLD_LEAGUE: CalculationMethodParams(
        method=CalculationMethod.MUSLIM_WORLD_LEAGUE,
        display_name="Muslim World League",
        fajr_angle=18.0,
        isha=IshaRule.by_angle(17.0),
        adjustments=PrayerAdjustments(zuhr=1),
        high_latitude_note=_ANGLE_NOTE,
    ),
    CalculationMethod.EGYPTIAN: CalculationMethodParams(
        method=CalculationMethod.EGYPTIAN,
        display_name="Egyptian General Authority of Survey",
        fajr_angle=19.5,
        isha=IshaRule.by_angle(17.5),
        adjustments=PrayerAdjustments(zuhr=1),
        high_latitude_note=_ANGLE_NOTE,
    ),
    CalculationMethod.KARACHI: CalculationMethodParams(
        method=CalculationMethod.KARACHI,
        display_name="University of Islamic Sciences, Karachi",
        fajr_angle=18.0,
        isha=IshaRule.by_angle(18.0),
        adjustments=PrayerAdjustments(zuhr=1),
        high_latitude_note=_ANGLE_NOTE,
    ),
    CalculationMethod.UMM_AL_QURA: CalculationMethodParams(
        method=CalculationMethod.UMM_AL_QURA,
        display_name="Umm al-Qura University, Makkah",
        fajr_angle=18.5,
        isha=IshaRule.after_maghrib(90),
        high_latitude_note=_INTERVAL_NOTE,
    ),
    CalculationMethod.DUBAI: CalculationMethodParams(
        method=CalculationMethod.DUBAI,
        display_name="Dubai",
        fajr_angle=18.2,
        isha=IshaRule.by_angle(18.2),
        adjustments=PrayerAdjustments(sunrise=-3, zuhr=3, asr=3, maghrib=3),
        high_latitude_note=_ANGLE_NOTE,
    ),
    CalculationMethod.MOONSIGHTING_COMMITTEE: CalculationMethodParams(
        method=CalculationMethod.MOONSIGHTING_COMMITTEE,
        display_name="Moonsighting Committee Worldwide",
        fajr_angle=18.0,
        isha=IshaRule.by_angle(18.0),
        adjustments=PrayerAdjustments(zuhr=5, maghrib=3),
        high_latitude_note="Seasonal adjustment above 55° latitude is not applied",
    ),
    CalculationMethod.NORTH_AMERICA: CalculationMethodParams(
        method=CalculationMethod.NORTH_AMERICA,
        display_name="Islamic Society of North America",
        fajr_angle=15.0,
        isha=IshaRule.by_angle(15.0),
        adjustments=PrayerAdjustments(zuhr=1),
        high_latitude_note="Shallow angles; unreachable only above ~51° latitude in summer",
    ),
    CalculationMethod.KUWAIT: CalculationMethodParams(
        method=CalculationMethod.KUWAIT,
        display_name="Kuwait",
        fajr_angle=18.0,
        isha=IshaRule.by_angle(17.5),
        high_latitude_note=_ANGLE_NOTE,
    ),
    CalculationMethod.QATAR: CalculationMethodParams(
        method=CalculationMethod.QATAR,
        display_name="Qatar",
        fajr_angle=18.0,
        isha=IshaRule.after_maghrib(90),
        high_latitude_note=_INTERVAL_NOTE,
    ),
    CalculationMethod.SINGAPORE: CalculationMethodParams(
        method=CalculationMethod.SINGAPORE,
        display_name="Majlis Ugama Islam Singapura",
        fajr_angle=20.0,
        isha=IshaRule.by_angle(18.0),
        adjustments=PrayerAdjustments(zuhr=1),
        high_latitude_note="Steep Fajr angle; unreachable above ~46° latitude in summer",
    ),
    CalculationMethod.TEHRAN: CalculationMethodParams(
        method=CalculationMethod.TEHRAN,
        display_name="Institute of Geophysics, University of Tehran",
        fajr_angle=17.7,
        isha=IshaRule.by_angle(14.0),
        maghrib_angle=4.5,
        high_latitude_note=_ANGLE_NOTE,
    ),
    CalculationMethod.TURKEY: CalculationMethodParams(
        method=CalculationMethod.TURKEY,
        display_name="Diyanet İşleri Başkanlığı, Turkey",
        fajr_angle=18.0,
        isha=IshaRule.by_angle(17.0),
        adjustments=PrayerAdjustments(sunrise=-7, zuhr=5, asr=4, maghrib=7),
        high_latitude_note=_ANGLE_NOTE,
    ),
}


def _check_angle(label: str, angle: float) -> None:
    """Reject implausible depression angles."""
    if not isinstance(angle, (int, float)) or not 0 < angle <= MAX_ANGLE:
        raise InvalidMethodParameters(f"{label} angle must be within (0, {MAX_ANGLE:g}]: {angle!r}")


def custom_method(
    fajr_angle: float,
    isha_angle: float | None = None,
    isha_interval: int | None = None,
) -> CalculationMethodParams:
    """Build parameters for the caller-supplied ``Other`` method."""
    _check_angle("Fajr", fajr_angle)
    if isha_angle is not None and isha_interval is not None:
        raise InvalidMethodParameters("Isha needs exactly one of an angle or an interval")
    if isha_angle is not None:
        _check_angle("Isha", isha_angle)
        isha = IshaRule.by_angle(float(isha_angle))
    elif isha_interval is not None:
        if not isinstance(isha_interval, int) or not 0 < isha_interval <= MAX_ISHA_INTERVAL:
            raise InvalidMethodParameters(
                f"Isha interval must be within (0, {MAX_ISHA_INTERVAL}] minutes: {isha_interval!r}"
            )
        isha = IshaRule.after_maghrib(isha_interval)
    else:
        raise InvalidMethodParameters("The Other method needs an Isha angle or interval")

    return CalculationMethodParams(
        method=CalculationMethod.OTHER,
        display_name="Custom",
        fajr_angle=float(fajr_angle),
        isha=isha,
        high_latitude_note="Caller-supplied angles",
    )


def lookup(
    name: str | CalculationMethod,
    *,
    fajr_angle: float | None = None,
    isha_angle: float | None = None,
    isha_interval: int | None = None,
) -> CalculationMethodParams:
    """
    Resolve a method name to its parameters.

    Args:
        name: One of the identifiers in ``CalculationMethod``
        fajr_angle: Required for ``Other``, ignored otherwise
        isha_angle: Isha angle for ``Other``
        isha_interval: Isha interval (minutes) for ``Other``
    """
    method = name if isinstance(name, CalculationMethod) else CalculationMethod.from_name(name)
    if method is CalculationMethod.OTHER:
        if fajr_angle is None:
            raise InvalidMethodParameters("The Other method needs a Fajr angle")
        return custom_method(fajr_angle, isha_angle=isha_angle, isha_interval=isha_interval)
    return METHODS[method]


def available_methods() -> list[str]:
    """All method identifiers."""
    return [method.value for method in CalculationMethod]

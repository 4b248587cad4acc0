"""Low-precision solar ephemeris.

Good to roughly a minute of time, which is enough for prayer scheduling.
Angles are kept in degrees; conversion to radians happens only at the trig
call sites.
"""

import math
from datetime import date

from sujood.domain.models import SolarDay

J2000 = 2451545.0
# date.toordinal() + this = Julian day at 0h UT
_ORDINAL_TO_JD = 1721424.5


def _sin(degrees: float) -> float:
    return math.sin(math.radians(degrees))


def _cos(degrees: float) -> float:
    return math.cos(math.radians(degrees))


def fix_angle(angle: float) -> float:
    """Normalize to [0, 360)."""
    return angle - 360.0 * math.floor(angle / 360.0)


def fix_hour(hours: float) -> float:
    """Normalize to [0, 24)."""
    return hours - 24.0 * math.floor(hours / 24.0)


def julian_day(calendar_date: date) -> float:
    """Julian day at 0h UT of a (proleptic Gregorian) date."""
    return calendar_date.toordinal() + _ORDINAL_TO_JD


def solar_position(calendar_date: date, longitude: float, *, day_fraction: float = 0.5) -> SolarDay:
    """
    Sun declination and equation of time.

    Args:
        calendar_date: Local calendar date
        longitude: Observer longitude in degrees, east positive
        day_fraction: Local mean time of evaluation as a fraction of the day (noon by default)
    """
    jd = julian_day(calendar_date) + day_fraction - longitude / 360.0
    d = jd - J2000

    mean_anomaly = fix_angle(357.529 + 0.98560028 * d)
    mean_longitude = fix_angle(280.459 + 0.98564736 * d)
    ecliptic_longitude = fix_angle(
        mean_longitude + 1.915 * _sin(mean_anomaly) + 0.020 * _sin(2 * mean_anomaly)
    )
    obliquity = 23.439 - 0.00000036 * d

    right_ascension = math.degrees(
        math.atan2(_cos(obliquity) * _sin(ecliptic_longitude), _cos(ecliptic_longitude))
    )
    right_ascension_hours = fix_hour(right_ascension / 15.0)
    declination = math.degrees(math.asin(_sin(obliquity) * _sin(ecliptic_longitude)))

    # Wrap into [-12, 12) so the difference never jumps a whole day.
    equation_hours = (mean_longitude / 15.0 - right_ascension_hours + 12.0) % 24.0 - 12.0

    return SolarDay(
        declination=declination,
        equation_of_time=equation_hours * 60.0,
        julian_day=jd,
    )

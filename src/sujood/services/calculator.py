"""Astronomical prayer time calculation."""

import logging
import math
from datetime import date, datetime, time, timedelta

from sujood.domain.errors import OrderingViolation, UnreachableSolarEvent
from sujood.domain.methods import CalculationMethodParams
from sujood.domain.models import Location, Madhab, PrayerName, PrayerTimes, UtcOffset
from sujood.services.astronomy import solar_position

logger = logging.getLogger(__name__)

# Apparent radius of the sun plus standard refraction, in degrees.
SUNRISE_ANGLE = 0.833

# Initial guesses (local mean time, hours) used to evaluate the sun before refinement.
_INITIAL_GUESS = {
    PrayerName.FAJR: 5.0,
    PrayerName.SUNRISE: 6.0,
    PrayerName.ZUHR: 12.0,
    PrayerName.ASR: 13.0,
    PrayerName.MAGHRIB: 18.0,
    PrayerName.ISHA: 18.0,
}


def round_half_up(minutes: float) -> int:
    """Round to the nearest whole minute; exact halves round up."""
    return math.floor(minutes + 0.5)


class _SolarDaySolver:
    """Hour-angle solutions for one date and one observer."""

    def __init__(self, calendar_date: date, location: Location) -> None:
        self._date = calendar_date
        self._location = location

    def transit(self, hours: float) -> float:
        """Local mean time of solar noon, evaluating the sun at ``hours``."""
        sun = solar_position(self._date, self._location.longitude, day_fraction=hours / 24.0)
        return 12.0 - sun.equation_of_time / 60.0

    def hour_angle(self, prayer: PrayerName, altitude: float, hours: float) -> float:
        """Hours between transit and the moment the sun reaches ``altitude``."""
        sun = solar_position(self._date, self._location.longitude, day_fraction=hours / 24.0)
        latitude = math.radians(self._location.latitude)
        declination = math.radians(sun.declination)
        cos_h = (math.sin(math.radians(altitude)) - math.sin(latitude) * math.sin(declination)) / (
            math.cos(latitude) * math.cos(declination)
        )
        if not -1.0 <= cos_h <= 1.0:
            raise UnreachableSolarEvent(prayer, self._date, self._location.latitude)
        return math.degrees(math.acos(cos_h)) / 15.0

    def asr_altitude(self, shadow_factor: int, hours: float) -> float:
        """Sun altitude at which a shadow reaches ``shadow_factor`` times its object plus the noon shadow."""
        sun = solar_position(self._date, self._location.longitude, day_fraction=hours / 24.0)
        zenith = abs(self._location.latitude - sun.declination)
        return math.degrees(math.atan(1.0 / (shadow_factor + math.tan(math.radians(zenith)))))

    def before_transit(self, prayer: PrayerName, altitude: float, hours: float) -> float:
        """Local mean time when the sun rises through ``altitude``."""
        return self.transit(hours) - self.hour_angle(prayer, altitude, hours)

    def after_transit(self, prayer: PrayerName, altitude: float, hours: float) -> float:
        """Local mean time when the sun sets through ``altitude``."""
        return self.transit(hours) + self.hour_angle(prayer, altitude, hours)


def _solve(
    solver: _SolarDaySolver,
    guesses: dict[PrayerName, float],
    params: CalculationMethodParams,
    madhab: Madhab,
    horizon: float,
) -> dict[PrayerName, float]:
    """One pass over all boundaries, in local mean time."""
    times: dict[PrayerName, float] = {}
    times[PrayerName.FAJR] = solver.before_transit(
        PrayerName.FAJR, -params.fajr_angle, guesses[PrayerName.FAJR]
    )
    times[PrayerName.SUNRISE] = solver.before_transit(
        PrayerName.SUNRISE, -horizon, guesses[PrayerName.SUNRISE]
    )
    times[PrayerName.ZUHR] = solver.transit(guesses[PrayerName.ZUHR])

    asr_guess = guesses[PrayerName.ASR]
    times[PrayerName.ASR] = solver.after_transit(
        PrayerName.ASR, solver.asr_altitude(madhab.shadow_factor, asr_guess), asr_guess
    )

    if params.maghrib_angle is not None:
        times[PrayerName.MAGHRIB] = solver.after_transit(
            PrayerName.MAGHRIB, -params.maghrib_angle, guesses[PrayerName.MAGHRIB]
        )
    else:
        times[PrayerName.MAGHRIB] = solver.after_transit(
            PrayerName.MAGHRIB, -horizon, guesses[PrayerName.MAGHRIB]
        )

    if params.isha.is_interval:
        times[PrayerName.ISHA] = times[PrayerName.MAGHRIB] + params.isha.interval_minutes / 60.0
    else:
        times[PrayerName.ISHA] = solver.after_transit(
            PrayerName.ISHA, -params.isha.angle, guesses[PrayerName.ISHA]
        )
    return times


def compute(
    calendar_date: date,
    location: Location,
    params: CalculationMethodParams,
    madhab: Madhab,
    utc_offset: UtcOffset,
) -> PrayerTimes:
    """
    Compute the six boundaries of one day.

    Args:
        calendar_date: Local calendar date
        location: Observer position
        params: Calculation method parameters
        madhab: Selects the Asr shadow factor
        utc_offset: Offset of the local clock from UTC

    Raises:
        UnreachableSolarEvent: The sun never reaches a required angle on this day
        OrderingViolation: Internal error, the result is not strictly increasing
    """
    solver = _SolarDaySolver(calendar_date, location)
    horizon = SUNRISE_ANGLE + 0.0347 * math.sqrt(max(location.elevation, 0.0))

    first_pass = _solve(solver, _INITIAL_GUESS, params, madhab, horizon)
    refined = _solve(solver, first_pass, params, madhab, horizon)

    # Local mean time -> local clock time
    clock_shift = utc_offset.hours - location.longitude / 15.0
    tz = utc_offset.tzinfo
    midnight = datetime.combine(calendar_date, time(0, 0), tzinfo=tz)

    instants: dict[str, datetime] = {}
    for prayer in PrayerName:
        minutes = (refined[prayer] + clock_shift) * 60.0 + params.adjustments.get_adjustment(prayer)
        instants[prayer.value] = midnight + timedelta(minutes=round_half_up(minutes))

    times = PrayerTimes(date=calendar_date, utc_offset=utc_offset, **instants)
    if not times.is_ordered():
        logger.error(f"Ordering violation for {calendar_date} at {location}: {times.to_dict()}")
        raise OrderingViolation(times)

    logger.debug(
        f"Computed {calendar_date} ({params.method.value}, {madhab.value}, UTC{utc_offset}) "
        f"for {location.latitude:.4f},{location.longitude:.4f}"
    )
    return times

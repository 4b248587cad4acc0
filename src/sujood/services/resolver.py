"""Current/next prayer resolution."""

from datetime import datetime, timedelta

from sujood.domain.errors import MissingTomorrowTimes
from sujood.domain.models import NextPrayer, PrayerName, PrayerTimes


def resolve(
    now: datetime,
    today_times: PrayerTimes,
    tomorrow_times: PrayerTimes | None = None,
) -> NextPrayer:
    """
    Locate ``now`` between the day's boundaries.

    A naive ``now`` is read as wall-clock time at ``today_times.utc_offset``.
    ``tomorrow_times`` is only needed once today's Isha has started.

    Raises:
        MissingTomorrowTimes: ``now`` is at or after Isha and no tomorrow was given
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=today_times.utc_offset.tzinfo)

    if now < today_times.fajr:
        return NextPrayer(
            current_prayer=PrayerName.ISHA,
            next_prayer=PrayerName.FAJR,
            next_at=today_times.fajr,
            countdown=today_times.fajr - now,
            before_fajr=True,
        )

    current = PrayerName.FAJR
    for prayer in PrayerName:
        at = today_times.get_time(prayer)
        if at > now:
            return NextPrayer(
                current_prayer=current,
                next_prayer=prayer,
                next_at=at,
                countdown=at - now,
            )
        current = prayer

    if tomorrow_times is None:
        raise MissingTomorrowTimes(
            f"Isha of {today_times.date.isoformat()} has started; the next day's times are required"
        )
    return NextPrayer(
        current_prayer=PrayerName.ISHA,
        next_prayer=PrayerName.FAJR,
        next_at=tomorrow_times.fajr,
        countdown=max(tomorrow_times.fajr - now, timedelta(0)),
    )

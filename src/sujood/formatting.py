"""Display helpers shared by the API and the CLI."""

from datetime import date, datetime, timedelta

from babel.dates import format_date

from sujood.domain.models import HijriDate

DEFAULT_LOCALE = "en"


def format_countdown(td: timedelta) -> str:
    """Timedelta as HH:MM:SS; negative values clamp to zero."""
    total_seconds = max(int(td.total_seconds()), 0)
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def format_duration(td: timedelta) -> str:
    """
    Short human duration, e.g. "2h 5m", "45m" or "now".

    Seconds are rounded up so a countdown never shows "0m" while time remains.
    """
    total_seconds = int(td.total_seconds())
    if total_seconds <= 0:
        return "now"
    total_minutes = -(-total_seconds // 60)
    hours, minutes = divmod(total_minutes, 60)
    if hours and minutes:
        return f"{hours}h {minutes}m"
    if hours:
        return f"{hours}h"
    return f"{minutes}m"


def format_time(at: datetime, *, seconds: bool = False) -> str:
    """Wall-clock time of an instant."""
    return at.strftime("%H:%M:%S" if seconds else "%H:%M")


def format_date_long(day: date, locale: str = DEFAULT_LOCALE) -> str:
    """E.g. "Friday, 15 March 2024"."""
    return format_date(day, "EEEE, d MMMM yyyy", locale=locale)


def format_hijri(hijri: HijriDate) -> str:
    """E.g. "5 Ramadan 1445 AH"."""
    return f"{hijri.formatted()} AH"

"""API Routes."""

from dataclasses import replace
from datetime import date, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query

from sujood import __version__
from sujood.api.dependencies import AppState, get_app_state
from sujood.api.schemas import (
    ApiResponse,
    CurrentStateSchema,
    CustomAnglesSchema,
    HijriSchema,
    LocationSchema,
    MethodSchema,
    PrayerTimeSchema,
    PrayerTimesSchema,
    PruneResultSchema,
    SettingsSchema,
    SettingsUpdateSchema,
    SystemStatusSchema,
)
from sujood.domain.methods import METHODS
from sujood.domain.models import HijriDate, Location, PrayerName, PrayerTimes, UtcOffset
from sujood.domain.settings import CustomAngles, SalahSettings
from sujood.formatting import format_countdown, format_date_long, format_hijri, format_time
from sujood.services.timezone import suggest_utc_offset

router = APIRouter()

MAX_RANGE_DAYS = 31


def _location_schema(location: Location) -> LocationSchema:
    return LocationSchema(
        latitude=location.latitude,
        longitude=location.longitude,
        elevation=location.elevation,
        name=location.name,
    )


def _hijri_schema(hijri: HijriDate) -> HijriSchema:
    return HijriSchema(
        year=hijri.year,
        month=hijri.month,
        day=hijri.day,
        month_name=hijri.month_name,
        formatted=hijri.formatted(),
    )


def _times_schema(state: AppState, times: PrayerTimes) -> PrayerTimesSchema:
    prayers = [
        PrayerTimeSchema(
            name=pt.name,
            display_name=pt.name.display_name,
            time=pt.time_str,
            at=pt.at.isoformat(),
            is_salah=pt.name.is_salah,
        )
        for pt in times.all_prayer_times()
    ]
    return PrayerTimesSchema(
        date=times.date,
        date_formatted=format_date_long(times.date),
        hijri=_hijri_schema(state.prayer_service.hijri_date(times.date)),
        utc_offset=str(times.utc_offset),
        prayers=prayers,
    )


def _settings_schema(settings: SalahSettings) -> SettingsSchema:
    custom = settings.custom_angles
    return SettingsSchema(
        location=_location_schema(settings.location),
        method=settings.method,
        madhab=settings.madhab,
        utc_offset=str(settings.utc_offset),
        utc_offset_minutes=settings.utc_offset.minutes,
        hijri_offset=settings.hijri_offset,
        custom_angles=CustomAnglesSchema(
            fajr_angle=custom.fajr_angle,
            isha_angle=custom.isha_angle,
            isha_interval=custom.isha_interval,
        )
        if custom
        else None,
    )


# ============== State & Status ==============


@router.get("/status", response_model=SystemStatusSchema)
async def get_status(state: Annotated[AppState, Depends(get_app_state)]) -> SystemStatusSchema:
    """System status."""
    uptime = datetime.now() - state.started_at
    return SystemStatusSchema(
        version=__version__,
        uptime=str(uptime).split(".")[0],
        settings_path=str(state.settings_repository.file_path),
        cache_path=str(state.cache.file_path),
        cached_days=state.cache.count(),
    )


@router.get("/current", response_model=CurrentStateSchema)
async def get_current_state(
    state: Annotated[AppState, Depends(get_app_state)],
) -> CurrentStateSchema:
    """Current prayer, next prayer and countdown."""
    service = state.prayer_service
    now = datetime.now(service.timezone)
    upcoming = service.get_next_prayer(now)

    return CurrentStateSchema(
        current_time=format_time(now, seconds=True),
        current_date=format_date_long(now.date()),
        hijri_date=format_hijri(service.hijri_date(now.date())),
        location=_location_schema(service.location),
        current_prayer=upcoming.current_prayer,
        current_prayer_display=upcoming.current_prayer.display_name,
        next_prayer=upcoming.next_prayer,
        next_prayer_display=upcoming.next_prayer.display_name,
        next_prayer_time=format_time(upcoming.next_at),
        countdown=format_countdown(upcoming.countdown),
        countdown_seconds=int(upcoming.countdown.total_seconds()),
        before_fajr=upcoming.before_fajr,
    )


# ============== Prayer Times ==============


@router.get("/times/today", response_model=PrayerTimesSchema)
async def get_today_times(state: Annotated[AppState, Depends(get_app_state)]) -> PrayerTimesSchema:
    """Today's prayer times."""
    today = datetime.now(state.prayer_service.timezone).date()
    return _times_schema(state, state.prayer_service.calculate(today))


@router.get("/times", response_model=PrayerTimesSchema)
async def get_times(
    state: Annotated[AppState, Depends(get_app_state)],
    target_date: Annotated[date, Query(alias="date")],
) -> PrayerTimesSchema:
    """Prayer times for a given date."""
    return _times_schema(state, state.prayer_service.calculate(target_date))


@router.get("/times/range", response_model=list[PrayerTimesSchema])
async def get_times_range(
    state: Annotated[AppState, Depends(get_app_state)],
    start: date | None = None,
    days: Annotated[int, Query(ge=1, le=MAX_RANGE_DAYS)] = 7,
) -> list[PrayerTimesSchema]:
    """Prayer times for consecutive days."""
    start = start or datetime.now(state.prayer_service.timezone).date()
    return [_times_schema(state, times) for times in state.prayer_service.calculate_range(start, days)]


@router.get("/hijri", response_model=HijriSchema)
async def get_hijri(
    state: Annotated[AppState, Depends(get_app_state)],
    target_date: Annotated[date | None, Query(alias="date")] = None,
) -> HijriSchema:
    """Hijri date, honouring the configured sighting offset."""
    return _hijri_schema(state.prayer_service.hijri_date(target_date))


# ============== Settings ==============


@router.get("/settings", response_model=SettingsSchema)
async def get_settings(state: Annotated[AppState, Depends(get_app_state)]) -> SettingsSchema:
    """Current settings."""
    return _settings_schema(state.settings)


@router.put("/settings", response_model=ApiResponse)
async def update_settings(
    update: SettingsUpdateSchema,
    state: Annotated[AppState, Depends(get_app_state)],
) -> ApiResponse:
    """
    Update settings.

    A new location without an explicit offset gets the offset of the
    location's time zone.
    """
    current = state.settings

    new_location = current.location
    if update.location:
        new_location = Location(
            latitude=update.location.latitude,
            longitude=update.location.longitude,
            elevation=update.location.elevation,
            name=update.location.name,
        )

    if update.utc_offset is not None:
        new_offset = UtcOffset.parse(update.utc_offset)
    elif new_location != current.location:
        new_offset = suggest_utc_offset(new_location)
    else:
        new_offset = current.utc_offset

    new_custom = current.custom_angles
    if update.custom_angles:
        new_custom = CustomAngles(
            fajr_angle=update.custom_angles.fajr_angle,
            isha_angle=update.custom_angles.isha_angle,
            isha_interval=update.custom_angles.isha_interval,
        )

    new_settings = replace(
        current,
        location=new_location,
        method=update.method or current.method,
        madhab=update.madhab or current.madhab,
        utc_offset=new_offset,
        hijri_offset=update.hijri_offset if update.hijri_offset is not None else current.hijri_offset,
        custom_angles=new_custom,
    )

    changed = state.prayer_service.apply_settings(new_settings)
    state.settings = new_settings
    if changed:
        await state.settings_repository.save(new_settings)

    return ApiResponse(
        success=True,
        message="Settings updated." if changed else "Settings unchanged.",
        data={"changed": list(changed)},
    )


# ============== Methods ==============


@router.get("/methods", response_model=list[MethodSchema])
async def get_methods() -> list[MethodSchema]:
    """Built-in calculation methods."""
    return [
        MethodSchema(
            method=params.method,
            display_name=params.display_name,
            fajr_angle=params.fajr_angle,
            isha=params.isha.describe(),
            maghrib_angle=params.maghrib_angle,
            high_latitude_note=params.high_latitude_note,
        )
        for params in METHODS.values()
    ]


# ============== Cache ==============


@router.post("/cache/prune", response_model=PruneResultSchema)
async def prune_cache(state: Annotated[AppState, Depends(get_app_state)]) -> PruneResultSchema:
    """Drop cached days past the retention horizon."""
    removed = state.prayer_service.prune_cache(retention_days=state.retention_days)
    return PruneResultSchema(
        removed=removed,
        retention_days=state.retention_days,
        remaining=state.cache.count(),
    )


# ============== Utility ==============


@router.get("/prayers")
async def get_prayer_names() -> list[dict[str, str | bool]]:
    """Boundary names."""
    return [{"value": p.value, "display_name": p.display_name, "is_salah": p.is_salah} for p in PrayerName]


@router.post("/prayers/{prayer}/missed", response_model=ApiResponse)
async def mark_missed(
    prayer: PrayerName,
    state: Annotated[AppState, Depends(get_app_state)],
    target_date: Annotated[date | None, Query(alias="date")] = None,
) -> ApiResponse:
    """Record a missed prayer; the event carries the prayer's window."""
    on = target_date or datetime.now(state.prayer_service.timezone).date()
    event = state.prayer_service.mark_missed(prayer, on)
    return ApiResponse(
        success=True,
        message=f"{prayer.display_name} on {on} marked missed.",
        data={
            "prayer": event.prayer.value,
            "date": event.date.isoformat(),
            "window_start": event.window_start.isoformat(),
            "window_end": event.window_end.isoformat(),
        },
    )

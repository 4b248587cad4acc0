"""Pydantic schemas for API."""

from datetime import date
from typing import Annotated

from pydantic import BaseModel, Field

from sujood.domain.methods import CalculationMethod
from sujood.domain.models import Madhab, PrayerName


class LocationSchema(BaseModel):
    """Observer location."""

    latitude: Annotated[float, Field(ge=-90, le=90, description="Latitude")]
    longitude: Annotated[float, Field(ge=-180, le=180, description="Longitude")]
    elevation: Annotated[float, Field(default=0.0, description="Metres above sea level, negative below")]
    name: str = Field(default="", description="Place name")


class CustomAnglesSchema(BaseModel):
    """Parameters for the Other method."""

    fajr_angle: Annotated[float, Field(gt=0, le=30)]
    isha_angle: Annotated[float | None, Field(gt=0, le=30)] = None
    isha_interval: Annotated[int | None, Field(gt=0, le=300)] = None


class SettingsSchema(BaseModel):
    """All settings."""

    location: LocationSchema
    method: CalculationMethod
    madhab: Madhab
    utc_offset: str = Field(description='Offset from UTC, e.g. "+5" or "+5:30"')
    utc_offset_minutes: int
    hijri_offset: int = Field(default=0, description="Local sighting correction in days")
    custom_angles: CustomAnglesSchema | None = None


class SettingsUpdateSchema(BaseModel):
    """Partial settings update."""

    location: LocationSchema | None = None
    method: CalculationMethod | None = None
    madhab: Madhab | None = None
    utc_offset: str | None = None
    hijri_offset: Annotated[int | None, Field(ge=-3, le=3)] = None
    custom_angles: CustomAnglesSchema | None = None


class PrayerTimeSchema(BaseModel):
    """A single boundary."""

    name: PrayerName
    display_name: str
    time: str  # HH:MM
    at: str  # ISO-8601 with offset
    is_salah: bool


class HijriSchema(BaseModel):
    """A Hijri date."""

    year: int
    month: int
    day: int
    month_name: str
    formatted: str


class PrayerTimesSchema(BaseModel):
    """One day of prayer times."""

    date: date
    date_formatted: str
    hijri: HijriSchema
    utc_offset: str
    prayers: list[PrayerTimeSchema]


class CurrentStateSchema(BaseModel):
    """Current position between the day's boundaries."""

    current_time: str
    current_date: str
    hijri_date: str
    location: LocationSchema
    current_prayer: PrayerName
    current_prayer_display: str
    next_prayer: PrayerName
    next_prayer_display: str
    next_prayer_time: str
    countdown: str
    countdown_seconds: int
    before_fajr: bool


class MethodSchema(BaseModel):
    """A calculation method from the registry."""

    method: CalculationMethod
    display_name: str
    fajr_angle: float
    isha: str
    maghrib_angle: float | None = None
    high_latitude_note: str


class PruneResultSchema(BaseModel):
    """Cache prune outcome."""

    removed: int
    retention_days: int
    remaining: int


class SystemStatusSchema(BaseModel):
    """System status."""

    version: str
    uptime: str
    settings_path: str
    cache_path: str
    cached_days: int


class ApiResponse(BaseModel):
    """Generic API response."""

    success: bool
    message: str
    data: dict | list | None = None

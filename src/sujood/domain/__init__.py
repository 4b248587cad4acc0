"""Domain layer - Business entities and value objects."""

from sujood.domain.errors import (
    CacheCorrupted,
    CalculationError,
    InvalidInput,
    InvalidLocation,
    InvalidMethodParameters,
    InvalidOffset,
    MissingTomorrowTimes,
    OrderingViolation,
    SujoodError,
    UnknownMadhab,
    UnknownMethod,
    UnreachableSolarEvent,
)
from sujood.domain.methods import CalculationMethod, CalculationMethodParams, IshaRule
from sujood.domain.models import (
    HijriDate,
    HijriOffsetMode,
    Location,
    Madhab,
    NextPrayer,
    PrayerAdjustments,
    PrayerName,
    PrayerTime,
    PrayerTimes,
    SolarDay,
    UtcOffset,
)
from sujood.domain.settings import CacheKey, CustomAngles, SalahSettings

__all__ = [
    "CacheCorrupted",
    "CacheKey",
    "CalculationError",
    "CalculationMethod",
    "CalculationMethodParams",
    "CustomAngles",
    "HijriDate",
    "HijriOffsetMode",
    "InvalidInput",
    "InvalidLocation",
    "InvalidMethodParameters",
    "InvalidOffset",
    "IshaRule",
    "Location",
    "Madhab",
    "MissingTomorrowTimes",
    "NextPrayer",
    "OrderingViolation",
    "PrayerAdjustments",
    "PrayerName",
    "PrayerTime",
    "PrayerTimes",
    "SalahSettings",
    "SolarDay",
    "SujoodError",
    "UnknownMadhab",
    "UnknownMethod",
    "UnreachableSolarEvent",
    "UtcOffset",
]

"""User settings and cache identity."""

import hashlib
import json
from dataclasses import dataclass, field
from datetime import date
from typing import Self

from sujood.domain.errors import InvalidInput
from sujood.domain.methods import CalculationMethod, CalculationMethodParams, lookup
from sujood.domain.models import HijriOffsetMode, Location, Madhab, UtcOffset

# Fields that change computed times; any change invalidates the cache.
TIME_AFFECTING_FIELDS = ("location", "method", "madhab", "utc_offset", "custom_angles")

DEFAULT_LOCATION = Location(latitude=33.6938, longitude=73.0651, name="Islamabad")


@dataclass(frozen=True)
class CustomAngles:
    """Caller-supplied parameters for the ``Other`` method."""

    fajr_angle: float
    isha_angle: float | None = None
    isha_interval: int | None = None


def location_key(location: Location) -> str:
    """Rounded coordinates identifying a location in the cache."""
    return f"{location.latitude:.6f},{location.longitude:.6f},{location.elevation:.1f}"


def _params_key(params: CalculationMethodParams) -> str:
    return json.dumps(params.to_dict(), sort_keys=True, separators=(",", ":"))


@dataclass
class SalahSettings:
    """Settings that drive the computation."""

    location: Location = DEFAULT_LOCATION
    method: CalculationMethod = CalculationMethod.MUSLIM_WORLD_LEAGUE
    madhab: Madhab = Madhab.HANAFI
    utc_offset: UtcOffset = field(default_factory=lambda: UtcOffset(300))
    hijri_offset: int = 0
    custom_angles: CustomAngles | None = None

    def calculation_params(self) -> CalculationMethodParams:
        """Resolve the method through the registry."""
        if self.method is CalculationMethod.OTHER and self.custom_angles is not None:
            return lookup(
                self.method,
                fajr_angle=self.custom_angles.fajr_angle,
                isha_angle=self.custom_angles.isha_angle,
                isha_interval=self.custom_angles.isha_interval,
            )
        return lookup(self.method)

    @property
    def hijri_mode(self) -> HijriOffsetMode:
        """Hijri conversion mode."""
        return HijriOffsetMode(self.hijri_offset)

    def fingerprint(self) -> str:
        """Stable digest of every parameter that affects computed times."""
        payload = "|".join(
            (
                location_key(self.location),
                _params_key(self.calculation_params()),
                self.madhab.value,
                str(self.utc_offset.minutes),
            )
        )
        return hashlib.sha256(payload.encode("utf-8")).hexdigest()

    def changed_fields(self, other: "SalahSettings") -> tuple[str, ...]:
        """Names of the fields that differ from ``other``."""
        names = ("location", "method", "madhab", "utc_offset", "hijri_offset", "custom_angles")
        return tuple(name for name in names if getattr(self, name) != getattr(other, name))

    def to_dict(self) -> dict:
        """Dictionary representation."""
        data: dict = {
            "location": self.location.to_dict(),
            "method": self.method.value,
            "madhab": self.madhab.value,
            "utc_offset": self.utc_offset.minutes,
            "hijri_offset": self.hijri_offset,
        }
        if self.custom_angles is not None:
            data["custom_angles"] = {
                "fajr_angle": self.custom_angles.fajr_angle,
                "isha_angle": self.custom_angles.isha_angle,
                "isha_interval": self.custom_angles.isha_interval,
            }
        return data

    @classmethod
    def from_dict(cls, data: dict) -> Self:
        """Build from a dictionary. Invalid or missing values raise InvalidInput."""
        try:
            return cls._from_dict(data)
        except InvalidInput:
            raise
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise InvalidInput(f"Invalid settings: {type(e).__name__}: {e}") from e

    @classmethod
    def _from_dict(cls, data: dict) -> Self:
        location_data = data.get("location")
        custom = data.get("custom_angles")
        utc_offset = data.get("utc_offset", 300)
        return cls(
            location=Location.from_dict(location_data) if location_data else DEFAULT_LOCATION,
            method=CalculationMethod.from_name(data.get("method", CalculationMethod.MUSLIM_WORLD_LEAGUE.value)),
            madhab=Madhab.from_name(data.get("madhab", Madhab.HANAFI.value)),
            utc_offset=UtcOffset.parse(utc_offset) if isinstance(utc_offset, str) else UtcOffset(utc_offset),
            hijri_offset=int(data.get("hijri_offset", 0)),
            custom_angles=CustomAngles(
                fajr_angle=custom["fajr_angle"],
                isha_angle=custom.get("isha_angle"),
                isha_interval=custom.get("isha_interval"),
            )
            if custom
            else None,
        )


@dataclass(frozen=True)
class CacheKey:
    """Identity of one cached day."""

    location: Location
    params: CalculationMethodParams
    madhab: Madhab
    utc_offset: UtcOffset
    date: date

    @property
    def location_key(self) -> str:
        """Coordinates only, for per-location invalidation."""
        return location_key(self.location)

    @property
    def digest(self) -> str:
        """sha256 of every component."""
        payload = "|".join(
            (
                self.location_key,
                _params_key(self.params),
                self.madhab.value,
                str(self.utc_offset.minutes),
                self.date.isoformat(),
            )
        )
        return hashlib.sha256(payload.encode("utf-8")).hexdigest()

    @classmethod
    def for_settings(cls, settings: SalahSettings, on: date) -> Self:
        """Key for a given day under the given settings."""
        return cls(
            location=settings.location,
            params=settings.calculation_params(),
            madhab=settings.madhab,
            utc_offset=settings.utc_offset,
            date=on,
        )

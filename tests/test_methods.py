"""Tests for the calculation method registry."""

import pytest

from sujood.domain.errors import InvalidMethodParameters, UnknownMethod
from sujood.domain.methods import (
    METHODS,
    CalculationMethod,
    IshaRule,
    available_methods,
    custom_method,
    lookup,
)
from sujood.domain.models import PrayerName


class TestLookup:
    """Registry lookup tests."""

    def test_every_builtin_method_resolves(self) -> None:
        """All identifiers except Other have fixed parameters."""
        for method in CalculationMethod:
            if method is CalculationMethod.OTHER:
                continue
            params = lookup(method.value)
            assert params.method is method
            assert params.fajr_angle > 0
            assert params.high_latitude_note

    def test_available_methods(self) -> None:
        """Thirteen identifiers including Other."""
        names = available_methods()
        assert len(names) == 13
        assert "MuslimWorldLeague" in names
        assert "Other" in names

    def test_lookup_is_case_sensitive(self) -> None:
        """Identifiers must match exactly."""
        with pytest.raises(UnknownMethod):
            lookup("muslimworldleague")

    def test_unknown_method(self) -> None:
        """Unknown names raise UnknownMethod carrying the name."""
        with pytest.raises(UnknownMethod) as exc_info:
            lookup("Jafari")
        assert exc_info.value.name == "Jafari"

    def test_lookup_is_deterministic(self) -> None:
        """Same name, same parameters."""
        assert lookup("Egyptian") == lookup(CalculationMethod.EGYPTIAN)

    @pytest.mark.parametrize(
        ("name", "fajr", "isha"),
        [
            ("MuslimWorldLeague", 18.0, 17.0),
            ("Egyptian", 19.5, 17.5),
            ("Karachi", 18.0, 18.0),
            ("NorthAmerica", 15.0, 15.0),
            ("Singapore", 20.0, 18.0),
            ("Tehran", 17.7, 14.0),
            ("Turkey", 18.0, 17.0),
        ],
    )
    def test_angle_methods(self, name: str, fajr: float, isha: float) -> None:
        """Published Fajr and Isha angles."""
        params = lookup(name)
        assert params.fajr_angle == fajr
        assert params.isha.angle == isha
        assert not params.isha.is_interval

    @pytest.mark.parametrize("name", ["UmmAlQura", "Qatar"])
    def test_interval_methods(self, name: str) -> None:
        """Isha ninety minutes after Maghrib."""
        params = lookup(name)
        assert params.isha.is_interval
        assert params.isha.interval_minutes == 90
        assert params.isha.angle is None

    def test_tehran_maghrib_angle(self) -> None:
        """Tehran waits for the sun to reach 4.5° below the horizon."""
        assert lookup("Tehran").maghrib_angle == 4.5
        assert lookup("MuslimWorldLeague").maghrib_angle is None

    def test_method_adjustments(self) -> None:
        """Fixed minute corrections."""
        turkey = lookup("Turkey")
        assert turkey.adjustments.get_adjustment(PrayerName.SUNRISE) == -7
        assert turkey.dhuhr_offset_minutes == 5
        assert turkey.maghrib_offset_minutes == 7
        assert lookup("MoonsightingCommittee").maghrib_offset_minutes == 3
        assert lookup("MuslimWorldLeague").dhuhr_offset_minutes == 1

    def test_registry_has_no_other(self) -> None:
        """Other is built on demand, never stored."""
        assert CalculationMethod.OTHER not in METHODS
        assert len(METHODS) == 12


class TestCustomMethod:
    """Other method tests."""

    def test_other_requires_fajr_angle(self) -> None:
        """Other without parameters is rejected."""
        with pytest.raises(InvalidMethodParameters):
            lookup("Other")

    def test_other_with_angles(self) -> None:
        """Caller-supplied angles are used as given."""
        params = lookup("Other", fajr_angle=16.0, isha_angle=14.0)
        assert params.method is CalculationMethod.OTHER
        assert params.fajr_angle == 16.0
        assert params.isha.angle == 14.0

    def test_other_with_interval(self) -> None:
        """Isha may be interval-based."""
        params = custom_method(17.0, isha_interval=75)
        assert params.isha.interval_minutes == 75

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"fajr_angle": 0.0, "isha_angle": 17.0},
            {"fajr_angle": 31.0, "isha_angle": 17.0},
            {"fajr_angle": 18.0, "isha_angle": -1.0},
            {"fajr_angle": 18.0, "isha_interval": 0},
            {"fajr_angle": 18.0, "isha_interval": 301},
            {"fajr_angle": 18.0},
            {"fajr_angle": 18.0, "isha_angle": 17.0, "isha_interval": 90},
        ],
    )
    def test_implausible_parameters(self, kwargs: dict) -> None:
        """Out-of-range or ambiguous parameters are rejected."""
        with pytest.raises(InvalidMethodParameters):
            custom_method(**kwargs)


class TestIshaRule:
    """IshaRule tests."""

    def test_exactly_one_rule(self) -> None:
        """Angle and interval are mutually exclusive."""
        with pytest.raises(ValueError):
            IshaRule(angle=17.0, interval_minutes=90)
        with pytest.raises(ValueError):
            IshaRule()

    def test_describe(self) -> None:
        """Readable description."""
        assert "90" in IshaRule.after_maghrib(90).describe()
        assert "17" in IshaRule.by_angle(17.0).describe()

"""Shared fixtures."""

from datetime import date
from pathlib import Path

import pytest

from sujood.domain.methods import CalculationMethod, lookup
from sujood.domain.models import Location, Madhab, UtcOffset
from sujood.domain.settings import SalahSettings
from sujood.infrastructure.cache_repository import SqlitePrayerTimeCache


@pytest.fixture
def mecca() -> Location:
    """Mecca, Masjid al-Haram."""
    return Location(latitude=21.4225, longitude=39.8262, name="Mecca")


@pytest.fixture
def istanbul() -> Location:
    """Istanbul."""
    return Location(latitude=41.0082, longitude=28.9784, name="Istanbul")


@pytest.fixture
def mecca_settings(mecca: Location) -> SalahSettings:
    """Umm al-Qura settings for Mecca."""
    return SalahSettings(
        location=mecca,
        method=CalculationMethod.UMM_AL_QURA,
        madhab=Madhab.SHAFI,
        utc_offset=UtcOffset(180),
    )


@pytest.fixture
def mwl():
    """Muslim World League parameters."""
    return lookup(CalculationMethod.MUSLIM_WORLD_LEAGUE)


@pytest.fixture
def reference_day() -> date:
    """A fixed day in Ramadan 1445."""
    return date(2024, 3, 15)


@pytest.fixture
def cache(tmp_path: Path) -> SqlitePrayerTimeCache:
    """Cache in a temporary directory."""
    return SqlitePrayerTimeCache(tmp_path / "cache.db")

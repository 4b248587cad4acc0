"""SQLAlchemy models for the prayer time cache.

One row per (location, method parameters, madhab, offset, date), keyed by the
sha256 digest of those components. The payload is the JSON form of
``PrayerTimes``; the checksum guards it against partial or foreign writes.
"""

import datetime as dt

from sqlalchemy import Date, DateTime, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Declarative base for cache tables."""


class CachedPrayerTimes(Base):
    """One cached day of prayer times."""

    __tablename__ = "prayer_times_cache"

    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    location_key: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    schema_version: Mapped[int] = mapped_column(Integer, nullable=False)
    payload: Mapped[str] = mapped_column(Text, nullable=False)
    checksum: Mapped[str] = mapped_column(String(64), nullable=False)
    computed_at: Mapped[dt.datetime] = mapped_column(DateTime, nullable=False)


class CacheMeta(Base):
    """Key/value metadata, e.g. the fingerprint of the settings that wrote the rows."""

    __tablename__ = "cache_meta"

    key: Mapped[str] = mapped_column(String(64), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)

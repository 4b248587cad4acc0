"""SQLite-backed prayer time cache."""

import hashlib
import json
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date, datetime, timedelta
from pathlib import Path

from sqlalchemy import Connection, create_engine, delete, event, func, inspect, select
from sqlalchemy.exc import DatabaseError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from sujood.domain.errors import CacheCorrupted
from sujood.domain.models import Location, PrayerTimes
from sujood.domain.settings import CacheKey, location_key
from sujood.infrastructure.cache_models import Base, CachedPrayerTimes, CacheMeta
from sujood.services.ports import PrayerTimeCachePort

logger = logging.getLogger(__name__)

DEFAULT_CACHE_PATH = Path.home() / ".local" / "share" / "sujood" / "cache.db"
SCHEMA_VERSION = 1
DEFAULT_RETENTION_DAYS = 90

_FINGERPRINT_KEY = "settings_fingerprint"


def _checksum(payload: str) -> str:
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def _on_connect(dbapi_connection, connection_record) -> None:
    """Leave transaction control to the ``begin`` hook and switch to WAL."""
    dbapi_connection.isolation_level = None
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()


def _on_begin(conn: Connection) -> None:
    """BEGIN IMMEDIATE for writers so the lock is held from the first statement."""
    mode = conn.get_execution_options().get("sqlite_begin", "DEFERRED")
    conn.exec_driver_sql(f"BEGIN {mode}")


class SqlitePrayerTimeCache(PrayerTimeCachePort):
    """
    Prayer times cached in a local SQLite file.

    Every public method runs in its own short transaction, so concurrent CLI
    invocations never observe a half-written row. Rows that fail to decode
    are deleted and reported as misses.
    """

    def __init__(self, file_path: Path | None = None, *, timeout: float = 5.0) -> None:
        """
        Initialize cache.

        Args:
            file_path: Database file (default: ~/.local/share/sujood/cache.db)
            timeout: Seconds to wait for another process's write lock
        """
        self._file_path = file_path or DEFAULT_CACHE_PATH
        self._file_path.parent.mkdir(parents=True, exist_ok=True)

        self._engine = create_engine(
            f"sqlite:///{self._file_path}",
            connect_args={"timeout": timeout, "check_same_thread": False},
        )
        event.listen(self._engine, "connect", _on_connect)
        event.listen(self._engine, "begin", _on_begin)
        self._writer = self._engine.execution_options(sqlite_begin="IMMEDIATE")

        self._initialize()

    @property
    def file_path(self) -> Path:
        """Database file path."""
        return self._file_path

    def close(self) -> None:
        """Release pooled connections."""
        self._engine.dispose()

    def _initialize(self) -> None:
        """Create the schema, replacing a file that is not a usable database."""
        try:
            self._create_schema()
        except OperationalError:
            raise
        except DatabaseError as e:
            logger.warning(f"Cache database unreadable ({e.orig}), recreating: {self._file_path}")
            self._quarantine()
            self._create_schema()

    def _create_schema(self) -> None:
        """Create missing tables; tables laid out differently are dropped and recreated."""
        with self._writer.begin() as conn:
            inspector = inspect(conn)
            for table in Base.metadata.sorted_tables:
                if not inspector.has_table(table.name):
                    continue
                found = {column["name"] for column in inspector.get_columns(table.name)}
                expected = {column.name for column in table.columns}
                if found != expected:
                    logger.warning(f"Cache table {table.name} has an unexpected layout, recreating")
                    table.drop(conn)
            Base.metadata.create_all(conn)

    def _quarantine(self) -> None:
        """Move a damaged database file aside."""
        self._engine.dispose()
        stamp = datetime.now().strftime("%Y%m%d%H%M%S")
        target = self._file_path.with_name(f"{self._file_path.name}.corrupt-{stamp}")
        self._file_path.replace(target)
        for suffix in ("-wal", "-shm"):
            sidecar = self._file_path.with_name(self._file_path.name + suffix)
            sidecar.unlink(missing_ok=True)
        logger.warning(f"Damaged cache moved to {target}")

    @contextmanager
    def _transaction(self) -> Iterator[Session]:
        """Write transaction holding the database lock from the start."""
        with Session(self._writer) as session, session.begin():
            yield session

    def _decode(self, key: CacheKey, row: CachedPrayerTimes) -> PrayerTimes:
        if row.schema_version != SCHEMA_VERSION:
            raise CacheCorrupted(f"Schema version {row.schema_version} != {SCHEMA_VERSION}")
        payload = row.payload
        if not isinstance(payload, str) or _checksum(payload) != row.checksum:
            raise CacheCorrupted("Checksum mismatch")
        try:
            times = PrayerTimes.from_dict(json.loads(payload))
        except (KeyError, TypeError, ValueError) as e:
            raise CacheCorrupted(f"Undecodable payload: {e}") from e
        if times.date != key.date or times.utc_offset != key.utc_offset or not times.is_ordered():
            raise CacheCorrupted("Payload does not match its key")
        return times

    def get(self, key: CacheKey) -> PrayerTimes | None:
        """Cached times, or None on a miss or an unreadable row."""
        digest = key.digest
        try:
            with Session(self._engine) as session:
                row = session.get(CachedPrayerTimes, digest)
                times = self._decode(key, row) if row is not None else None
        except CacheCorrupted as e:
            logger.warning(f"Discarding corrupted cache entry for {key.date}: {e}")
            self._delete(digest)
            return None
        except SQLAlchemyError as e:
            logger.warning(f"Cache read failed, treating as miss: {e}")
            return None

        logger.debug(f"Cache {'hit' if times is not None else 'miss'}: {key.date}")
        return times

    def _delete(self, digest: str) -> None:
        try:
            self._delete_where(CachedPrayerTimes.key == digest)
        except SQLAlchemyError as e:
            logger.warning(f"Could not delete cache entry: {e}")

    def put(self, key: CacheKey, times: PrayerTimes) -> None:
        """Store times; failures are logged and the value simply stays uncached."""
        payload = json.dumps(times.to_dict(), sort_keys=True)
        row = CachedPrayerTimes(
            key=key.digest,
            location_key=key.location_key,
            date=key.date,
            schema_version=SCHEMA_VERSION,
            payload=payload,
            checksum=_checksum(payload),
            computed_at=datetime.now(),
        )
        try:
            with self._transaction() as session:
                session.merge(row)
        except SQLAlchemyError as e:
            logger.warning(f"Cache write failed for {key.date}: {e}")

    def _delete_where(self, *criteria) -> int:
        statement = delete(CachedPrayerTimes).execution_options(synchronize_session=False)
        if criteria:
            statement = statement.where(*criteria)
        with self._transaction() as session:
            return session.execute(statement).rowcount

    def invalidate_all(self) -> int:
        """Drop every entry."""
        removed = self._delete_where()
        logger.info(f"Cache invalidated: {removed} entries removed")
        return removed

    def invalidate_location(self, location: Location) -> int:
        """Drop every entry for the given coordinates."""
        key = location_key(location)
        removed = self._delete_where(CachedPrayerTimes.location_key == key)
        logger.info(f"Cache invalidated for {key}: {removed} entries removed")
        return removed

    def prune_older_than(self, cutoff: date) -> int:
        """Drop entries dated strictly before ``cutoff``."""
        removed = self._delete_where(CachedPrayerTimes.date < cutoff)
        if removed:
            logger.info(f"Cache pruned: {removed} entries before {cutoff}")
        return removed

    def prune(self, today: date | None = None, retention_days: int = DEFAULT_RETENTION_DAYS) -> int:
        """Drop entries more than ``retention_days`` before ``today``."""
        today = today or date.today()
        return self.prune_older_than(today - timedelta(days=retention_days))

    def ensure_fingerprint(self, fingerprint: str) -> bool:
        """
        Record the fingerprint of the settings in use.

        A first fingerprint is adopted as is; a different one drops every entry.
        Returns True when entries were dropped for that reason.
        """
        with self._transaction() as session:
            meta = session.get(CacheMeta, _FINGERPRINT_KEY)
            stored = meta.value if meta is not None else None
            if stored == fingerprint:
                return False
            removed = 0
            if stored is not None:
                removed = session.execute(
                    delete(CachedPrayerTimes).execution_options(synchronize_session=False)
                ).rowcount
            session.merge(CacheMeta(key=_FINGERPRINT_KEY, value=fingerprint))
        if stored is None:
            return False
        logger.info(f"Settings changed since last run, {removed} cached entries dropped")
        return True

    def count(self) -> int:
        """Number of stored entries."""
        with Session(self._engine) as session:
            return session.scalar(select(func.count()).select_from(CachedPrayerTimes))

    def dates(self) -> list[date]:
        """Distinct cached dates, ascending."""
        with Session(self._engine) as session:
            return list(
                session.scalars(select(CachedPrayerTimes.date).distinct().order_by(CachedPrayerTimes.date))
            )

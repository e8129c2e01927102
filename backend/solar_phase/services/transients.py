"""Expiring key-value caches ("transients") for fetched API data.

Values are strings (callers serialize to JSON).  Two backends share the same
interface: an in-process dict for tests and single-worker setups, and a
SQLite table that survives restarts and is shared by every worker.
"""

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional, Protocol

from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session, sessionmaker

from ..models.transient import TransientModel

logger = logging.getLogger(__name__)


class TransientCache(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str, ttl: int) -> None: ...

    def delete(self, key: str) -> None: ...


@dataclass
class _CacheEntry:
    value: str
    expires_at: float


class MemoryTransientCache:
    """Process-local cache with per-entry expiry."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._entries: dict[str, _CacheEntry] = {}

    def get(self, key: str) -> Optional[str]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() >= entry.expires_at:
            del self._entries[key]
            return None
        logger.debug("Transient cache hit for %s", key)
        return entry.value

    def set(self, key: str, value: str, ttl: int) -> None:
        self._entries[key] = _CacheEntry(value=value, expires_at=self._clock() + ttl)

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)


def _utc_naive(ts: float) -> datetime:
    """SQLite DateTime columns are naive; store UTC without tzinfo."""
    return datetime.fromtimestamp(ts, tz=timezone.utc).replace(tzinfo=None)


class DatabaseTransientCache:
    """Cache backed by the ``transients`` table."""

    def __init__(
        self,
        session_factory: sessionmaker,
        clock: Callable[[], float] = time.time,
    ):
        self._session_factory = session_factory
        self._clock = clock

    def get(self, key: str) -> Optional[str]:
        db: Session = self._session_factory()
        try:
            row = db.get(TransientModel, key)
            if row is None:
                return None
            if _utc_naive(self._clock()) >= row.expires_at:
                db.delete(row)
                db.commit()
                return None
            logger.debug("Transient cache hit for %s", key)
            return row.value
        finally:
            db.close()

    def set(self, key: str, value: str, ttl: int) -> None:
        expires_at = _utc_naive(self._clock() + ttl)
        updated_at = datetime.now(timezone.utc).replace(tzinfo=None)
        # Upsert: the last of several concurrent writes wins
        stmt = sqlite_insert(TransientModel).values(
            key=key, value=value, expires_at=expires_at, updated_at=updated_at,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=[TransientModel.key],
            set_={
                "value": stmt.excluded.value,
                "expires_at": stmt.excluded.expires_at,
                "updated_at": stmt.excluded.updated_at,
            },
        )
        db: Session = self._session_factory()
        try:
            db.execute(stmt)
            db.commit()
        finally:
            db.close()

    def delete(self, key: str) -> None:
        db: Session = self._session_factory()
        try:
            row = db.get(TransientModel, key)
            if row is not None:
                db.delete(row)
                db.commit()
        finally:
            db.close()

    def purge_expired(self) -> int:
        """Delete every expired row; returns how many were removed."""
        now = _utc_naive(self._clock())
        db: Session = self._session_factory()
        try:
            removed = (
                db.query(TransientModel)
                .filter(TransientModel.expires_at <= now)
                .delete()
            )
            db.commit()
        finally:
            db.close()
        if removed:
            logger.info("Purged %d expired transients", removed)
        return removed

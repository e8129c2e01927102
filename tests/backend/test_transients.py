"""Tests for the in-memory and SQLite transient caches."""

import threading

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from solar_phase.models.database import Base
from solar_phase.models.transient import TransientModel
from solar_phase.services.transients import DatabaseTransientCache, MemoryTransientCache


class Clock:
    def __init__(self, now: float = 1_717_200_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine, tables=[TransientModel.__table__])
    yield sessionmaker(bind=engine, autocommit=False, autoflush=False)
    engine.dispose()


class TestMemoryTransientCache:
    def test_get_missing(self):
        assert MemoryTransientCache().get("nope") is None

    def test_set_then_get(self):
        cache = MemoryTransientCache(clock=Clock())
        cache.set("k", "v", 60)
        assert cache.get("k") == "v"

    def test_expires(self):
        clock = Clock()
        cache = MemoryTransientCache(clock=clock)
        cache.set("k", "v", 60)
        clock.now += 60
        assert cache.get("k") is None

    def test_overwrite_last_write_wins(self):
        cache = MemoryTransientCache(clock=Clock())
        cache.set("k", "first", 60)
        cache.set("k", "second", 60)
        assert cache.get("k") == "second"

    def test_delete(self):
        cache = MemoryTransientCache(clock=Clock())
        cache.set("k", "v", 60)
        cache.delete("k")
        cache.delete("k")
        assert cache.get("k") is None


class TestDatabaseTransientCache:
    def test_set_then_get(self, session_factory):
        cache = DatabaseTransientCache(session_factory, clock=Clock())
        cache.set("k", '{"a": 1}', 86400)
        assert cache.get("k") == '{"a": 1}'

    def test_update_existing_row(self, session_factory):
        cache = DatabaseTransientCache(session_factory, clock=Clock())
        cache.set("k", "first", 60)
        cache.set("k", "second", 60)
        assert cache.get("k") == "second"
        db = session_factory()
        try:
            assert db.query(TransientModel).count() == 1
        finally:
            db.close()

    def test_expired_row_is_removed_on_read(self, session_factory):
        clock = Clock()
        cache = DatabaseTransientCache(session_factory, clock=clock)
        cache.set("k", "v", 60)
        clock.now += 61
        assert cache.get("k") is None
        db = session_factory()
        try:
            assert db.get(TransientModel, "k") is None
        finally:
            db.close()

    def test_shared_between_instances(self, session_factory):
        clock = Clock()
        DatabaseTransientCache(session_factory, clock=clock).set("k", "v", 60)
        assert DatabaseTransientCache(session_factory, clock=clock).get("k") == "v"

    def test_delete(self, session_factory):
        cache = DatabaseTransientCache(session_factory, clock=Clock())
        cache.set("k", "v", 60)
        cache.delete("k")
        cache.delete("missing")
        assert cache.get("k") is None

    def test_purge_expired(self, session_factory):
        clock = Clock()
        cache = DatabaseTransientCache(session_factory, clock=clock)
        cache.set("short", "v", 60)
        cache.set("long", "v", 3600)
        clock.now += 120
        assert cache.purge_expired() == 1
        assert cache.get("long") == "v"

    def test_two_misses_then_both_write(self, session_factory):
        """Both requests miss, both write: the later write wins, one row remains."""
        clock = Clock()
        first = DatabaseTransientCache(session_factory, clock=clock)
        second = DatabaseTransientCache(session_factory, clock=clock)
        assert first.get("k") is None
        assert second.get("k") is None
        first.set("k", "first", 60)
        second.set("k", "second", 60)
        assert first.get("k") == "second"
        db = session_factory()
        try:
            assert db.query(TransientModel).count() == 1
        finally:
            db.close()

    def test_racing_writers_on_file_db(self, tmp_path):
        engine = create_engine(
            f"sqlite:///{tmp_path / 'transients.db'}",
            connect_args={"check_same_thread": False, "timeout": 30},
        )
        Base.metadata.create_all(bind=engine, tables=[TransientModel.__table__])
        factory = sessionmaker(bind=engine, autocommit=False, autoflush=False)
        cache = DatabaseTransientCache(factory, clock=Clock())

        writers = 8
        barrier = threading.Barrier(writers)
        errors: list[str] = []

        def write(i: int) -> None:
            barrier.wait()
            try:
                cache.set("k", f"v{i}", 60)
            except Exception as exc:
                errors.append(type(exc).__name__)

        threads = [threading.Thread(target=write, args=(i,)) for i in range(writers)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        try:
            assert errors == []
            assert cache.get("k") in {f"v{i}" for i in range(writers)}
            db = factory()
            try:
                assert db.query(TransientModel).count() == 1
            finally:
                db.close()
        finally:
            engine.dispose()

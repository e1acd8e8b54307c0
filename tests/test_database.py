from datetime import datetime

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import select

from flowershop.database import Database
from flowershop.jobs.session_cleanup import remove_expired_sessions
from flowershop.models.category import Category


def test_in_memory_database_lifecycle():
    db = Database("sqlite://")

    with pytest.raises(RuntimeError):
        db.engine

    db.open()
    assert db.is_open
    assert isinstance(db.engine.pool, StaticPool)

    db.create_all()
    with db.session() as session:
        session.add(Category(name="Roses"))
        session.commit()

    # every session sees the same in-memory database
    with db.session() as session:
        assert [c.name for c in session.exec(select(Category)).all()] == ["Roses"]

    db.close()
    assert not db.is_open


def test_open_is_idempotent(database):
    engine = database.engine

    assert database.open().engine is engine


def test_remove_expired_sessions_job(database):
    assert remove_expired_sessions(database) == 0


def test_timestamps_are_stored_as_naive_utc(session):
    before = datetime.utcnow()
    session.add(Category(name="Tulips"))
    session.commit()

    stored = session.exec(select(Category)).one()

    assert stored.created_at.tzinfo is None
    assert before <= stored.created_at <= datetime.utcnow()

"""Tests for academy/db/engine.py - Database engine and session management."""

import contextlib

from sqlalchemy import text
from sqlmodel import Session

from academy.db.engine import build_engine, get_session


def test_get_session():
    """Test get_session() yields a database session."""
    gen = get_session()
    session = next(gen)

    assert session is not None

    with contextlib.suppress(StopIteration):
        next(gen)


def test_sqlite_engine_enforces_foreign_keys():
    engine = build_engine("sqlite://")

    with Session(engine) as session:
        enabled = session.connection().execute(text("PRAGMA foreign_keys")).scalar()

    engine.dispose()
    assert enabled == 1

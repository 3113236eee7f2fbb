from collections.abc import Generator
from typing import Any

from sqlalchemy import Engine, event
from sqlmodel import Session, create_engine

from academy.core.settings import get_settings


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _record: Any) -> None:
    # Membership cascades rely on FK enforcement, which SQLite leaves off.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(database_url: str, **kwargs: Any) -> Engine:
    """Create an engine, applying the SQLite-specific connection setup."""
    connect_args: dict[str, object] = {}
    if database_url.startswith("sqlite"):
        # Required for SQLite when used with FastAPI across threads.
        connect_args = {"check_same_thread": False}

    new_engine = create_engine(
        database_url, echo=False, connect_args=connect_args, **kwargs
    )
    if new_engine.dialect.name == "sqlite":
        event.listen(new_engine, "connect", _enable_sqlite_foreign_keys)
    return new_engine


engine = build_engine(get_settings().database_url)


def get_session() -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session

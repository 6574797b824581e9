# product_ratings/core/db.py
from __future__ import annotations

from contextlib import contextmanager
from functools import lru_cache
from typing import Any, Generator, Iterator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from product_ratings.core.config import get_settings
from product_ratings.core.errors import ForeignKeyViolation, StoreError
from product_ratings.core.logging import get_logger

logger = get_logger(__name__)

# SQLSTATE foreign_key_violation (PostgreSQL)
_FOREIGN_KEY_SQLSTATE = "23503"
# SQLite extended result code SQLITE_CONSTRAINT_FOREIGNKEY
_SQLITE_FOREIGN_KEY_ERRORNAME = "SQLITE_CONSTRAINT_FOREIGNKEY"
_SQLITE_FOREIGN_KEY_MESSAGE = "FOREIGN KEY constraint failed"


class Base(DeclarativeBase):
    """Declarative base for the SQLAlchemy models."""


def _enable_sqlite_foreign_keys(dbapi_connection: Any, _connection_record: Any) -> None:
    # SQLite ships with foreign key enforcement off.
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(url: str) -> Engine:
    """
    Create an engine for `url`.

    SQLite (local runs, tests) gets foreign keys enabled on every connection;
    an in-memory database is pinned to a single shared connection so all
    sessions see the same tables.
    """
    if url.startswith("sqlite"):
        kwargs: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        engine = create_engine(url, **kwargs)
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    # pool_pre_ping drops connections the server already closed
    return create_engine(url, pool_pre_ping=True)


@lru_cache(maxsize=1)
def get_engine() -> Engine:
    return build_engine(get_settings().database_url_resolved)


@lru_cache(maxsize=1)
def get_sessionmaker() -> sessionmaker[Session]:
    return sessionmaker(
        bind=get_engine(),
        autocommit=False,
        autoflush=False,
        class_=Session,
    )


def get_db() -> Generator[Session, None, None]:
    """
    Dependency/fixture-friendly: yield a session and always close it.
    """
    SessionLocal = get_sessionmaker()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables(engine: Engine) -> None:
    # Registers the tables on Base.metadata.
    from product_ratings import models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def is_foreign_key_violation(exc: IntegrityError) -> bool:
    orig = exc.orig
    # psycopg 3 exposes `sqlstate`, psycopg2 `pgcode`.
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if code:
        return code == _FOREIGN_KEY_SQLSTATE

    # sqlite3 has no SQLSTATE; Python 3.11+ sets sqlite_errorname.
    if getattr(orig, "sqlite_errorname", None) == _SQLITE_FOREIGN_KEY_ERRORNAME:
        return True
    return _SQLITE_FOREIGN_KEY_MESSAGE in str(orig)


@contextmanager
def classify_errors(db: Session) -> Iterator[None]:
    """
    Run a store operation, rolling back and re-raising SQLAlchemy failures
    as StoreError (or ForeignKeyViolation for referential failures).
    """
    try:
        yield
    except IntegrityError as exc:
        db.rollback()
        if is_foreign_key_violation(exc):
            raise ForeignKeyViolation(str(exc.orig)) from exc
        logger.exception("Integrity error in store operation")
        raise StoreError(str(exc.orig)) from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Store operation failed")
        raise StoreError(str(exc)) from exc

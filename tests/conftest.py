import os

# Environment defaults must be in place before the app (and its Settings) is imported.
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "INFO")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ["DB_CREATE_TABLES"] = "0"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import text  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402

from product_ratings.core.db import build_engine, create_tables, get_db  # noqa: E402
from product_ratings.main import app  # noqa: E402


@pytest.fixture
def engine():
    """
    A fresh in-memory SQLite database per test, so ids always start at 1.
    """
    engine = build_engine("sqlite://")
    create_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, class_=Session)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory):
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    try:
        with TestClient(app) as c:
            yield c
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def add_products(engine):
    def _add(count: int = 1) -> None:
        count = max(count, 1)
        with engine.begin() as conn:
            for i in range(count):
                conn.execute(
                    text("INSERT INTO products(name, price) VALUES (:name, :price)"),
                    {"name": f"Product {i}", "price": (i + 1.0) * 10},
                )

    return _add


@pytest.fixture
def add_ratings(engine):
    """Insert one extra product, then `count` ratings that all point at product 1."""

    def _add(count: int = 1) -> None:
        count = max(count, 1)
        with engine.begin() as conn:
            conn.execute(
                text("INSERT INTO products(name, price) VALUES (:name, :price)"),
                {"name": "Product 1", "price": 20.0},
            )
            for i in range(count):
                conn.execute(
                    text("INSERT INTO ratings(product_id, rating, info) VALUES (:pid, :rating, :info)"),
                    {"pid": 1, "rating": i, "info": "Static rating text..."},
                )

    return _add

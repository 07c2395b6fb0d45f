"""Pytest configuration and fixtures."""

import sqlite3
from collections.abc import Generator
from datetime import UTC, datetime, timedelta

import pytest
from flask import Flask
from prometheus_client import REGISTRY
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from app import create_app
from app.config import Settings
from app.database import upgrade_database
from app.models.part import Part
from app.services.container import ServiceContainer
from app.services.part_lifecycle import PartFields, create_part


@pytest.fixture(autouse=True)
def clear_prometheus_registry():
    """Clear Prometheus registry before and after each test to ensure isolation.

    This is necessary for tests that create multiple Flask app instances or services
    that register Prometheus metrics, as metrics cannot be registered twice in the
    same registry. Clearing before AND after each test ensures proper isolation.
    """
    # Clear collectors before test
    collectors = list(REGISTRY._collector_to_names.keys())
    for collector in collectors:
        try:
            REGISTRY.unregister(collector)
        except (KeyError, ValueError):
            # Collector may have already been unregistered or not exist
            pass
    yield
    # Clean up after test
    collectors = list(REGISTRY._collector_to_names.keys())
    for collector in collectors:
        try:
            REGISTRY.unregister(collector)
        except (KeyError, ValueError):
            pass


def _build_test_settings() -> Settings:
    """Construct base Settings object for tests."""
    return Settings(
        DATABASE_URL="sqlite:///:memory:",
        SECRET_KEY="test-secret-key",
        DEBUG=True,
        FLASK_ENV="testing",
        CORS_ORIGINS=["http://localhost:3000"],
        BASE_URL="https://parts.example.com",
        QR_CODE_SIZE=120,
        ACTING_USER_HEADER="X-User-Id",
        LIFECYCLE_MAX_ATTEMPTS=3,
    )


@pytest.fixture
def test_settings() -> Settings:
    """Create test settings with in-memory database."""
    return _build_test_settings()


@pytest.fixture(scope="session")
def template_connection() -> Generator[sqlite3.Connection, None, None]:
    """Create a template SQLite database once and apply migrations."""
    conn = sqlite3.connect(":memory:", check_same_thread=False)

    settings = _build_test_settings().model_copy()
    settings.DATABASE_URL = "sqlite://"
    settings.set_engine_options_override({
        "poolclass": StaticPool,
        "creator": lambda: conn,
    })

    template_app = create_app(settings)
    with template_app.app_context():
        upgrade_database(recreate=True)

    # Note: Prometheus registry cleanup is handled by the autouse
    # clear_prometheus_registry fixture, no need to do it here

    yield conn

    conn.close()


@pytest.fixture
def app(test_settings: Settings, template_connection: sqlite3.Connection) -> Generator[Flask, None, None]:
    """Create Flask app for testing using a fresh copy of the template database."""
    clone_conn = sqlite3.connect(":memory:", check_same_thread=False)
    template_connection.backup(clone_conn)

    settings = test_settings.model_copy()
    settings.DATABASE_URL = "sqlite://"
    settings.set_engine_options_override({
        "poolclass": StaticPool,
        "creator": lambda: clone_conn,
    })

    app = create_app(settings)

    try:
        yield app
    finally:
        with app.app_context():
            from app.extensions import db as flask_db

            flask_db.session.remove()

        clone_conn.close()


@pytest.fixture
def session(container: ServiceContainer) -> Generator[Session, None, None]:
    """Create a new database session for a test."""

    session = container.db_session()

    exc = None
    try:
        yield session
    except Exception as e:
        exc = e

    if exc:
        session.rollback()
    else:
        session.commit()
    session.close()

    container.db_session.reset()


@pytest.fixture
def client(app: Flask):
    """Create test client."""
    return app.test_client()


@pytest.fixture
def container(app: Flask):
    """Access to the DI container for testing with session provided."""
    container = app.container

    with app.app_context():
        from sqlalchemy.orm import sessionmaker

        from app.extensions import db as flask_db

        SessionLocal = sessionmaker(
            bind=flask_db.engine, autoflush=True, expire_on_commit=False
        )

    container.session_maker.override(SessionLocal)

    return container


class FixedClock:
    """Deterministic clock for lifecycle tests; each call advances one minute."""

    def __init__(self, start: datetime | None = None):
        self.current = start or datetime(2024, 1, 15, 9, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        value = self.current
        self.current = self.current + timedelta(minutes=1)
        return value


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def make_part(container: ServiceContainer, session: Session):
    """Factory that stores a part with its initial-add history entry."""

    def _make_part(
        part_id: str = "P1",
        name: str = "Pump housing",
        quantity: int = 10,
        acting_user: str | None = None,
        **fields,
    ) -> Part:
        snapshot = create_part(PartFields(id=part_id, name=name, **fields), quantity, acting_user)
        part = container.part_service().create_part(snapshot)
        session.commit()
        return part

    return _make_part

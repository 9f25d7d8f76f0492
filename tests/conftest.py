import os
from collections.abc import Generator
from typing import Any

import pytest
from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from contact_store.orm.config import EntityManagerFactory, PersistenceConfiguration


@pytest.fixture(scope="session")
def db_engine() -> Generator[Engine, Any, None]:
    """Create a database engine for the test session.

    Uses CONTACT_STORE_TEST_DATABASE_URL when set, otherwise a shared in-memory SQLite database.
    """
    url = os.getenv("CONTACT_STORE_TEST_DATABASE_URL", "sqlite://")
    if url.startswith("sqlite"):
        engine = create_engine(url, connect_args={"check_same_thread": False}, poolclass=StaticPool)
    else:
        engine = create_engine(url, pool_pre_ping=True)

    yield engine

    engine.dispose()


@pytest.fixture(scope="session")
def persistence_configuration(db_engine: Engine) -> Generator[PersistenceConfiguration, Any, None]:
    """Initialize the persistence configuration once for the test session."""
    configuration = PersistenceConfiguration(db_engine, show_sql=False)
    configuration.initialize()

    yield configuration

    configuration.close()


@pytest.fixture(scope="session")
def session_factory(persistence_configuration: PersistenceConfiguration) -> EntityManagerFactory:
    return persistence_configuration.entity_manager_factory()


@pytest.fixture
def db_session(session_factory: EntityManagerFactory) -> Generator[Session, Any, None]:
    """Create a new database session for each test.

    The session is rolled back after the test to maintain isolation.
    """
    session = session_factory()

    yield session

    session.rollback()
    session.close()


@pytest.fixture
def fresh_configuration() -> Generator[PersistenceConfiguration, Any, None]:
    """A configuration over its own in-memory SQLite database, for tests that commit."""
    configuration = PersistenceConfiguration("sqlite://", show_sql=False)

    yield configuration

    configuration.close()

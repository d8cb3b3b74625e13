"""
Shared test fixtures.

Every test gets its own SQLite file database so tests never touch
the real database and never see each other's data. A file (not
:memory:) is used so several sessions and threads can share it.
"""

import pytest
from fastapi.testclient import TestClient

from stock_ledger.config import get_settings
from stock_ledger.logging_config import reset_logging
from stock_ledger.main import create_app
from stock_ledger.models.base import Base, create_session_factory, get_db
from stock_ledger.services.locks import ProductLocks


@pytest.fixture
def session_factory(tmp_path):
    """Create all tables before the test, drop them after."""
    factory = create_session_factory(
        f"sqlite:///{tmp_path / 'test.db'}", lock_timeout=5.0
    )
    engine = factory.kw["bind"]
    Base.metadata.create_all(bind=engine)
    yield factory
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(session_factory):
    """Provide a database session for direct service testing."""
    session = session_factory()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def locks():
    return ProductLocks(timeout=5.0)


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    reset_logging()


@pytest.fixture
def client(session_factory, db_session):
    """
    Provide a test client bound to the test database.

    get_db is overridden so the app uses the test session.
    """
    app = create_app(get_settings(), session_factory=session_factory)

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()

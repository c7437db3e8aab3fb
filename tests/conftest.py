"""Shared pytest fixtures for warden tests."""

import pytest
from fastapi.testclient import TestClient

from warden.api.app import create_app
from warden.core.config import Settings
from warden.db.session import build_engine, build_session_factory, init_db
from warden.storage.local import LocalStorage

BASE_URL = "http://testserver"


@pytest.fixture
def engine():
    """Create an in-memory SQLite engine with foreign keys enforced."""
    engine = build_engine("sqlite://")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def session(session_factory):
    """Create a database session for testing."""
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def storage(tmp_path):
    """Local storage rooted in a temporary directory."""
    return LocalStorage(tmp_path / "media")


@pytest.fixture
def settings(tmp_path):
    return Settings(
        db_path=tmp_path / "unused.db",
        media_root=tmp_path / "media",
        public_base_url=BASE_URL,
        signing_key="test-signing-key",
    )


@pytest.fixture
def client(settings, session_factory, storage):
    """TestClient over an app sharing the test engine and storage."""
    app = create_app(settings=settings, session_factory=session_factory, storage=storage)
    return TestClient(app)

"""
Pytest configuration and fixtures for Buscador tests.
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from api.database import Base
from api.main import app, get_runner, get_snapshot_store
from scrapers.manager import PipelineRunner
from scrapers.storage import JsonFileSnapshotStore

from tests.fakes import FakeSessionFactory


@pytest.fixture
def session_factory():
    """Fake browser sessions serving the saved result pages."""
    return FakeSessionFactory()


@pytest.fixture
def snapshot_store(tmp_path):
    """JSON snapshot store writing into a temporary directory."""
    return JsonFileSnapshotStore(tmp_path / "data")


@pytest.fixture
def runner(session_factory, snapshot_store):
    """Runner with fake sessions and no settle delay."""
    return PipelineRunner(
        session_factory=session_factory,
        snapshot_store=snapshot_store,
        settle_seconds=0,
    )


@pytest.fixture(scope="function")
def db_session_factory():
    """Session factory bound to a fresh in-memory SQLite database."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield TestingSessionLocal
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def client(runner, snapshot_store):
    """Create a test client whose runner uses fake browser sessions."""
    app.dependency_overrides[get_runner] = lambda: runner
    app.dependency_overrides[get_snapshot_store] = lambda: snapshot_store

    # Use TestClient directly without context manager for compatibility
    test_client = TestClient(app)
    yield test_client

    app.dependency_overrides.clear()

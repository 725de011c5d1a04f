"""Pytest configuration and shared fixtures."""

from unittest.mock import MagicMock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from docapproval.db.base import Base
import docapproval.db.models  # noqa: F401

from tests.factories import create_approver, create_document, create_user, get_or_create_role


@pytest.fixture
def engine():
    """Fresh in-memory SQLite database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    yield session
    session.close()


@pytest.fixture
def approver_factory(db_session):
    def _create(**kwargs):
        return create_approver(db_session, **kwargs)
    return _create


@pytest.fixture
def approvers(approver_factory):
    """Three active approvers."""
    return [approver_factory() for _ in range(3)]


@pytest.fixture
def requester(db_session):
    return create_user(db_session, name="Requester")


@pytest.fixture
def admin(db_session):
    role = get_or_create_role(db_session, "Administrator")
    return create_user(db_session, role=role, name="Admin")


@pytest.fixture
def document(db_session, requester):
    return create_document(db_session, requester=requester)


@pytest.fixture
def sink():
    """Notification sink that records calls."""
    return MagicMock()


@pytest.fixture
def client(db_session, sink):
    """TestClient bound to the test session and a mock notification sink."""
    from fastapi.testclient import TestClient

    from docapproval.api.deps import get_db, get_notification_sink
    from docapproval.api.main import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notification_sink] = lambda: sink
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()

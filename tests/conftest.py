"""Fixtures shared by the unit and integration suites."""
import os

# Settings are read at import time; keep the app off any real database
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "testing")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from classvote.main import app  # noqa: E402
from classvote.db.base import Base  # noqa: E402
from classvote.api.deps import get_db  # noqa: E402
from classvote.core.cache import global_cache  # noqa: E402
from classvote.core.security import create_vote_admin_token  # noqa: E402
from classvote.schemas import VoteCreate  # noqa: E402
from classvote.services.vote import add_vote  # noqa: E402


# One in-memory database per test, shared across threads via StaticPool
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(autouse=True)
def disable_rate_limiting_for_tests(request):
    """Rate limits are off unless a test is marked rate_limit."""
    from classvote.core.rate_limit import limiter

    limiter.reset()
    if "rate_limit" in request.keywords:
        yield
    else:
        limiter.enabled = False
        yield
        limiter.enabled = True
    limiter.reset()


@pytest.fixture(autouse=True)
def clear_snapshot_cache():
    """Snapshots are cached process-wide; start every test from an empty cache."""
    global_cache.clear()
    yield
    global_cache.clear()


@pytest.fixture(scope="function")
def db_engine():
    """In-memory SQLite engine with the schema created, dropped afterwards."""
    engine = create_engine(
        SQLALCHEMY_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_session(db_engine):
    """Session bound to the per-test engine."""
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def client(db_session):
    """TestClient whose get_db dependency yields the test session."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_vote(db_session):
    """Factory creating votes straight through the service layer.

    Defaults to a yes/no vote for 5 students with admin code 1234.
    """
    def _make_vote(**overrides):
        data = {
            "title": "Test vote",
            "admin_password": "1234",
            "total_expected_voters": 5,
            "vote_type": "yes_no",
            "visibility_setting": "everyone",
        }
        data.update(overrides)
        return add_vote(db_session, VoteCreate(**data))

    return _make_vote


@pytest.fixture
def login_as_admin(client):
    """Set an admin cookie scoped to the given vote on the shared client."""
    def _login(vote_id: str):
        client.cookies.set("admin_token", create_vote_admin_token(vote_id))
        return client

    return _login

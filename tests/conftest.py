"""Shared test fixtures and configuration."""
import os

# Must be set before attendance.core.config is imported anywhere
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("ENVIRONMENT", "testing")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from attendance.api.deps import get_db  # noqa: E402
from attendance.core.rate_limit import limiter  # noqa: E402
from attendance.core.security import create_access_token  # noqa: E402
from attendance.db.base import Base  # noqa: E402
from attendance.main import app  # noqa: E402
from attendance.repositories import SqlUserContextProvider  # noqa: E402
from attendance.services import AttendanceCoordinator  # noqa: E402
from tests.utils import seed_directory  # noqa: E402


# Test database setup
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(autouse=True)
def disable_rate_limiting_for_tests(request):
    """Disable rate limiting for all tests except rate limiting tests."""
    limiter.reset()
    if "rate_limit" in request.keywords:
        yield
    else:
        limiter.enabled = False
        yield
        limiter.enabled = True
    limiter.reset()


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh database for each test."""
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
    """Create a new database session for a test."""
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def directory(db_session):
    """Seeded users, courses and enrollments (see tests.utils.seed_directory)."""
    return seed_directory(db_session)


@pytest.fixture
def context_for(db_session):
    """Resolve the UserContext of a user id."""
    provider = SqlUserContextProvider(db_session)
    return provider.get_user_context


@pytest.fixture
def make_coordinator(db_session):
    """Build a coordinator on the test session, optionally with a fixed clock."""
    def _make(clock=None):
        if clock is None:
            return AttendanceCoordinator.from_session(db_session)
        return AttendanceCoordinator.from_session(db_session, clock=clock)
    return _make


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with a test database."""
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
def auth_headers():
    """Build an Authorization header for a user id."""
    def _headers(user_id: str) -> dict:
        return {"Authorization": f"Bearer {create_access_token({'sub': user_id})}"}
    return _headers

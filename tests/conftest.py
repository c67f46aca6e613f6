"""
Shared fixtures: in-memory SQLite database and a TestClient wired to it.
"""
import os

# Must be set before app modules read their configuration
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOG_TO_FILE", "false")
os.environ.pop("OPENAI_API_KEY", None)

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.db.base import Base
from app.db.models.auth_session import AuthSession
from app.core.auth_dependency import get_db
from app.core.security import utcnow
from app.services.auth_service import register_user


TEST_DATABASE_URL = "sqlite:///:memory:"
test_engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


def override_get_db():
    """Override get_db dependency for testing."""
    db = TestSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="function", autouse=True)
def setup_db():
    """Create and drop tables for each test."""
    Base.metadata.create_all(bind=test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def db_session():
    """Provide a database session for tests."""
    db = TestSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    """TestClient with the database dependency pointed at the test engine."""
    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session):
    """Factory: register a user directly through the service layer."""
    def _make_user(email="alice@example.com", password="Passw0rd", name=None):
        user, auth_session = register_user(db_session, email, password, password, name=name)
        return user, auth_session.token
    return _make_user


@pytest.fixture
def alice(make_user):
    return make_user("alice@example.com", "Passw0rd", name="Alice")


@pytest.fixture
def bob(make_user):
    return make_user("bob@example.com", "Hunter22", name="Bob")


@pytest.fixture
def expired_token(db_session, alice):
    """A token for alice that expired an hour ago."""
    user, _ = alice
    now = utcnow()
    auth_session = AuthSession(
        user_id=user.id,
        token="e" * 64,
        created_at=now - timedelta(days=31),
        expires_at=now - timedelta(hours=1),
    )
    db_session.add(auth_session)
    db_session.commit()
    return auth_session.token

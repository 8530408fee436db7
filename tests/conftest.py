import os

# Settings are read at import time, so the test environment goes first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

import novelcraft.models  # noqa: F401  (registers every table on Base.metadata)
from novelcraft.api.deps import get_db
from novelcraft.db.base import Base
from novelcraft.main import app
from novelcraft.models.user import User
from novelcraft.repositories.users import UserRepository
from novelcraft.services.auth import generate_token, hash_password

TEST_PASSWORD = "Str0ng!Pass"

# In-memory SQLite shared by every connection of a test
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


@event.listens_for(engine, "connect")
def _enable_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys = ON")
    cursor.close()


TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db():
    """Fresh schema and session for every test."""
    Base.metadata.create_all(bind=engine)
    db_session = TestingSessionLocal()
    try:
        yield db_session
    finally:
        db_session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db: Session):
    """Create a test client with the test database."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.state.rate_limiter.clear()

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
    app.state.rate_limiter.clear()


def make_user(db: Session, username: str, password: str = TEST_PASSWORD) -> User:
    return UserRepository.create(db, username=username, password_hash=hash_password(password))


def bearer(user: User, auth_method: str = "password") -> dict[str, str]:
    token = generate_token(user.id, user.username, auth_method)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(scope="function")
def test_user(db: Session) -> User:
    return make_user(db, "writer@example.com")


@pytest.fixture(scope="function")
def other_user(db: Session) -> User:
    return make_user(db, "rival@example.com")


@pytest.fixture(scope="function")
def auth_headers(test_user: User) -> dict[str, str]:
    """Create authentication headers with a valid token."""
    return bearer(test_user)


@pytest.fixture(scope="function")
def other_headers(other_user: User) -> dict[str, str]:
    return bearer(other_user)


@pytest.fixture(scope="function")
def user_factory(db: Session):
    """Create extra users: ``user_factory("name@example.com")``."""

    def _create(username: str, password: str = TEST_PASSWORD) -> User:
        return make_user(db, username, password)

    return _create


@pytest.fixture(scope="function")
def headers_for():
    """Bearer headers for any user: ``headers_for(user)``."""
    return bearer

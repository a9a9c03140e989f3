"""
Pytest fixtures and configuration for EstateIQ tests.

This module provides common fixtures used across all test modules,
including database setup, test client, users, sessions and Google
identity tokens.
"""

import base64
import json
import os
from typing import Callable, Generator

# Keep the app's own engine off disk and Google verification off during tests
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ.pop("GOOGLE_CLIENT_ID", None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from estateiq.main import app
from estateiq.config import SESSION_COOKIE_NAME
from estateiq.db import get_db, enable_sqlite_foreign_keys
from estateiq.models import Base
from estateiq.models.user import User
from estateiq.services.auth import AuthService
from estateiq.utils.auth import hash_password

# Test password used in fixtures
TEST_PASSWORD = "testpassword123"


# Create in-memory SQLite database for testing
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
enable_sqlite_foreign_keys(engine)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    """Use the minimum bcrypt cost so hashing doesn't dominate test time."""
    monkeypatch.setattr("estateiq.utils.auth.BCRYPT_ROUNDS", 4)


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """
    Create a fresh database session for each test.

    Creates all tables before the test and drops them after.
    """
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """
    Create a test client with overridden database dependency.
    """
    app.dependency_overrides[get_db] = lambda: db_session
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_service(db_session: Session) -> AuthService:
    return AuthService(db_session, google_client_id="")


@pytest.fixture
def test_user(db_session: Session) -> User:
    """
    Create a password-based test user in the database.
    """
    user = User(
        email="investor@example.com",
        password_hash=hash_password(TEST_PASSWORD),
        first_name="Test",
        last_name="Investor",
        phone="555-0100",
        company="Test Holdings",
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def test_user_with_auth(client: TestClient, auth_service: AuthService, test_user: User) -> User:
    """
    Create a test user with a live session and set the session cookie.
    """
    token = auth_service.create_session(test_user.id)
    client.cookies.set(SESSION_COOKIE_NAME, token)
    return test_user


def _b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


@pytest.fixture
def make_google_credential() -> Callable[..., str]:
    """
    Build an unsigned Google-style ID token with the given claims.
    """
    def _make(**claims) -> str:
        payload = {
            "iss": "https://accounts.google.com",
            "sub": "google-sub-123",
            "email": "googler@example.com",
            "given_name": "Grace",
            "family_name": "Hopper",
            "picture": "https://example.com/avatar.png",
        }
        payload.update(claims)
        header = _b64url(json.dumps({"alg": "RS256", "typ": "JWT"}).encode())
        body = _b64url(json.dumps(payload).encode())
        signature = _b64url(b"signature")
        return f"{header}.{body}.{signature}"

    return _make

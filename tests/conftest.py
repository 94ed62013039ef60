"""Pytest configuration and shared fixtures."""

import os

# Settings and the engine are built at import time, so the test environment
# must be in place before the application package is imported.
os.environ["ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("JWT_SECRET", "test_jwt_secret_key_change_in_production_min_32_chars")
os.environ.setdefault("EMAIL_BACKEND", "console")

from collections.abc import Generator  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy.orm import Session  # noqa: E402

from registry_identity import models  # noqa: E402,F401
from registry_identity.core.dependencies import Identity  # noqa: E402
from registry_identity.core.security import create_access_token  # noqa: E402
from registry_identity.db.base import Base  # noqa: E402
from registry_identity.db.engine import engine  # noqa: E402
from registry_identity.main import app  # noqa: E402
from registry_identity.models.user import User  # noqa: E402
from tests.helpers.seed import create_test_user  # noqa: E402


@pytest.fixture(scope="function")
def db() -> Generator[Session, None, None]:
    """Fresh in-memory schema per test; application code may commit freely."""
    Base.metadata.create_all(bind=engine)
    session = Session(bind=engine)
    try:
        yield session
    finally:
        session.rollback()
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db) -> Generator[TestClient, None, None]:
    """FastAPI test client sharing the test session."""
    from registry_identity.db.session import get_db

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def test_user(db) -> User:
    """Account without an email record."""
    user = create_test_user(db, login="alice")
    db.commit()
    return user


@pytest.fixture
def other_user(db) -> User:
    user = create_test_user(db, login="bob")
    db.commit()
    return user


@pytest.fixture
def identity(test_user) -> Identity:
    return Identity(id=test_user.id, login=test_user.login)


@pytest.fixture
def auth_headers(test_user) -> dict[str, str]:
    """Authorization header for test_user."""
    token = create_access_token(user_id=test_user.id, login=test_user.login)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def sent_emails(monkeypatch) -> list[dict[str, str]]:
    """Record confirmation emails instead of sending them."""
    sent: list[dict[str, str]] = []

    def record(email: str, login: str, token: str) -> str:
        sent.append({"email": email, "login": login, "token": token})
        return f"test:{len(sent)}"

    monkeypatch.setattr("registry_identity.services.verification.send_user_confirm_email", record)
    return sent


@pytest.fixture
def failing_email(monkeypatch) -> list[str]:
    """Make every confirmation email fail; returns the attempted addresses."""
    attempts: list[str] = []

    def fail(email: str, login: str, token: str) -> str:
        attempts.append(email)
        raise ConnectionRefusedError("smtp unavailable")

    monkeypatch.setattr("registry_identity.services.verification.send_user_confirm_email", fail)
    return attempts

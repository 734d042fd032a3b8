"""
Pytest configuration and fixtures
Shared test setup for all test modules
"""

import os

# Settings are read at import time, so the environment must be ready first.
os.environ.setdefault("SIGNING_SECRET", "test-signing-secret-that-is-long-enough-for-hs256")
os.environ.setdefault("TOKEN_TTL", "1h")
os.environ.setdefault("PASSWORD_HASH_COST", "1000")
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from main import app
from core.config import settings
from database import Base, get_db

# One in-memory database shared by the app and the test code
test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


@pytest.fixture(autouse=True)
def _schema():
    """Create a clean schema for each test"""
    Base.metadata.create_all(bind=test_engine)
    yield
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture(autouse=True)
def storage_root(tmp_path, monkeypatch):
    """Point the object store at a per-test directory"""
    monkeypatch.setattr(settings, "storage_root", tmp_path)
    return tmp_path


@pytest.fixture
def db_session():
    session = TestSessionLocal()
    yield session
    session.close()


@pytest.fixture
def client():
    """Create test client with database override"""

    def override_get_db():
        session = TestSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def register(client):
    """Register a user and return its Authorization headers"""

    def _register(email: str, password: str = "secret123", username: str = None) -> dict:
        response = client.post("/auth/register", json={
            "email": email,
            "password": password,
            "username": username or email.split("@")[0],
        })
        assert response.status_code == 201, response.text
        return {"Authorization": f"Bearer {response.json()['token']}"}

    return _register


@pytest.fixture
def alice(register) -> dict:
    return register("alice@example.com")


@pytest.fixture
def bob(register) -> dict:
    return register("bob@example.com")

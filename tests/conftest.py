import os
import tempfile
import uuid

# Settings and the engine are built at import time, so configure them first
_db_dir = tempfile.mkdtemp(prefix="subtrack-tests-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{os.path.join(_db_dir, 'test.db')}"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ENVIRONMENT"] = "development"
os.environ["BCRYPT_ROUNDS"] = "4"

import pytest
from fastapi.testclient import TestClient

from app.main import app

TEST_PASSWORD = "password123"

@pytest.fixture(scope="session")
def client():
    # entering the context runs startup, which creates the tables
    with TestClient(app) as test_client:
        yield test_client

@pytest.fixture(autouse=True)
def clear_cookies(client):
    client.cookies.clear()
    yield
    client.cookies.clear()

def signup(client, name="Test User"):
    """Register a fresh user and return email, id, token and bearer headers"""
    email = f"user_{uuid.uuid4().hex[:12]}@example.com"
    response = client.post(
        "/api/v1/auth/signup",
        json={"email": email, "password": TEST_PASSWORD, "name": name}
    )
    assert response.status_code == 201, response.text
    client.cookies.clear()

    body = response.json()
    token = body["access_token"]
    return {
        "email": email,
        "password": TEST_PASSWORD,
        "id": body["user"]["id"],
        "token": token,
        "headers": {"Authorization": f"Bearer {token}"},
    }

@pytest.fixture
def user(client):
    return signup(client)

@pytest.fixture
def other_user(client):
    return signup(client, name="Someone Else")

@pytest.fixture
def make_user(client):
    return lambda name="Test User": signup(client, name)

# tests/conftest.py
import os

# Must be set before anything imports helpdesk.main
os.environ["ENVIRONMENT"] = "test"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["MOCK_LLM"] = "false"
os.environ["OPENAI_API_KEY"] = ""
os.environ["LOG_LEVEL"] = "WARNING"

import random

import pytest
from fastapi.testclient import TestClient

from helpdesk.config import get_settings

get_settings.cache_clear()

from helpdesk.main import app  # noqa: E402


@pytest.fixture
def client():
    # Each lifespan opens a fresh in-memory database
    with TestClient(app) as c:
        app.state.rng = random.Random(7)
        yield c


@pytest.fixture
def signup(client):
    """Create an account through the API; returns (token, user)."""
    def _signup(name, email, role="agent", password="password123"):
        r = client.post(
            "/api/auth/signup",
            json={"name": name, "email": email, "password": password, "role": role},
        )
        assert r.status_code == 201, r.text
        data = r.json()["data"]
        return data["token"], data["user"]
    return _signup
"""Shared fixtures: a fresh in-memory schema per test and an API client helper."""

import unittest

from fastapi.testclient import TestClient

from rolegate.core.database import SessionLocal, engine
from rolegate.core.transaction import clear_transaction_id
from rolegate.main import app
from rolegate.models import Base

PASSWORD = "correct-horse-battery"


class DatabaseTestCase(unittest.TestCase):
    """Creates all tables before each test and drops them after."""

    def setUp(self) -> None:
        Base.metadata.create_all(engine)
        self.db = SessionLocal()

    def tearDown(self) -> None:
        self.db.close()
        Base.metadata.drop_all(engine)
        clear_transaction_id()


class ApiTestCase(DatabaseTestCase):
    """DatabaseTestCase plus a TestClient and token helpers."""

    def setUp(self) -> None:
        super().setUp()
        self.client = TestClient(app)

    def register(self, username: str = "alice", password: str = PASSWORD) -> dict:
        response = self.client.post(
            "/api/auth/register", json={"username": username, "password": password}
        )
        self.assertEqual(response.status_code, 200, response.text)
        return response.json()

    def auth_headers(self, username: str = "alice", **extra: str) -> dict[str, str]:
        """Register username and return an Authorization header with its access token."""
        tokens = self.register(username)
        return {"Authorization": f"Bearer {tokens['access_token']}", **extra}

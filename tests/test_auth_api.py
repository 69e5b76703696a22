"""API tests for /api/auth and the bearer-token dependency."""

from datetime import timedelta

from rolegate.core.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    validate_token,
)
from rolegate.middleware import TRANSACTION_ID_HEADER
from rolegate.models import User
from tests.support import PASSWORD, ApiTestCase

TXN = "TXN-20250219143005-00042"


class TestRegister(ApiTestCase):
    def test_register_returns_token_pair(self) -> None:
        response = self.client.post(
            "/api/auth/register",
            json={"username": "alice", "password": PASSWORD},
            headers={TRANSACTION_ID_HEADER: TXN},
        )
        self.assertEqual(response.status_code, 200, response.text)
        body = response.json()
        self.assertEqual(body["username"], "alice")
        self.assertEqual(body["roles"], ["USER"])
        self.assertEqual(body["token_type"], "Bearer")
        self.assertEqual(body["transaction_id"], TXN)
        self.assertEqual(body["expires_in"], 24 * 60 * 60)
        self.assertEqual(body["refresh_expires_in"], 7 * 24 * 60 * 60)
        self.assertTrue(validate_token(body["access_token"], "alice"))

        claims = decode_token(body["access_token"])
        self.assertEqual(claims["transactionId"], TXN)
        self.assertEqual(claims["authorities"], ["ROLE_USER"])
        self.assertEqual(decode_token(body["refresh_token"])["type"], "REFRESH")

    def test_register_stamps_user_with_transaction_id(self) -> None:
        self.client.post(
            "/api/auth/register",
            json={"username": "alice", "password": PASSWORD},
            headers={TRANSACTION_ID_HEADER: TXN},
        )
        user = self.db.query(User).filter(User.username == "alice").one()
        self.assertEqual(user.transaction_id, TXN)
        self.assertTrue(user.active)
        self.assertNotEqual(user.password_hash, PASSWORD)

    def test_duplicate_username_rejected(self) -> None:
        self.register("alice")
        response = self.client.post(
            "/api/auth/register",
            json={"username": "alice", "password": PASSWORD},
            headers={TRANSACTION_ID_HEADER: TXN},
        )
        self.assertEqual(response.status_code, 400)
        body = response.json()
        self.assertEqual(body["message"], "Username already exists")
        self.assertEqual(body["transaction_id"], TXN)

    def test_short_password_rejected(self) -> None:
        response = self.client.post(
            "/api/auth/register", json={"username": "alice", "password": "short"}
        )
        self.assertEqual(response.status_code, 400)
        self.assertIn("password", response.json()["message"])

    def test_overlong_transaction_header_not_stored(self) -> None:
        self.client.post(
            "/api/auth/register",
            json={"username": "alice", "password": PASSWORD},
            headers={TRANSACTION_ID_HEADER: "T" * 200},
        )
        user = self.db.query(User).filter(User.username == "alice").one()
        self.assertRegex(user.transaction_id, r"^TXN-\d{14}-\d{5}$")


class TestLogin(ApiTestCase):
    def test_login_success(self) -> None:
        self.register("alice")
        response = self.client.post(
            "/api/auth/login", json={"username": "alice", "password": PASSWORD}
        )
        self.assertEqual(response.status_code, 200, response.text)
        body = response.json()
        self.assertEqual(body["username"], "alice")
        self.assertEqual(body["transaction_id"], response.headers[TRANSACTION_ID_HEADER])

    def test_username_whitespace_ignored(self) -> None:
        self.client.post(
            "/api/auth/register", json={"username": " alice ", "password": PASSWORD}
        )
        response = self.client.post(
            "/api/auth/login", json={"username": " alice", "password": PASSWORD}
        )
        self.assertEqual(response.status_code, 200, response.text)
        self.assertEqual(response.json()["username"], "alice")

    def test_blank_username_rejected(self) -> None:
        response = self.client.post(
            "/api/auth/login", json={"username": "   ", "password": PASSWORD}
        )
        self.assertEqual(response.status_code, 400)

    def test_wrong_password(self) -> None:
        self.register("alice")
        response = self.client.post(
            "/api/auth/login", json={"username": "alice", "password": "wrong-password"}
        )
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["message"], "Invalid username or password")

    def test_unknown_user(self) -> None:
        response = self.client.post(
            "/api/auth/login", json={"username": "nobody", "password": PASSWORD}
        )
        self.assertEqual(response.status_code, 401)

    def test_inactive_user(self) -> None:
        self.register("alice")
        user = self.db.query(User).filter(User.username == "alice").one()
        user.active = False
        self.db.commit()
        response = self.client.post(
            "/api/auth/login", json={"username": "alice", "password": PASSWORD}
        )
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["message"], "User is inactive")


class TestRefresh(ApiTestCase):
    def test_refresh_issues_new_pair(self) -> None:
        tokens = self.register("alice")
        response = self.client.post(
            "/api/auth/refresh",
            json={"refresh_token": tokens["refresh_token"]},
            headers={TRANSACTION_ID_HEADER: TXN},
        )
        self.assertEqual(response.status_code, 200, response.text)
        body = response.json()
        self.assertEqual(body["username"], "alice")
        self.assertEqual(body["transaction_id"], TXN)
        self.assertEqual(decode_token(body["access_token"])["transactionId"], TXN)

    def test_access_token_cannot_refresh(self) -> None:
        tokens = self.register("alice")
        response = self.client.post(
            "/api/auth/refresh", json={"refresh_token": tokens["access_token"]}
        )
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["message"], "Invalid refresh token")

    def test_expired_refresh_token(self) -> None:
        self.register("alice")
        expired = create_refresh_token("alice", expires_delta=timedelta(seconds=-5))
        response = self.client.post("/api/auth/refresh", json={"refresh_token": expired})
        self.assertEqual(response.status_code, 401)

    def test_refresh_for_deleted_user(self) -> None:
        token = create_refresh_token("ghost")
        response = self.client.post("/api/auth/refresh", json={"refresh_token": token})
        self.assertEqual(response.status_code, 401)

    def test_blank_refresh_token(self) -> None:
        for payload in ({"refresh_token": "   "}, {}):
            with self.subTest(payload=payload):
                response = self.client.post("/api/auth/refresh", json=payload)
                self.assertEqual(response.status_code, 400)
                self.assertEqual(response.json()["message"], "Refresh token is required")


class TestHealth(ApiTestCase):
    def test_health(self) -> None:
        response = self.client.get("/api/auth/health", headers={TRANSACTION_ID_HEADER: TXN})
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["status"], "UP")
        self.assertEqual(body["service"], "authentication")
        self.assertEqual(body["transaction_id"], TXN)
        self.assertEqual(body["database"], "connected")


class TestBearerAuthentication(ApiTestCase):
    """Protected routes accept access tokens only."""

    def test_access_token_accepted(self) -> None:
        headers = self.auth_headers("alice")
        response = self.client.get("/api/users/me", headers=headers)
        self.assertEqual(response.status_code, 200, response.text)
        body = response.json()
        self.assertEqual(body["username"], "alice")
        self.assertEqual(body["authorities"], ["ROLE_USER"])

    def test_missing_token(self) -> None:
        response = self.client.get("/api/users")
        self.assertEqual(response.status_code, 401)
        self.assertIn(TRANSACTION_ID_HEADER, response.headers)

    def test_refresh_token_rejected(self) -> None:
        tokens = self.register("alice")
        response = self.client.get(
            "/api/users", headers={"Authorization": f"Bearer {tokens['refresh_token']}"}
        )
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["detail"], "Access token required")

    def test_expired_access_token_rejected(self) -> None:
        self.register("alice")
        token = create_access_token("alice", ["ROLE_USER"], expires_delta=timedelta(seconds=-5))
        response = self.client.get("/api/users", headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(response.status_code, 401)

    def test_token_for_unknown_user_rejected(self) -> None:
        token = create_access_token("ghost", ["ROLE_USER"])
        response = self.client.get("/api/users", headers={"Authorization": f"Bearer {token}"})
        self.assertEqual(response.status_code, 401)

    def test_inactive_user_token_rejected(self) -> None:
        headers = self.auth_headers("alice")
        user = self.db.query(User).filter(User.username == "alice").one()
        user.active = False
        self.db.commit()
        response = self.client.get("/api/users", headers=headers)
        self.assertEqual(response.status_code, 401)

    def test_malformed_token_rejected(self) -> None:
        response = self.client.get("/api/users", headers={"Authorization": "Bearer not-a-jwt"})
        self.assertEqual(response.status_code, 401)

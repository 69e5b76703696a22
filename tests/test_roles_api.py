"""API tests for /api/roles, including role assignment sub-resources."""

from rolegate.core.security import decode_token
from rolegate.middleware import TRANSACTION_ID_HEADER
from tests.support import PASSWORD, ApiTestCase

TXN = "TXN-20250301120000-00011"


class RolesApiTestCase(ApiTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.headers = self.auth_headers("admin")
        self.admin_id = self.client.get("/api/users/me", headers=self.headers).json()["id"]

    def create_role(self, name: str, **extra: object) -> dict:
        response = self.client.post(
            "/api/roles", json={"name": name, **extra}, headers=self.headers
        )
        self.assertEqual(response.status_code, 200, response.text)
        return response.json()

    def assign(self, user_id: int, names: list[str]):
        return self.client.post(
            f"/api/roles/users/{user_id}/assign", json=names, headers=self.headers
        )


class TestRoleCrud(RolesApiTestCase):
    def test_create_role(self) -> None:
        response = self.client.post(
            "/api/roles",
            json={"name": "ADMIN", "description": "Administrators"},
            headers={**self.headers, TRANSACTION_ID_HEADER: TXN},
        )
        self.assertEqual(response.status_code, 200, response.text)
        body = response.json()
        self.assertEqual(body["name"], "ADMIN")
        self.assertEqual(body["description"], "Administrators")
        self.assertTrue(body["active"])
        self.assertEqual(body["transaction_id"], TXN)

    def test_role_name_uniqueness(self) -> None:
        self.create_role("ADMIN")
        response = self.client.post("/api/roles", json={"name": "ADMIN"}, headers=self.headers)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["message"], "Role already exists with name: ADMIN")

    def test_get_list_and_active(self) -> None:
        admin = self.create_role("ADMIN")
        self.create_role("LEGACY", active=False)
        self.assertEqual(
            self.client.get(f"/api/roles/{admin['id']}", headers=self.headers).json()["name"],
            "ADMIN",
        )
        self.assertEqual(
            self.client.get("/api/roles/name/ADMIN", headers=self.headers).json()["id"],
            admin["id"],
        )
        names = [r["name"] for r in self.client.get("/api/roles", headers=self.headers).json()]
        self.assertEqual(names, ["ADMIN", "LEGACY"])
        active = self.client.get("/api/roles/active", headers=self.headers).json()
        self.assertEqual([r["name"] for r in active], ["ADMIN"])

    def test_missing_role_is_404(self) -> None:
        self.assertEqual(self.client.get("/api/roles/9999", headers=self.headers).status_code, 404)
        self.assertEqual(
            self.client.get("/api/roles/name/NOPE", headers=self.headers).status_code, 404
        )

    def test_update_role(self) -> None:
        role = self.create_role("ADMIN", description="old")
        response = self.client.put(
            f"/api/roles/{role['id']}",
            json={"description": None, "active": False},
            headers=self.headers,
        )
        self.assertEqual(response.status_code, 200, response.text)
        body = response.json()
        self.assertEqual(body["name"], "ADMIN")
        self.assertIsNone(body["description"])
        self.assertFalse(body["active"])

    def test_update_role_name_conflict(self) -> None:
        self.create_role("ADMIN")
        other = self.create_role("AUDITOR")
        response = self.client.put(
            f"/api/roles/{other['id']}", json={"name": "ADMIN"}, headers=self.headers
        )
        self.assertEqual(response.status_code, 400)

    def test_delete_role(self) -> None:
        role = self.create_role("ADMIN")
        self.assign(self.admin_id, ["ADMIN"])
        response = self.client.delete(f"/api/roles/{role['id']}", headers=self.headers)
        self.assertEqual(response.status_code, 204)
        self.assertEqual(
            self.client.get(f"/api/roles/{role['id']}", headers=self.headers).status_code, 404
        )
        user = self.client.get(f"/api/users/{self.admin_id}", headers=self.headers).json()
        self.assertEqual(user["roles"], [])
        self.assertEqual(
            self.client.delete(f"/api/roles/{role['id']}", headers=self.headers).status_code, 404
        )

    def test_check_name(self) -> None:
        self.create_role("ADMIN")
        self.assertIs(
            self.client.get("/api/roles/check-name/ADMIN", headers=self.headers).json(), True
        )
        self.assertIs(
            self.client.get("/api/roles/check-name/NOPE", headers=self.headers).json(), False
        )


class TestRoleAssignment(RolesApiTestCase):
    def test_assign_and_query(self) -> None:
        self.create_role("ADMIN")
        self.create_role("AUDITOR")
        response = self.client.post(
            f"/api/roles/users/{self.admin_id}/assign",
            json=["ADMIN", "AUDITOR", "ADMIN"],
            headers={**self.headers, TRANSACTION_ID_HEADER: TXN},
        )
        self.assertEqual(response.status_code, 200, response.text)
        body = response.json()
        self.assertEqual(body["roles"], ["ADMIN", "AUDITOR"])
        self.assertEqual(body["transaction_id"], TXN)

        roles = self.client.get(f"/api/roles/users/{self.admin_id}", headers=self.headers).json()
        self.assertEqual([r["name"] for r in roles], ["ADMIN", "AUDITOR"])
        names = self.client.get(
            f"/api/roles/users/{self.admin_id}/names", headers=self.headers
        ).json()
        self.assertEqual(names, ["ADMIN", "AUDITOR"])
        self.assertIs(
            self.client.get(
                f"/api/roles/users/{self.admin_id}/has-role/ADMIN", headers=self.headers
            ).json(),
            True,
        )
        self.assertIs(
            self.client.get(
                f"/api/roles/users/{self.admin_id}/has-role/OTHER", headers=self.headers
            ).json(),
            False,
        )

    def test_assign_unknown_role_changes_nothing(self) -> None:
        self.create_role("ADMIN")
        response = self.assign(self.admin_id, ["ADMIN", "GHOST", "PHANTOM"])
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["message"], "Roles not found: GHOST, PHANTOM")
        user = self.client.get(f"/api/users/{self.admin_id}", headers=self.headers).json()
        self.assertEqual(user["roles"], [])

    def test_assign_to_unknown_user(self) -> None:
        self.create_role("ADMIN")
        self.assertEqual(self.assign(9999, ["ADMIN"]).status_code, 404)

    def test_remove_roles(self) -> None:
        self.create_role("ADMIN")
        self.create_role("AUDITOR")
        self.assign(self.admin_id, ["ADMIN", "AUDITOR"])
        response = self.client.post(
            f"/api/roles/users/{self.admin_id}/remove",
            json=["AUDITOR", "UNKNOWN"],
            headers=self.headers,
        )
        self.assertEqual(response.status_code, 200, response.text)
        self.assertEqual(response.json()["roles"], ["ADMIN"])

    def test_users_by_role_and_count(self) -> None:
        self.create_role("ADMIN")
        bob = self.client.post(
            "/api/users", json={"username": "bob", "password": PASSWORD}, headers=self.headers
        ).json()
        self.assign(self.admin_id, ["ADMIN"])
        self.assign(bob["id"], ["ADMIN"])

        users = self.client.get("/api/roles/name/ADMIN/users", headers=self.headers).json()
        self.assertEqual([u["username"] for u in users], ["admin", "bob"])
        count = self.client.get(
            "/api/roles/name/ADMIN/count", headers={**self.headers, TRANSACTION_ID_HEADER: TXN}
        ).json()
        self.assertEqual(count, {"role_name": "ADMIN", "user_count": 2, "transaction_id": TXN})

    def test_inactive_roles_are_excluded(self) -> None:
        self.create_role("ADMIN")
        legacy = self.create_role("LEGACY")
        self.assign(self.admin_id, ["ADMIN", "LEGACY"])
        self.client.put(f"/api/roles/{legacy['id']}", json={"active": False}, headers=self.headers)

        names = self.client.get(
            f"/api/roles/users/{self.admin_id}/names", headers=self.headers
        ).json()
        self.assertEqual(names, ["ADMIN"])
        self.assertIs(
            self.client.get(
                f"/api/roles/users/{self.admin_id}/has-role/LEGACY", headers=self.headers
            ).json(),
            False,
        )
        self.assertEqual(
            self.client.get("/api/roles/name/LEGACY/count", headers=self.headers).json()[
                "user_count"
            ],
            0,
        )

        login = self.client.post(
            "/api/auth/login", json={"username": "admin", "password": PASSWORD}
        ).json()
        self.assertEqual(login["roles"], ["ADMIN"])
        self.assertEqual(decode_token(login["access_token"])["authorities"], ["ROLE_ADMIN"])

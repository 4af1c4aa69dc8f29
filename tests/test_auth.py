"""Tests for user and admin accounts and the bearer-token gate."""
from datetime import timedelta

from smartwatt.application.services.auth_service import ROLE_USER, create_access_token
from tests.conftest import auth_header, create_catalog_device, get_me, register_admin, register_user


class TestUserAccounts:

    def test_register_returns_user_and_token(self, client):
        data = register_user(client, budget=500)
        assert data["token"]
        assert data["user"]["email"] == "alice@example.com"
        assert data["user"]["userName"] == "Alice"
        assert data["user"]["budget"] == 500
        assert data["user"]["minBudget"] == 0
        assert data["user"]["totalWattage"] == 0
        assert "password" not in data["user"]
        assert "passwordHash" not in data["user"]

    def test_response_envelope(self, client):
        resp = client.post("/api/register", json={
            "userName": "Bob", "email": "bob@example.com", "password": "pw",
        })
        body = resp.json()
        assert body["status"] == "success"
        assert isinstance(body["message"], str)
        assert body["data"]["user"]["budget"] == 0

    def test_register_missing_field_is_400(self, client):
        resp = client.post("/api/register", json={"email": "x@example.com", "password": "pw"})
        assert resp.status_code == 400
        assert resp.json()["status"] == "error"
        assert resp.json()["data"] is None

    def test_duplicate_email_is_409(self, client):
        register_user(client)
        resp = client.post("/api/register", json={
            "userName": "Again", "email": "alice@example.com", "password": "pw",
        })
        assert resp.status_code == 409

    def test_login(self, client):
        register_user(client)
        resp = client.post("/api/login", json={"email": "alice@example.com", "password": "s3cret"})
        assert resp.status_code == 200
        assert resp.json()["data"]["token"]

    def test_login_wrong_password_is_401(self, client):
        register_user(client)
        resp = client.post("/api/login", json={"email": "alice@example.com", "password": "nope"})
        assert resp.status_code == 401
        assert resp.json()["message"] == "Invalid credentials"

    def test_login_unknown_email_is_401(self, client):
        resp = client.post("/api/login", json={"email": "ghost@example.com", "password": "pw"})
        assert resp.status_code == 401

    def test_get_me(self, client):
        data = register_user(client)
        assert get_me(client, data["headers"])["id"] == data["user"]["id"]

    def test_missing_token_is_401(self, client):
        assert client.get("/api/user").status_code == 401

    def test_garbage_token_is_401(self, client):
        assert client.get("/api/user", headers=auth_header("not-a-jwt")).status_code == 401

    def test_expired_token_is_401(self, client):
        data = register_user(client)
        token = create_access_token(data["user"]["id"], ROLE_USER, expires_delta=timedelta(seconds=-1))
        assert client.get("/api/user", headers=auth_header(token)).status_code == 401

    def test_partial_update_only_changes_given_fields(self, client):
        data = register_user(client)
        resp = client.put("/api/user", json={"userName": "Alicia"}, headers=data["headers"])
        assert resp.status_code == 200
        user = resp.json()["data"]
        assert user["userName"] == "Alicia"
        assert user["email"] == "alice@example.com"
        assert user["budget"] == 500

    def test_update_password_allows_new_login(self, client):
        data = register_user(client)
        client.put("/api/user", json={"password": "changed"}, headers=data["headers"])
        resp = client.post("/api/login", json={"email": "alice@example.com", "password": "changed"})
        assert resp.status_code == 200

    def test_update_ignores_ledger_fields(self, client):
        data = register_user(client)
        resp = client.put("/api/user", json={"minBudget": 99, "totalWattage": 5}, headers=data["headers"])
        assert resp.status_code == 200
        assert resp.json()["data"]["minBudget"] == 0
        assert resp.json()["data"]["totalWattage"] == 0

    def test_update_to_taken_email_is_409(self, client):
        register_user(client, email="bob@example.com")
        data = register_user(client)
        resp = client.put("/api/user", json={"email": "bob@example.com"}, headers=data["headers"])
        assert resp.status_code == 409

    def test_update_budget(self, client):
        data = register_user(client)
        resp = client.put("/api/user/budget", json={"budget": 750.5}, headers=data["headers"])
        assert resp.status_code == 200
        assert resp.json()["data"]["budget"] == 750.5

    def test_negative_budget_is_400(self, client):
        data = register_user(client)
        resp = client.put("/api/user/budget", json={"budget": -1}, headers=data["headers"])
        assert resp.status_code == 400

    def test_delete_account_removes_home_devices(self, client):
        admin = register_admin(client)
        device = create_catalog_device(client, admin["headers"])
        data = register_user(client)
        client.post(f"/api/home-devices/{device['id']}", json={"chosenWatts": 100}, headers=data["headers"])

        resp = client.delete("/api/user", headers=data["headers"])
        assert resp.status_code == 200
        assert client.get("/api/user", headers=data["headers"]).status_code == 401

        # The catalog entry is no longer referenced
        assert client.delete(f"/api/system-devices/{device['id']}", headers=admin["headers"]).status_code == 200


class TestAdminAccounts:

    def test_register_and_login(self, client):
        register_admin(client)
        resp = client.post("/api/admin/login", json={"email": "admin@example.com", "password": "adminpass"})
        assert resp.status_code == 200
        assert resp.json()["data"]["token"]

    def test_duplicate_admin_is_409(self, client):
        register_admin(client)
        resp = client.post("/api/admin/register", json={"email": "admin@example.com", "password": "x"})
        assert resp.status_code == 409

    def test_admin_probe(self, client):
        admin = register_admin(client)
        resp = client.get("/api/admin", headers=admin["headers"])
        assert resp.status_code == 200
        assert resp.json()["message"] == "Welcome Admin"

    def test_user_token_on_admin_route_is_403(self, client):
        data = register_user(client)
        assert client.get("/api/admin", headers=data["headers"]).status_code == 403

    def test_admin_token_on_user_route_is_401(self, client):
        admin = register_admin(client)
        assert client.get("/api/user", headers=admin["headers"]).status_code == 401

    def test_admin_and_user_identities_are_separate(self, client):
        register_admin(client, email="same@example.com")
        register_user(client, email="same@example.com")
        resp = client.post("/api/login", json={"email": "same@example.com", "password": "adminpass"})
        assert resp.status_code == 401

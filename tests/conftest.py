"""Pytest fixtures — SQLite database and temp upload dir, fresh schema per test."""
import os
import tempfile

# conftest can be imported twice (by pytest and via `tests.conftest`); reuse one dir
_TMP_DIR = os.environ.setdefault("SMARTWATT_TEST_DIR", tempfile.mkdtemp(prefix="smartwatt-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{os.path.join(_TMP_DIR, 'test.db')}"
os.environ["UPLOAD_DIR"] = os.path.join(_TMP_DIR, "uploads")
os.environ["SECRET_KEY"] = "test-secret"
os.environ["GEMINI_API_KEY"] = ""
os.environ["OPENAI_API_KEY"] = ""
os.environ["ENVIRONMENT"] = "test"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from smartwatt.config import get_settings  # noqa: E402
from smartwatt.main import app  # noqa: E402

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture(scope="function")
def client():
    """TestClient with a clean schema; dependency overrides are reset afterwards."""
    with TestClient(app) as c:
        yield c
        app.state.database.drop_all()
        app.state.database.create_all()
    app.dependency_overrides.clear()


@pytest.fixture
def upload_dir() -> str:
    return get_settings().UPLOAD_DIR


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def register_user(client: TestClient, email: str = "alice@example.com", budget: float = 500) -> dict:
    """POST /api/register and return {user, token, headers}."""
    resp = client.post("/api/register", json={
        "userName": "Alice",
        "email": email,
        "password": "s3cret",
        "budget": budget,
    })
    assert resp.status_code == 201, resp.text
    data = resp.json()["data"]
    return {**data, "headers": auth_header(data["token"])}


def register_admin(client: TestClient, email: str = "admin@example.com") -> dict:
    resp = client.post("/api/admin/register", json={"email": email, "password": "adminpass"})
    assert resp.status_code == 201, resp.text
    data = resp.json()["data"]
    return {**data, "headers": auth_header(data["token"])}


def create_catalog_device(
    client: TestClient,
    admin_headers: dict,
    name: str = "Fridge",
    watts_options: str = "[100, 150]",
    all_day: bool = True,
) -> dict:
    resp = client.post(
        "/api/system-devices",
        data={
            "name": name,
            "wattsOptions": watts_options,
            "deviceWorkAllDay": "true" if all_day else "false",
        },
        files={"img": (f"{name.lower()}.png", PNG_BYTES, "image/png")},
        headers=admin_headers,
    )
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


def get_me(client: TestClient, headers: dict) -> dict:
    resp = client.get("/api/user", headers=headers)
    assert resp.status_code == 200, resp.text
    return resp.json()["data"]

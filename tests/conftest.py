import os

# Settings are read at import time, so configure the environment first.
os.environ.setdefault("ADMIN_USERNAME", "admin")
os.environ.setdefault("ADMIN_PASSWORD", "admin-secret")
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ["GOOGLE_SHEET_ID"] = ""
os.environ["GITHUB_TOKEN"] = ""

import pytest
from fastapi.testclient import TestClient

from registration_api.app.core.sheets import MemorySpreadsheet, use_spreadsheet
from registration_api.app.main import app


ADMIN_CREDENTIALS = {"username": "admin", "password": "admin-secret", "type": "admin"}


# ──────────────────────────────────────────────
# Fixtures
# ──────────────────────────────────────────────


@pytest.fixture
def spreadsheet():
    """A fresh in-memory spreadsheet for every test."""
    sheet = MemorySpreadsheet()
    use_spreadsheet(sheet)
    yield sheet
    use_spreadsheet(None)


@pytest.fixture
def client(spreadsheet):
    return TestClient(app)


def auth_headers(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(client):
    response = client.post("/api/v1/auth/login", json=ADMIN_CREDENTIALS)
    assert response.status_code == 200
    return auth_headers(response.json()["access_token"])


@pytest.fixture
def company(client, admin_headers):
    """A saved, enabled company called Acme."""
    response = client.post(
        "/api/v1/companies",
        json={"name": "Acme", "username": "acme", "password": "acme-pass"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    return response.json()["company"]


@pytest.fixture
def company_headers(client, company):
    response = client.post(
        "/api/v1/auth/login",
        json={"username": "acme", "password": "acme-pass", "type": "company"},
    )
    assert response.status_code == 200
    return auth_headers(response.json()["access_token"])


@pytest.fixture
def event(client, company, company_headers):
    """An enabled event of Acme called Hackathon."""
    response = client.post(
        "/api/v1/events",
        json={"companyName": "Acme", "eventName": "Hackathon"},
        headers=company_headers,
    )
    assert response.status_code == 200
    return response.json()["event"]


@pytest.fixture
def registration_payload():
    """Build a valid public registration body, with optional overrides."""

    def _build(**overrides):
        payload = {
            "companyName": "Acme",
            "eventName": "Hackathon",
            "name": "Jane Doe",
            "phone": "01012345678",
            "email": "jane@example.com",
            "gender": "Female",
            "college": "Engineering",
            "status": "Student",
            "nationalId": "29801011234567",
        }
        payload.update(overrides)
        return payload

    return _build

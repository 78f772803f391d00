import pytest
from fastapi.testclient import TestClient

from registration_api.app.core import tables
from registration_api.app.main import app
from registration_api.app.services.company_service import COMPANY_HEADERS


def test_create_company_writes_row_and_sheet(client, spreadsheet, company):
    assert company["id"].startswith("company_")
    assert company["enabled"] is True
    assert "password" not in company

    rows = spreadsheet.get_values("companies")
    assert rows[0] == COMPANY_HEADERS
    assert rows[1][:3] == [company["id"], "Acme", "acme"]
    # Stored hashed, never in clear text.
    assert rows[1][3] != "acme-pass"
    assert spreadsheet.has_sheet("Acme")


def test_list_companies_hides_passwords(client, admin_headers, company):
    response = client.get("/api/v1/companies", headers=admin_headers)
    assert response.status_code == 200
    companies = response.json()["companies"]
    assert [c["username"] for c in companies] == ["acme"]
    assert "password" not in companies[0]
    assert "password_hash" not in companies[0]


def test_company_routes_require_admin(client, company, company_headers):
    assert client.get("/api/v1/companies").status_code == 401
    assert client.get("/api/v1/companies", headers=company_headers).status_code == 401


def test_create_company_missing_fields(client, admin_headers, spreadsheet):
    response = client.post(
        "/api/v1/companies",
        json={"name": "Acme", "username": " ", "password": "x"},
        headers=admin_headers,
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Name, username, and password are required"


def test_duplicate_username_rejected(client, admin_headers, company):
    response = client.post(
        "/api/v1/companies",
        json={"name": "Other", "username": "acme", "password": "x"},
        headers=admin_headers,
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Username already exists"


def test_duplicate_name_rejected(client, admin_headers, company):
    response = client.post(
        "/api/v1/companies",
        json={"name": "Acme", "username": "acme2", "password": "x"},
        headers=admin_headers,
    )
    assert response.status_code == 400


@pytest.mark.parametrize("name", ["ACME", "acme"])
def test_name_clash_ignores_case(client, admin_headers, spreadsheet, company, name):
    response = client.post(
        "/api/v1/companies",
        json={"name": name, "username": "acme2", "password": "x"},
        headers=admin_headers,
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Company name already exists"
    assert len(spreadsheet.get_values("companies")) == 2


@pytest.mark.parametrize("name", ["companies", "Companies", "COMPANIES"])
def test_reserved_name_rejected(client, admin_headers, spreadsheet, name):
    response = client.post(
        "/api/v1/companies",
        json={"name": name, "username": "x", "password": "x"},
        headers=admin_headers,
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Company name is reserved"


def test_failed_sheet_creation_saves_no_company(client, admin_headers, spreadsheet, monkeypatch):
    tables.ensure_sheet("companies", COMPANY_HEADERS)

    def failing_add_sheet(title):
        raise RuntimeError("sheet service unavailable")

    monkeypatch.setattr(spreadsheet, "add_sheet", failing_add_sheet)
    with pytest.raises(RuntimeError):
        client.post(
            "/api/v1/companies",
            json={"name": "Acme", "username": "acme", "password": "x"},
            headers=admin_headers,
        )
    assert client.get("/api/v1/companies", headers=admin_headers).json()["companies"] == []


def test_update_company_fields(client, admin_headers, company):
    response = client.patch(
        "/api/v1/companies",
        json={"id": company["id"], "username": "acme-new", "password": "new-pass", "enabled": False},
        headers=admin_headers,
    )
    assert response.status_code == 200
    updated = response.json()["company"]
    assert updated["username"] == "acme-new"
    assert updated["enabled"] is False

    fetched = client.get(f"/api/v1/companies/{company['id']}", headers=admin_headers).json()
    assert fetched["enabled"] is False


def test_update_keeps_row_position(client, admin_headers, spreadsheet, company):
    second = client.post(
        "/api/v1/companies",
        json={"name": "Beta", "username": "beta", "password": "x"},
        headers=admin_headers,
    ).json()["company"]
    client.patch("/api/v1/companies", json={"id": company["id"], "enabled": False}, headers=admin_headers)
    ids = [row[0] for row in spreadsheet.get_values("companies")[1:]]
    assert ids == [company["id"], second["id"]]


def test_rename_company_moves_its_sheet(client, admin_headers, company, company_headers, event):
    response = client.patch(
        "/api/v1/companies",
        json={"id": company["id"], "name": "Acme Corp"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert not tables.sheet_exists("Acme")
    assert [t.name for t in tables.list_tables("Acme Corp")] == ["Hackathon"]


def test_update_username_clash(client, admin_headers, company):
    client.post(
        "/api/v1/companies",
        json={"name": "Beta", "username": "beta", "password": "x"},
        headers=admin_headers,
    )
    response = client.patch(
        "/api/v1/companies",
        json={"id": company["id"], "username": "beta"},
        headers=admin_headers,
    )
    assert response.status_code == 400


def test_rename_clash_ignores_case(client, admin_headers, company):
    client.post(
        "/api/v1/companies",
        json={"name": "Beta", "username": "beta", "password": "x"},
        headers=admin_headers,
    )
    clash = client.patch("/api/v1/companies", json={"id": company["id"], "name": "BETA"}, headers=admin_headers)
    assert clash.status_code == 400

    recased = client.patch("/api/v1/companies", json={"id": company["id"], "name": "ACME"}, headers=admin_headers)
    assert recased.status_code == 200
    assert tables.list_tables("ACME") == []


def test_update_unknown_company(client, admin_headers, spreadsheet):
    response = client.patch("/api/v1/companies", json={"id": "company_0", "enabled": False}, headers=admin_headers)
    assert response.status_code == 404


def test_delete_company_keeps_sheet(client, admin_headers, spreadsheet, company):
    response = client.delete(f"/api/v1/companies?id={company['id']}", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Company Acme deleted successfully"
    assert client.get("/api/v1/companies", headers=admin_headers).json()["companies"] == []
    assert spreadsheet.has_sheet("Acme")


def test_delete_company_errors(client, admin_headers, spreadsheet):
    assert client.delete("/api/v1/companies", headers=admin_headers).status_code == 400
    assert client.delete("/api/v1/companies?id=company_0", headers=admin_headers).status_code == 404


def test_legacy_row_without_enabled_column_is_enabled(client, admin_headers, spreadsheet):
    spreadsheet.add_sheet("companies")
    spreadsheet.append_rows("companies", [["ID", "Name", "Username", "Password", "Image"]])
    spreadsheet.append_rows("companies", [["company_1", "Old", "old", "x"]])
    companies = client.get("/api/v1/companies", headers=admin_headers).json()["companies"]
    assert companies[0]["enabled"] is True
    assert companies[0]["image"] is None


def test_startup_creates_companies_sheet(spreadsheet):
    with TestClient(app):
        pass
    assert spreadsheet.get_values("companies") == [COMPANY_HEADERS]

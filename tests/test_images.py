import asyncio
import base64

import httpx
import pytest

from registration_api.app.services import image_service
from registration_api.app.services.image_service import ImageService, safe_file_name, strip_data_url


PNG = base64.b64encode(b"\x89PNG fake image").decode()


@pytest.fixture
def github(monkeypatch):
    """Configure image hosting and record the requests sent to GitHub."""
    monkeypatch.setattr(image_service.settings, "github_token", "token")
    monkeypatch.setattr(image_service.settings, "github_owner", "owner")
    monkeypatch.setattr(image_service.settings, "github_repo", "images")
    monkeypatch.setattr(image_service.settings, "github_branch", "main")
    calls = []

    def fake_put(url, headers=None, json=None, timeout=None):
        calls.append({"url": url, "headers": headers, "json": json})
        return httpx.Response(201, json={}, request=httpx.Request("PUT", url))

    monkeypatch.setattr(image_service.httpx, "put", fake_put)
    return calls


def test_strip_data_url():
    assert strip_data_url(f"data:image/png;base64,{PNG}") == PNG
    assert strip_data_url(PNG) == PNG


def test_safe_file_name():
    assert safe_file_name("event_Acme Corp_Spring/Fest_1.jpg") == "event_Acme_Corp_Spring_Fest_1.jpg"


def test_upload_not_configured(monkeypatch):
    monkeypatch.setattr(image_service.settings, "github_token", "")
    assert asyncio.run(ImageService.upload_image("a.jpg", PNG, "events")) is None


def test_company_logo_is_uploaded(client, admin_headers, github):
    response = client.post(
        "/api/v1/companies",
        json={"name": "Acme", "username": "acme", "password": "x", "image": f"data:image/png;base64,{PNG}"},
        headers=admin_headers,
    )
    company = response.json()["company"]
    assert len(github) == 1
    call = github[0]
    assert call["url"].startswith("https://api.github.com/repos/owner/images/contents/companies/company_")
    assert call["json"]["content"] == PNG
    assert call["json"]["branch"] == "main"
    assert company["image"].startswith("https://raw.githubusercontent.com/owner/images/main/companies/")


def test_event_banner_is_uploaded(client, company, company_headers, github):
    response = client.post(
        "/api/v1/events",
        json={"companyName": "Acme", "eventName": "Hackathon", "image": PNG},
        headers=company_headers,
    )
    image = response.json()["event"]["image"]
    assert "/events/event_Acme_Hackathon_" in image

    events = client.get("/api/v1/events?company=Acme", headers=company_headers).json()["events"]
    assert events[0]["image"] == image


def test_failed_upload_leaves_image_empty(client, admin_headers, monkeypatch, github):
    def failing_put(url, **kwargs):
        raise httpx.ConnectError("boom")

    monkeypatch.setattr(image_service.httpx, "put", failing_put)
    response = client.post(
        "/api/v1/companies",
        json={"name": "Acme", "username": "acme", "password": "x", "image": PNG},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["company"]["image"] is None


def test_invalid_base64_is_skipped(client, admin_headers, github):
    response = client.post(
        "/api/v1/companies",
        json={"name": "Acme", "username": "acme", "password": "x", "image": "not base64!"},
        headers=admin_headers,
    )
    assert response.json()["company"]["image"] is None
    assert github == []


def test_registrant_photo_is_uploaded(client, event, company_headers, registration_payload, github):
    response = client.post("/api/v1/events/register", json=registration_payload(image=PNG))
    assert response.status_code == 200
    assert len(github) == 1
    assert "/contents/registrations/registration_Hackathon_01012345678_" in github[0]["url"]

    registrations = client.get(
        "/api/v1/events/registrations?company=Acme&event=Hackathon", headers=company_headers
    ).json()["registrations"]
    assert registrations[0]["Image"].startswith("https://raw.githubusercontent.com/owner/images/main/registrations/")


def test_failed_registrant_upload_still_registers(
    client, event, company_headers, registration_payload, monkeypatch, github
):
    def failing_put(url, **kwargs):
        raise httpx.ConnectError("boom")

    monkeypatch.setattr(image_service.httpx, "put", failing_put)
    response = client.post("/api/v1/events/register", json=registration_payload(image=PNG))
    assert response.status_code == 200

    registrations = client.get(
        "/api/v1/events/registrations?company=Acme&event=Hackathon", headers=company_headers
    ).json()["registrations"]
    assert registrations[0]["Name"] == "Jane Doe"
    assert registrations[0]["Image"] == ""

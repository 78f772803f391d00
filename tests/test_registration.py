import re

import pytest

from registration_api.app.core import tables


def test_successful_registration(client, event, registration_payload):
    response = client.post("/api/v1/events/register", json=registration_payload())
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Registration successful"
    assert body["registration"]["email"] == "jane@example.com"
    assert re.match(r"^\d{4}-\d\d-\d\dT\d\d:\d\d:\d\d\.\d{3}Z$", body["registration"]["registrationDate"])

    rows = tables.get_table_data("Acme", "Hackathon")
    assert rows[2][:7] == [
        "Jane Doe",
        "01012345678",
        "jane@example.com",
        "Female",
        "Engineering",
        "Student",
        "29801011234567",
    ]


@pytest.mark.parametrize("field", ["name", "phone", "email", "gender", "college", "status", "nationalId"])
def test_missing_field(client, event, registration_payload, field):
    payload = registration_payload()
    del payload[field]
    response = client.post("/api/v1/events/register", json=payload)
    assert response.status_code == 400
    assert response.json()["detail"] == "All fields are required"


def test_blank_field(client, event, registration_payload):
    response = client.post("/api/v1/events/register", json=registration_payload(college="   "))
    assert response.status_code == 400


@pytest.mark.parametrize("email", ["jane", "jane@example", "jane doe@example.com"])
def test_invalid_email(client, event, registration_payload, email):
    response = client.post("/api/v1/events/register", json=registration_payload(email=email))
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid email format"


@pytest.mark.parametrize("phone", ["12345", "+201012345678", "0101234567890123", "٠١٠١٢٣٤٥٦٧٨"])
def test_invalid_phone(client, event, registration_payload, phone):
    response = client.post("/api/v1/events/register", json=registration_payload(phone=phone))
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid phone number format"


def test_duplicate_email_or_phone(client, event, registration_payload):
    assert client.post("/api/v1/events/register", json=registration_payload()).status_code == 200

    same_email = client.post("/api/v1/events/register", json=registration_payload(phone="01099999999"))
    assert same_email.status_code == 400
    assert same_email.json()["detail"] == "You are already registered for this event"

    same_phone = client.post("/api/v1/events/register", json=registration_payload(email="other@example.com"))
    assert same_phone.status_code == 400

    assert len(tables.get_table_data("Acme", "Hackathon")) == 3


def test_same_person_can_join_another_event(client, company_headers, event, registration_payload):
    client.post("/api/v1/events", json={"companyName": "Acme", "eventName": "Meetup"}, headers=company_headers)
    assert client.post("/api/v1/events/register", json=registration_payload()).status_code == 200
    response = client.post("/api/v1/events/register", json=registration_payload(eventName="Meetup"))
    assert response.status_code == 200


def test_unknown_company(client, event, registration_payload):
    response = client.post("/api/v1/events/register", json=registration_payload(companyName="Ghost"))
    assert response.status_code == 404
    assert response.json()["detail"] == "Company not found"


def test_unknown_event(client, event, registration_payload):
    response = client.post("/api/v1/events/register", json=registration_payload(eventName="Ghost"))
    assert response.status_code == 404
    assert response.json()["detail"] == "Event not found"


def test_disabled_company_rejects_registrations(client, admin_headers, company, event, registration_payload):
    client.patch("/api/v1/companies", json={"id": company["id"], "enabled": False}, headers=admin_headers)
    response = client.post("/api/v1/events/register", json=registration_payload())
    assert response.status_code == 403
    assert response.json()["detail"] == "Registration is unavailable for this company"


def test_disabled_event_rejects_registrations(client, company_headers, event, registration_payload):
    client.patch(
        "/api/v1/events",
        json={"companyName": "Acme", "eventName": "Hackathon", "enabled": False},
        headers=company_headers,
    )
    response = client.post("/api/v1/events/register", json=registration_payload())
    assert response.status_code == 403
    assert response.json()["detail"] == "Registration has ended for this event"


def test_leading_zero_phone_is_kept(client, event, registration_payload):
    client.post("/api/v1/events/register", json=registration_payload(phone="0000012345"))
    assert tables.get_table_data("Acme", "Hackathon")[2][1] == "0000012345"


def test_url_encoded_company_name(client, admin_headers, registration_payload):
    client.post(
        "/api/v1/companies",
        json={"name": "Acme Events", "username": "acme-events", "password": "x"},
        headers=admin_headers,
    )
    client.post(
        "/api/v1/events",
        json={"companyName": "Acme Events", "eventName": "Hackathon"},
        headers=admin_headers,
    )
    response = client.post("/api/v1/events/register", json=registration_payload(companyName="Acme%20Events"))
    assert response.status_code == 200
    assert tables.get_table_data("Acme Events", "Hackathon")[2][0] == "Jane Doe"

# tests/test_records.py

"""
Tests for units, people, agenda and communications endpoints.
"""

import pytest
from fastapi.testclient import TestClient


@pytest.fixture
def building(client: TestClient, admin_headers, building_payload):
    return client.post("/buildings", json=building_payload, headers=admin_headers).json()


@pytest.fixture
def owner(client: TestClient, admin_headers, person_payload):
    return client.post("/people", json=person_payload, headers=admin_headers).json()


# -----------------------------------------------------
# Units
# -----------------------------------------------------
def test_unit_requires_existing_building(client: TestClient, admin_headers):
    response = client.post(
        "/units",
        json={"condominio_id": 5, "nome": "Int. 1", "piano": "1", "superficie": 80},
        headers=admin_headers,
    )

    assert response.status_code == 422
    assert "condominio_id" in response.json()["detail"]


def test_unit_surface_must_be_positive(client: TestClient, admin_headers, building):
    response = client.post(
        "/units",
        json={"condominio_id": building["id"], "nome": "Int. 1", "piano": "1", "superficie": 0},
        headers=admin_headers,
    )
    assert response.status_code == 422


def test_unit_with_owner(client: TestClient, manager_headers, building, owner):
    response = client.post(
        "/units",
        json={
            "condominio_id": building["id"],
            "nome": "Int. 3",
            "piano": "2",
            "superficie": 95.5,
            "owner_id": owner["id"],
        },
        headers=manager_headers,
    )

    assert response.status_code == 201
    assert response.json()["owner_id"] == owner["id"]
    assert response.json()["tenant_id"] is None


def test_unit_with_unknown_tenant_is_rejected(client: TestClient, admin_headers, building):
    response = client.post(
        "/units",
        json={"condominio_id": building["id"], "nome": "Int. 3", "piano": "2", "superficie": 50, "tenant_id": 77},
        headers=admin_headers,
    )
    assert response.status_code == 422


def test_units_filter_by_building(client: TestClient, admin_headers, building, building_payload):
    other = client.post("/buildings", json={**building_payload, "nome": "Casa B"}, headers=admin_headers).json()
    for target in (building["id"], other["id"], other["id"]):
        client.post(
            "/units",
            json={"condominio_id": target, "nome": "Int.", "piano": "T", "superficie": 40},
            headers=admin_headers,
        )

    rows = client.get("/units", params={"condominio_id": other["id"]}, headers=admin_headers).json()
    assert len(rows) == 2


def test_manager_cannot_delete_unit(client: TestClient, manager_headers):
    assert client.delete("/units/1", headers=manager_headers).status_code == 403


def _unit(client: TestClient, headers, building_id, **extra):
    payload = {"condominio_id": building_id, "nome": "Int. 1", "piano": "1", "superficie": 80, **extra}
    return client.post("/units", json=payload, headers=headers).json()


def test_unit_update_cannot_clear_surface(client: TestClient, admin_headers, building):
    unit = _unit(client, admin_headers, building["id"])

    response = client.put(f"/units/{unit['id']}", json={"superficie": None}, headers=admin_headers)

    assert response.status_code == 422
    listed = client.get("/units", headers=admin_headers)
    assert listed.status_code == 200
    assert listed.json()[0]["superficie"] == 80


def test_unit_update_null_owner_clears_reference(client: TestClient, admin_headers, building, owner):
    unit = _unit(client, admin_headers, building["id"], owner_id=owner["id"], tenant_id=owner["id"])

    response = client.put(f"/units/{unit['id']}", json={"owner_id": None}, headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["owner_id"] is None
    assert response.json()["tenant_id"] == owner["id"]
    assert client.get(f"/units/{unit['id']}", headers=admin_headers).json()["owner_id"] is None


# -----------------------------------------------------
# People
# -----------------------------------------------------
def test_person_email_is_validated(client: TestClient, admin_headers, person_payload):
    response = client.post("/people", json={**person_payload, "email": "mario"}, headers=admin_headers)
    assert response.status_code == 422


def test_person_tax_code_is_returned_decrypted(client: TestClient, admin_headers, owner):
    response = client.get(f"/people/{owner['id']}", headers=admin_headers)
    assert response.json()["codice_fiscale"] == "RSSMRA80A01H501U"


def test_people_search(client: TestClient, admin_headers, owner, person_payload):
    client.post(
        "/people",
        json={**person_payload, "nome": "Lucia Bianchi", "email": "lucia@example.com", "role": "tenant"},
        headers=admin_headers,
    )

    assert [p["nome"] for p in client.get("/people", params={"q": "lucia"}, headers=admin_headers).json()] == [
        "Lucia Bianchi"
    ]
    assert len(client.get("/people", params={"role": "owner"}, headers=admin_headers).json()) == 1


def test_manager_cannot_delete_person(client: TestClient, manager_headers, owner):
    assert client.delete(f"/people/{owner['id']}", headers=manager_headers).status_code == 403


def test_person_update_cannot_clear_name(client: TestClient, admin_headers, owner):
    response = client.put(f"/people/{owner['id']}", json={"nome": None}, headers=admin_headers)

    assert response.status_code == 422
    assert client.get(f"/people/{owner['id']}", headers=admin_headers).json()["nome"] == "Mario Rossi"

    login = client.post("/auth/login", json={"email": "mario@example.com", "password": "RSSMRA80A01H501U"})
    assert login.status_code == 200


# -----------------------------------------------------
# Agenda
# -----------------------------------------------------
def test_events_are_sorted_and_visible_to_users(client: TestClient, admin_headers, user_headers):
    client.post("/events", json={"title": "Scadenza IMU", "start_date": "2025-06-16", "type": "scadenza"},
                headers=admin_headers)
    client.post("/events", json={"title": "Assemblea", "start_date": "2025-02-10"}, headers=admin_headers)

    rows = client.get("/events", headers=user_headers).json()

    assert [e["title"] for e in rows] == ["Assemblea", "Scadenza IMU"]
    assert rows[0]["type"] == "assemblea"


def test_user_cannot_create_event(client: TestClient, user_headers):
    response = client.post("/events", json={"title": "X", "start_date": "2025-01-01"}, headers=user_headers)
    assert response.status_code == 403


def test_event_requires_start_date(client: TestClient, admin_headers):
    response = client.post("/events", json={"title": "X", "start_date": ""}, headers=admin_headers)
    assert response.status_code == 422


def test_event_update_null_end_date_is_allowed_but_title_is_not(client: TestClient, admin_headers):
    event = client.post(
        "/events",
        json={"title": "Lavori facciata", "start_date": "2025-03-01", "end_date": "2025-03-20"},
        headers=admin_headers,
    ).json()

    cleared = client.put(f"/events/{event['id']}", json={"end_date": None}, headers=admin_headers)
    assert cleared.status_code == 200
    assert cleared.json()["end_date"] is None

    assert client.put(f"/events/{event['id']}", json={"title": None}, headers=admin_headers).status_code == 422
    assert [e["title"] for e in client.get("/events", headers=admin_headers).json()] == ["Lavori facciata"]


# -----------------------------------------------------
# Communications
# -----------------------------------------------------
def test_communication_is_stamped(client: TestClient, admin_headers, user_headers):
    response = client.post(
        "/communications",
        json={"title": "Chiusura acqua", "content": "Lunedì dalle 9 alle 12."},
        headers=admin_headers,
    )

    assert response.status_code == 201
    assert response.json()["sent_at"].endswith("Z")
    assert len(client.get("/communications", headers=user_headers).json()) == 1


def test_user_cannot_send_communication(client: TestClient, user_headers):
    response = client.post("/communications", json={"title": "X", "content": "Y"}, headers=user_headers)
    assert response.status_code == 403

# tests/test_buildings.py

"""
Tests for building endpoints.
"""

from fastapi.testclient import TestClient


def test_create_assigns_ids_and_delete_keeps_others(client: TestClient, admin_headers, building_payload):
    first = client.post("/buildings", json=building_payload, headers=admin_headers)
    second = client.post("/buildings", json={**building_payload, "nome": "Casa B"}, headers=admin_headers)

    assert first.status_code == 201
    assert first.json()["id"] == 1
    assert second.json()["id"] == 2

    response = client.delete("/buildings/1", headers=admin_headers)
    assert response.status_code == 200
    assert response.json() == {"success": True, "deleted_id": 1}

    remaining = client.get("/buildings", headers=admin_headers).json()
    assert [b["id"] for b in remaining] == [2]
    assert remaining[0]["nome"] == "Casa B"


def test_list_filters_by_name_and_city(client: TestClient, admin_headers, building_payload):
    client.post("/buildings", json=building_payload, headers=admin_headers)
    client.post(
        "/buildings",
        json={**building_payload, "nome": "Residenza Sole", "city": "Roma"},
        headers=admin_headers,
    )

    by_name = client.get("/buildings", params={"name": "sole"}, headers=admin_headers).json()
    by_city = client.get("/buildings", params={"city": "MILANO"}, headers=admin_headers).json()

    assert [b["nome"] for b in by_name] == ["Residenza Sole"]
    assert [b["nome"] for b in by_city] == ["Casa A"]


def test_get_building_not_found(client: TestClient, admin_headers):
    response = client.get("/buildings/999", headers=admin_headers)
    assert response.status_code == 404


def test_create_building_requires_name(client: TestClient, admin_headers, building_payload):
    response = client.post("/buildings", json={**building_payload, "nome": "   "}, headers=admin_headers)
    assert response.status_code == 422


def test_create_building_rejects_bad_email(client: TestClient, admin_headers, building_payload):
    response = client.post("/buildings", json={**building_payload, "email": "casa.a"}, headers=admin_headers)
    assert response.status_code == 422


def test_update_is_partial(client: TestClient, admin_headers, building_payload):
    client.post("/buildings", json=building_payload, headers=admin_headers)

    response = client.put("/buildings/1", json={"city": "Bergamo"}, headers=admin_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["city"] == "Bergamo"
    assert body["nome"] == "Casa A"
    assert body["codice_fiscale"] == "80012345678"


def test_update_missing_building_is_404(client: TestClient, admin_headers):
    response = client.put("/buildings/5", json={"city": "Bergamo"}, headers=admin_headers)
    assert response.status_code == 404


def test_update_cannot_clear_required_field(client: TestClient, admin_headers, building_payload):
    client.post("/buildings", json=building_payload, headers=admin_headers)

    response = client.put("/buildings/1", json={"nome": None, "city": "Bergamo"}, headers=admin_headers)

    assert response.status_code == 422
    assert "nome" in response.json()["detail"]

    listed = client.get("/buildings", headers=admin_headers)
    assert listed.status_code == 200
    assert listed.json()[0]["nome"] == "Casa A"
    assert listed.json()[0]["city"] == "Milano"


def test_delete_missing_building_succeeds(client: TestClient, admin_headers):
    response = client.delete("/buildings/5", headers=admin_headers)
    assert response.status_code == 200


def test_building_tax_code_is_encrypted_at_rest(client: TestClient, admin_headers, building_payload, store):
    client.post("/buildings", json=building_payload, headers=admin_headers)

    raw = store.path.read_text(encoding="utf-8")
    assert "80012345678" not in raw
    assert client.get("/buildings/1", headers=admin_headers).json()["codice_fiscale"] == "80012345678"


def test_delete_building_leaves_units_in_place(client: TestClient, admin_headers, building_payload):
    client.post("/buildings", json=building_payload, headers=admin_headers)
    client.post(
        "/units",
        json={"condominio_id": 1, "nome": "Int. 1", "piano": "1", "superficie": 80},
        headers=admin_headers,
    )

    client.delete("/buildings/1", headers=admin_headers)

    units = client.get("/units", headers=admin_headers).json()
    assert len(units) == 1
    assert units[0]["condominio_id"] == 1


def test_building_sub_lists(client: TestClient, admin_headers, building_payload):
    client.post("/buildings", json=building_payload, headers=admin_headers)
    client.post("/buildings", json={**building_payload, "nome": "Casa B"}, headers=admin_headers)
    client.post(
        "/units",
        json={"condominio_id": 2, "nome": "Int. 1", "piano": "1", "superficie": 80},
        headers=admin_headers,
    )
    client.post(
        "/events",
        json={"title": "Assemblea generale", "start_date": "2025-03-01T18:00"},
        headers=admin_headers,
    )
    client.post(
        "/events",
        json={"title": "Pulizia", "start_date": "2025-03-02T09:00", "condominio_id": 2, "type": "manutenzione"},
        headers=admin_headers,
    )

    assert client.get("/buildings/1/units", headers=admin_headers).json() == []
    assert len(client.get("/buildings/2/units", headers=admin_headers).json()) == 1
    assert [e["title"] for e in client.get("/buildings/1/events", headers=admin_headers).json()] == [
        "Assemblea generale"
    ]
    assert len(client.get("/buildings/2/events", headers=admin_headers).json()) == 2

# tests/test_tickets.py

"""
Tests for tickets, AI analysis / drafting and the dashboard.
"""

import pytest
from fastapi.testclient import TestClient
from unittest.mock import patch

from models.communication import CommunicationDraft
from models.enums import CommunicationTone
from services import ai_assistant


@pytest.fixture
def building(client: TestClient, admin_headers, building_payload):
    return client.post("/buildings", json=building_payload, headers=admin_headers).json()


def _ticket(client: TestClient, headers, building_id, **extra):
    payload = {
        "condominio_id": building_id,
        "title": "Perdita d'acqua",
        "description": "Macchia sul soffitto del box",
        **extra,
    }
    return client.post("/tickets", json=payload, headers=headers)


# -----------------------------------------------------
# Tickets
# -----------------------------------------------------
def test_user_can_open_ticket(client: TestClient, user_headers, building):
    response = _ticket(client, user_headers, building["id"], priority="high")

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "open"
    assert body["priority"] == "high"
    assert body["created_at"].endswith("Z")
    assert body["ai_analysis"] is None


def test_ticket_requires_existing_building(client: TestClient, user_headers):
    assert _ticket(client, user_headers, 9).status_code == 422


def test_ticket_requires_description(client: TestClient, admin_headers, building):
    assert _ticket(client, admin_headers, building["id"], description=" ").status_code == 422


def test_user_cannot_change_status(client: TestClient, user_headers, admin_headers, building):
    ticket = _ticket(client, admin_headers, building["id"]).json()

    response = client.patch(f"/tickets/{ticket['id']}/status", json={"status": "resolved"}, headers=user_headers)
    assert response.status_code == 403


def test_manager_changes_status(client: TestClient, manager_headers, building):
    ticket = _ticket(client, manager_headers, building["id"]).json()

    response = client.patch(
        f"/tickets/{ticket['id']}/status",
        json={"status": "in_progress"},
        headers=manager_headers,
    )

    assert response.status_code == 200
    assert response.json()["status"] == "in_progress"
    assert response.json()["title"] == "Perdita d'acqua"


def test_invalid_status_is_rejected(client: TestClient, admin_headers, building):
    ticket = _ticket(client, admin_headers, building["id"]).json()

    response = client.patch(f"/tickets/{ticket['id']}/status", json={"status": "closed"}, headers=admin_headers)
    assert response.status_code == 422


def test_status_cannot_be_cleared(client: TestClient, admin_headers, building):
    ticket = _ticket(client, admin_headers, building["id"]).json()

    response = client.patch(f"/tickets/{ticket['id']}/status", json={"status": None}, headers=admin_headers)

    assert response.status_code == 422
    assert client.get(f"/tickets/{ticket['id']}", headers=admin_headers).json()["status"] == "open"


def test_ticket_building_cannot_be_cleared(client: TestClient, admin_headers, building):
    ticket = _ticket(client, admin_headers, building["id"]).json()

    response = client.put(f"/tickets/{ticket['id']}", json={"condominio_id": None}, headers=admin_headers)

    assert response.status_code == 422
    listed = client.get("/tickets", headers=admin_headers)
    assert listed.status_code == 200
    assert listed.json()[0]["condominio_id"] == building["id"]


def test_tickets_filter_by_status(client: TestClient, admin_headers, building):
    first = _ticket(client, admin_headers, building["id"]).json()
    _ticket(client, admin_headers, building["id"], title="Ascensore fermo")
    client.patch(f"/tickets/{first['id']}/status", json={"status": "resolved"}, headers=admin_headers)

    open_rows = client.get("/tickets", params={"status": "open"}, headers=admin_headers).json()
    assert [t["title"] for t in open_rows] == ["Ascensore fermo"]


def test_manager_cannot_delete_ticket(client: TestClient, manager_headers, admin_headers, building):
    ticket = _ticket(client, admin_headers, building["id"]).json()

    assert client.delete(f"/tickets/{ticket['id']}", headers=manager_headers).status_code == 403
    assert client.delete(f"/tickets/{ticket['id']}", headers=admin_headers).status_code == 200


# -----------------------------------------------------
# AI analysis
# -----------------------------------------------------
def test_analysis_without_key_stores_configuration_message(client: TestClient, admin_headers, building):
    ticket = _ticket(client, admin_headers, building["id"]).json()

    with patch.object(ai_assistant.settings, "GEMINI_API_KEY", None):
        response = client.post(f"/tickets/{ticket['id']}/analyze", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["ai_analysis"] == ai_assistant.MISSING_KEY_ANALYSIS


def test_analysis_is_stored_on_ticket(client: TestClient, admin_headers, building):
    ticket = _ticket(client, admin_headers, building["id"]).json()

    with patch.object(ai_assistant.settings, "GEMINI_API_KEY", "test-key"), \
            patch("services.ai_assistant._run_agent", return_value="Priorità: Alta. Idraulico.") as run:
        response = client.post(f"/tickets/{ticket['id']}/analyze", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["ai_analysis"] == "Priorità: Alta. Idraulico."
    prompt = run.call_args.args[0]
    assert "Perdita d'acqua" in prompt
    assert "Macchia sul soffitto del box" in prompt


def test_analysis_failure_returns_fixed_message():
    with patch.object(ai_assistant.settings, "GEMINI_API_KEY", "test-key"), \
            patch("services.ai_assistant._run_agent", side_effect=RuntimeError("quota")):
        assert ai_assistant.analyze_ticket("t", "d") == ai_assistant.FAILED_ANALYSIS


def test_empty_analysis_falls_back():
    with patch.object(ai_assistant.settings, "GEMINI_API_KEY", "test-key"), \
            patch("services.ai_assistant._run_agent", return_value=""):
        assert ai_assistant.analyze_ticket("t", "d") == ai_assistant.EMPTY_ANALYSIS


def test_user_cannot_request_analysis(client: TestClient, user_headers):
    assert client.post("/tickets/1/analyze", headers=user_headers).status_code == 403


# -----------------------------------------------------
# AI drafting
# -----------------------------------------------------
def test_draft_endpoint(client: TestClient, manager_headers):
    draft = CommunicationDraft(title="Lavori in facciata", content="Gentili condomini, ...")

    with patch.object(ai_assistant.settings, "GEMINI_API_KEY", "test-key"), \
            patch("services.ai_assistant._run_agent", return_value=draft) as run:
        response = client.post(
            "/communications/draft",
            json={"topic": "ponteggi", "tone": "friendly"},
            headers=manager_headers,
        )

    assert response.status_code == 200
    assert response.json() == {"title": "Lavori in facciata", "content": "Gentili condomini, ..."}
    assert "friendly" in run.call_args.args[0]


def test_draft_without_key():
    with patch.object(ai_assistant.settings, "GEMINI_API_KEY", None):
        draft = ai_assistant.draft_communication("ponteggi", CommunicationTone.formal)

    assert draft == ai_assistant.MISSING_KEY_DRAFT


def test_draft_failure():
    with patch.object(ai_assistant.settings, "GEMINI_API_KEY", "test-key"), \
            patch("services.ai_assistant._run_agent", side_effect=TimeoutError()):
        draft = ai_assistant.draft_communication("ponteggi", CommunicationTone.urgent)

    assert draft == ai_assistant.FAILED_DRAFT


def test_draft_requires_topic(client: TestClient, admin_headers):
    response = client.post("/communications/draft", json={"topic": "  "}, headers=admin_headers)
    assert response.status_code == 422


# -----------------------------------------------------
# Dashboard
# -----------------------------------------------------
def test_dashboard_counts(client: TestClient, admin_headers, building):
    created = [
        _ticket(client, admin_headers, building["id"], title=f"Guasto {n}").json()
        for n in range(7)
    ]
    client.patch(f"/tickets/{created[0]['id']}/status", json={"status": "resolved"}, headers=admin_headers)

    response = client.get("/dashboard", headers=admin_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["buildings"] == 1
    assert body["active_tickets"] == 6
    assert body["resolved_tickets"] == 1
    assert len(body["recent_tickets"]) == 5


def test_user_cannot_open_dashboard(client: TestClient, user_headers):
    assert client.get("/dashboard", headers=user_headers).status_code == 403

# tests/conftest.py

"""
Pytest configuration and shared fixtures for testing.

Every test runs against a fresh LocalRecordStore in tmp_path; the
process-wide store is never touched.
"""

import pytest
from fastapi.testclient import TestClient
from typing import Generator

from core.crypto import FieldCipher
from core.store import LocalRecordStore, get_record_store
from dependencies.auth import clear_revoked_tokens, create_access_token
from main import create_app
from models.auth import Session
from models.enums import Role


TEST_KEY = "kondo-manager-secure-key-2025"
TEST_SENSITIVE_FIELDS = ["password_hash", "two_factor_secret", "remember_token", "password", "codice_fiscale"]


@pytest.fixture
def cipher() -> FieldCipher:
    return FieldCipher(TEST_KEY, TEST_SENSITIVE_FIELDS)


@pytest.fixture
def store(tmp_path, cipher) -> LocalRecordStore:
    """Empty local store backed by a file in tmp_path."""
    return LocalRecordStore(str(tmp_path / "store.json"), namespace="kondo", cipher=cipher)


@pytest.fixture(scope="function")
def app(store):
    """Create a test FastAPI application instance bound to the tmp store."""
    application = create_app()
    application.dependency_overrides[get_record_store] = lambda: store
    yield application
    application.dependency_overrides.clear()


@pytest.fixture(scope="function")
def client(app) -> Generator[TestClient, None, None]:
    """Create a test client for the FastAPI application."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture(autouse=True)
def reset_revocations():
    """Logouts from one test must not leak into the next."""
    clear_revoked_tokens()
    yield
    clear_revoked_tokens()


# -----------------------------------------------------
# Sessions / tokens
# -----------------------------------------------------
def _bearer(session: Session) -> dict:
    token, _ = create_access_token(session)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers() -> dict:
    return _bearer(Session(id=0, name="Amministratore", email="admin@kondo.it", role=Role.admin))


@pytest.fixture
def manager_headers() -> dict:
    return _bearer(Session(id=900, name="Gestore", email="gestore@kondo.it", role=Role.manager))


@pytest.fixture
def user_headers() -> dict:
    return _bearer(Session(id=1, name="Mario Rossi", email="mario@example.com", role=Role.user, person_id=1))


# -----------------------------------------------------
# Sample payloads
# -----------------------------------------------------
@pytest.fixture
def building_payload() -> dict:
    return {
        "nome": "Casa A",
        "indirizzo": "Via Roma 1",
        "city": "Milano",
        "email": "casa.a@example.com",
        "codice_fiscale": "80012345678",
        "units_count": 4,
    }


@pytest.fixture
def person_payload() -> dict:
    return {
        "nome": "Mario Rossi",
        "email": "mario@example.com",
        "telefono": "+39 333 1234567",
        "codice_fiscale": "RSSMRA80A01H501U",
        "role": "owner",
    }

# core/store.py

"""
Record store adapter.

One CRUD contract (select / insert / update / delete by integer id) over two
interchangeable backends:

    LocalRecordStore   - collections kept in a JSON document on disk
    SheetsRecordStore  - spreadsheet web-app endpoint over HTTP

Exactly one backend is active per process, chosen from settings at startup
(see get_record_store). Sensitive fields are encrypted on the way in and
decrypted on the way out by both backends.
"""

import json
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from threading import Lock
from typing import Any, Dict, List, Optional

import requests

from core.config import settings
from core.crypto import FieldCipher, get_field_cipher
from core.errors import (
    BackendUnreachableError,
    MalformedResponseError,
    NotFoundError,
    StoreError,
)
from core.logging_config import get_logger


logger = get_logger("store")


def coerce_id(value: Any) -> Optional[int]:
    """Integer id from whatever the backend stored ("3", 3.0, 3)."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    return None


def next_id(records: List[dict]) -> int:
    """One more than the highest id in the collection, or 1 when empty."""
    ids = [coerce_id(r.get("id")) for r in records]
    ids = [i for i in ids if i is not None]
    return max(ids) + 1 if ids else 1


def _without_id(data: dict) -> dict:
    return {k: v for k, v in data.items() if k != "id"}


# ============================================================
# Store contract
# ============================================================

class RecordStore(ABC):
    """Uniform CRUD contract shared by every backend."""

    backend_name = "abstract"

    def __init__(self, cipher: Optional[FieldCipher] = None):
        self.cipher = cipher or get_field_cipher()

    @abstractmethod
    def select(self, table: str) -> List[dict]:
        """All records of a collection, decrypted."""

    @abstractmethod
    def insert(self, table: str, data: dict) -> dict:
        """Persist a new record and return it with its assigned id."""

    @abstractmethod
    def update(self, table: str, record_id: int, fields: dict) -> dict:
        """Merge fields onto an existing record. Raises NotFoundError."""

    @abstractmethod
    def delete(self, table: str, record_id: int) -> None:
        """Remove a record. Deleting an absent id is a no-op."""

    def get(self, table: str, record_id: int) -> dict:
        for record in self.select(table):
            if coerce_id(record.get("id")) == record_id:
                return record
        raise NotFoundError(table, record_id)

    def exists(self, table: str, record_id: int) -> bool:
        try:
            self.get(table, record_id)
        except NotFoundError:
            return False
        return True

    def close(self) -> None:
        pass


# ============================================================
# Local backend (JSON document on disk)
# ============================================================

class LocalRecordStore(RecordStore):
    """
    Every collection is one JSON array stored under "<namespace>_<table>".
    First access to a collection seeds an empty array.
    """

    backend_name = "local"

    def __init__(self, path: str, namespace: str = "kondo", cipher: Optional[FieldCipher] = None):
        super().__init__(cipher)
        self.path = Path(path)
        self.namespace = namespace
        self._lock = Lock()
        logger.info(f"Local record store at {self.path}")

    def _key(self, table: str) -> str:
        return f"{self.namespace}_{table}"

    def _load(self) -> Dict[str, list]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                document = json.load(fh)
        except ValueError as e:
            raise MalformedResponseError(f"Local store {self.path} is not valid JSON", detail=str(e))
        except OSError as e:
            raise BackendUnreachableError(f"Local store {self.path} is not readable", detail=str(e))

        if not isinstance(document, dict):
            raise MalformedResponseError(f"Local store {self.path} must hold a JSON object")
        return document

    def _save(self, document: Dict[str, list]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=str(self.path.parent), suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(document, fh, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise BackendUnreachableError(f"Local store {self.path} is not writable", detail=str(e))

    def _rows(self, document: Dict[str, list], table: str) -> List[dict]:
        key = self._key(table)
        if key not in document:
            document[key] = []
            self._save(document)

        rows = document[key]
        if not isinstance(rows, list):
            raise MalformedResponseError(f"Collection '{table}' is not a list")
        return rows

    def select(self, table: str) -> List[dict]:
        with self._lock:
            rows = self._rows(self._load(), table)
        return [self.cipher.decrypt_record(row) for row in rows]

    def insert(self, table: str, data: dict) -> dict:
        with self._lock:
            document = self._load()
            rows = self._rows(document, table)

            new_id = next_id(rows)
            stored = {**self.cipher.encrypt_record(_without_id(data)), "id": new_id}
            document[self._key(table)] = rows + [stored]
            self._save(document)

        logger.info(f"Inserted {table} id={new_id}")
        return self.cipher.decrypt_record(stored)

    def update(self, table: str, record_id: int, fields: dict) -> dict:
        with self._lock:
            document = self._load()
            rows = self._rows(document, table)

            for index, row in enumerate(rows):
                if coerce_id(row.get("id")) == record_id:
                    break
            else:
                raise NotFoundError(table, record_id)

            merged = {**row, **self.cipher.encrypt_record(_without_id(fields))}
            rows[index] = merged
            self._save(document)

        logger.info(f"Updated {table} id={record_id} fields={sorted(_without_id(fields))}")
        return self.cipher.decrypt_record(merged)

    def delete(self, table: str, record_id: int) -> None:
        with self._lock:
            document = self._load()
            rows = self._rows(document, table)
            kept = [row for row in rows if coerce_id(row.get("id")) != record_id]

            if len(kept) == len(rows):
                logger.debug(f"Delete {table} id={record_id}: nothing to remove")
                return

            document[self._key(table)] = kept
            self._save(document)

        logger.info(f"Deleted {table} id={record_id}")


# ============================================================
# Remote backend (spreadsheet web app)
# ============================================================

class SheetsRecordStore(RecordStore):
    """
    Wire contract:
        GET  {endpoint}?action=select&table=T            -> [record, ...]
        POST {endpoint}?action=insert&table=T            {"data": {...}} -> record
        POST {endpoint}?action=update&table=T&id=N       {"data": {...}} -> record
        POST {endpoint}?action=delete&table=T&id=N       -> {}
    Any of them may answer {"error": "..."} instead.
    """

    backend_name = "sheets"

    def __init__(
        self,
        endpoint: str,
        session: Optional[requests.Session] = None,
        timeout: Optional[float] = None,
        cipher: Optional[FieldCipher] = None,
    ):
        super().__init__(cipher)
        self.endpoint = endpoint
        self.timeout = timeout
        self._session = session or requests.Session()
        logger.info("Sheets record store initialised")

    def _request(self, method: str, params: dict, body: Optional[dict] = None) -> Any:
        action = params.get("action")
        table = params.get("table")

        try:
            response = self._session.request(
                method,
                self.endpoint,
                params=params,
                json=body,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Sheets {action} on {table} failed: {type(e).__name__}: {e}")
            raise BackendUnreachableError(f"Storage backend unreachable during {action} on '{table}'", detail=str(e))

        if not response.ok:
            logger.error(f"Sheets {action} on {table} returned HTTP {response.status_code}")
            raise BackendUnreachableError(
                f"Storage backend answered HTTP {response.status_code} during {action} on '{table}'"
            )

        try:
            payload = response.json()
        except ValueError as e:
            logger.error(f"Sheets {action} on {table} returned non-JSON body")
            raise MalformedResponseError(f"Storage backend returned invalid JSON during {action} on '{table}'", detail=str(e))

        if isinstance(payload, dict) and payload.get("error"):
            error_text = str(payload["error"])
            if "not found" in error_text.lower() and "id" in params:
                raise NotFoundError(table, coerce_id(params["id"]))
            logger.error(f"Sheets {action} on {table} reported: {error_text}")
            raise BackendUnreachableError(f"Storage backend rejected {action} on '{table}'", detail=error_text)

        return payload

    def _expect_record(self, payload: Any, action: str, table: str) -> dict:
        if not isinstance(payload, dict):
            raise MalformedResponseError(f"Expected a record from {action} on '{table}'")
        return self.cipher.decrypt_record(payload)

    def select(self, table: str) -> List[dict]:
        logger.debug(f"Fetching {table}")
        payload = self._request("GET", {"action": "select", "table": table})

        if not isinstance(payload, list) or not all(isinstance(row, dict) for row in payload):
            raise MalformedResponseError(f"Expected a list of records from select on '{table}'")

        return [self.cipher.decrypt_record(row) for row in payload]

    def insert(self, table: str, data: dict) -> dict:
        encrypted = self.cipher.encrypt_record(_without_id(data))
        payload = self._request("POST", {"action": "insert", "table": table}, {"data": encrypted})

        record = self._expect_record(payload, "insert", table)
        if coerce_id(record.get("id")) is None:
            raise MalformedResponseError(f"Insert on '{table}' returned a record without id")

        logger.info(f"Inserted {table} id={record['id']}")
        return record

    def update(self, table: str, record_id: int, fields: dict) -> dict:
        encrypted = self.cipher.encrypt_record(_without_id(fields))
        payload = self._request(
            "POST",
            {"action": "update", "table": table, "id": record_id},
            {"data": encrypted},
        )

        logger.info(f"Updated {table} id={record_id}")
        return self._expect_record(payload, "update", table)

    def delete(self, table: str, record_id: int) -> None:
        try:
            self._request("POST", {"action": "delete", "table": table, "id": record_id})
        except NotFoundError:
            logger.debug(f"Delete {table} id={record_id}: nothing to remove")
            return

        logger.info(f"Deleted {table} id={record_id}")

    def close(self) -> None:
        self._session.close()


# ============================================================
# Backend selection (once per process)
# ============================================================

_store: Optional[RecordStore] = None
_store_lock = Lock()


def build_record_store() -> RecordStore:
    if settings.SHEETS_ENDPOINT_URL:
        return SheetsRecordStore(
            settings.SHEETS_ENDPOINT_URL,
            timeout=settings.SHEETS_TIMEOUT_SECONDS,
        )

    logger.warning("SHEETS_ENDPOINT_URL not set, records are kept in the local store")
    return LocalRecordStore(settings.LOCAL_STORE_PATH, namespace=settings.STORE_NAMESPACE)


def get_record_store() -> RecordStore:
    """Process-wide store; FastAPI dependency."""
    global _store
    with _store_lock:
        if _store is None:
            _store = build_record_store()
        return _store


def reset_record_store() -> None:
    global _store
    with _store_lock:
        if _store is not None:
            _store.close()
        _store = None


# ============================================================
# Ping the store for health checks
# ============================================================

def ping_store(store: RecordStore, tables: Optional[List[str]] = None) -> dict:
    """
    Simple connectivity check: selects every collection once and reports
    row counts or the error per table.
    """
    results = {}
    status = "ok"

    for t in tables or []:
        try:
            results[t] = {"status": "ok", "rows_found": len(store.select(t))}
        except StoreError as err:
            status = "error"
            results[t] = {"status": "error", "detail": err.message}

    return {
        "service": "RecordStore",
        "backend": store.backend_name,
        "status": status,
        "tables": results,
    }

# tests/test_store_local.py

"""
Tests for the local (JSON file) record store.
"""

import json

import pytest

from core.errors import MalformedResponseError, NotFoundError
from core.store import LocalRecordStore, coerce_id, next_id


def test_next_id_starts_at_one_and_follows_max():
    assert next_id([]) == 1
    assert next_id([{"id": 1}, {"id": 5}, {"id": "3"}]) == 6
    assert next_id([{"nome": "no id"}]) == 1


def test_coerce_id_accepts_sheet_representations():
    assert coerce_id(3) == 3
    assert coerce_id(3.0) == 3
    assert coerce_id("3") == 3
    assert coerce_id(" 12 ") == 12
    assert coerce_id(True) is None
    assert coerce_id("abc") is None
    assert coerce_id(None) is None


def test_first_select_seeds_empty_collection(store: LocalRecordStore):
    assert store.select("condomini") == []

    document = json.loads(store.path.read_text(encoding="utf-8"))
    assert document["kondo_condomini"] == []


def test_insert_assigns_sequential_ids(store: LocalRecordStore):
    first = store.insert("condomini", {"nome": "Casa A"})
    second = store.insert("condomini", {"nome": "Casa B"})

    assert first["id"] == 1
    assert second["id"] == 2
    assert [r["nome"] for r in store.select("condomini")] == ["Casa A", "Casa B"]


def test_insert_ignores_client_supplied_id(store: LocalRecordStore):
    record = store.insert("condomini", {"id": 99, "nome": "Casa A"})
    assert record["id"] == 1


def test_ids_are_not_reused_below_max(store: LocalRecordStore):
    store.insert("condomini", {"nome": "A"})
    store.insert("condomini", {"nome": "B"})
    store.delete("condomini", 1)

    assert store.insert("condomini", {"nome": "C"})["id"] == 3


def test_update_merges_fields_and_keeps_id(store: LocalRecordStore):
    store.insert("condomini", {"nome": "Casa A", "city": "Milano"})

    updated = store.update("condomini", 1, {"city": "Torino", "id": 50})

    assert updated == {"id": 1, "nome": "Casa A", "city": "Torino"}
    assert store.get("condomini", 1)["city"] == "Torino"


def test_update_missing_record_raises_not_found(store: LocalRecordStore):
    with pytest.raises(NotFoundError):
        store.update("condomini", 42, {"nome": "X"})


def test_delete_removes_only_target(store: LocalRecordStore):
    store.insert("condomini", {"nome": "Casa A"})
    store.insert("condomini", {"nome": "Casa B"})

    store.delete("condomini", 1)

    assert [r["id"] for r in store.select("condomini")] == [2]


def test_delete_missing_record_is_noop(store: LocalRecordStore):
    store.insert("condomini", {"nome": "Casa A"})
    store.delete("condomini", 99)
    assert len(store.select("condomini")) == 1


def test_sensitive_fields_are_encrypted_at_rest(store: LocalRecordStore):
    store.insert("anagrafiche", {"nome": "Mario", "codice_fiscale": "RSSMRA80A01H501U"})

    raw = json.loads(store.path.read_text(encoding="utf-8"))["kondo_anagrafiche"][0]
    assert raw["codice_fiscale"] != "RSSMRA80A01H501U"
    assert raw["nome"] == "Mario"

    assert store.select("anagrafiche")[0]["codice_fiscale"] == "RSSMRA80A01H501U"


def test_legacy_plaintext_sensitive_value_is_readable(store: LocalRecordStore):
    store.path.write_text(
        json.dumps({"kondo_anagrafiche": [{"id": 1, "nome": "Mario", "codice_fiscale": "PLAIN"}]}),
        encoding="utf-8",
    )

    assert store.get("anagrafiche", 1)["codice_fiscale"] == "PLAIN"


def test_get_missing_record_raises_not_found(store: LocalRecordStore):
    with pytest.raises(NotFoundError):
        store.get("condomini", 1)
    assert store.exists("condomini", 1) is False


def test_corrupted_file_raises_malformed(tmp_path, cipher):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(MalformedResponseError):
        LocalRecordStore(str(path), cipher=cipher).select("condomini")


def test_collections_are_namespaced(tmp_path, cipher):
    path = str(tmp_path / "shared.json")
    LocalRecordStore(path, namespace="one", cipher=cipher).insert("condomini", {"nome": "A"})

    assert LocalRecordStore(path, namespace="two", cipher=cipher).select("condomini") == []

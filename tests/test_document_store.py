"""
Unit tests for the document store backends.
"""

import json

import pytest

from core.document_store import (
    InMemoryDocumentStore,
    JsonFileDocumentStore,
    create_document_store,
)
from core.exceptions import RecordNotFoundError, RemoteOperationFailure, StoreUnavailableError


# Fixtures

@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "data" / "print_shop.json"


@pytest.fixture(params=["memory", "json"])
def any_store(request, store_path):
    """Each backend in turn."""
    if request.param == "memory":
        return InMemoryDocumentStore()
    return JsonFileDocumentStore(store_path)


class TestCollectionOperations:
    """Behaviour shared by every backend."""

    def test_create_and_list(self, any_store):
        clients = any_store.collection("clients")
        client_id = clients.create({"name": "Acme", "priceRates": []})

        assert clients.list() == [{"name": "Acme", "priceRates": [], "id": client_id}]

    def test_create_ignores_caller_id(self, any_store):
        clients = any_store.collection("clients")
        client_id = clients.create({"id": "chosen", "name": "Acme"})

        assert client_id != "chosen"
        assert clients.list()[0]["id"] == client_id

    def test_replace_overwrites_whole_record(self, any_store):
        papers = any_store.collection("papers")
        paper_id = papers.create({"size": "A4", "thickness": 300, "costPerUnit": 1})

        papers.replace(paper_id, {"size": "A3", "thickness": 170})

        assert papers.list() == [{"size": "A3", "thickness": 170, "id": paper_id}]

    def test_remove(self, any_store):
        orders = any_store.collection("orders")
        order_id = orders.create({"clientId": "acme"})
        orders.remove(order_id)
        assert orders.list() == []

    def test_missing_record(self, any_store):
        costs = any_store.collection("additionalCosts")
        with pytest.raises(RecordNotFoundError) as exc_info:
            costs.remove("nope")
        assert exc_info.value.record_id == "nope"

        with pytest.raises(RemoteOperationFailure):
            costs.replace("nope", {"name": "Ink"})

    def test_collections_are_separate(self, any_store):
        any_store.collection("clients").create({"name": "Acme"})
        assert any_store.collection("orders").list() == []

    def test_unknown_collection(self, any_store):
        with pytest.raises(ValueError):
            any_store.collection("invoices")

    def test_listed_records_are_copies(self, any_store):
        clients = any_store.collection("clients")
        clients.create({"name": "Acme", "priceRates": []})

        clients.list()[0]["priceRates"].append({"paperSize": "A4"})

        assert clients.list()[0]["priceRates"] == []


class TestJsonFileDocumentStore:
    """JSON file persistence."""

    def test_survives_reopen(self, store_path):
        first = JsonFileDocumentStore(store_path)
        client_id = first.collection("clients").create({"name": "Acme"})

        second = JsonFileDocumentStore(store_path)
        assert second.collection("clients").list() == [{"name": "Acme", "id": client_id}]

    def test_file_layout(self, store_path):
        store = JsonFileDocumentStore(store_path)
        cost_id = store.collection("additionalCosts").create({"name": "Ink", "costPerUnit": 1.5})

        data = json.loads(store_path.read_text(encoding="utf-8"))
        assert data["additionalCosts"] == {cost_id: {"name": "Ink", "costPerUnit": 1.5}}
        assert data["clients"] == {}

    def test_unreadable_file(self, store_path):
        store_path.parent.mkdir(parents=True)
        store_path.write_text("{not json", encoding="utf-8")

        with pytest.raises(StoreUnavailableError):
            JsonFileDocumentStore(store_path)

    def test_non_object_file(self, store_path):
        store_path.parent.mkdir(parents=True)
        store_path.write_text("[]", encoding="utf-8")

        with pytest.raises(StoreUnavailableError):
            JsonFileDocumentStore(store_path)

    def test_failed_write_leaves_data_unchanged(self, store_path, monkeypatch):
        store = JsonFileDocumentStore(store_path)
        clients = store.collection("clients")
        clients.create({"name": "Acme"})

        def broken_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr("core.document_store.os.replace", broken_replace)

        with pytest.raises(RemoteOperationFailure):
            clients.create({"name": "Zen"})
        assert [c["name"] for c in clients.list()] == ["Acme"]


class TestCreateDocumentStore:
    """Backend selection."""

    def test_memory(self):
        assert create_document_store("memory").backend_name == "memory"

    def test_json(self, store_path):
        store = create_document_store("json", str(store_path))
        assert isinstance(store, JsonFileDocumentStore)

    def test_json_without_path(self):
        with pytest.raises(StoreUnavailableError):
            create_document_store("json")

    def test_unknown_backend(self):
        with pytest.raises(StoreUnavailableError):
            create_document_store("firestore")

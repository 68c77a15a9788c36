"""
Document store collaborators.

The dashboard persists every entity in a key-value document store organised
in collections (clients, orders, papers, additionalCosts). Each collection
supports exactly four operations:

    list()                  -> list of records, each carrying its "id"
    create(record)          -> store-assigned id
    replace(id, record)     -> full overwrite, no partial patch
    remove(id)

Any failure is raised as RemoteOperationFailure. The store never retries.

Two backends are provided:
    - InMemoryDocumentStore: process-local dicts (development and tests)
    - JsonFileDocumentStore: the same dicts mirrored to a single JSON file

Usage:
    store = create_document_store("json", path="data/print_shop.json")
    clients = store.collection("clients")
    client_id = clients.create({"name": "Acme", "priceRates": []})
    for record in clients.list():
        ...
"""

from __future__ import annotations

import copy
import json
import os
import threading
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional

from .exceptions import (
    RecordNotFoundError,
    RemoteOperationFailure,
    StoreUnavailableError,
)
from logging_config import get_logger


logger = get_logger(__name__)

COLLECTIONS = ("clients", "orders", "papers", "additionalCosts")


class CollectionHandle:
    """
    Bound view of one collection in a document store.

    Holds no state of its own; every call goes straight to the store.
    """

    def __init__(self, store: "DocumentStore", name: str):
        self._store = store
        self.name = name

    def list(self) -> List[Dict[str, Any]]:
        return self._store.list(self.name)

    def create(self, record: Dict[str, Any]) -> str:
        return self._store.create(self.name, record)

    def replace(self, record_id: str, record: Dict[str, Any]) -> None:
        self._store.replace(self.name, record_id, record)

    def remove(self, record_id: str) -> None:
        self._store.remove(self.name, record_id)


class DocumentStore:
    """
    Abstract document store.

    Subclasses implement the four collection operations. Records passed in
    and handed out are always copies, so callers can never mutate stored
    state behind the store's back.
    """

    backend_name = "abstract"

    def collection(self, name: str) -> CollectionHandle:
        """
        Get a handle bound to one collection.

        Args:
            name: One of COLLECTIONS

        Raises:
            ValueError: If the collection name is unknown
        """
        _check_collection(name)
        return CollectionHandle(self, name)

    def list(self, collection: str) -> List[Dict[str, Any]]:
        raise NotImplementedError

    def create(self, collection: str, record: Dict[str, Any]) -> str:
        raise NotImplementedError

    def replace(self, collection: str, record_id: str, record: Dict[str, Any]) -> None:
        raise NotImplementedError

    def remove(self, collection: str, record_id: str) -> None:
        raise NotImplementedError


class InMemoryDocumentStore(DocumentStore):
    """
    Document store kept entirely in process memory.

    Thread Safety:
        All operations hold a single threading.Lock. Flask may serve
        requests on several threads; the lock keeps each call atomic.
    """

    backend_name = "memory"

    def __init__(self, initial: Optional[Dict[str, Dict[str, Dict[str, Any]]]] = None):
        self._lock = threading.Lock()
        self._data: Dict[str, Dict[str, Dict[str, Any]]] = {name: {} for name in COLLECTIONS}
        if initial:
            for name, records in initial.items():
                _check_collection(name)
                self._data[name] = copy.deepcopy(records)

    def list(self, collection: str) -> List[Dict[str, Any]]:
        _check_collection(collection)
        with self._lock:
            return [
                {**copy.deepcopy(body), "id": record_id}
                for record_id, body in self._data[collection].items()
            ]

    def create(self, collection: str, record: Dict[str, Any]) -> str:
        _check_collection(collection)
        record_id = uuid.uuid4().hex
        body = _strip_id(record)
        with self._lock:
            updated = dict(self._data[collection])
            updated[record_id] = body
            self._commit(collection, updated, "create")
        logger.debug(f"Created {collection}/{record_id}")
        return record_id

    def replace(self, collection: str, record_id: str, record: Dict[str, Any]) -> None:
        _check_collection(collection)
        body = _strip_id(record)
        with self._lock:
            if record_id not in self._data[collection]:
                raise RecordNotFoundError("replace", collection, record_id)
            updated = dict(self._data[collection])
            updated[record_id] = body
            self._commit(collection, updated, "replace", record_id)
        logger.debug(f"Replaced {collection}/{record_id}")

    def remove(self, collection: str, record_id: str) -> None:
        _check_collection(collection)
        with self._lock:
            if record_id not in self._data[collection]:
                raise RecordNotFoundError("remove", collection, record_id)
            updated = dict(self._data[collection])
            del updated[record_id]
            self._commit(collection, updated, "remove", record_id)
        logger.debug(f"Removed {collection}/{record_id}")

    def _commit(
        self,
        collection: str,
        records: Dict[str, Dict[str, Any]],
        operation: str,
        record_id: Optional[str] = None,
    ) -> None:
        """Swap in the new collection contents. Called with the lock held."""
        self._data[collection] = records


class JsonFileDocumentStore(InMemoryDocumentStore):
    """
    Document store mirrored to a single JSON file.

    The whole store is rewritten on every mutation (write to a temporary
    file, then os.replace). If the write fails the in-memory contents are
    left untouched and RemoteOperationFailure is raised.

    File layout:
        {"clients": {"<id>": {...}}, "orders": {...}, ...}
    """

    backend_name = "json"

    def __init__(self, path: Path):
        self.path = Path(path)
        initial = self._load()
        super().__init__(initial)
        logger.info(f"JSON document store opened at {self.path}")

    def _load(self) -> Dict[str, Dict[str, Dict[str, Any]]]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise StoreUnavailableError(self.backend_name, f"cannot read {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise StoreUnavailableError(self.backend_name, f"{self.path} must hold a JSON object")

        return {name: data.get(name, {}) for name in COLLECTIONS}

    def _commit(
        self,
        collection: str,
        records: Dict[str, Dict[str, Any]],
        operation: str,
        record_id: Optional[str] = None,
    ) -> None:
        snapshot = dict(self._data)
        snapshot[collection] = records

        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(snapshot, indent=2), encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as e:
            raise RemoteOperationFailure(operation, collection, str(e), record_id) from e

        self._data[collection] = records


def create_document_store(backend: str, path: Optional[str] = None) -> DocumentStore:
    """
    Build the document store selected by configuration.

    Args:
        backend: "memory" or "json"
        path: JSON file path (required for "json")

    Returns:
        Ready-to-use DocumentStore

    Raises:
        StoreUnavailableError: Unknown backend, missing path, or unreadable file
    """
    if backend == "memory":
        return InMemoryDocumentStore()
    if backend == "json":
        if not path:
            raise StoreUnavailableError(backend, "STORE_PATH is not set")
        return JsonFileDocumentStore(Path(path))
    raise StoreUnavailableError(backend, "unknown backend")


def _check_collection(name: str) -> None:
    if name not in COLLECTIONS:
        raise ValueError(f"Unknown collection: {name}")


def _strip_id(record: Dict[str, Any]) -> Dict[str, Any]:
    # The id lives in the key, not the body.
    body = copy.deepcopy(record)
    body.pop("id", None)
    return body

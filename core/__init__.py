"""
Core module for the print shop dashboard.

Contains fundamental infrastructure components:
- exceptions: Custom exception hierarchy
- document_store: Collection-based document store backends
- notifications: User notification sinks
"""

from .exceptions import (
    PrintShopError,
    StoreUnavailableError,
    RemoteOperationFailure,
    RecordNotFoundError,
    ValidationError,
)
from .document_store import (
    COLLECTIONS,
    DocumentStore,
    InMemoryDocumentStore,
    JsonFileDocumentStore,
    create_document_store,
)
from .notifications import Notifier, FlashNotifier, RecordingNotifier

__all__ = [
    "PrintShopError",
    "StoreUnavailableError",
    "RemoteOperationFailure",
    "RecordNotFoundError",
    "ValidationError",
    "COLLECTIONS",
    "DocumentStore",
    "InMemoryDocumentStore",
    "JsonFileDocumentStore",
    "create_document_store",
    "Notifier",
    "FlashNotifier",
    "RecordingNotifier",
]

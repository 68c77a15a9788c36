"""
Custom exceptions for the print shop dashboard.

Exception Hierarchy:
    PrintShopError (base)
    ├── StoreUnavailableError   - Document store cannot be opened (startup failure)
    ├── RemoteOperationFailure  - A store call failed (runtime, graceful)
    │   └── RecordNotFoundError - Replace/remove of an id the store does not hold
    └── ValidationError         - Request payload is malformed (runtime, HTTP 400)

Usage:
    Startup errors (StoreUnavailableError) cause the app to fail fast.
    Runtime errors are caught at the call site, logged, and reported through
    the notification sink. Local state is never partially applied.

Degenerate pricing input (missing client, unmatched rate) is NOT an error;
the pricing engine returns an Unpriced result instead.
"""

from typing import Optional, Dict, Any


class PrintShopError(Exception):
    """
    Base exception for all print shop dashboard errors.

    All custom exceptions inherit from this class, allowing callers to catch
    all application-specific errors with a single except clause if needed.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional context for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# STARTUP ERRORS - Application will not start if these occur
# =============================================================================

class StoreUnavailableError(PrintShopError):
    """
    The document store could not be opened.

    Raised by create_app() when the configured backend is unknown or the
    backing file cannot be read. The app refuses to start.
    """

    def __init__(self, backend: str, reason: str = ""):
        message = f"Document store '{backend}' is not available"
        if reason:
            message = f"{message}: {reason}"
        details = {
            "backend": backend,
            "resolution": "Check STORE_BACKEND and STORE_PATH in .env",
        }
        super().__init__(message, details)
        self.backend = backend


# =============================================================================
# RUNTIME ERRORS - Application continues, operation fails gracefully
# =============================================================================

class RemoteOperationFailure(PrintShopError):
    """
    A create/list/replace/remove call against the document store failed.

    Not retried. The caller logs it, notifies the user, and leaves its
    local mirror exactly as it was before the call.
    """

    def __init__(
        self,
        operation: str,
        collection: str,
        reason: str = "",
        record_id: Optional[str] = None,
    ):
        message = f"Store {operation} on '{collection}' failed"
        if reason:
            message = f"{message}: {reason}"
        details: Dict[str, Any] = {
            "operation": operation,
            "collection": collection,
        }
        if record_id:
            details["record_id"] = record_id
        super().__init__(message, details)
        self.operation = operation
        self.collection = collection
        self.record_id = record_id


class RecordNotFoundError(RemoteOperationFailure):
    """The store holds no record with the requested id."""

    def __init__(self, operation: str, collection: str, record_id: str):
        super().__init__(
            operation,
            collection,
            reason=f"no record with id {record_id}",
            record_id=record_id,
        )


class ValidationError(PrintShopError):
    """
    A request payload could not be turned into a domain record.

    Raised by the route layer; rendered as HTTP 400.
    """

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else None
        super().__init__(message, details)
        self.field = field

# core/errors.py

from typing import Optional

from fastapi import HTTPException


# =================================================================
#  ERROR TAXONOMY
# =================================================================
# Every failure that crosses the record store, the auth gate or the
# validation layer is one of these. Routers never see backend-specific
# exceptions (requests / json / OSError).
# =================================================================

class KondoError(Exception):
    """Base class for all application errors."""

    status_code = 500

    def __init__(self, message: str, *, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail


class StoreError(KondoError):
    """Any failure raised by a record store backend."""


class NotFoundError(StoreError):
    """Update/delete target id is absent from the collection."""

    status_code = 404

    def __init__(self, table: str, record_id):
        super().__init__(f"Record {record_id} not found in '{table}'")
        self.table = table
        self.record_id = record_id


class BackendUnreachableError(StoreError):
    """Network failure or non-success HTTP status from the remote backend."""

    status_code = 503


class MalformedResponseError(StoreError):
    """Remote backend returned non-JSON or JSON of the wrong shape."""

    status_code = 502


class ValidationFailure(KondoError):
    """Caller-supplied record fails a field constraint before reaching the store."""

    status_code = 422

    def __init__(self, message: str, *, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class AuthenticationFailure(KondoError):
    """Credential pair matched no known principal."""

    status_code = 401


# =================================================================
#  HTTP MAPPING
# =================================================================

def http_status_for(error: Exception) -> int:
    """Status code a router should answer with for the given error."""
    if isinstance(error, KondoError):
        return error.status_code
    return 500


def extract_error_message(error: Exception) -> str:
    """
    Readable details from any exception.
    Application errors carry .message; everything else falls back to args/str.
    """
    if isinstance(error, KondoError):
        return error.message

    if getattr(error, "args", None):
        return str(error.args[0])

    return str(error) or type(error).__name__


def handle_store_error(error: Exception, operation: str = "Database operation") -> HTTPException:
    """
    Convert an application error into an HTTPException with a consistent message.
    Returns HTTPException (doesn't raise) so caller can customize or re-raise.

    Args:
        error: The exception that occurred
        operation: Description of what operation failed (e.g., "Failed to create unit")
    """
    from core.logging_config import logger

    status_code = http_status_for(error)
    message = extract_error_message(error)

    if status_code >= 500:
        logger.error(f"{operation}: {message}")
    else:
        logger.info(f"{operation}: {message}")

    if isinstance(error, NotFoundError):
        return HTTPException(status_code=404, detail=f"{operation}: Resource not found")
    if isinstance(error, (ValidationFailure, AuthenticationFailure)):
        return HTTPException(status_code=status_code, detail=message)
    if isinstance(error, BackendUnreachableError):
        return HTTPException(status_code=503, detail=f"{operation}: storage backend unreachable")
    if isinstance(error, MalformedResponseError):
        return HTTPException(status_code=502, detail=f"{operation}: invalid response from storage backend")

    return HTTPException(status_code=500, detail=f"{operation} failed")

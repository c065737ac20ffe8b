"""
Exceptions for the shop assistant.

Client-input and auth errors surface as plain HTTP responses before any
streaming starts. Catalog and backend errors happen after the SSE response
is committed, so the chat service turns them into a single ``error`` event.
"""

from typing import Any, Dict, Optional


class ElectroShopError(Exception):
    """Base exception for assistant errors."""

    error_code: Optional[str] = None

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        """
        Args:
            message: Human-readable error message
            status_code: HTTP status code when surfaced as a plain response
            details: Additional error details for debugging
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details or {}

    @property
    def code(self) -> str:
        return self.error_code or type(self).__name__


class ClientInputError(ElectroShopError):
    """Raised when the request body is malformed."""

    error_code = "INVALID_REQUEST"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, status_code=400, details=details)


class AuthenticationError(ElectroShopError):
    """Raised when a bearer token is missing, malformed or expired."""

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message=message, status_code=401)


class CatalogUnavailable(ElectroShopError):
    """Raised when the catalog snapshot cannot be fetched."""

    def __init__(self, error: Exception):
        message = f"Failed to fetch catalog data: {error}"
        super().__init__(
            message=message,
            status_code=503,
            details={"error": str(error), "error_type": type(error).__name__},
        )


class BackendProtocolError(ElectroShopError):
    """Raised when the generation request cannot be encoded or sent."""

    def __init__(self, message: str, error: Optional[Exception] = None):
        details = {}
        if error is not None:
            details = {"error": str(error), "error_type": type(error).__name__}
        super().__init__(message=message, status_code=502, details=details)


class BackendStreamError(ElectroShopError):
    """Raised when reading the generation stream fails before EOF."""

    def __init__(self, error: Exception):
        message = f"Generation stream interrupted: {error}"
        super().__init__(
            message=message,
            status_code=502,
            details={"error": str(error), "error_type": type(error).__name__},
        )

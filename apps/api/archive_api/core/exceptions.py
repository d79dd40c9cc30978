"""
Exception hierarchy for the archive API.

Only caller input errors reach the client; store errors are handled inside
the services and turn into degraded results.
"""

from typing import Any, Dict, Optional


class AppException(Exception):
    """
    Base exception for all application errors.

    Attributes:
        message: Human-readable error message
        code: Machine-readable error code
        status_code: HTTP status code for API responses
        details: Additional error details
    """

    def __init__(
        self,
        message: str,
        code: str = "ERROR",
        status_code: int = 400,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API response."""
        result = {
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


class InvalidFilterError(AppException):
    """Unknown facet dimension or a value outside its canonical set."""

    def __init__(self, message: str, dimension: Optional[str] = None, value: Optional[str] = None):
        details: Dict[str, Any] = {}
        if dimension is not None:
            details["dimension"] = dimension
        if value is not None:
            details["value"] = value
        super().__init__(message=message, code="BAD_REQUEST", status_code=400, details=details)


class StoreError(AppException):
    """Backing store failure."""

    def __init__(self, message: str, code: str = "STORE_ERROR"):
        super().__init__(message=message, code=code, status_code=503)


class AggregationUnavailableError(StoreError):
    """The store cannot run a grouped-count expression."""

    def __init__(self, message: str = "Grouped aggregation is not available"):
        super().__init__(message=message, code="AGGREGATION_UNAVAILABLE")


class TransientStoreError(StoreError):
    """Timeout or connection-level failure; worth one retry."""

    def __init__(self, message: str):
        super().__init__(message=message, code="STORE_UNAVAILABLE")


class ClientDisconnectedError(AppException):
    def __init__(self):
        super().__init__(message="Client closed the request", code="CLIENT_CLOSED_REQUEST", status_code=499)

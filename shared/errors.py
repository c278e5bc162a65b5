"""
Shared error handling for the Book Cache proxy.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel

from shared.logging import request_id_var


class ErrorResponse(BaseModel):
    """Standard error response format."""

    request_id: Optional[str] = None
    code: str
    error: str
    details: Any = None


class BookCacheException(Exception):
    """Base exception for Book Cache services."""

    status_code = 500

    def __init__(
        self,
        code: str,
        message: str,
        details: Any = None,
        status_code: Optional[int] = None,
    ):
        self.code = code
        self.message = message
        self.details = details
        if status_code is not None:
            self.status_code = status_code
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            request_id=request_id_var.get(),
            code=self.code,
            error=self.message,
            details=self.details,
        )


class ClientInputError(BookCacheException):
    """Missing or invalid request parameters."""

    status_code = 400

    def __init__(self, message: str = "Invalid request", details: Any = None):
        super().__init__("CLIENT_INPUT_ERROR", message, details)


class StoreError(BookCacheException):
    """Cache backend rejected or failed an operation."""

    def __init__(self, message: str = "Cache store error", details: Any = None, code: str = "STORE_ERROR"):
        super().__init__(code, message, details)


class StoreUnavailable(StoreError):
    """Cache backend cannot be reached."""

    status_code = 503

    def __init__(self, message: str = "Cache store unavailable", details: Any = None):
        super().__init__(message, details, code="STORE_UNAVAILABLE")


class FetchError(BookCacheException):
    """Base class for origin fetch failures."""

    def __init__(self, code: str = "ORIGIN_ERROR", message: str = "Failed to fetch book data", details: Any = None):
        super().__init__(code, message, details)


class OriginConnectionRefused(FetchError):
    """Origin could not be reached at all."""

    status_code = 503

    def __init__(self, details: Any = "Connection refused"):
        super().__init__(
            "ORIGIN_CONNECTION_REFUSED",
            "Cannot connect to Open Library API. Please try again later.",
            details,
        )


class OriginTimeout(FetchError):
    """Origin did not answer within the request bound."""

    status_code = 504

    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__(
            "ORIGIN_TIMEOUT",
            "Open Library API timed out",
            {"timeout_seconds": timeout},
        )


class UpstreamError(FetchError):
    """Origin answered with a non-success status."""

    def __init__(self, status: Optional[int], body: str = ""):
        self.status = status
        self.body = body
        super().__init__(
            "UPSTREAM_ERROR",
            "Failed to fetch book data",
            {"status": status, "body": body},
        )
        # 4xx/5xx are forwarded as-is, anything else is a generic server error
        if status is not None and 400 <= status <= 599:
            self.status_code = status


class OriginTransportError(FetchError):
    """Any other network-level failure talking to the origin."""

    def __init__(self, message: str):
        super().__init__("ORIGIN_TRANSPORT_ERROR", "Failed to fetch book data", message)


def error_details(exc: BookCacheException) -> Dict[str, Any]:
    """Flatten an exception into structured log fields."""
    return {"code": exc.code, "message": exc.message, "details": exc.details}

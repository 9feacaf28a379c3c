"""Custom exceptions for the CartRec API.

Defines specific exception types for better error handling and reporting.
"""

from typing import Any, Dict, Optional


class CartRecException(Exception):
    """Base exception for CartRec errors."""

    def __init__(
        self,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
    ):
        """Initialize exception.

        Args:
            message: Human-readable error message
            status_code: HTTP status code for API responses
            details: Additional error details for debugging
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details or {}


class CatalogUnavailableError(CartRecException):
    """Raised when the active catalog cannot be read."""

    def __init__(self, error: Exception):
        message = f"Error fetching product catalog: {str(error) or type(error).__name__}"
        super().__init__(
            message=message,
            status_code=503,
            details={
                "error": str(error),
                "error_type": type(error).__name__,
            },
        )


class HistoryUnavailableError(CartRecException):
    """Raised when past purchase rows cannot be read.

    The suggestion route recovers from this error by scoring against an empty
    history, so the 503 status is never rendered by the API. It applies to
    callers that choose not to recover.
    """

    def __init__(self, error: Exception):
        message = f"Error fetching purchase history: {str(error) or type(error).__name__}"
        super().__init__(
            message=message,
            status_code=503,
            details={
                "error": str(error),
                "error_type": type(error).__name__,
            },
        )


class SuggestionError(CartRecException):
    """Raised when suggestion generation fails unexpectedly."""

    def __init__(self, region_code: str, error: Exception):
        message = f"Failed to generate suggestions for region {region_code!r}: {str(error)}"
        super().__init__(
            message=message,
            status_code=500,
            details={
                "region_code": region_code,
                "error": str(error),
                "error_type": type(error).__name__,
            },
        )

"""Custom exceptions for the Local Food Lovers Network API.

Defines specific exception types for better error handling and reporting.
Every exception carries the HTTP status code it is rendered with.
"""

from typing import Any, Dict, Optional


class FoodNetworkException(Exception):
    """Base exception for Local Food Lovers Network errors."""

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
            details: Additional error details for the client
        """
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details or {}


class ValidationError(FoodNetworkException):
    """Raised when a required field is missing or malformed."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, status_code=400, details=details)


class InvalidIdentifierError(FoodNetworkException):
    """Raised when a path identifier is not a well-formed ObjectId."""

    def __init__(self, identifier: str):
        super().__init__(
            message=f"'{identifier}' is not a valid document identifier",
            status_code=400,
            details={"id": identifier},
        )


class NotFoundError(FoodNetworkException):
    """Raised when no document matches an identifier or filter."""

    def __init__(
        self,
        resource: str,
        identifier: Optional[str] = None,
        message: Optional[str] = None,
    ):
        super().__init__(
            message=message or f"{resource} not found",
            status_code=404,
            details={"resource": resource, "id": identifier} if identifier else {"resource": resource},
        )


class StoreError(FoodNetworkException):
    """Raised when an underlying document store operation fails.

    The original error is logged, never returned to the client.
    """

    def __init__(self, operation: str, error: Optional[Exception] = None):
        super().__init__(
            message=f"Failed to {operation}",
            status_code=500,
            details={"operation": operation},
        )
        self.error = error


class ConflictError(FoodNetworkException):
    """Raised when concurrent writes keep a conditional update from applying."""

    def __init__(self, resource: str, identifier: str):
        super().__init__(
            message=f"{resource} is being modified concurrently, retry the request",
            status_code=409,
            details={"resource": resource, "id": identifier},
        )

"""
Custom exceptions for the travel history service.
"""

from typing import Optional, Dict, Any
from enum import Enum


class ErrorCode(str, Enum):
    """Standardized error codes for the application."""

    # Lookup errors
    STAY_NOT_FOUND = "STAY_NOT_FOUND"
    NOT_FOUND = "NOT_FOUND"

    # Authentication errors
    MISSING_API_KEY = "MISSING_API_KEY"
    INVALID_API_KEY = "INVALID_API_KEY"

    # Storage errors
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"

    # Generic errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"


class TravelHistoryException(Exception):
    """Base exception for the travel history service."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code


class StayNotFoundError(TravelHistoryException):
    """Raised when a write targets a stay id that does not exist."""

    def __init__(self, stay_id: int):
        super().__init__(
            message="No historical location with that id exists, so nothing was updated.",
            error_code=ErrorCode.STAY_NOT_FOUND,
            details={"stay_id": stay_id},
            status_code=422
        )


class MissingAuthKeyError(TravelHistoryException):
    """Raised when a write request carries no key at all."""

    def __init__(self, header_name: str):
        super().__init__(
            message=f"Write key required in {header_name} header or 'key' query parameter",
            error_code=ErrorCode.MISSING_API_KEY,
            status_code=401
        )


class InvalidAuthKeyError(TravelHistoryException):
    """Raised when the supplied write key does not match the configured one."""

    def __init__(self):
        super().__init__(
            message="Invalid authentication key for this request.",
            error_code=ErrorCode.INVALID_API_KEY,
            status_code=403
        )


class StoreUnavailableError(TravelHistoryException):
    """Raised when the stay store cannot complete a read or write."""

    def __init__(self, operation: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=f"Stay store failed during '{operation}'",
            error_code=ErrorCode.STORE_UNAVAILABLE,
            details=details or {"operation": operation},
            status_code=503
        )

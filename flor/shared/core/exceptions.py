# 📄 File: flor/shared/core/exceptions.py
# 🧭 Purpose (Layman Explanation):
# This file defines the special error types Flor uses to say exactly what went wrong,
# like a missing plant, a bad plant name, or a monthly AI limit that has been used up.
# 🧪 Purpose (Technical Summary):
# Custom exception hierarchy providing specific error types with HTTP status codes,
# error details, and serialization for API error responses.
# 🔗 Dependencies:
# FastAPI status constants, typing
# 🔄 Connected Modules / Calls From:
# Domain services, repositories, AI clients, photo storage, flor.main exception handlers,
# flor.shared.utils.resilience (error classification)

from typing import Any, Dict, Optional

from fastapi import status


class FlorException(Exception):
    """
    Base exception class for the Flor application.
    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
        error_code: Optional[str] = None
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.error_code = error_code or self.__class__.__name__.upper()
        super().__init__(self.message)


# =============================================================================
# AUTHENTICATION EXCEPTIONS
# =============================================================================

class AuthenticationError(FlorException):
    """
    Exception raised when the bearer token is missing, expired or invalid.
    """

    def __init__(
        self,
        message: str = "Authentication failed",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_401_UNAUTHORIZED,
            details=details,
            error_code="AUTHENTICATION_ERROR"
        )


# =============================================================================
# VALIDATION & DATA EXCEPTIONS
# =============================================================================

class ValidationError(FlorException):
    """
    Exception raised for data validation failures.
    The message is shown to the user verbatim.
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        value: Optional[Any] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)

        super().__init__(
            message=message,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details=details,
            error_code="VALIDATION_ERROR"
        )


class NotFoundError(FlorException):
    """
    Exception raised when a resource is missing or not owned by the caller.
    """

    def __init__(
        self,
        message: str = "Resource not found",
        resource_type: Optional[str] = None,
        resource_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if resource_type:
            details["resource_type"] = resource_type
        if resource_id:
            details["resource_id"] = resource_id

        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            details=details,
            error_code="NOT_FOUND"
        )


class ConflictError(FlorException):
    """
    Exception raised when the current state of a resource blocks the request.
    """

    def __init__(
        self,
        message: str = "Resource conflict",
        resource_type: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if resource_type:
            details["resource_type"] = resource_type

        super().__init__(
            message=message,
            status_code=status.HTTP_409_CONFLICT,
            details=details,
            error_code="CONFLICT"
        )


# =============================================================================
# USAGE LIMIT EXCEPTIONS
# =============================================================================

class UsageLimitExceededError(FlorException):
    """
    Exception raised when a per-user quota blocks an operation.
    Used for the plant cap and the monthly AI generation cap.
    """

    def __init__(
        self,
        message: str = "Usage limit reached",
        limit_type: Optional[str] = None,
        used: Optional[int] = None,
        limit: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if limit_type:
            details["limit_type"] = limit_type
        if used is not None:
            details["used"] = used
        if limit is not None:
            details["limit"] = limit

        super().__init__(
            message=message,
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            details=details,
            error_code="USAGE_LIMIT_EXCEEDED"
        )


# =============================================================================
# INFRASTRUCTURE EXCEPTIONS
# =============================================================================

class DatabaseError(FlorException):
    """
    Exception raised for database operation failures.
    Repositories wrap SQLAlchemy errors in this type.
    """

    def __init__(
        self,
        message: str = "Database operation failed",
        operation: Optional[str] = None,
        table: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if operation:
            details["operation"] = operation
        if table:
            details["table"] = table

        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details=details,
            error_code="DATABASE_ERROR"
        )


class StorageError(FlorException):
    """
    Exception raised when Supabase Storage rejects an upload.
    """

    def __init__(
        self,
        message: str = "File storage operation failed",
        operation: Optional[str] = None,
        file_path: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if operation:
            details["operation"] = operation
        if file_path:
            details["file_path"] = file_path

        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details=details,
            error_code="STORAGE_ERROR"
        )


# =============================================================================
# EXTERNAL API EXCEPTIONS
# =============================================================================

class ExternalAPIError(FlorException):
    """
    Exception raised when PlantNet or OpenAI returns an error response.
    """

    def __init__(
        self,
        message: str = "External API request failed",
        api_name: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if not details:
            details = {}

        if api_name:
            details["api_name"] = api_name
        if status_code is not None:
            details["upstream_status"] = status_code

        super().__init__(
            message=message,
            status_code=status.HTTP_502_BAD_GATEWAY,
            details=details,
            error_code="EXTERNAL_API_ERROR"
        )


class APITimeoutError(ExternalAPIError):
    """Raised when an external API does not answer in time."""

    def __init__(self, message: str = "External API request timed out", api_name: Optional[str] = None):
        super().__init__(message=message, api_name=api_name)
        self.status_code = status.HTTP_504_GATEWAY_TIMEOUT
        self.error_code = "API_TIMEOUT"


# =============================================================================
# EXCEPTION UTILITIES
# =============================================================================

def is_client_error(exception: Exception) -> bool:
    """Check if exception represents a client error (4xx)."""
    if isinstance(exception, FlorException):
        return 400 <= exception.status_code < 500
    return False

# =============================================================================
# QUOTE API - CORE EXCEPTIONS MODULE
# =============================================================================
# File: core/exceptions.py
# Description: Custom exception hierarchy for the quote service
#              Provides granular error handling with HTTP status code mapping
# =============================================================================

from typing import Any, Dict, Optional

from fastapi import status


class QuoteApiException(Exception):
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    BASE EXCEPTION CLASS                                  │
    │  All custom exceptions inherit from this base class                      │
    │  Provides consistent error structure across the application             │
    └─────────────────────────────────────────────────────────────────────────┘

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable error identifier
        status_code: HTTP status code for API responses
        details: Additional context for debugging
    """

    def __init__(
        self,
        message: str = "An error occurred",
        error_code: str = "ERROR",
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON serialization."""
        return {
            "error": True,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details
        }


# =============================================================================
# VALIDATION EXCEPTIONS
# =============================================================================

class ValidationError(QuoteApiException):
    """Raised when request input is missing or malformed."""

    def __init__(
        self,
        message: str = "Validation failed",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details
        )


# =============================================================================
# AUTHENTICATION EXCEPTIONS
# =============================================================================

class AuthError(QuoteApiException):
    """
    Raised when authentication fails.

    Examples:
        - Invalid email/password combination
        - Missing Authorization header
    """

    def __init__(
        self,
        message: str = "Authentication failed",
        error_code: str = "AUTHENTICATION_FAILED",
        status_code: int = status.HTTP_401_UNAUTHORIZED,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=status_code,
            details=details
        )


class InvalidCredentialsError(AuthError):
    """Raised for unknown email and wrong password alike."""

    def __init__(self, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="Invalid email or password",
            error_code="INVALID_CREDENTIALS",
            details=details
        )


class TokenMissingError(AuthError):
    """Raised when authentication token is not provided."""

    def __init__(self, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="Access token required",
            error_code="TOKEN_MISSING",
            details=details
        )


class TokenError(AuthError):
    """Base class for presented-but-unusable tokens (403)."""

    def __init__(
        self,
        message: str = "Invalid or expired token",
        error_code: str = "TOKEN_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=status.HTTP_403_FORBIDDEN,
            details=details
        )


class TokenExpiredError(TokenError):
    """Raised when JWT token has expired."""

    def __init__(self, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="Token has expired",
            error_code="TOKEN_EXPIRED",
            details=details
        )


class TokenInvalidError(TokenError):
    """Raised when JWT token is malformed or signature is invalid."""

    def __init__(self, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="Invalid token",
            error_code="TOKEN_INVALID",
            details=details
        )


# =============================================================================
# CONFLICT / NOT FOUND EXCEPTIONS
# =============================================================================

class ConflictError(QuoteApiException):
    """Raised when a write collides with existing data."""

    def __init__(
        self,
        message: str = "Record already exists",
        error_code: str = "CONFLICT",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=status.HTTP_409_CONFLICT,
            details=details
        )


class DuplicateRecordError(ConflictError):
    """Raised by the query layer when a unique constraint rejects an insert."""

    def __init__(self, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="Record violates a uniqueness constraint",
            error_code="DUPLICATE_RECORD",
            details=details
        )


class UserExistsError(ConflictError):
    """Raised when registering an email that is already taken."""

    def __init__(self, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="Email already registered",
            error_code="USER_EXISTS",
            details=details
        )


class NotFoundError(QuoteApiException):
    """Base class for missing resources."""

    def __init__(
        self,
        message: str = "Resource not found",
        error_code: str = "NOT_FOUND",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=status.HTTP_404_NOT_FOUND,
            details=details
        )


class UserNotFoundError(NotFoundError):
    """Raised when requested user does not exist."""

    def __init__(self, user_id: Optional[Any] = None, details: Optional[Dict[str, Any]] = None):
        message = "User not found"
        if user_id is not None:
            message = f"User with ID '{user_id}' not found"
        super().__init__(
            message=message,
            error_code="USER_NOT_FOUND",
            details=details
        )


class QuoteNotFoundError(NotFoundError):
    """Raised when requested quote does not exist."""

    def __init__(self, quote_id: Optional[Any] = None, details: Optional[Dict[str, Any]] = None):
        message = "Quote not found"
        if quote_id is not None:
            message = f"Quote with ID '{quote_id}' not found"
        super().__init__(
            message=message,
            error_code="QUOTE_NOT_FOUND",
            details=details
        )


# =============================================================================
# BACKEND EXCEPTIONS
# =============================================================================

class BackendError(QuoteApiException):
    """Base class for storage backend failures."""

    def __init__(
        self,
        message: str = "Database error",
        error_code: str = "DATABASE_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details=details
        )


class ConfigurationError(BackendError):
    """Raised when the selected backend is missing required settings."""

    def __init__(self, message: str = "Database is misconfigured", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code="CONFIGURATION_ERROR",
            details=details
        )


class CredentialError(BackendError):
    """Raised when a database access token cannot be acquired."""

    def __init__(self, message: str = "Failed to acquire database credential", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code="CREDENTIAL_ERROR",
            details=details
        )


class StorageIOError(BackendError):
    """Raised when the embedded database file cannot be opened or created."""

    def __init__(self, message: str = "Database file is not accessible", details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message=message,
            error_code="STORAGE_IO_ERROR",
            details=details
        )


class DatabaseConnectionError(BackendError):
    """Raised when database connection fails."""

    def __init__(self, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="Failed to connect to database",
            error_code="DATABASE_CONNECTION_ERROR",
            details=details
        )


class DatabaseQueryError(BackendError):
    """Raised when database query fails."""

    def __init__(self, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            message="Database query failed",
            error_code="DATABASE_QUERY_ERROR",
            details=details
        )

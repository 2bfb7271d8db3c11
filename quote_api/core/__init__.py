# =============================================================================
# CORE MODULE INITIALIZATION
# =============================================================================
# File: core/__init__.py
# Description: Core module exports for centralized access
# =============================================================================

from quote_api.core.config import BackendKind, Settings, get_settings
from quote_api.core.exceptions import (
    # Base
    QuoteApiException,

    # Validation
    ValidationError,

    # Authentication
    AuthError,
    InvalidCredentialsError,
    TokenMissingError,
    TokenError,
    TokenExpiredError,
    TokenInvalidError,

    # Conflict / Not found
    ConflictError,
    DuplicateRecordError,
    UserExistsError,
    NotFoundError,
    UserNotFoundError,
    QuoteNotFoundError,

    # Backend
    BackendError,
    ConfigurationError,
    CredentialError,
    StorageIOError,
    DatabaseConnectionError,
    DatabaseQueryError,
)
from quote_api.core.security import JWTManager, PasswordManager, TokenPayload

__all__ = [
    # Config
    "BackendKind",
    "Settings",
    "get_settings",

    # Exceptions
    "QuoteApiException",
    "ValidationError",
    "AuthError",
    "InvalidCredentialsError",
    "TokenMissingError",
    "TokenError",
    "TokenExpiredError",
    "TokenInvalidError",
    "ConflictError",
    "DuplicateRecordError",
    "UserExistsError",
    "NotFoundError",
    "UserNotFoundError",
    "QuoteNotFoundError",
    "BackendError",
    "ConfigurationError",
    "CredentialError",
    "StorageIOError",
    "DatabaseConnectionError",
    "DatabaseQueryError",

    # Security
    "PasswordManager",
    "JWTManager",
    "TokenPayload",
]

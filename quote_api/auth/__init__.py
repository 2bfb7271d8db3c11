# =============================================================================
# AUTH MODULE INITIALIZATION
# =============================================================================
# File: auth/__init__.py
# Description: Registration, login and token dependencies
# =============================================================================

from quote_api.auth.schemas import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    UserListResponse,
    UserPublic,
    UserResponse,
    UserSummary,
)
from quote_api.auth.repository import UserRepository
from quote_api.auth.service import AuthService

__all__ = [
    # Schemas
    "RegisterRequest",
    "LoginRequest",
    "UserSummary",
    "UserPublic",
    "AuthResponse",
    "UserResponse",
    "UserListResponse",

    # Data access and logic
    "UserRepository",
    "AuthService",
]

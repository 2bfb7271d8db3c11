# =============================================================================
# QUOTE API - AUTH SCHEMAS
# =============================================================================
# File: auth/schemas.py
# Description: Pydantic models for request/response validation
#              Type-safe data transfer objects for the authentication API
# =============================================================================

from datetime import datetime
from typing import Annotated, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StringConstraints


# =============================================================================
# BASE SCHEMAS
# =============================================================================

class BaseSchema(BaseModel):
    """Base schema with common configuration."""
    model_config = ConfigDict(
        from_attributes=True,
        str_strip_whitespace=True,
    )


# =============================================================================
# REQUEST SCHEMAS
# =============================================================================

# Passwords are taken verbatim; only identity fields are trimmed
TrimmedStr = Annotated[str, StringConstraints(strip_whitespace=True)]


class RequestSchema(BaseSchema):
    """Base for request bodies: no implicit whitespace stripping."""
    model_config = ConfigDict(str_strip_whitespace=False)


class RegisterRequest(RequestSchema):
    """
    Schema for user registration request.

    Validation Rules:
        - name: required, non-empty
        - email: required, non-empty; stored exactly as given (case-sensitive)
        - password: at least 6 characters, whitespace included
    """
    name: TrimmedStr = Field(
        ...,
        min_length=1,
        max_length=255,
        description="Display name",
        examples=["Alice"]
    )
    email: TrimmedStr = Field(
        ...,
        min_length=1,
        max_length=255,
        description="User's email address",
        examples=["a@x.com"]
    )
    password: str = Field(
        ...,
        min_length=6,
        description="Password (min 6 chars)",
        examples=["secret1"]
    )


class LoginRequest(RequestSchema):
    """Schema for login request."""
    email: TrimmedStr = Field(..., min_length=1, description="User's email address")
    password: str = Field(..., min_length=1, description="User's password")


# =============================================================================
# RESPONSE SCHEMAS
# =============================================================================

class UserSummary(BaseSchema):
    """User as returned alongside a freshly issued token."""
    id: Union[int, str]
    name: str
    email: str


class UserPublic(UserSummary):
    """User profile (never includes the password hash)."""
    # SQLite hands timestamps back as text
    created_at: Optional[Union[datetime, str]] = None


class AuthResponse(BaseModel):
    """Register/login response."""
    message: str
    token: str
    user: UserSummary


class UserResponse(BaseModel):
    user: UserPublic


class UserListResponse(BaseModel):
    users: List[UserPublic]

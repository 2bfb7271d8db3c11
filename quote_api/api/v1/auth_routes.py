# =============================================================================
# QUOTE API - AUTH ROUTES
# =============================================================================
# File: api/v1/auth_routes.py
# Description: Registration, login and user lookup endpoints
# =============================================================================

from fastapi import APIRouter, status

from quote_api.auth.dependencies import AuthServiceDep, CurrentToken
from quote_api.auth.schemas import (
    AuthResponse,
    LoginRequest,
    RegisterRequest,
    UserListResponse,
    UserResponse,
)


router = APIRouter(tags=["Authentication"])


# =============================================================================
# REGISTRATION
# =============================================================================

@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    description="Create an account and receive a token valid for 7 days.",
)
async def register(
    data: RegisterRequest,
    auth_service: AuthServiceDep,
) -> AuthResponse:
    """
    Register a new user account.

    - **name**: Display name
    - **email**: Unique, stored as given
    - **password**: Minimum 6 characters
    """
    token, user = await auth_service.register(data)
    return AuthResponse(message="Account created successfully", token=token, user=user)


# =============================================================================
# LOGIN
# =============================================================================

@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Authenticate user",
    description="Login with email and password to receive a token.",
)
async def login(
    data: LoginRequest,
    auth_service: AuthServiceDep,
) -> AuthResponse:
    token, user = await auth_service.login(data)
    return AuthResponse(message="Login successful", token=token, user=user)


# =============================================================================
# USERS
# =============================================================================

@router.get(
    "/user",
    response_model=UserResponse,
    summary="Current user profile",
)
async def get_user_profile(
    token: CurrentToken,
    auth_service: AuthServiceDep,
) -> UserResponse:
    """Profile of the user the bearer token was issued to."""
    user = await auth_service.get_profile(token.id)
    return UserResponse(user=user)


@router.get(
    "/users",
    response_model=UserListResponse,
    summary="List users",
    description="Development listing of every registered user.",
)
async def list_users(auth_service: AuthServiceDep) -> UserListResponse:
    return UserListResponse(users=await auth_service.list_users())

# =============================================================================
# QUOTE API - AUTH DEPENDENCIES
# =============================================================================
# File: auth/dependencies.py
# Description: FastAPI dependencies for authentication and data access
#              Everything is read from app.state, set up by the app factory
# =============================================================================

from typing import Annotated, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from quote_api.auth.service import AuthService
from quote_api.core.config import Settings
from quote_api.core.exceptions import TokenMissingError
from quote_api.core.security import JWTManager, PasswordManager, TokenPayload
from quote_api.db.connection import ConnectionManager
from quote_api.db.queries import QueryFacade


# =============================================================================
# SECURITY SCHEME
# =============================================================================

# Bearer token scheme; missing header handled below as 401
bearer_scheme = HTTPBearer(
    scheme_name="Bearer",
    description="JWT access token",
    auto_error=False,
)


# =============================================================================
# APPLICATION STATE DEPENDENCIES
# =============================================================================

def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


AppSettings = Annotated[Settings, Depends(get_app_settings)]


def get_connection_manager(request: Request) -> ConnectionManager:
    return request.app.state.connection_manager


Connections = Annotated[ConnectionManager, Depends(get_connection_manager)]


def get_query_facade(manager: Connections) -> QueryFacade:
    """
    Dependency for the query facade.

    A facade is cheap; the handle itself is re-acquired from the manager
    on every statement.
    """
    return QueryFacade(manager)


Queries = Annotated[QueryFacade, Depends(get_query_facade)]


def get_jwt_manager(request: Request) -> JWTManager:
    return request.app.state.jwt_manager


def get_password_manager(request: Request) -> PasswordManager:
    return request.app.state.password_manager


# =============================================================================
# SERVICE DEPENDENCIES
# =============================================================================

def get_auth_service(
    queries: Queries,
    password_manager: Annotated[PasswordManager, Depends(get_password_manager)],
    jwt_manager: Annotated[JWTManager, Depends(get_jwt_manager)],
) -> AuthService:
    """
    Dependency for authentication service.

    Returns:
        AuthService: Service bound to the active backend
    """
    return AuthService(queries, password_manager, jwt_manager)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]


# =============================================================================
# TOKEN EXTRACTION
# =============================================================================

async def get_token_from_header(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    """
    Extract JWT token from Authorization header.

    Raises:
        TokenMissingError: If token not provided (401)
    """
    if credentials is None or not credentials.credentials:
        raise TokenMissingError()

    return credentials.credentials


Token = Annotated[str, Depends(get_token_from_header)]


# =============================================================================
# TOKEN VALIDATION
# =============================================================================

async def get_current_token(
    token: Token,
    jwt_manager: Annotated[JWTManager, Depends(get_jwt_manager)],
) -> TokenPayload:
    """
    Validate and decode JWT token.

    Raises:
        TokenExpiredError: If token expired (403)
        TokenInvalidError: If token invalid (403)
    """
    return jwt_manager.decode_token(token)


CurrentToken = Annotated[TokenPayload, Depends(get_current_token)]

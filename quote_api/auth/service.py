# =============================================================================
# QUOTE API - AUTH SERVICE
# =============================================================================
# File: auth/service.py
# Description: Business logic layer for authentication operations
#              Orchestrates repository and security components
# =============================================================================

import logging
from typing import Any, Dict, List, Tuple

from starlette.concurrency import run_in_threadpool

from quote_api.auth.repository import UserRepository
from quote_api.auth.schemas import (
    LoginRequest,
    RegisterRequest,
    UserPublic,
    UserSummary,
)
from quote_api.core.exceptions import (
    DuplicateRecordError,
    InvalidCredentialsError,
    UserExistsError,
    UserNotFoundError,
)
from quote_api.core.security import JWTManager, PasswordManager
from quote_api.db.queries import QueryFacade


logger = logging.getLogger(__name__)


class AuthService:
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    AUTHENTICATION SERVICE                                │
    │  Business logic layer handling all authentication operations            │
    │  Coordinates between the user repository and the security managers      │
    └─────────────────────────────────────────────────────────────────────────┘

    Responsibilities:
        - User registration (storage uniqueness is the final arbiter)
        - Login with a single generic failure message
        - Token issuance
        - Profile and user listing
    """

    def __init__(
        self,
        queries: QueryFacade,
        password_manager: PasswordManager,
        jwt_manager: JWTManager,
    ):
        self._user_repo = UserRepository(queries)
        self._passwords = password_manager
        self._jwt = jwt_manager

    # =========================================================================
    # REGISTRATION
    # =========================================================================

    async def register(self, data: RegisterRequest) -> Tuple[str, UserSummary]:
        """
        Register a new user.

        Returns:
            Tuple of (token, user summary)

        Raises:
            UserExistsError: Email already registered, whether caught by the
                pre-check or by the storage constraint on insert
        """
        if await self._user_repo.exists_email(data.email):
            raise UserExistsError()

        password_hash = await run_in_threadpool(self._passwords.hash_password, data.password)

        # Two concurrent registrations can both pass the pre-check
        try:
            user_id = await self._user_repo.create(data.name, data.email, password_hash)
        except DuplicateRecordError:
            logger.info(f"Concurrent registration lost the race for {data.email}")
            raise UserExistsError()

        user = UserSummary(id=user_id, name=data.name, email=data.email)
        token = self._issue_token(user)
        logger.info(f"User registered: id={user_id}")
        return token, user

    # =========================================================================
    # LOGIN
    # =========================================================================

    async def login(self, data: LoginRequest) -> Tuple[str, UserSummary]:
        """
        Authenticate by email and password.

        Raises:
            InvalidCredentialsError: Unknown email or wrong password; the two
                cases are indistinguishable to the caller
        """
        row = await self._user_repo.get_by_email(data.email)
        if row is None:
            raise InvalidCredentialsError()

        is_valid, needs_rehash = await run_in_threadpool(
            self._passwords.verify_password, data.password, row["password"]
        )
        if not is_valid:
            raise InvalidCredentialsError()
        if needs_rehash:
            logger.info(f"User {row['id']} has a legacy password hash")

        user = UserSummary(id=row["id"], name=row["name"], email=row["email"])
        return self._issue_token(user), user

    # =========================================================================
    # PROFILE
    # =========================================================================

    async def get_profile(self, user_id: Any) -> UserPublic:
        row = await self._user_repo.get_by_id(user_id)
        if row is None:
            raise UserNotFoundError(user_id)
        return UserPublic.model_validate(row)

    async def list_users(self) -> List[UserPublic]:
        rows: List[Dict[str, Any]] = await self._user_repo.list_all()
        return [UserPublic.model_validate(row) for row in rows]

    def _issue_token(self, user: UserSummary) -> str:
        return self._jwt.create_token(user_id=user.id, email=user.email, name=user.name)

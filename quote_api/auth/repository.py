# =============================================================================
# QUOTE API - USER REPOSITORY
# =============================================================================
# File: auth/repository.py
# Description: Data access for user records
#              Every call goes through the backend-agnostic query facade
# =============================================================================

from typing import Any, Dict, List, Optional

from quote_api.db.dialects import Operation
from quote_api.db.queries import QueryFacade


class UserRepository:
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    USER REPOSITORY                                       │
    │  Data access layer for User entity operations                           │
    │  Provides clean separation between business logic and data access       │
    └─────────────────────────────────────────────────────────────────────────┘

    Rows come back as plain dicts. Users are created by registration and
    never updated or deleted.
    """

    def __init__(self, queries: QueryFacade):
        """
        Initialize repository with the query facade.

        Args:
            queries: Facade bound to the active backend
        """
        self._queries = queries

    # =========================================================================
    # CREATE OPERATIONS
    # =========================================================================

    async def create(self, name: str, email: str, password_hash: str) -> Any:
        """
        Insert a user and return the backend-assigned id.

        Raises:
            DuplicateRecordError: Email already taken (storage constraint)
        """
        result = await self._queries.execute(
            Operation.INSERT_USER,
            {"name": name, "email": email, "password": password_hash},
        )
        return result.inserted_id

    # =========================================================================
    # READ OPERATIONS
    # =========================================================================

    async def get_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        """Fetch a user including the password hash, for login."""
        result = await self._queries.execute(Operation.FIND_USER_BY_EMAIL, {"email": email})
        return result.first()

    async def get_by_id(self, user_id: Any) -> Optional[Dict[str, Any]]:
        result = await self._queries.execute(Operation.FIND_USER_BY_ID, {"id": user_id})
        return result.first()

    async def exists_email(self, email: str) -> bool:
        return await self.get_by_email(email) is not None

    async def list_all(self) -> List[Dict[str, Any]]:
        result = await self._queries.execute(Operation.LIST_USERS)
        return result.rows

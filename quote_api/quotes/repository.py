# =============================================================================
# QUOTE API - QUOTE REPOSITORY
# =============================================================================
# File: quotes/repository.py
# Description: Data access for quote records
# =============================================================================

from typing import Any, Dict, List, Optional

from quote_api.db.dialects import QUOTE_LIST_CAP, Operation
from quote_api.db.queries import QueryFacade


class QuoteRepository:
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    QUOTE REPOSITORY                                      │
    │  Insert and read quote rows through the query facade                    │
    └─────────────────────────────────────────────────────────────────────────┘

    Column values arrive already serialized (order types joined, measurements
    as JSON text); decoding is the service's job.
    """

    def __init__(self, queries: QueryFacade):
        self._queries = queries

    async def create(self, values: Dict[str, Any]) -> Any:
        """Insert one quote row and return the backend-assigned id."""
        result = await self._queries.execute(Operation.INSERT_QUOTE, values)
        return result.inserted_id

    async def get_by_id(self, quote_id: Any) -> Optional[Dict[str, Any]]:
        result = await self._queries.execute(Operation.FIND_QUOTE_BY_ID, {"id": quote_id})
        return result.first()

    async def list_recent(self, limit: int = QUOTE_LIST_CAP) -> List[Dict[str, Any]]:
        """Newest first; the dialect clamps ``limit`` to the listing cap."""
        result = await self._queries.execute(Operation.LIST_QUOTES, {"limit": limit})
        return result.rows

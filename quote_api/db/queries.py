# =============================================================================
# QUOTE API - QUERY FACADE
# =============================================================================
# File: db/queries.py
# Description: Backend-agnostic execution of logical operations
#              Renders, executes and normalizes through the active driver
# =============================================================================

import logging
from typing import Any, Mapping, Optional

from sqlalchemy.exc import DBAPIError, IntegrityError, SQLAlchemyError

from quote_api.core.exceptions import BackendError, DatabaseQueryError, DuplicateRecordError
from quote_api.db.base import QueryResult
from quote_api.db.connection import ConnectionManager
from quote_api.db.dialects import Operation, Query


logger = logging.getLogger(__name__)


class QueryFacade:
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    QUERY FACADE                                          │
    │  One call shape for repositories, whichever backend is active           │
    │  Placeholders, inserted ids and row limits stay inside the dialects     │
    └─────────────────────────────────────────────────────────────────────────┘

    Error translation:
        - unique constraint violated  -> DuplicateRecordError (409)
        - connection invalidated      -> handle invalidated, DatabaseQueryError
        - anything else from the DB   -> DatabaseQueryError

    Failed statements are never retried here.
    """

    def __init__(self, manager: ConnectionManager):
        self._manager = manager

    async def run(self, query: Query) -> QueryResult:
        handle = await self._manager.acquire()
        driver = self._manager.driver
        statement = driver.dialect.render(query)

        try:
            return await driver.execute(handle, statement)
        except IntegrityError as e:
            logger.info(f"{query.operation.value} rejected by constraint: {e.orig}")
            raise DuplicateRecordError(details={"operation": query.operation.value})
        except DBAPIError as e:
            if e.connection_invalidated:
                self._manager.invalidate(handle)
            logger.error(f"{query.operation.value} failed on {driver.kind.value}: {e}")
            raise DatabaseQueryError(details={"operation": query.operation.value, "error": str(e.orig)})
        except SQLAlchemyError as e:
            logger.error(f"{query.operation.value} failed on {driver.kind.value}: {e}")
            raise DatabaseQueryError(details={"operation": query.operation.value, "error": str(e)})
        except OSError as e:
            # Socket-level failures surface unwrapped from some async drivers
            self._manager.invalidate(handle)
            logger.error(f"{query.operation.value} failed on {driver.kind.value}: {e}")
            raise DatabaseQueryError(details={"operation": query.operation.value, "error": str(e)})

    async def execute(
        self,
        operation: Operation,
        params: Optional[Mapping[str, Any]] = None,
    ) -> QueryResult:
        """Shorthand for ``run(Query(operation, params))``."""
        return await self.run(Query(operation, dict(params or {})))

    async def ping(self) -> bool:
        """Run the dialect's ping statement; False on any backend failure."""
        try:
            await self.execute(Operation.PING)
        except BackendError as e:
            logger.warning(f"Database ping failed: {e.message}")
            return False
        return True

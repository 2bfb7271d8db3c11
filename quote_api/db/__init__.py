# =============================================================================
# DATABASE MODULE INITIALIZATION
# =============================================================================
# File: db/__init__.py
# Description: Data-access layer exports
# =============================================================================

from quote_api.db.base import BackendDriver, ConnectionHandle, QueryResult
from quote_api.db.connection import ConnectionManager
from quote_api.db.dialects import (
    QUOTE_LIST_CAP,
    MSSQLDialect,
    Operation,
    PostgresDialect,
    Query,
    SQLDialect,
    SQLiteDialect,
    Statement,
)
from quote_api.db.factory import DRIVER_REGISTRY, create_driver
from quote_api.db.queries import QueryFacade

__all__ = [
    # Driver contract
    "BackendDriver",
    "ConnectionHandle",
    "QueryResult",
    "DRIVER_REGISTRY",
    "create_driver",

    # Dialects
    "SQLDialect",
    "SQLiteDialect",
    "PostgresDialect",
    "MSSQLDialect",
    "Operation",
    "Query",
    "Statement",
    "QUOTE_LIST_CAP",

    # Lifecycle and execution
    "ConnectionManager",
    "QueryFacade",
]

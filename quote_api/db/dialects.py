# =============================================================================
# QUOTE API - SQL DIALECTS
# =============================================================================
# File: db/dialects.py
# Description: Logical operations and their rendering per SQL dialect
#              Placeholders, inserted-id retrieval and row limiting differ
# =============================================================================

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple


# Hard cap on rows returned by the quote listing
QUOTE_LIST_CAP = 200

USER_PUBLIC_COLUMNS = ("id", "name", "email", "created_at")
USER_AUTH_COLUMNS = ("id", "name", "email", "password", "created_at")
USER_INSERT_COLUMNS = ("name", "email", "password")

QUOTE_INSERT_COLUMNS = (
    "company",
    "tag_name",
    "po_number",
    "delivery",
    "size_shape",
    "order_types",
    "grid_size",
    "colour",
    "comments",
    "measurements",
)
QUOTE_ALL_COLUMNS = ("id",) + QUOTE_INSERT_COLUMNS + ("created_at",)
QUOTE_SUMMARY_COLUMNS = ("id", "company", "tag_name", "grid_size", "colour", "created_at")


# =============================================================================
# LOGICAL OPERATIONS
# =============================================================================

class Operation(str, Enum):
    """Every statement the service issues, independent of backend."""
    PING = "ping"
    FIND_USER_BY_EMAIL = "find_user_by_email"
    FIND_USER_BY_ID = "find_user_by_id"
    LIST_USERS = "list_users"
    INSERT_USER = "insert_user"
    INSERT_QUOTE = "insert_quote"
    FIND_QUOTE_BY_ID = "find_quote_by_id"
    LIST_QUOTES = "list_quotes"


@dataclass(frozen=True)
class Query:
    """A logical operation plus its parameter values."""
    operation: Operation
    params: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Statement:
    """SQL text with named ``:param`` markers and the values to bind."""
    sql: str
    params: Dict[str, Any] = field(default_factory=dict)
    returns_id: bool = False


# =============================================================================
# BASE DIALECT
# =============================================================================

class SQLDialect:
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    SQL DIALECT                                           │
    │  Renders logical operations into backend-specific statement text        │
    │  Values are never written into SQL, only bound as parameters            │
    └─────────────────────────────────────────────────────────────────────────┘

    The base class speaks ANSI-ish SQL with ``LIMIT``; subclasses override
    the insert and limit hooks where their backend disagrees.
    """

    name = "generic"

    # -------------------------------------------------------------------------
    # DISPATCH
    # -------------------------------------------------------------------------

    def render(self, query: Query) -> Statement:
        params = dict(query.params)
        op = query.operation

        if op is Operation.PING:
            return self.ping()
        if op is Operation.FIND_USER_BY_EMAIL:
            return self.select(
                "users", USER_AUTH_COLUMNS,
                where="email = :email", params={"email": params["email"]},
            )
        if op is Operation.FIND_USER_BY_ID:
            return self.select(
                "users", USER_PUBLIC_COLUMNS,
                where="id = :id", params={"id": params["id"]},
            )
        if op is Operation.LIST_USERS:
            return self.select("users", USER_PUBLIC_COLUMNS, order_by="id")
        if op is Operation.INSERT_USER:
            return self.insert("users", USER_INSERT_COLUMNS, params)
        if op is Operation.INSERT_QUOTE:
            return self.insert("quotes", QUOTE_INSERT_COLUMNS, params)
        if op is Operation.FIND_QUOTE_BY_ID:
            return self.select(
                "quotes", QUOTE_ALL_COLUMNS,
                where="id = :id", params={"id": params["id"]},
            )
        if op is Operation.LIST_QUOTES:
            limit = min(int(params.get("limit", QUOTE_LIST_CAP)), QUOTE_LIST_CAP)
            return self.select(
                "quotes", QUOTE_SUMMARY_COLUMNS,
                order_by="id DESC", limit=max(limit, 0),
            )
        raise ValueError(f"Unsupported operation: {op}")

    # -------------------------------------------------------------------------
    # STATEMENT BUILDERS
    # -------------------------------------------------------------------------

    def ping(self) -> Statement:
        return Statement("SELECT 1")

    def select(
        self,
        table: str,
        columns: Sequence[str],
        where: Optional[str] = None,
        params: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> Statement:
        bound = dict(params or {})
        head, tail = self._limit_clauses(limit, bound)
        sql = f"SELECT {head}{', '.join(columns)} FROM {table}"
        if where:
            sql += f" WHERE {where}"
        if order_by:
            sql += f" ORDER BY {order_by}"
        sql += tail
        return Statement(sql, bound)

    def insert(
        self,
        table: str,
        columns: Sequence[str],
        values: Mapping[str, Any],
    ) -> Statement:
        bound = {column: values.get(column) for column in columns}
        column_list = ", ".join(columns)
        markers = ", ".join(f":{column}" for column in columns)
        return Statement(
            self._insert_sql(table, column_list, markers),
            bound,
            returns_id=True,
        )

    # -------------------------------------------------------------------------
    # DIALECT HOOKS
    # -------------------------------------------------------------------------

    def _insert_sql(self, table: str, column_list: str, markers: str) -> str:
        return f"INSERT INTO {table} ({column_list}) VALUES ({markers})"

    def _limit_clauses(self, limit: Optional[int], bound: Dict[str, Any]) -> Tuple[str, str]:
        """Return (select-prefix, statement-suffix) for a row limit."""
        if limit is None:
            return "", ""
        bound["limit"] = limit
        return "", " LIMIT :limit"

    def schema_statements(self) -> List[str]:
        raise NotImplementedError


# =============================================================================
# SQLITE
# =============================================================================

class SQLiteDialect(SQLDialect):
    """SQLite: ``LIMIT``, generated key read from the cursor's lastrowid."""

    name = "sqlite"

    def schema_statements(self) -> List[str]:
        return [
            """CREATE TABLE IF NOT EXISTS users (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                email TEXT NOT NULL UNIQUE,
                password TEXT NOT NULL,
                created_at DATETIME DEFAULT CURRENT_TIMESTAMP
            )""",
            """CREATE TABLE IF NOT EXISTS quotes (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                company TEXT NOT NULL,
                tag_name TEXT NOT NULL,
                po_number TEXT,
                delivery TEXT,
                size_shape TEXT,
                order_types TEXT,
                grid_size TEXT,
                colour TEXT,
                comments TEXT,
                measurements TEXT,
                created_at DATETIME DEFAULT CURRENT_TIMESTAMP
            )""",
        ]


# =============================================================================
# POSTGRESQL
# =============================================================================

class PostgresDialect(SQLDialect):
    """PostgreSQL: ``LIMIT``, generated key via ``RETURNING id``."""

    name = "postgres"

    def _insert_sql(self, table: str, column_list: str, markers: str) -> str:
        return f"INSERT INTO {table} ({column_list}) VALUES ({markers}) RETURNING id"

    def schema_statements(self) -> List[str]:
        return [
            """CREATE TABLE IF NOT EXISTS users (
                id SERIAL PRIMARY KEY,
                name VARCHAR(255) NOT NULL,
                email VARCHAR(255) UNIQUE NOT NULL,
                password VARCHAR(255) NOT NULL,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )""",
            """CREATE TABLE IF NOT EXISTS quotes (
                id SERIAL PRIMARY KEY,
                company VARCHAR(255) NOT NULL,
                tag_name VARCHAR(255) NOT NULL,
                po_number VARCHAR(255),
                delivery VARCHAR(50),
                size_shape VARCHAR(255),
                order_types VARCHAR(255),
                grid_size VARCHAR(50),
                colour VARCHAR(50),
                comments TEXT,
                measurements TEXT,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )""",
        ]


# =============================================================================
# AZURE SQL / SQL SERVER
# =============================================================================

class MSSQLDialect(SQLDialect):
    """
    Azure SQL: ``TOP (n)`` instead of ``LIMIT``, generated key via
    ``OUTPUT INSERTED.id``, and table creation guarded by a sysobjects
    lookup because ``CREATE TABLE IF NOT EXISTS`` is unavailable.
    """

    name = "mssql"

    def _insert_sql(self, table: str, column_list: str, markers: str) -> str:
        return f"INSERT INTO {table} ({column_list}) OUTPUT INSERTED.id VALUES ({markers})"

    def _limit_clauses(self, limit: Optional[int], bound: Dict[str, Any]) -> Tuple[str, str]:
        if limit is None:
            return "", ""
        bound["limit"] = limit
        return "TOP (:limit) ", ""

    def schema_statements(self) -> List[str]:
        return [
            """IF NOT EXISTS (SELECT * FROM sysobjects WHERE name='users' AND xtype='U')
            CREATE TABLE users (
                id INT IDENTITY(1,1) PRIMARY KEY,
                name NVARCHAR(255) NOT NULL,
                email NVARCHAR(255) NOT NULL UNIQUE,
                password NVARCHAR(255) NOT NULL,
                created_at DATETIME2 DEFAULT SYSUTCDATETIME()
            )""",
            """IF NOT EXISTS (SELECT * FROM sysobjects WHERE name='quotes' AND xtype='U')
            CREATE TABLE quotes (
                id INT IDENTITY(1,1) PRIMARY KEY,
                company NVARCHAR(255) NOT NULL,
                tag_name NVARCHAR(255) NOT NULL,
                po_number NVARCHAR(255) NULL,
                delivery NVARCHAR(50) NULL,
                size_shape NVARCHAR(255) NULL,
                order_types NVARCHAR(255) NULL,
                grid_size NVARCHAR(50) NULL,
                colour NVARCHAR(50) NULL,
                comments NVARCHAR(MAX) NULL,
                measurements NVARCHAR(MAX) NULL,
                created_at DATETIME2 DEFAULT SYSUTCDATETIME()
            )""",
        ]

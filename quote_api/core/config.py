# =============================================================================
# QUOTE API - CORE CONFIGURATION MODULE
# =============================================================================
# File: core/config.py
# Description: Centralized configuration management using Pydantic Settings
#              Auto-detects the storage backend from the settings present
# =============================================================================

from enum import Enum
from functools import lru_cache
from typing import List, Literal, Optional

from pydantic import computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class BackendKind(str, Enum):
    """Supported storage backends."""
    SQLITE = "sqlite"
    AZURE = "azure"
    POSTGRES = "postgres"


class Settings(BaseSettings):
    """
    ┌─────────────────────────────────────────────────────────────────────────┐
    │                    APPLICATION SETTINGS                                  │
    │  Type-safe configuration loaded once from the environment / .env file  │
    │  Frozen: the resolved record is never mutated after startup            │
    └─────────────────────────────────────────────────────────────────────────┘
    """

    # -------------------------------------------------------------------------
    # APPLICATION CORE
    # -------------------------------------------------------------------------
    app_name: str = "QuoteAPI"
    app_env: Literal["development", "staging", "production"] = "development"
    host: str = "0.0.0.0"
    port: int = 3000

    # -------------------------------------------------------------------------
    # DATABASE SELECTION
    # -------------------------------------------------------------------------
    # Explicit override; auto-detected from the settings below when unset
    db_backend: Optional[BackendKind] = None

    # SQLite (local development)
    sqlite_db: str = "./users.db"

    # Azure SQL (production)
    azure_sql_server: Optional[str] = None
    azure_sql_database: Optional[str] = None
    azure_sql_user: Optional[str] = None
    azure_sql_password: Optional[str] = None
    azure_sql_port: int = 1433
    azure_sql_encrypt: bool = True
    azure_sql_auth: Literal["sql", "aad"] = "sql"
    azure_sql_odbc_driver: str = "ODBC Driver 18 for SQL Server"
    # Seconds before token expiry at which an AAD connection counts as stale
    azure_token_refresh_margin: int = 300

    # PostgreSQL (Supabase or self-hosted)
    database_url: Optional[str] = None
    db_ssl: bool = True

    # Connection pool
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: int = 30

    # How long a caller waits for an in-flight reconnect before giving up
    reconnect_wait_seconds: float = 1.0

    # -------------------------------------------------------------------------
    # JWT CONFIGURATION
    # -------------------------------------------------------------------------
    jwt_secret: str = "change-this-in-production-minimum-32-characters"
    jwt_algorithm: Literal["HS256", "HS384", "HS512"] = "HS256"
    jwt_expire_days: int = 7

    # -------------------------------------------------------------------------
    # PASSWORD HASHING
    # -------------------------------------------------------------------------
    password_hash_algorithm: Literal["argon2", "bcrypt"] = "argon2"
    bcrypt_rounds: int = 10

    # Argon2 Parameters (OWASP recommended)
    argon2_memory_cost: int = 65536  # 64 MB
    argon2_time_cost: int = 3
    argon2_parallelism: int = 4

    # -------------------------------------------------------------------------
    # CORS / LOGGING
    # -------------------------------------------------------------------------
    cors_origins: str = "*"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # -------------------------------------------------------------------------
    # COMPUTED PROPERTIES
    # -------------------------------------------------------------------------

    @computed_field
    @property
    def backend(self) -> BackendKind:
        """
        Resolve which storage backend to use.

        Order: explicit DB_BACKEND, then Azure SQL when its server is set,
        then PostgreSQL when DATABASE_URL is set, otherwise SQLite.
        """
        if self.db_backend is not None:
            return self.db_backend
        if self.azure_sql_server:
            return BackendKind.AZURE
        if self.database_url:
            return BackendKind.POSTGRES
        return BackendKind.SQLITE

    @computed_field
    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins from comma-separated string to list."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    @computed_field
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"

    @computed_field
    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.app_env == "development"

    # -------------------------------------------------------------------------
    # VALIDATORS
    # -------------------------------------------------------------------------

    @field_validator("jwt_secret")
    @classmethod
    def validate_jwt_secret(cls, v: str) -> str:
        """Ensure JWT secret has minimum length for HMAC signing."""
        if len(v) < 32:
            raise ValueError("JWT_SECRET must be at least 32 characters long")
        return v

    @field_validator("db_backend", mode="before")
    @classmethod
    def blank_backend_is_auto(cls, v):
        """Treat an empty DB_BACKEND as auto-detect."""
        if v == "":
            return None
        return v

    @field_validator("azure_sql_auth", mode="before")
    @classmethod
    def normalize_azure_auth(cls, v):
        """Accept AZURE_SQL_AUTH in any case (e.g. AAD)."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    # -------------------------------------------------------------------------
    # PYDANTIC SETTINGS CONFIG
    # -------------------------------------------------------------------------
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Build the settings record from the process environment.

    Called once by the application factory; everything downstream receives
    the instance explicitly instead of importing a module global.

    Returns:
        Settings: Validated configuration instance
    """
    return Settings()

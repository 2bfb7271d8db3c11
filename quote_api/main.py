# =============================================================================
# QUOTE API - MAIN APPLICATION
# =============================================================================
# File: main.py
# Description: FastAPI application entry point with lifecycle management
# =============================================================================

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from quote_api.api import LoggingMiddleware, RequestIDMiddleware, api_router
from quote_api.core.config import Settings, get_settings
from quote_api.core.exceptions import BackendError, QuoteApiException, ValidationError
from quote_api.core.security import JWTManager, PasswordManager
from quote_api.db.connection import ConnectionManager


logger = logging.getLogger(__name__)

APP_VERSION = "1.0.0"


# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================

def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


# =============================================================================
# APPLICATION LIFECYCLE
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifecycle manager.

    Handles startup and shutdown events:
    - Startup: connect to the selected backend, ensure the schema
    - Shutdown: close the connection handle

    A startup failure propagates, so the server exits instead of
    serving requests without a database.
    """
    settings: Settings = app.state.settings
    manager: ConnectionManager = app.state.connection_manager

    # STARTUP
    logger.info(f"Starting {settings.app_name} in {settings.app_env} mode")

    try:
        await manager.initialize()
    except Exception as e:
        logger.critical(f"Startup failed: {e}")
        raise

    logger.info(f"{settings.app_name} started with {manager.backend.value} backend")

    yield  # Application runs here

    # SHUTDOWN
    logger.info(f"Shutting down {settings.app_name}")

    try:
        await manager.shutdown()
    except Exception as e:
        logger.error(f"Shutdown error: {e}")

    logger.info(f"{settings.app_name} shutdown complete")


# =============================================================================
# ERROR FORMATTING
# =============================================================================

def _validation_errors(exc: RequestValidationError) -> List[Dict[str, Any]]:
    """Flatten pydantic errors to {field, message} pairs."""
    errors = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        errors.append({
            "field": ".".join(loc) or "body",
            "message": error.get("msg", "Invalid value"),
        })
    return errors


def _validation_message(errors: List[Dict[str, Any]]) -> str:
    fields = {error["field"] for error in errors}
    if fields == {"password"}:
        return "Password must be at least 6 characters"
    return "Missing or invalid fields: " + ", ".join(sorted(fields))


# =============================================================================
# APPLICATION FACTORY
# =============================================================================

def create_application(
    settings: Optional[Settings] = None,
    connection_manager: Optional[ConnectionManager] = None,
) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        settings: Explicit settings; read from the environment when omitted
        connection_manager: Pre-built manager (tests inject fake drivers)

    Returns:
        FastAPI: Configured application instance
    """
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        description="User accounts and quote storage over SQLite, Azure SQL or PostgreSQL",
        version=APP_VERSION,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url=None,
        openapi_url="/openapi.json" if not settings.is_production else None,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.connection_manager = connection_manager or ConnectionManager(settings)
    app.state.password_manager = PasswordManager(settings)
    app.state.jwt_manager = JWTManager(settings)

    # =========================================================================
    # MIDDLEWARE STACK (last added = outermost)
    # =========================================================================

    # LoggingMiddleware must sit inside RequestIDMiddleware
    app.add_middleware(LoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials="*" not in settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    # =========================================================================
    # EXCEPTION HANDLERS
    # =========================================================================

    @app.exception_handler(QuoteApiException)
    async def quote_api_exception_handler(
        request: Request,
        exc: QuoteApiException,
    ) -> JSONResponse:
        """Handle application exceptions."""
        content = exc.to_dict()
        if isinstance(exc, BackendError):
            logger.error(
                f"{request.method} {request.url.path} - {exc.error_code}: "
                f"{exc.message} {exc.details}"
            )
            if settings.is_production:
                content["details"] = {}
        return JSONResponse(status_code=exc.status_code, content=content)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Report body validation failures as 400 rather than 422."""
        errors = _validation_errors(exc)
        error = ValidationError(_validation_message(errors), details={"errors": errors})
        return JSONResponse(status_code=error.status_code, content=error.to_dict())

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request,
        exc: StarletteHTTPException,
    ) -> JSONResponse:
        """Handle standard HTTP exceptions."""
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": True,
                "error_code": f"HTTP_{exc.status_code}",
                "message": exc.detail,
                "details": {},
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request,
        exc: Exception,
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled exception")

        if settings.is_production:
            message = "An internal error occurred"
        else:
            message = str(exc)

        return JSONResponse(
            status_code=500,
            content={
                "error": True,
                "error_code": "INTERNAL_ERROR",
                "message": message,
                "details": {},
            },
        )

    # =========================================================================
    # ROUTES
    # =========================================================================

    app.include_router(api_router)

    @app.get("/", include_in_schema=False)
    async def root():
        """Root endpoint with API info."""
        return {
            "name": settings.app_name,
            "version": APP_VERSION,
            "status": "running",
            "database": app.state.connection_manager.backend.value,
        }

    return app


# =============================================================================
# ENTRYPOINT
# =============================================================================

def run() -> None:
    """Console entry point: serve the app factory with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "quote_api.main:create_application",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()

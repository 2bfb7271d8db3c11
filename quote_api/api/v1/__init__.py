# =============================================================================
# API V1 MODULE INITIALIZATION
# =============================================================================
# File: api/v1/__init__.py
# Description: Router aggregation under the /api prefix
# =============================================================================

from fastapi import APIRouter

from quote_api.api.v1.auth_routes import router as auth_router
from quote_api.api.v1.quote_routes import router as quote_router
from quote_api.api.v1.health_routes import router as health_router


# Create main API router
api_router = APIRouter(prefix="/api")

# Include sub-routers
api_router.include_router(auth_router)
api_router.include_router(quote_router)
api_router.include_router(health_router)


__all__ = [
    "api_router",
    "auth_router",
    "quote_router",
    "health_router",
]

# =============================================================================
# QUOTE API - HEALTH ROUTES
# =============================================================================
# File: api/v1/health_routes.py
# Description: Health check endpoints for monitoring and orchestration
# =============================================================================

from fastapi import APIRouter
from pydantic import BaseModel, Field

from quote_api.auth.dependencies import AppSettings, Connections, Queries


router = APIRouter(tags=["Health"])


# =============================================================================
# RESPONSE MODELS
# =============================================================================

class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="OK or degraded")
    database: str = Field(..., description="Active storage backend")
    environment: str = Field(..., description="Environment name")


class ReadinessResponse(HealthResponse):
    connected: bool = Field(..., description="Whether the backend answered a ping")


# =============================================================================
# HEALTH ENDPOINTS
# =============================================================================

@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Basic health check",
    description="Quick health check for load balancers.",
)
async def health_check(settings: AppSettings, manager: Connections) -> HealthResponse:
    """
    Basic health check.

    Does not touch the database.
    """
    return HealthResponse(
        status="OK",
        database=manager.backend.value,
        environment=settings.app_env,
    )


@router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    summary="Readiness check",
    description="Check that the database answers before routing traffic here.",
)
async def readiness_check(
    settings: AppSettings,
    manager: Connections,
    queries: Queries,
) -> ReadinessResponse:
    """
    Readiness check.

    Pings the active backend through the normal acquire path, so a stale
    handle is reconnected here as it would be for any request.
    """
    connected = await queries.ping()
    return ReadinessResponse(
        status="OK" if connected else "degraded",
        database=manager.backend.value,
        environment=settings.app_env,
        connected=connected,
    )

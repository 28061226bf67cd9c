"""Health and info endpoints.

GET /health, GET /health/gateway, GET /info.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from evote_api import __version__
from evote_api.core.config import Settings, get_settings
from evote_api.core.dependencies import get_gateway
from evote_api.lib.gateway import BaseGateway

health_router = APIRouter(tags=["health"])


@health_router.get("/health", status_code=200)
async def health_check() -> dict:
    """Liveness check (no authentication required)."""
    return {"status": "healthy"}


@health_router.get("/health/gateway", status_code=200)
async def gateway_health(gateway: Annotated[BaseGateway, Depends(get_gateway)]) -> dict:
    """Check the record store is reachable and report the voter count.

    A store failure propagates as an upstream error (HTTP 500).
    """
    voters = await gateway.list_voters()
    return {"success": True, "connected": True, "backend": gateway.backend_name, "voterCount": len(voters)}


@health_router.get("/info", status_code=200)
async def info(settings: Annotated[Settings, Depends(get_settings)]) -> dict:
    """Return application version and environment."""
    return {"version": __version__, "environment": settings.environment}

"""Root API router with the /api prefix and middleware registration."""

from fastapi import APIRouter, FastAPI

from evote_api.api.middleware import RateLimitMiddleware, SecurityHeadersMiddleware, setup_cors
from evote_api.core.config import Settings


def create_router(settings: Settings) -> APIRouter:
    """Create the root API router with all sub-routers included.

    Args:
        settings: Application settings.

    Returns:
        Configured API router.
    """
    from evote_api.api.v1.admin import admin_router
    from evote_api.api.v1.candidates import candidates_router
    from evote_api.api.v1.dashboard import dashboard_router
    from evote_api.api.v1.health import health_router
    from evote_api.api.v1.superadmin import superadmin_router
    from evote_api.api.v1.voters import voters_router
    from evote_api.api.v1.votes import votes_router

    root_router = APIRouter(prefix=settings.api_prefix)
    root_router.include_router(health_router)
    root_router.include_router(voters_router)
    root_router.include_router(candidates_router)
    root_router.include_router(votes_router)
    root_router.include_router(dashboard_router)
    root_router.include_router(admin_router)
    root_router.include_router(superadmin_router)

    return root_router


def setup_middleware(app: FastAPI, settings: Settings) -> None:
    """Register all middleware on the FastAPI app.

    Args:
        app: The FastAPI application.
        settings: Application settings.
    """
    setup_cors(app, settings)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        RateLimitMiddleware,
        requests_per_minute=settings.rate_limit_per_minute,
        trusted_proxies=settings.trusted_proxy_list,
    )

"""FastAPI application factory.

Creates the FastAPI app with lifespan management, exception handlers,
and OpenAPI metadata.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger

from evote_api import __version__
from evote_api.core.config import Settings, get_settings
from evote_api.core.errors import EvoteError, InternalError, ValidationError
from evote_api.core.logging import setup_logging
from evote_api.core.single_flight import SingleFlight
from evote_api.lib.gateway import create_gateway
from evote_api.lib.identity import IdentityClient
from evote_api.services.auth_service import build_authenticators


def _error_response(exc: EvoteError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.message, "kind": exc.kind},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Render every failure as ``{success: false, error, kind}``.

    Request validation failures are reported as 400 rather than FastAPI's
    default 422. Unexpected exceptions are logged and hidden behind a
    generic message.
    """

    @app.exception_handler(EvoteError)
    async def evote_error_handler(request: Request, exc: EvoteError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("{} {} failed: {}", request.method, request.url.path, exc.message)
        return _error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = exc.errors()
        first = errors[0] if errors else {}
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        detail = first.get("msg", "Invalid request")
        message = f"{location}: {detail}" if location else detail
        return _error_response(ValidationError(message))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on {} {}", request.method, request.url.path)
        return _error_response(InternalError("Internal server error"))


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Build the gateway and identity client on startup; close them on shutdown."""
    settings: Settings = app.state.settings
    setup_logging(settings.log_level, settings.log_dir, json_logs=settings.log_json)

    app.state.gateway = create_gateway(settings)
    app.state.identity_client = IdentityClient(
        settings.identity_api_url,
        api_key=settings.identity_api_key,
        timeout=settings.identity_timeout,
    )
    logger.info(
        "evote-api {} starting ({} gateway, {} environment)",
        __version__,
        app.state.gateway.backend_name,
        settings.environment,
    )

    yield

    await app.state.identity_client.aclose()
    await app.state.gateway.aclose()


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Optional settings; loaded from the environment when omitted.

    Returns:
        Configured FastAPI application instance.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="eVote API",
        description="Electronic voting backend with vote integrity auditing",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.authenticators = build_authenticators(settings)
    app.state.audit_guard = SingleFlight()
    app.dependency_overrides[get_settings] = lambda: settings

    register_exception_handlers(app)

    from evote_api.api.router import create_router, setup_middleware

    setup_middleware(app, settings)
    app.include_router(create_router(settings))

    return app

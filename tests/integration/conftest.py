"""Fixtures for API tests: the full router tree over the seeded in-memory gateway."""

from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from evote_api.api.router import create_router
from evote_api.core.config import Settings, get_settings
from evote_api.core.single_flight import SingleFlight
from evote_api.lib.gateway import InMemoryGateway
from evote_api.main import register_exception_handlers
from evote_api.services.auth_service import build_authenticators


@pytest.fixture
def identity_client() -> AsyncMock:
    """Identity registry stand-in; tests set ``lookup`` as needed."""
    client = AsyncMock()
    client.lookup.return_value = None
    return client


@pytest.fixture
def app(settings: Settings, gateway: InMemoryGateway, identity_client: AsyncMock) -> FastAPI:
    """Create a FastAPI app with every router and the error envelope handlers."""
    app = FastAPI()
    register_exception_handlers(app)
    app.include_router(create_router(settings))
    app.state.settings = settings
    app.state.gateway = gateway
    app.state.identity_client = identity_client
    app.state.authenticators = build_authenticators(settings)
    app.state.audit_guard = SingleFlight()
    app.dependency_overrides[get_settings] = lambda: settings
    return app


@pytest.fixture
def client(app: FastAPI) -> AsyncClient:
    """Create an async test client."""
    return AsyncClient(transport=ASGITransport(app=app), base_url="http://test")


@pytest.fixture
async def admin_headers(client: AsyncClient, settings: Settings) -> dict[str, str]:
    """Bearer header for a fresh administrator session."""
    resp = await client.post(
        "/api/admin/login",
        json={"email": settings.admin_email, "password": settings.admin_password},
    )
    return {"Authorization": f"Bearer {resp.json()['token']}"}


@pytest.fixture
async def superadmin_headers(client: AsyncClient, settings: Settings) -> dict[str, str]:
    """Bearer header for a fresh super-administrator session."""
    resp = await client.post(
        "/api/superadmin/login",
        json={"email": settings.superadmin_email, "password": settings.superadmin_password},
    )
    return {"Authorization": f"Bearer {resp.json()['token']}"}

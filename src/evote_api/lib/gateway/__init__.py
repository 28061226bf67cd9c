"""Persistence gateway library: key/filter access to voters, candidates and votes.

Public API:
    - BaseGateway: Abstract gateway interface
    - RecordType: Record set enum (voters, candidates, votes)
    - GatewayError / GatewayConflictError: Store failures
    - PostgrestGateway: Supabase REST backend
    - InMemoryGateway: Process-local backend
    - create_gateway: Backend factory driven by settings
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from evote_api.lib.gateway.base import BaseGateway, GatewayConflictError, GatewayError, RecordType
from evote_api.lib.gateway.memory import InMemoryGateway
from evote_api.lib.gateway.postgrest import PostgrestGateway

if TYPE_CHECKING:
    from evote_api.core.config import Settings


def create_gateway(settings: Settings) -> BaseGateway:
    """Build the gateway backend selected by ``settings.gateway_backend``.

    Args:
        settings: Application settings.

    Returns:
        A ready-to-use gateway instance.

    Raises:
        ValueError: If the PostgREST backend is selected without a URL or key.
    """
    if settings.gateway_backend == "memory":
        return InMemoryGateway()

    if not settings.supabase_url or not settings.supabase_service_key:
        msg = "SUPABASE_URL and SUPABASE_SERVICE_KEY are required for the postgrest gateway"
        raise ValueError(msg)
    return PostgrestGateway(
        settings.gateway_rest_url,
        settings.supabase_service_key,
        timeout=settings.gateway_timeout,
    )


__all__ = [
    "BaseGateway",
    "GatewayConflictError",
    "GatewayError",
    "InMemoryGateway",
    "PostgrestGateway",
    "RecordType",
    "create_gateway",
]

"""FastAPI dependency injection for the gateway, identity client and session auth.

Long-lived collaborators are built once in the application lifespan and
kept on ``app.state``; these dependencies hand them to route handlers so
tests can replace any of them through ``dependency_overrides``.
"""

from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from evote_api.core.errors import AuthError
from evote_api.core.single_flight import SingleFlight
from evote_api.lib.gateway import BaseGateway
from evote_api.lib.identity import IdentityClient
from evote_api.services.auth_service import TIER_ADMIN, TIER_SUPERADMIN, SessionAuthenticator

bearer_scheme = HTTPBearer(auto_error=False)


def get_gateway(request: Request) -> BaseGateway:
    """Return the application's persistence gateway."""
    return request.app.state.gateway


def get_identity_client(request: Request) -> IdentityClient:
    """Return the application's identity registry client."""
    return request.app.state.identity_client


def get_audit_guard(request: Request) -> SingleFlight:
    """Return the single-flight guard shared by audit operations."""
    return request.app.state.audit_guard


def get_admin_authenticator(request: Request) -> SessionAuthenticator:
    """Return the administrator-tier authenticator."""
    return request.app.state.authenticators[TIER_ADMIN]


def get_superadmin_authenticator(request: Request) -> SessionAuthenticator:
    """Return the super-administrator-tier authenticator."""
    return request.app.state.authenticators[TIER_SUPERADMIN]


def _check_bearer(credentials: HTTPAuthorizationCredentials | None, authenticator: SessionAuthenticator) -> str:
    if credentials is None or not credentials.credentials:
        msg = "Token not provided"
        raise AuthError(msg)
    if not authenticator.validate(credentials.credentials):
        msg = "Invalid or expired token"
        raise AuthError(msg)
    return credentials.credentials


async def require_admin(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    authenticator: Annotated[SessionAuthenticator, Depends(get_admin_authenticator)],
) -> str:
    """Require a valid administrator session token.

    Returns:
        The bearer token.

    Raises:
        AuthError: If the token is missing, unknown or expired.
    """
    return _check_bearer(credentials, authenticator)


async def require_superadmin(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
    authenticator: Annotated[SessionAuthenticator, Depends(get_superadmin_authenticator)],
) -> str:
    """Require a valid super-administrator session token.

    Returns:
        The bearer token.

    Raises:
        AuthError: If the token is missing, unknown or expired.
    """
    return _check_bearer(credentials, authenticator)

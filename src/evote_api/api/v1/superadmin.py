"""Super-administrator API endpoints.

POST /superadmin/login, GET /superadmin/verify, POST /superadmin/logout,
GET /superadmin/migration/export.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from evote_api.core.dependencies import get_gateway, get_superadmin_authenticator, require_superadmin
from evote_api.core.errors import AuthError
from evote_api.lib.gateway import BaseGateway
from evote_api.schemas.auth import LoginRequest, LoginResponse, VerifyResponse
from evote_api.schemas.candidate import CandidateResponse
from evote_api.schemas.common import MessageResponse
from evote_api.schemas.export import ExportData, ExportResponse
from evote_api.schemas.voter import VoterResponse
from evote_api.services import export_service
from evote_api.services.auth_service import SessionAuthenticator

superadmin_router = APIRouter(prefix="/superadmin", tags=["superadmin"])

SuperadminToken = Annotated[str, Depends(require_superadmin)]


@superadmin_router.post("/login", response_model=LoginResponse)
async def login(
    request: LoginRequest,
    authenticator: Annotated[SessionAuthenticator, Depends(get_superadmin_authenticator)],
) -> LoginResponse:
    """Exchange super-administrator credentials for a session token."""
    token = authenticator.authenticate(request.email, request.password)
    if token is None:
        msg = "Invalid credentials"
        raise AuthError(msg)
    return LoginResponse(token=token, message="Login successful")


@superadmin_router.get("/verify", response_model=VerifyResponse)
async def verify(_token: SuperadminToken) -> VerifyResponse:
    """Confirm the bearer token is a live super-administrator session."""
    return VerifyResponse(message="Token valid")


@superadmin_router.post("/logout", response_model=MessageResponse)
async def logout(
    token: SuperadminToken,
    authenticator: Annotated[SessionAuthenticator, Depends(get_superadmin_authenticator)],
) -> MessageResponse:
    """End the super-administrator session."""
    authenticator.revoke(token)
    return MessageResponse(message="Logged out")


@superadmin_router.get("/migration/export", response_model=ExportResponse)
async def export_data(
    gateway: Annotated[BaseGateway, Depends(get_gateway)],
    _token: SuperadminToken,
) -> ExportResponse:
    """Export all voters and candidates with the vote total."""
    export = await export_service.export_all_data(gateway)
    data = ExportData(
        exported_at=export.exported_at,
        voters=[VoterResponse.from_voter(v) for v in export.voters],
        candidates=[CandidateResponse.from_candidate(c) for c in export.candidates],
        votes=export.vote_count,
    )
    return ExportResponse(data=data, message="Data exported successfully")

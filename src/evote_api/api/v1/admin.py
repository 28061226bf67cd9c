"""Administrator API endpoints.

Session: POST /admin/login, GET /admin/verify, POST /admin/logout.
Integrity: POST /admin/clean/{null-values,duplicates,normalize},
GET /admin/clean/validate-dnis.
Analysis: POST /admin/training/{trends,anomalies,participation}.

Every endpoint except login requires an administrator bearer token, and
the clean/training endpoints share one single-flight guard.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from evote_api.core.config import Settings, get_settings
from evote_api.core.dependencies import get_admin_authenticator, get_audit_guard, get_gateway, require_admin
from evote_api.core.errors import AuthError
from evote_api.core.single_flight import SingleFlight
from evote_api.lib.gateway import BaseGateway
from evote_api.schemas.analysis import (
    AnomaliesData,
    AnomaliesResponse,
    ParticipationData,
    ParticipationResponse,
    TrendsData,
    TrendsResponse,
)
from evote_api.schemas.auth import LoginRequest, LoginResponse, VerifyResponse
from evote_api.schemas.common import MessageResponse
from evote_api.schemas.integrity import (
    DeletedCountResponse,
    IdentifierFindingSchema,
    InvalidIdentifiersResponse,
    NormalizedCountResponse,
)
from evote_api.services import analytics_service, integrity_service
from evote_api.services.auth_service import SessionAuthenticator

admin_router = APIRouter(prefix="/admin", tags=["admin"])

GatewayDep = Annotated[BaseGateway, Depends(get_gateway)]
GuardDep = Annotated[SingleFlight, Depends(get_audit_guard)]
AdminToken = Annotated[str, Depends(require_admin)]


@admin_router.post("/login", response_model=LoginResponse)
async def login(
    request: LoginRequest,
    authenticator: Annotated[SessionAuthenticator, Depends(get_admin_authenticator)],
) -> LoginResponse:
    """Exchange administrator credentials for a session token."""
    token = authenticator.authenticate(request.email, request.password)
    if token is None:
        msg = "Invalid credentials"
        raise AuthError(msg)
    return LoginResponse(token=token, message="Login successful")


@admin_router.get("/verify", response_model=VerifyResponse)
async def verify(_token: AdminToken) -> VerifyResponse:
    """Confirm the bearer token is a live administrator session."""
    return VerifyResponse(message="Token valid")


@admin_router.post("/logout", response_model=MessageResponse)
async def logout(
    token: AdminToken,
    authenticator: Annotated[SessionAuthenticator, Depends(get_admin_authenticator)],
) -> MessageResponse:
    """End the administrator session."""
    authenticator.revoke(token)
    return MessageResponse(message="Logged out")


@admin_router.post("/clean/null-values", response_model=DeletedCountResponse)
async def clean_null_values(gateway: GatewayDep, guard: GuardDep, _token: AdminToken) -> DeletedCountResponse:
    """Delete records missing a required field."""
    deleted = await integrity_service.purge_null_values(gateway, guard=guard)
    return DeletedCountResponse(deleted_count=deleted, message=f"Deleted {deleted} record(s) with null values")


@admin_router.post("/clean/duplicates", response_model=DeletedCountResponse)
async def clean_duplicates(
    gateway: GatewayDep,
    guard: GuardDep,
    settings: Annotated[Settings, Depends(get_settings)],
    _token: AdminToken,
) -> DeletedCountResponse:
    """Keep one vote per (voter, category) and delete the rest."""
    deleted = await integrity_service.resolve_duplicate_votes(gateway, settings.duplicate_keep_policy, guard=guard)
    return DeletedCountResponse(deleted_count=deleted, message=f"Deleted {deleted} duplicate vote(s)")


@admin_router.get("/clean/validate-dnis", response_model=InvalidIdentifiersResponse)
async def validate_dnis(gateway: GatewayDep, guard: GuardDep, _token: AdminToken) -> InvalidIdentifiersResponse:
    """Report malformed DNIs in voters and votes."""
    findings = await integrity_service.validate_identifiers(gateway, guard=guard)
    message = "All DNIs are valid" if not findings else f"Found {len(findings)} invalid DNI(s)"
    return InvalidIdentifiersResponse(
        invalid_dnis=[f.label for f in findings],
        findings=[IdentifierFindingSchema.from_finding(f) for f in findings],
        count=len(findings),
        message=message,
    )


@admin_router.post("/clean/normalize", response_model=NormalizedCountResponse)
async def clean_normalize(gateway: GatewayDep, guard: GuardDep, _token: AdminToken) -> NormalizedCountResponse:
    """Normalize name and place casing and trim whitespace."""
    updated = await integrity_service.normalize_records(gateway, guard=guard)
    return NormalizedCountResponse(normalized_count=updated, message=f"Normalized {updated} record(s)")


@admin_router.post("/training/trends", response_model=TrendsResponse)
async def training_trends(
    gateway: GatewayDep,
    guard: GuardDep,
    settings: Annotated[Settings, Depends(get_settings)],
    _token: AdminToken,
) -> TrendsResponse:
    """Daily vote trend analysis."""
    report = await analytics_service.run_trend_analysis(gateway, settings.election_tzinfo, guard=guard)
    return TrendsResponse(data=TrendsData.from_report(report), message="Trend analysis completed")


@admin_router.post("/training/anomalies", response_model=AnomaliesResponse)
async def training_anomalies(
    gateway: GatewayDep,
    guard: GuardDep,
    settings: Annotated[Settings, Depends(get_settings)],
    _token: AdminToken,
) -> AnomaliesResponse:
    """Duplicate, out-of-hours and rapid-succession anomaly detection."""
    report = await analytics_service.run_anomaly_detection(gateway, settings.election_tzinfo, guard=guard)
    return AnomaliesResponse(data=AnomaliesData.from_report(report), message="Anomaly detection completed")


@admin_router.post("/training/participation", response_model=ParticipationResponse)
async def training_participation(gateway: GatewayDep, guard: GuardDep, _token: AdminToken) -> ParticipationResponse:
    """Participation by department and demographic bucket."""
    report = await analytics_service.run_participation_analysis(gateway, guard=guard)
    return ParticipationResponse(
        data=ParticipationData.from_report(report),
        message="Participation analysis completed",
    )

"""Voter API endpoints.

POST /voters/verify, GET /voters (admin), GET /voters/{dni}.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from evote_api.core.dependencies import get_gateway, get_identity_client, require_admin
from evote_api.lib.gateway import BaseGateway
from evote_api.lib.identity import IdentityClient
from evote_api.schemas.voter import VoterEnvelope, VoterListResponse, VoterResponse, VoterVerifyRequest
from evote_api.services import voter_service

voters_router = APIRouter(prefix="/voters", tags=["voters"])


@voters_router.post("/verify", response_model=VoterEnvelope)
async def verify_voter(
    request: VoterVerifyRequest,
    gateway: Annotated[BaseGateway, Depends(get_gateway)],
    identity_client: Annotated[IdentityClient, Depends(get_identity_client)],
) -> VoterEnvelope:
    """Verify a DNI against the identity registry and register the voter."""
    voter = await voter_service.verify_voter(gateway, identity_client, request.dni)
    return VoterEnvelope(data=VoterResponse.from_voter(voter), message="Verification successful")


@voters_router.get("", response_model=VoterListResponse)
async def list_voters(
    gateway: Annotated[BaseGateway, Depends(get_gateway)],
    _token: Annotated[str, Depends(require_admin)],
    dni: Annotated[str | None, Query(description="Filter by DNI substring")] = None,
) -> VoterListResponse:
    """List registered voters (admin only)."""
    voters = await voter_service.list_voters(gateway, dni)
    return VoterListResponse(data=[VoterResponse.from_voter(v) for v in voters], count=len(voters))


@voters_router.get("/{dni}", response_model=VoterResponse)
async def get_voter(
    dni: str,
    gateway: Annotated[BaseGateway, Depends(get_gateway)],
) -> VoterResponse:
    """Fetch a voter profile by DNI."""
    return VoterResponse.from_voter(await voter_service.get_voter(gateway, dni))

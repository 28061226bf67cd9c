"""Vote API endpoints.

POST /votes, GET /votes/voter/{dni}/categories,
POST /votes/invalidate/{dni} (admin).
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from evote_api.core.dependencies import get_gateway, require_admin
from evote_api.lib.gateway import BaseGateway
from evote_api.schemas.common import MessageResponse
from evote_api.schemas.vote import InvalidateVotesResponse, VoteRequest
from evote_api.services import vote_service

votes_router = APIRouter(prefix="/votes", tags=["votes"])


@votes_router.post("", response_model=MessageResponse)
async def cast_votes(
    request: VoteRequest,
    gateway: Annotated[BaseGateway, Depends(get_gateway)],
) -> MessageResponse:
    """Record a voter's ballot, one selection per category."""
    await vote_service.register_votes(gateway, request.voter_dni, request.selections)
    return MessageResponse(message="Votes registered successfully")


@votes_router.get("/voter/{dni}/categories", response_model=list[str])
async def voted_categories(
    dni: str,
    gateway: Annotated[BaseGateway, Depends(get_gateway)],
) -> list[str]:
    """List the categories the voter has already voted in."""
    return await vote_service.get_voted_categories(gateway, dni)


@votes_router.post("/invalidate/{dni}", response_model=InvalidateVotesResponse)
async def invalidate_votes(
    dni: str,
    gateway: Annotated[BaseGateway, Depends(get_gateway)],
    _token: Annotated[str, Depends(require_admin)],
) -> InvalidateVotesResponse:
    """Detach the voter's votes from their candidates (admin only)."""
    count = await vote_service.invalidate_votes(gateway, dni)
    return InvalidateVotesResponse(invalidated_count=count, message="Votes invalidated successfully")

"""Candidate API endpoints.

GET /candidates, GET /candidates/category/{category}, GET /candidates/{candidate_id}.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from evote_api.core.dependencies import get_gateway
from evote_api.lib.gateway import BaseGateway
from evote_api.schemas.candidate import CandidateResponse
from evote_api.services import candidate_service

candidates_router = APIRouter(prefix="/candidates", tags=["candidates"])


@candidates_router.get("", response_model=list[CandidateResponse])
async def list_candidates(gateway: Annotated[BaseGateway, Depends(get_gateway)]) -> list[CandidateResponse]:
    """All candidates, most votes first."""
    return [CandidateResponse.from_candidate(c) for c in await candidate_service.list_candidates(gateway)]


@candidates_router.get("/category/{category}", response_model=list[CandidateResponse])
async def list_candidates_by_category(
    category: str,
    gateway: Annotated[BaseGateway, Depends(get_gateway)],
) -> list[CandidateResponse]:
    """Candidates in one category, most votes first."""
    candidates = await candidate_service.list_candidates(gateway, category)
    return [CandidateResponse.from_candidate(c) for c in candidates]


@candidates_router.get("/{candidate_id}", response_model=CandidateResponse)
async def get_candidate(
    candidate_id: str,
    gateway: Annotated[BaseGateway, Depends(get_gateway)],
) -> CandidateResponse:
    return CandidateResponse.from_candidate(await candidate_service.get_candidate(gateway, candidate_id))

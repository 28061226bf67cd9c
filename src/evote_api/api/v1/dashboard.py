"""Dashboard API endpoints.

GET /dashboard/stats.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from evote_api.core.dependencies import get_gateway
from evote_api.lib.gateway import BaseGateway
from evote_api.models import Category
from evote_api.schemas.candidate import CandidateResponse
from evote_api.schemas.dashboard import DashboardStatsResponse
from evote_api.services import stats_service

dashboard_router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@dashboard_router.get("/stats", response_model=DashboardStatsResponse)
async def dashboard_stats(gateway: Annotated[BaseGateway, Depends(get_gateway)]) -> DashboardStatsResponse:
    """Vote totals, participation rate and the candidate standings."""
    stats = await stats_service.get_dashboard_stats(gateway)
    return DashboardStatsResponse(
        total_votes=stats.total_votes,
        total_voters=stats.total_voters,
        participation_rate=stats.participation_rate,
        presidential_votes=stats.votes_by_category[Category.PRESIDENCIAL],
        distrital_votes=stats.votes_by_category[Category.DISTRITAL],
        regional_votes=stats.votes_by_category[Category.REGIONAL],
        candidates=[CandidateResponse.from_candidate(c) for c in stats.candidates],
    )

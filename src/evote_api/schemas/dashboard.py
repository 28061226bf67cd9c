"""Public dashboard schemas."""

from evote_api.schemas.candidate import CandidateResponse
from evote_api.schemas.common import CamelModel


class DashboardStatsResponse(CamelModel):
    """Aggregate election statistics."""

    total_votes: int
    total_voters: int
    participation_rate: float
    presidential_votes: int
    distrital_votes: int
    regional_votes: int
    candidates: list[CandidateResponse]

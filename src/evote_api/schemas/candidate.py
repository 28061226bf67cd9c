"""Candidate catalog schemas."""

from evote_api.models import Candidate
from evote_api.schemas.common import CamelModel


class CandidateResponse(CamelModel):
    """Candidate as shown on the ballot and dashboard."""

    id: str
    name: str | None = None
    photo_url: str | None = None
    description: str | None = None
    party_name: str | None = None
    party_logo_url: str | None = None
    party_description: str | None = None
    category: str | None = None
    academic_formation: str | None = None
    professional_experience: str | None = None
    campaign_proposal: str | None = None
    vote_count: int = 0

    @classmethod
    def from_candidate(cls, candidate: Candidate) -> "CandidateResponse":
        return cls.model_validate(candidate.model_dump(mode="json"))

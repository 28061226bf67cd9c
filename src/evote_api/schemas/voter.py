"""Voter verification and profile schemas."""

from datetime import date, datetime

from pydantic import Field

from evote_api.models import Voter
from evote_api.schemas.common import CamelModel


class VoterVerifyRequest(CamelModel):
    """Request to verify a DNI against the identity registry."""

    dni: str = Field(min_length=1)


class VoterResponse(CamelModel):
    """Public voter profile."""

    dni: str
    full_name: str | None = None
    address: str | None = None
    district: str | None = None
    province: str | None = None
    department: str | None = None
    birth_date: date | None = None
    has_voted: bool = False
    voted_at: datetime | None = None

    @classmethod
    def from_voter(cls, voter: Voter) -> "VoterResponse":
        return cls.model_validate(voter.model_dump())


class VoterEnvelope(CamelModel):
    """Single voter wrapped in the success envelope."""

    success: bool = True
    data: VoterResponse
    message: str | None = None


class VoterListResponse(CamelModel):
    """Voter listing for administrators."""

    success: bool = True
    data: list[VoterResponse]
    count: int

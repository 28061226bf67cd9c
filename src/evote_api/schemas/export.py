"""Super-administrator data export schemas."""

from datetime import datetime

from evote_api.schemas.candidate import CandidateResponse
from evote_api.schemas.common import CamelModel
from evote_api.schemas.voter import VoterResponse


class ExportData(CamelModel):
    """Snapshot of voters and candidates plus the vote total."""

    exported_at: datetime
    voters: list[VoterResponse]
    candidates: list[CandidateResponse]
    votes: int


class ExportResponse(CamelModel):
    success: bool = True
    data: ExportData
    message: str | None = None

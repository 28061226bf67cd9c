"""Vote casting and invalidation schemas."""

from pydantic import Field

from evote_api.schemas.common import CamelModel


class VoteSelection(CamelModel):
    """One candidate choice within a ballot."""

    candidate_id: str = Field(min_length=1)
    candidate_name: str | None = None
    category: str = Field(min_length=1)


class VoteRequest(CamelModel):
    """A voter's ballot: one selection per category."""

    voter_dni: str = Field(min_length=1)
    selections: list[VoteSelection]


class InvalidateVotesResponse(CamelModel):
    """Result of invalidating a voter's votes."""

    success: bool = True
    message: str | None = None
    invalidated_count: int

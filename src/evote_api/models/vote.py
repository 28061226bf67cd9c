"""Vote record linking a voter to a candidate within one category."""

from datetime import datetime

from pydantic import field_validator

from evote_api.models.base import RecordModel, ensure_utc


class Vote(RecordModel):
    """A cast vote.

    ``candidate_id`` is None once the vote has been invalidated; the row
    itself, with its category and timestamp, is retained. ``category`` is
    kept as the raw stored string so malformed rows can still be audited.
    """

    id: str | None = None
    voter_dni: str | None = None
    candidate_id: str | None = None
    category: str | None = None
    voted_at: datetime | None = None

    @field_validator("id", "candidate_id", mode="before")
    @classmethod
    def coerce_identifier(cls, v: object) -> str | None:
        return None if v is None else str(v)

    @field_validator("voted_at")
    @classmethod
    def attach_utc(cls, v: datetime | None) -> datetime | None:
        return ensure_utc(v)

    @property
    def is_active(self) -> bool:
        """Whether the vote still references a candidate."""
        return bool(self.candidate_id and self.candidate_id.strip())

"""Candidate record."""

from loguru import logger
from pydantic import field_validator

from evote_api.models.base import Category, RecordModel


class Candidate(RecordModel):
    """A candidate standing in exactly one electoral category."""

    id: str
    name: str | None = None
    photo_url: str | None = None
    description: str | None = None
    party_name: str | None = None
    party_logo_url: str | None = None
    party_description: str | None = None
    category: Category | None = None
    academic_formation: str | None = None
    professional_experience: str | None = None
    campaign_proposal: str | None = None
    vote_count: int = 0

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: object) -> str:
        return str(v)

    @field_validator("category", mode="before")
    @classmethod
    def parse_category(cls, v: object) -> Category | None:
        if v is None:
            return None
        category = Category.parse(v)
        if category is None:
            logger.warning("Ignoring unknown candidate category {!r}", v)
        return category

    @field_validator("vote_count", mode="before")
    @classmethod
    def null_count_is_zero(cls, v: object) -> object:
        return 0 if v is None else v

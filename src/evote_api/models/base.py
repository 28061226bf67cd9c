"""Shared base for gateway record models."""

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict


class Category(StrEnum):
    """Electoral tier a vote and its candidate must share."""

    PRESIDENCIAL = "presidencial"
    DISTRITAL = "distrital"
    REGIONAL = "regional"

    @classmethod
    def parse(cls, value: object) -> "Category | None":
        """Coerce a raw category value, returning None when unrecognized."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        try:
            return cls(value.strip().lower())
        except ValueError:
            return None


def ensure_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive timestamps read back from the store."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class RecordModel(BaseModel):
    """Base for records exchanged with the persistence gateway.

    Records are tolerant: the auditor must be able to load rows that
    violate the invariants it checks, so most fields are optional.
    """

    model_config = ConfigDict(extra="ignore", validate_assignment=True)

    def to_record(self) -> dict[str, Any]:
        """Serialize to the snake_case JSON shape the store expects."""
        return self.model_dump(mode="json", exclude_none=True)

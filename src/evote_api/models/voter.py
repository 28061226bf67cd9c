"""Voter record keyed by national ID (DNI)."""

from datetime import date, datetime

from pydantic import field_validator

from evote_api.models.base import RecordModel, ensure_utc


class Voter(RecordModel):
    """A registered voter."""

    dni: str
    full_name: str | None = None
    address: str | None = None
    district: str | None = None
    province: str | None = None
    department: str | None = None
    birth_date: date | None = None
    has_voted: bool = False
    created_at: datetime | None = None
    voted_at: datetime | None = None

    @field_validator("dni", mode="before")
    @classmethod
    def coerce_dni(cls, v: object) -> str:
        return "" if v is None else str(v)

    @field_validator("birth_date", mode="before")
    @classmethod
    def strip_time_component(cls, v: object) -> object:
        if isinstance(v, str) and "T" in v:
            return v.split("T", 1)[0]
        return v

    @field_validator("has_voted", mode="before")
    @classmethod
    def null_means_not_voted(cls, v: object) -> object:
        return False if v is None else v

    @field_validator("created_at", "voted_at")
    @classmethod
    def attach_utc(cls, v: datetime | None) -> datetime | None:
        return ensure_utc(v)

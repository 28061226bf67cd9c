"""Integrity audit response schemas."""

from pydantic import Field

from evote_api.lib.integrity import IdentifierFinding
from evote_api.schemas.common import CamelModel


class DeletedCountResponse(CamelModel):
    """Result of a purge or duplicate resolution run."""

    success: bool = True
    deleted_count: int
    message: str | None = None


class NormalizedCountResponse(CamelModel):
    """Result of a normalization run."""

    success: bool = True
    normalized_count: int
    message: str | None = None


class IdentifierFindingSchema(CamelModel):
    """One malformed DNI."""

    dni: str | None
    source: str
    label: str

    @classmethod
    def from_finding(cls, finding: IdentifierFinding) -> "IdentifierFindingSchema":
        return cls(dni=finding.dni, source=finding.source, label=finding.label)


class InvalidIdentifiersResponse(CamelModel):
    """Report of malformed DNIs across voters and votes."""

    success: bool = True
    invalid_dnis: list[str] = Field(alias="invalidDNIs", description="Human-readable finding labels")
    findings: list[IdentifierFindingSchema]
    count: int
    message: str | None = None

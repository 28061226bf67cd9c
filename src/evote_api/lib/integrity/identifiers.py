"""Malformed national ID detection across voter and vote records."""

from dataclasses import dataclass

from evote_api.lib.integrity.rules import is_valid_dni
from evote_api.models import Vote, Voter

SOURCE_VOTER = "voter"
SOURCE_VOTE = "vote"


@dataclass(frozen=True)
class IdentifierFinding:
    """A record whose DNI does not match the 8-digit format."""

    dni: str | None
    source: str
    label: str


def find_invalid_identifiers(voters: list[Voter], votes: list[Vote]) -> list[IdentifierFinding]:
    """Report every malformed DNI without modifying anything.

    Voter findings are listed first, one per voter, labelled with the
    voter's name. Vote findings are de-duplicated by DNI. Votes with no
    DNI at all are left to the null-value purge.

    Args:
        voters: All voter rows.
        votes: All vote rows.

    Returns:
        Findings in discovery order.
    """
    findings: list[IdentifierFinding] = []
    for voter in voters:
        if not is_valid_dni(voter.dni):
            name = voter.full_name if voter.full_name is not None else "sin nombre"
            findings.append(IdentifierFinding(dni=voter.dni, source=SOURCE_VOTER, label=f"{voter.dni} ({name})"))

    seen: set[str] = set()
    for vote in votes:
        dni = vote.voter_dni
        if dni is None or is_valid_dni(dni) or dni in seen:
            continue
        seen.add(dni)
        findings.append(IdentifierFinding(dni=dni, source=SOURCE_VOTE, label=f"{dni} (en votos)"))
    return findings

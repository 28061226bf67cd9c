"""Text normalization for voter and candidate records.

Produces per-record change sets; applying a change set and normalizing
again yields an empty change set.
"""

from typing import Any

from evote_api.models import Candidate, Voter

TITLE_CASE_VOTER_FIELDS = ["full_name", "district", "province", "department"]
TRIM_VOTER_FIELDS = ["address"]
TITLE_CASE_CANDIDATE_FIELDS = ["name"]
TRIM_CANDIDATE_FIELDS = ["party_name"]


def normalize_text(value: str | None) -> str | None:
    """Title-case each whitespace-separated word and collapse spacing.

    ``"  juan   PEREZ "`` becomes ``"Juan Perez"``. Blank and None values
    are returned unchanged.
    """
    if value is None or not value.strip():
        return value
    return " ".join(word[:1].upper() + word[1:].lower() for word in value.split())


def _changes(record: Any, title_fields: list[str], trim_fields: list[str]) -> dict[str, str]:
    changes: dict[str, str] = {}
    for field in title_fields:
        value = getattr(record, field)
        normalized = normalize_text(value)
        if value is not None and normalized != value:
            changes[field] = normalized
    for field in trim_fields:
        value = getattr(record, field)
        if value is not None and value.strip() != value:
            changes[field] = value.strip()
    return changes


def voter_changes(voter: Voter) -> dict[str, str]:
    """Fields of ``voter`` whose normalized form differs from the stored value."""
    return _changes(voter, TITLE_CASE_VOTER_FIELDS, TRIM_VOTER_FIELDS)


def candidate_changes(candidate: Candidate) -> dict[str, str]:
    """Fields of ``candidate`` whose normalized form differs from the stored value."""
    return _changes(candidate, TITLE_CASE_CANDIDATE_FIELDS, TRIM_CANDIDATE_FIELDS)

"""Record completeness and identifier format rules."""

import re
from typing import Any

DNI_PATTERN = re.compile(r"^\d{8}$")

REQUIRED_VOTER_FIELDS = ["full_name", "address", "district", "province", "department"]
REQUIRED_CANDIDATE_FIELDS = ["name", "party_name", "description", "photo_url"]
# candidate_id is required, so invalidated votes count as incomplete.
REQUIRED_VOTE_FIELDS = ["voter_dni", "category", "candidate_id"]


def is_valid_dni(value: object) -> bool:
    """Check that a value is an 8-digit national ID."""
    return isinstance(value, str) and DNI_PATTERN.fullmatch(value) is not None


def missing_fields(record: Any, fields: list[str]) -> list[str]:
    """List the required fields that are absent, null, or blank.

    Args:
        record: Any object exposing the fields as attributes.
        fields: Field names to check.

    Returns:
        Names of the fields that fail the check, in input order.
    """
    missing = []
    for field in fields:
        value = getattr(record, field, None)
        if value is None or (isinstance(value, str) and value.strip() == ""):
            missing.append(field)
    return missing


def is_incomplete(record: Any, fields: list[str]) -> bool:
    """Whether any required field is missing."""
    return bool(missing_fields(record, fields))

"""Integrity audit service: repair operations over the full record sets.

Loads records through the gateway, applies the pure rules in
``evote_api.lib.integrity`` and writes the results back one record at a
time. There is no batch transaction: a failure part-way leaves earlier
deletions and updates applied, and rerunning the operation picks up where
it stopped.
"""

from contextlib import AbstractAsyncContextManager, nullcontext

from loguru import logger

from evote_api.core.logging import audit_logger
from evote_api.core.single_flight import SingleFlight
from evote_api.lib.gateway import BaseGateway, RecordType
from evote_api.lib.integrity import (
    KEEP_NEWEST,
    REQUIRED_CANDIDATE_FIELDS,
    REQUIRED_VOTE_FIELDS,
    REQUIRED_VOTER_FIELDS,
    IdentifierFinding,
    candidate_changes,
    find_invalid_identifiers,
    is_incomplete,
    select_duplicates,
    voter_changes,
)

AUDIT_OPERATION = "integrity-audit"


def guarded(guard: SingleFlight | None) -> AbstractAsyncContextManager[None]:
    """Hold the shared audit guard, or do nothing when none is given."""
    if guard is None:
        return nullcontext()
    return guard.hold(AUDIT_OPERATION)


async def purge_null_values(gateway: BaseGateway, *, guard: SingleFlight | None = None) -> int:
    """Delete records with a missing or blank required field.

    Candidates are checked first, then voters, then votes. A vote with no
    candidate (an invalidated vote) is incomplete and is deleted.

    Returns:
        Number of records deleted.
    """
    async with guarded(guard):
        deleted = 0

        for candidate in await gateway.list_candidates():
            if is_incomplete(candidate, REQUIRED_CANDIDATE_FIELDS):
                if await gateway.delete_record(RecordType.CANDIDATES, candidate.id):
                    deleted += 1

        for voter in await gateway.list_voters():
            if is_incomplete(voter, REQUIRED_VOTER_FIELDS):
                if await gateway.delete_record(RecordType.VOTERS, voter.dni):
                    deleted += 1

        for vote in await gateway.list_votes():
            if vote.id is not None and is_incomplete(vote, REQUIRED_VOTE_FIELDS):
                if await gateway.delete_record(RecordType.VOTES, vote.id):
                    deleted += 1

        audit_logger("integrity.purge_null_values", deleted=deleted).info(
            "Null-value purge deleted {} record(s)", deleted
        )
        return deleted


async def resolve_duplicate_votes(
    gateway: BaseGateway,
    keep: str = KEEP_NEWEST,
    *,
    guard: SingleFlight | None = None,
) -> int:
    """Delete all but one vote per (voter_dni, category).

    Args:
        gateway: Persistence gateway.
        keep: ``"newest"`` or ``"oldest"``; which vote survives per group.
        guard: Optional single-flight guard.

    Returns:
        Number of votes deleted. A second run returns 0.
    """
    async with guarded(guard):
        deleted = 0
        for vote in select_duplicates(await gateway.list_votes(), keep=keep):
            if vote.id is not None and await gateway.delete_record(RecordType.VOTES, vote.id):
                deleted += 1
        audit_logger("integrity.resolve_duplicates", keep=keep, deleted=deleted).info(
            "Duplicate resolution ({}) deleted {} vote(s)", keep, deleted
        )
        return deleted


async def validate_identifiers(gateway: BaseGateway, *, guard: SingleFlight | None = None) -> list[IdentifierFinding]:
    """Report malformed DNIs in voter and vote records. Nothing is modified."""
    async with guarded(guard):
        findings = find_invalid_identifiers(await gateway.list_voters(), await gateway.list_votes())
        logger.info("Identifier validation found {} malformed DNI(s)", len(findings))
        return findings


async def normalize_records(gateway: BaseGateway, *, guard: SingleFlight | None = None) -> int:
    """Title-case names and places, trim addresses and party names.

    Only records whose normalized form differs are written back, and only
    the changed columns are sent, so store-maintained fields such as
    ``vote_count`` are never rewritten. A second run returns 0.

    Returns:
        Number of records updated.
    """
    async with guarded(guard):
        updated = 0

        for voter in await gateway.list_voters():
            changes = voter_changes(voter)
            if changes and await gateway.update_voter(voter.dni, changes) is not None:
                updated += 1

        for candidate in await gateway.list_candidates():
            changes = candidate_changes(candidate)
            if changes and await gateway.update_candidate(candidate.id, changes) is not None:
                updated += 1

        audit_logger("integrity.normalize", updated=updated).info("Normalization updated {} record(s)", updated)
        return updated

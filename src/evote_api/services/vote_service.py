"""Vote registration and invalidation service.

Registration enforces one vote per (voter, category). The store offers no
multi-statement transactions, so the read of already-voted categories is
only a fast path: two concurrent ballots can both pass it, and the store's
unique index on (voter_dni, category) decides which insert wins.
Selections commit in order; a failure part-way through a ballot leaves the
earlier selections recorded.
"""

from datetime import UTC, datetime

from loguru import logger

from evote_api.core.errors import ConflictError, NotFoundError, ValidationError
from evote_api.core.logging import audit_logger
from evote_api.lib.gateway import BaseGateway, GatewayConflictError
from evote_api.lib.integrity import is_valid_dni
from evote_api.models import Category, Vote
from evote_api.schemas.vote import VoteSelection


async def get_voted_categories(gateway: BaseGateway, voter_dni: str) -> list[str]:
    """List the categories a voter has a vote row in.

    Invalidated votes still count: invalidation severs the candidate link
    but keeps the category history, so the voter cannot vote there again.

    Args:
        gateway: Persistence gateway.
        voter_dni: Voter's DNI.

    Returns:
        Distinct category names in first-voted order.
    """
    votes = await gateway.list_votes(voter_dni=voter_dni)
    categories: list[str] = []
    for vote in votes:
        if vote.category and vote.category not in categories:
            categories.append(vote.category)
    return categories


async def register_votes(gateway: BaseGateway, voter_dni: str, selections: list[VoteSelection]) -> list[Vote]:
    """Record a voter's ballot.

    Args:
        gateway: Persistence gateway.
        voter_dni: Voter's DNI.
        selections: One selection per category, applied in order.

    Returns:
        The inserted votes.

    Raises:
        ValidationError: Empty ballot, malformed DNI, unknown category, or a
            candidate whose category differs from the selection's.
        NotFoundError: Unknown voter or candidate.
        ConflictError: The voter already voted in a selected category,
            including when a concurrent ballot won the race.
    """
    if not selections:
        msg = "At least one selection is required"
        raise ValidationError(msg)
    if not is_valid_dni(voter_dni):
        msg = "DNI must be exactly 8 digits"
        raise ValidationError(msg)

    if await gateway.find_voter(voter_dni) is None:
        msg = f"Voter {voter_dni} not found"
        raise NotFoundError(msg)

    voted = set(await get_voted_categories(gateway, voter_dni))
    inserted: list[Vote] = []

    for selection in selections:
        category = Category.parse(selection.category)
        if category is None:
            msg = f"Unknown category: {selection.category}"
            raise ValidationError(msg)
        if category.value in voted:
            msg = f"Voter has already voted in category {category.value}"
            raise ConflictError(msg)

        candidate = await gateway.find_candidate(selection.candidate_id)
        if candidate is None:
            msg = f"Candidate {selection.candidate_id} not found"
            raise NotFoundError(msg)
        if candidate.category != category:
            msg = f"Candidate {candidate.id} does not belong to category {category.value}"
            raise ValidationError(msg)

        try:
            vote = await gateway.insert_vote(
                Vote(voter_dni=voter_dni, candidate_id=candidate.id, category=category.value),
            )
        except GatewayConflictError as exc:
            logger.info("Concurrent vote for {} in {} lost the uniqueness race", voter_dni, category.value)
            msg = f"Voter has already voted in category {category.value}"
            raise ConflictError(msg) from exc

        inserted.append(vote)
        voted.add(category.value)

    # Voting columns only; demographic fields belong to verification.
    if await gateway.update_voter(voter_dni, {"has_voted": True, "voted_at": datetime.now(UTC)}) is None:
        logger.warning("Voter {} disappeared before voting status could be recorded", voter_dni)
    logger.info("Registered {} vote(s) for voter {}", len(inserted), voter_dni)
    return inserted


async def invalidate_votes(gateway: BaseGateway, voter_dni: str) -> int:
    """Detach a voter's votes from their candidates.

    Vote rows, their categories and the voter's ``has_voted`` flag are
    left in place. Already-invalidated votes are skipped, so repeating the
    call returns 0.

    Args:
        gateway: Persistence gateway.
        voter_dni: Voter's DNI. Malformed DNIs are accepted so votes found
            by the identifier audit can be invalidated.

    Returns:
        Number of votes invalidated.

    Raises:
        ValidationError: If the DNI is blank.
    """
    if not voter_dni.strip():
        msg = "DNI is required"
        raise ValidationError(msg)

    invalidated = 0
    for vote in await gateway.list_votes(voter_dni=voter_dni):
        if not vote.is_active or vote.id is None:
            continue
        if await gateway.update_vote(vote.id, {"candidate_id": None}) is not None:
            invalidated += 1
    audit_logger("votes.invalidate", voter_dni=voter_dni, invalidated=invalidated).info(
        "Invalidated {} vote(s) for voter {}", invalidated, voter_dni
    )
    return invalidated

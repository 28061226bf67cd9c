"""Candidate catalog service."""

from evote_api.core.errors import NotFoundError, ValidationError
from evote_api.lib.gateway import BaseGateway
from evote_api.models import Candidate, Category


async def list_candidates(gateway: BaseGateway, category: str | None = None) -> list[Candidate]:
    """List candidates by descending vote count.

    Args:
        gateway: Persistence gateway.
        category: Optional category name to filter on.

    Raises:
        ValidationError: If ``category`` is not a known category.
    """
    parsed = None
    if category is not None:
        parsed = Category.parse(category)
        if parsed is None:
            msg = f"Unknown category: {category}"
            raise ValidationError(msg)
    candidates = await gateway.list_candidates(parsed)
    return sorted(candidates, key=lambda c: c.vote_count, reverse=True)


async def get_candidate(gateway: BaseGateway, candidate_id: str) -> Candidate:
    """Fetch one candidate.

    Raises:
        NotFoundError: No such candidate.
    """
    candidate = await gateway.find_candidate(candidate_id)
    if candidate is None:
        msg = f"Candidate {candidate_id} not found"
        raise NotFoundError(msg)
    return candidate

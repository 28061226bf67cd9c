"""Dashboard statistics service."""

from collections import Counter
from dataclasses import dataclass

from evote_api.lib.gateway import BaseGateway
from evote_api.lib.integrity import round_one_decimal
from evote_api.models import Candidate, Category
from evote_api.services.candidate_service import list_candidates


@dataclass
class DashboardStats:
    """Aggregate counts shown on the public dashboard."""

    total_votes: int
    total_voters: int
    participation_rate: float
    votes_by_category: dict[str, int]
    candidates: list[Candidate]


async def get_dashboard_stats(gateway: BaseGateway) -> DashboardStats:
    """Compute vote totals, participation and per-category counts.

    Participation is distinct voting DNIs over registered voters, as a
    percentage rounded to one decimal. Every vote row counts, including
    invalidated ones.
    """
    votes = await gateway.list_votes()
    voters = await gateway.list_voters()

    voting_dnis = {v.voter_dni for v in votes if v.voter_dni}
    rate = round_one_decimal(len(voting_dnis) * 100.0 / len(voters)) if voters else 0.0
    per_category = Counter(v.category for v in votes if v.category)

    return DashboardStats(
        total_votes=len(votes),
        total_voters=len(voters),
        participation_rate=rate,
        votes_by_category={c.value: per_category.get(c.value, 0) for c in Category},
        candidates=await list_candidates(gateway),
    )

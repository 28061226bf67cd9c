"""Duplicate vote grouping.

Two votes are duplicates when they share (voter_dni, category), whether or
not their candidate reference has been invalidated. Rows missing either key
are never grouped.
"""

from collections import defaultdict
from datetime import UTC, datetime

from evote_api.models import Vote

KEEP_NEWEST = "newest"
KEEP_OLDEST = "oldest"

_EPOCH = datetime.min.replace(tzinfo=UTC)


def group_votes(votes: list[Vote]) -> dict[tuple[str, str], list[Vote]]:
    """Group votes by (voter_dni, category), preserving input order."""
    groups: dict[tuple[str, str], list[Vote]] = defaultdict(list)
    for vote in votes:
        if vote.voter_dni is None or vote.category is None:
            continue
        groups[(vote.voter_dni, vote.category)].append(vote)
    return dict(groups)


def count_duplicate_votes(votes: list[Vote]) -> int:
    """Count votes beyond the first in each (voter_dni, category) group."""
    return sum(len(group) - 1 for group in group_votes(votes).values())


def select_duplicates(votes: list[Vote], keep: str = KEEP_NEWEST) -> list[Vote]:
    """Pick the votes to delete so each group keeps exactly one.

    Args:
        votes: All vote rows.
        keep: ``"newest"`` keeps the latest ``voted_at`` per group,
            ``"oldest"`` keeps the earliest. Ties fall back to the vote id.

    Returns:
        Votes to delete. Empty when no group has more than one vote, so
        running the selection again after deleting is a no-op.

    Raises:
        ValueError: If ``keep`` is not a known policy.
    """
    if keep not in (KEEP_NEWEST, KEEP_OLDEST):
        msg = f"Unknown duplicate keep policy: {keep!r}"
        raise ValueError(msg)

    to_delete: list[Vote] = []
    for group in group_votes(votes).values():
        if len(group) < 2:
            continue
        ordered = sorted(group, key=lambda v: (v.voted_at or _EPOCH, v.id or ""), reverse=keep == KEEP_NEWEST)
        to_delete.extend(ordered[1:])
    return to_delete

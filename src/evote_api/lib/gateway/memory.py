"""Process-local gateway backend.

Holds the three record sets in dictionaries and enforces the
(voter_dni, category) uniqueness constraint under an ``asyncio.Lock``, the
same guarantee the real store provides with a unique index. Every call
yields to the event loop first so concurrent callers interleave the way
they would against a remote store.
"""

import asyncio
import uuid
from datetime import UTC, datetime
from typing import Any

from loguru import logger

from evote_api.lib.gateway.base import BaseGateway, GatewayConflictError, RecordType
from evote_api.models import Candidate, Category, Vote, Voter


class InMemoryGateway(BaseGateway):
    """Gateway holding records in process memory.

    Suitable for tests and local development. Data does not survive a
    restart and is not shared between processes.
    """

    def __init__(self) -> None:
        self._voters: dict[str, Voter] = {}
        self._candidates: dict[str, Candidate] = {}
        self._votes: dict[str, Vote] = {}
        self._vote_lock = asyncio.Lock()

    @property
    def backend_name(self) -> str:
        return "memory"

    def seed(
        self,
        *,
        voters: list[Voter] | None = None,
        candidates: list[Candidate] | None = None,
        votes: list[Vote] | None = None,
    ) -> None:
        """Load records directly, bypassing the vote uniqueness constraint.

        Used to reproduce data written before the constraint existed, which
        is what the integrity auditor is there to repair.
        """
        for voter in voters or []:
            self._voters[voter.dni] = voter.model_copy(deep=True)
        for candidate in candidates or []:
            self._candidates[candidate.id] = candidate.model_copy(deep=True)
        for vote in votes or []:
            stored = vote.model_copy(deep=True)
            if stored.id is None:
                stored.id = uuid.uuid4().hex
            self._votes[stored.id] = stored

    # Voters

    async def find_voter(self, dni: str) -> Voter | None:
        await asyncio.sleep(0)
        voter = self._voters.get(dni)
        return voter.model_copy(deep=True) if voter else None

    async def list_voters(self) -> list[Voter]:
        await asyncio.sleep(0)
        return [v.model_copy(deep=True) for v in self._voters.values()]

    async def upsert_voter(self, voter: Voter) -> Voter:
        await asyncio.sleep(0)
        existing = self._voters.get(voter.dni)
        merged = existing.model_copy(update=voter.model_dump(exclude_unset=True)) if existing else voter.model_copy()
        if merged.created_at is None:
            merged.created_at = datetime.now(UTC)
        self._voters[merged.dni] = merged.model_copy(deep=True)
        return merged

    async def update_voter(self, dni: str, patch: dict[str, Any]) -> Voter | None:
        await asyncio.sleep(0)
        return self._apply_patch(self._voters, Voter, dni, patch)

    # Candidates

    async def find_candidate(self, candidate_id: str) -> Candidate | None:
        await asyncio.sleep(0)
        candidate = self._candidates.get(candidate_id)
        return candidate.model_copy(deep=True) if candidate else None

    async def list_candidates(self, category: Category | None = None) -> list[Candidate]:
        await asyncio.sleep(0)
        candidates = [c.model_copy(deep=True) for c in self._candidates.values()]
        if category is not None:
            candidates = [c for c in candidates if c.category == category]
        return sorted(candidates, key=lambda c: c.vote_count, reverse=True)

    async def upsert_candidate(self, candidate: Candidate) -> Candidate:
        await asyncio.sleep(0)
        existing = self._candidates.get(candidate.id)
        merged = (
            existing.model_copy(update=candidate.model_dump(exclude_unset=True)) if existing else candidate.model_copy()
        )
        self._candidates[merged.id] = merged.model_copy(deep=True)
        return merged

    async def update_candidate(self, candidate_id: str, patch: dict[str, Any]) -> Candidate | None:
        await asyncio.sleep(0)
        return self._apply_patch(self._candidates, Candidate, candidate_id, patch)

    # Votes

    async def insert_vote(self, vote: Vote) -> Vote:
        await asyncio.sleep(0)
        async with self._vote_lock:
            for existing in self._votes.values():
                if existing.voter_dni == vote.voter_dni and existing.category == vote.category:
                    logger.debug("Rejected duplicate vote for {} in {}", vote.voter_dni, vote.category)
                    msg = (
                        "duplicate key value violates unique constraint "
                        f"(voter_dni, category)=({vote.voter_dni}, {vote.category})"
                    )
                    raise GatewayConflictError(self.backend_name, msg, status_code=409)
            stored = vote.model_copy(deep=True)
            stored.id = stored.id or uuid.uuid4().hex
            stored.voted_at = stored.voted_at or datetime.now(UTC)
            self._votes[stored.id] = stored
            if stored.candidate_id in self._candidates:
                candidate = self._candidates[stored.candidate_id]
                candidate.vote_count += 1
            return stored.model_copy(deep=True)

    async def list_votes(self, **filters: Any) -> list[Vote]:
        await asyncio.sleep(0)
        votes = [
            v.model_copy(deep=True)
            for v in self._votes.values()
            if all(getattr(v, field) == value for field, value in filters.items())
        ]
        epoch = datetime.min.replace(tzinfo=UTC)
        return sorted(votes, key=lambda v: v.voted_at or epoch)

    async def update_vote(self, vote_id: str, patch: dict[str, Any]) -> Vote | None:
        await asyncio.sleep(0)
        return self._apply_patch(self._votes, Vote, vote_id, patch)

    # Generic

    async def delete_record(self, record_type: RecordType, key: str) -> bool:
        await asyncio.sleep(0)
        table: dict[str, Any] = {
            RecordType.VOTERS: self._voters,
            RecordType.CANDIDATES: self._candidates,
            RecordType.VOTES: self._votes,
        }[record_type]
        return table.pop(key, None) is not None

    @staticmethod
    def _apply_patch(table: dict[str, Any], model: type[Any], key: str, patch: dict[str, Any]) -> Any:
        existing = table.get(key)
        if existing is None:
            return None
        updated = model.model_validate({**existing.model_dump(), **patch})
        table[key] = updated
        return updated.model_copy(deep=True)

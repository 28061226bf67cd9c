"""Abstract persistence gateway interface.

The gateway is the only path to the record store. It offers single-record
reads and writes with no multi-statement transactions; the one cross-request
guarantee it must provide is the (voter_dni, category) uniqueness constraint
on votes, surfaced as ``GatewayConflictError``.
"""

from abc import ABC, abstractmethod
from enum import StrEnum
from typing import Any

from evote_api.core.errors import UpstreamError
from evote_api.models import Candidate, Category, Vote, Voter


class RecordType(StrEnum):
    """Record sets held by the store (values are the table names)."""

    VOTERS = "voters"
    CANDIDATES = "candidates"
    VOTES = "votes"

    @property
    def key_field(self) -> str:
        """Natural key column for the record set."""
        return "dni" if self is RecordType.VOTERS else "id"


class GatewayError(UpstreamError):
    """Raised when the store fails independently of business logic.

    Covers timeouts, connection failures, non-2xx responses and malformed
    bodies.

    Args:
        backend: Name of the failing gateway backend.
        message: Human-readable error description.
        status_code: Optional HTTP status code returned by the store.
    """

    def __init__(self, backend: str, message: str, status_code: int | None = None) -> None:
        self.backend = backend
        self.upstream_status = status_code
        super().__init__(f"{backend}: {message}")


class GatewayConflictError(GatewayError):
    """The store rejected a write on a uniqueness constraint."""


class BaseGateway(ABC):
    """Abstract gateway. All backends must implement this."""

    @property
    @abstractmethod
    def backend_name(self) -> str:
        """Short name identifying this backend."""

    # Voters

    @abstractmethod
    async def find_voter(self, dni: str) -> Voter | None:
        """Fetch a voter by DNI, or None if absent."""

    @abstractmethod
    async def list_voters(self) -> list[Voter]:
        """Fetch every voter record."""

    @abstractmethod
    async def upsert_voter(self, voter: Voter) -> Voter:
        """Insert or merge a voter on its DNI."""

    @abstractmethod
    async def update_voter(self, dni: str, patch: dict[str, Any]) -> Voter | None:
        """Apply a partial update to one voter. Returns None if absent.

        Only the columns named in ``patch`` are written, so concurrent
        writers of other columns are not overwritten.
        """

    # Candidates

    @abstractmethod
    async def find_candidate(self, candidate_id: str) -> Candidate | None:
        """Fetch a candidate by ID, or None if absent."""

    @abstractmethod
    async def list_candidates(self, category: Category | None = None) -> list[Candidate]:
        """Fetch candidates, optionally restricted to one category."""

    @abstractmethod
    async def upsert_candidate(self, candidate: Candidate) -> Candidate:
        """Insert or merge a candidate on its ID."""

    @abstractmethod
    async def update_candidate(self, candidate_id: str, patch: dict[str, Any]) -> Candidate | None:
        """Apply a partial update to one candidate. Returns None if absent.

        ``vote_count`` belongs to the store and must never appear in ``patch``.
        """

    # Votes

    @abstractmethod
    async def insert_vote(self, vote: Vote) -> Vote:
        """Insert a vote.

        Raises:
            GatewayConflictError: If a vote for the same (voter_dni, category)
                already exists.
        """

    @abstractmethod
    async def list_votes(self, **filters: Any) -> list[Vote]:
        """Fetch votes whose fields equal every given filter value."""

    @abstractmethod
    async def update_vote(self, vote_id: str, patch: dict[str, Any]) -> Vote | None:
        """Apply a partial update to one vote. Returns None if absent."""

    # Generic

    @abstractmethod
    async def delete_record(self, record_type: RecordType, key: str) -> bool:
        """Delete one record by natural key. Returns True if a row was removed."""

    async def aclose(self) -> None:
        """Release any held resources."""
        return None

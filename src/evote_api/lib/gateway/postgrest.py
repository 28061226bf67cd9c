"""PostgREST (Supabase REST) gateway backend.

Every call is a single HTTP request against ``{supabase_url}/rest/v1`` using
the service-role key, with a bounded timeout. Failures are translated into
``GatewayError``; a unique-constraint violation (HTTP 409 / SQLSTATE 23505)
becomes ``GatewayConflictError``.
"""

import json
from typing import Any, TypeVar

import httpx
from loguru import logger
from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from evote_api.lib.gateway.base import BaseGateway, GatewayConflictError, GatewayError, RecordType
from evote_api.models import Candidate, Category, Vote, Voter

DEFAULT_TIMEOUT = 10.0
UNIQUE_VIOLATION = "23505"

_RETURN_REPRESENTATION = "return=representation"
_UPSERT = "resolution=merge-duplicates,return=representation"

ModelT = TypeVar("ModelT", bound=BaseModel)

_PATCH_ADAPTER = TypeAdapter(dict[str, Any])


def _eq(value: Any) -> str:
    """Render a PostgREST equality (or null) filter."""
    if value is None:
        return "is.null"
    if isinstance(value, bool):
        return f"eq.{str(value).lower()}"
    return f"eq.{value}"


class PostgrestGateway(BaseGateway):
    """Gateway backed by a PostgREST endpoint.

    Args:
        base_url: REST base URL, e.g. ``https://xyz.supabase.co/rest/v1``.
        api_key: Service-role key, sent as ``apikey`` and bearer token.
        timeout: Per-request timeout in seconds.
        transport: Optional httpx transport (used by tests).
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    @property
    def backend_name(self) -> str:
        return "postgrest"

    # Voters

    async def find_voter(self, dni: str) -> Voter | None:
        rows = await self._request("GET", "/voters", params={"dni": _eq(dni), "select": "*"})
        voters = self._parse(Voter, rows)
        return voters[0] if voters else None

    async def list_voters(self) -> list[Voter]:
        rows = await self._request("GET", "/voters", params={"select": "*", "order": "created_at.desc"})
        return self._parse(Voter, rows)

    async def upsert_voter(self, voter: Voter) -> Voter:
        rows = await self._request(
            "POST",
            "/voters",
            params={"on_conflict": "dni"},
            json_body=voter.to_record(),
            prefer=_UPSERT,
        )
        saved = self._parse(Voter, rows)
        return saved[0] if saved else voter

    async def update_voter(self, dni: str, patch: dict[str, Any]) -> Voter | None:
        return await self._patch(Voter, RecordType.VOTERS, dni, patch)

    # Candidates

    async def find_candidate(self, candidate_id: str) -> Candidate | None:
        rows = await self._request("GET", "/candidates", params={"id": _eq(candidate_id), "select": "*"})
        candidates = self._parse(Candidate, rows)
        return candidates[0] if candidates else None

    async def list_candidates(self, category: Category | None = None) -> list[Candidate]:
        params = {"select": "*", "order": "vote_count.desc"}
        if category is not None:
            params["category"] = _eq(category.value)
        rows = await self._request("GET", "/candidates", params=params)
        return self._parse(Candidate, rows)

    async def upsert_candidate(self, candidate: Candidate) -> Candidate:
        rows = await self._request(
            "POST",
            "/candidates",
            params={"on_conflict": "id"},
            json_body=candidate.to_record(),
            prefer=_UPSERT,
        )
        saved = self._parse(Candidate, rows)
        return saved[0] if saved else candidate

    async def update_candidate(self, candidate_id: str, patch: dict[str, Any]) -> Candidate | None:
        return await self._patch(Candidate, RecordType.CANDIDATES, candidate_id, patch)

    # Votes

    async def insert_vote(self, vote: Vote) -> Vote:
        rows = await self._request("POST", "/votes", json_body=vote.to_record(), prefer=_RETURN_REPRESENTATION)
        saved = self._parse(Vote, rows)
        return saved[0] if saved else vote

    async def list_votes(self, **filters: Any) -> list[Vote]:
        params = {"select": "*", "order": "voted_at.asc"}
        params.update({field: _eq(value) for field, value in filters.items()})
        rows = await self._request("GET", "/votes", params=params)
        return self._parse(Vote, rows)

    async def update_vote(self, vote_id: str, patch: dict[str, Any]) -> Vote | None:
        return await self._patch(Vote, RecordType.VOTES, vote_id, patch)

    # Generic

    async def delete_record(self, record_type: RecordType, key: str) -> bool:
        rows = await self._request(
            "DELETE",
            f"/{record_type.value}",
            params={record_type.key_field: _eq(key)},
            prefer=_RETURN_REPRESENTATION,
        )
        return bool(rows)

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json_body: dict[str, Any] | None = None,
        prefer: str | None = None,
    ) -> list[dict[str, Any]]:
        """Issue one request and return the decoded row list."""
        headers = {"Prefer": prefer} if prefer else None
        try:
            response = await self._client.request(method, path, params=params, json=json_body, headers=headers)
            response.raise_for_status()
            if not response.content:
                return []
            body = response.json()
        except httpx.TimeoutException as exc:
            logger.warning("Gateway timeout on {} {}", method, path)
            raise GatewayError(self.backend_name, f"Request to {path} timed out") from exc
        except httpx.HTTPStatusError as exc:
            raise self._status_error(method, path, exc.response) from exc
        except httpx.RequestError as exc:
            logger.warning("Gateway connection error on {} {}: {}", method, path, exc)
            raise GatewayError(self.backend_name, f"Connection to record store failed: {exc}") from exc
        except json.JSONDecodeError as exc:
            logger.error("Gateway returned non-JSON response for {} {}", method, path)
            raise GatewayError(self.backend_name, f"Invalid JSON response for {path}") from exc

        if isinstance(body, dict):
            return [body]
        if not isinstance(body, list):
            raise GatewayError(self.backend_name, f"Unexpected response shape for {path}")
        return body

    async def _patch(
        self,
        model: type[ModelT],
        record_type: RecordType,
        key: str,
        patch: dict[str, Any],
    ) -> ModelT | None:
        """PATCH the named columns of one row and return the stored row."""
        rows = await self._request(
            "PATCH",
            f"/{record_type.value}",
            params={record_type.key_field: _eq(key)},
            json_body=_PATCH_ADAPTER.dump_python(patch, mode="json"),
            prefer=_RETURN_REPRESENTATION,
        )
        updated = self._parse(model, rows)
        return updated[0] if updated else None

    def _status_error(self, method: str, path: str, response: httpx.Response) -> GatewayError:
        """Map a non-2xx response onto the gateway error types."""
        code = None
        detail = response.reason_phrase
        try:
            payload = response.json()
        except json.JSONDecodeError:
            payload = None
        if isinstance(payload, dict):
            code = payload.get("code")
            detail = payload.get("message") or detail

        if response.status_code == 409 or code == UNIQUE_VIOLATION:
            logger.info("Gateway uniqueness violation on {} {}: {}", method, path, detail)
            return GatewayConflictError(
                self.backend_name,
                f"Uniqueness constraint violated: {detail}",
                status_code=response.status_code,
            )

        logger.error("Gateway HTTP {} on {} {}: {}", response.status_code, method, path, detail)
        return GatewayError(
            self.backend_name,
            f"HTTP {response.status_code}: {detail}",
            status_code=response.status_code,
        )

    def _parse(self, model: type[ModelT], rows: list[dict[str, Any]]) -> list[ModelT]:
        """Validate raw rows into record models."""
        try:
            return [model.model_validate(row) for row in rows]
        except PydanticValidationError as exc:
            logger.error("Malformed {} row from gateway: {}", model.__name__, exc)
            raise GatewayError(self.backend_name, f"Malformed {model.__name__} record") from exc

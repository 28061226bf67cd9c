"""Unit tests for the PostgREST gateway backend."""

import json
from datetime import UTC, datetime

import httpx
import pytest

from evote_api.lib.gateway import GatewayConflictError, GatewayError, PostgrestGateway, RecordType
from evote_api.models import Category, Vote, Voter

BASE = "https://xyz.supabase.co/rest/v1"


def _gateway(handler) -> PostgrestGateway:
    return PostgrestGateway(BASE, "service-key", transport=httpx.MockTransport(handler))


class TestRequestShape:
    """Tests for URLs, filters and headers sent to PostgREST."""

    async def test_find_voter_filters_by_dni(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[{"dni": "12345678", "full_name": "Ana Diaz", "has_voted": None}])

        gw = _gateway(handler)
        voter = await gw.find_voter("12345678")

        assert voter is not None
        assert voter.full_name == "Ana Diaz"
        assert voter.has_voted is False
        request = seen[0]
        assert request.method == "GET"
        assert request.url.path == "/rest/v1/voters"
        assert request.url.params["dni"] == "eq.12345678"
        assert request.headers["apikey"] == "service-key"
        assert request.headers["authorization"] == "Bearer service-key"
        await gw.aclose()

    async def test_find_voter_absent_returns_none(self) -> None:
        gw = _gateway(lambda request: httpx.Response(200, json=[]))
        assert await gw.find_voter("00000000") is None
        await gw.aclose()

    async def test_list_votes_filters_and_orders(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json=[
                    {
                        "id": 7,
                        "voter_dni": "12345678",
                        "candidate_id": 3,
                        "category": "presidencial",
                        "voted_at": "2026-04-12T10:00:00",
                    }
                ],
            )

        gw = _gateway(handler)
        votes = await gw.list_votes(voter_dni="12345678")

        assert votes[0].id == "7"
        assert votes[0].candidate_id == "3"
        assert votes[0].voted_at is not None and votes[0].voted_at.tzinfo is not None
        params = seen[0].url.params
        assert params["voter_dni"] == "eq.12345678"
        assert params["order"] == "voted_at.asc"
        await gw.aclose()

    async def test_list_candidates_by_category(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[{"id": "1", "name": "A", "category": "regional", "vote_count": None}])

        gw = _gateway(handler)
        candidates = await gw.list_candidates(Category.REGIONAL)

        assert candidates[0].category is Category.REGIONAL
        assert candidates[0].vote_count == 0
        assert seen[0].url.params["category"] == "eq.regional"
        assert seen[0].url.params["order"] == "vote_count.desc"
        await gw.aclose()

    async def test_upsert_voter_merges_on_dni(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(201, json=[json.loads(request.content)])

        gw = _gateway(handler)
        saved = await gw.upsert_voter(Voter(dni="12345678", full_name="Ana Diaz", has_voted=True))

        request = seen[0]
        assert request.method == "POST"
        assert request.url.params["on_conflict"] == "dni"
        assert "resolution=merge-duplicates" in request.headers["prefer"]
        body = json.loads(request.content)
        assert body["dni"] == "12345678"
        assert body["has_voted"] is True
        assert "voted_at" not in body
        assert saved.full_name == "Ana Diaz"
        await gw.aclose()

    async def test_update_vote_sends_null_patch(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json=[{"id": "v1", "voter_dni": "12345678", "candidate_id": None, "category": "distrital"}],
            )

        gw = _gateway(handler)
        updated = await gw.update_vote("v1", {"candidate_id": None})

        assert updated is not None and updated.candidate_id is None
        assert seen[0].method == "PATCH"
        assert seen[0].url.params["id"] == "eq.v1"
        assert json.loads(seen[0].content) == {"candidate_id": None}
        await gw.aclose()

    async def test_update_voter_patches_named_columns(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[{"dni": "12345678", "full_name": "Ana Diaz", "has_voted": True}])

        gw = _gateway(handler)
        updated = await gw.update_voter(
            "12345678",
            {"has_voted": True, "voted_at": datetime(2026, 4, 12, 10, 30, tzinfo=UTC)},
        )

        assert updated is not None and updated.has_voted is True
        request = seen[0]
        assert request.method == "PATCH"
        assert request.url.path == "/rest/v1/voters"
        assert request.url.params["dni"] == "eq.12345678"
        assert json.loads(request.content) == {"has_voted": True, "voted_at": "2026-04-12T10:30:00Z"}
        await gw.aclose()

    async def test_update_candidate_missing_row_returns_none(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[])

        gw = _gateway(handler)
        assert await gw.update_candidate("c9", {"name": "Luis Vega"}) is None
        assert seen[0].url.path == "/rest/v1/candidates"
        assert seen[0].url.params["id"] == "eq.c9"
        await gw.aclose()

    async def test_delete_voter_uses_dni_key(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=[{"dni": "1234"}])

        gw = _gateway(handler)
        assert await gw.delete_record(RecordType.VOTERS, "1234")
        assert seen[0].method == "DELETE"
        assert seen[0].url.params["dni"] == "eq.1234"
        await gw.aclose()

    async def test_delete_missing_row_returns_false(self) -> None:
        gw = _gateway(lambda request: httpx.Response(200, json=[]))
        assert not await gw.delete_record(RecordType.VOTES, "missing")
        await gw.aclose()


class TestErrorMapping:
    """Tests for translating store failures into gateway errors."""

    async def test_unique_violation_409(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(409, json={"code": "23505", "message": "duplicate key value"})

        gw = _gateway(handler)
        with pytest.raises(GatewayConflictError) as exc_info:
            await gw.insert_vote(Vote(voter_dni="12345678", candidate_id="1", category="presidencial"))
        assert exc_info.value.upstream_status == 409
        await gw.aclose()

    async def test_unique_violation_code_without_409(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(400, json={"code": "23505", "message": "duplicate key value"})

        gw = _gateway(handler)
        with pytest.raises(GatewayConflictError):
            await gw.insert_vote(Vote(voter_dni="12345678", candidate_id="1", category="presidencial"))
        await gw.aclose()

    async def test_server_error(self) -> None:
        gw = _gateway(lambda request: httpx.Response(503, json={"message": "unavailable"}))
        with pytest.raises(GatewayError) as exc_info:
            await gw.list_voters()
        assert not isinstance(exc_info.value, GatewayConflictError)
        assert exc_info.value.upstream_status == 503
        await gw.aclose()

    async def test_timeout(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        gw = _gateway(handler)
        with pytest.raises(GatewayError, match="timed out"):
            await gw.list_votes()
        await gw.aclose()

    async def test_connection_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        gw = _gateway(handler)
        with pytest.raises(GatewayError, match="Connection"):
            await gw.list_candidates()
        await gw.aclose()

    async def test_non_json_body(self) -> None:
        gw = _gateway(lambda request: httpx.Response(200, content=b"<html>oops</html>"))
        with pytest.raises(GatewayError, match="Invalid JSON"):
            await gw.list_voters()
        await gw.aclose()

    async def test_malformed_row(self) -> None:
        gw = _gateway(lambda request: httpx.Response(200, json=[{"dni": "1", "has_voted": "maybe"}]))
        with pytest.raises(GatewayError, match="Malformed Voter"):
            await gw.list_voters()
        await gw.aclose()

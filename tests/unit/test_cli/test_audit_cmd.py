"""Tests for the `evote-api audit` CLI commands.

The record store is replaced with the seeded in-memory gateway; these tests
verify command wiring and output, not the audit algorithms.
"""

from datetime import UTC, datetime
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from evote_api.cli.app import app
from evote_api.lib.gateway import InMemoryGateway
from evote_api.models import Vote

runner = CliRunner()

TEST_SECRET = "test-secret-key-that-is-at-least-32-characters-long"


@pytest.fixture(autouse=True)
def _env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("JWT_SECRET_KEY", TEST_SECRET)
    monkeypatch.setenv("GATEWAY_BACKEND", "memory")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")


@pytest.fixture
def seeded(gateway: InMemoryGateway):
    """Route the CLI to the shared in-memory gateway."""
    gateway.seed(
        votes=[
            Vote(
                id="a",
                voter_dni="12345678",
                category="presidencial",
                candidate_id="p1",
                voted_at=datetime(2026, 4, 12, 15, tzinfo=UTC),
            ),
            Vote(
                id="b",
                voter_dni="12345678",
                category="presidencial",
                candidate_id="p2",
                voted_at=datetime(2026, 4, 13, 15, tzinfo=UTC),
            ),
            Vote(id="c", voter_dni="999", category="regional", candidate_id="r1"),
        ]
    )
    with patch("evote_api.lib.gateway.create_gateway", return_value=gateway):
        yield gateway


class TestAuditCommands:
    """Tests for each audit subcommand."""

    def test_duplicates_default_policy(self, seeded: InMemoryGateway) -> None:
        result = runner.invoke(app, ["audit", "duplicates", "--yes"])
        assert result.exit_code == 0
        assert "Deleted 1 duplicate vote(s) (kept newest)" in result.output

    def test_duplicates_keep_oldest(self, seeded: InMemoryGateway) -> None:
        result = runner.invoke(app, ["audit", "duplicates", "--keep", "oldest", "-y"])
        assert result.exit_code == 0
        assert "(kept oldest)" in result.output

    def test_duplicates_bad_policy(self, seeded: InMemoryGateway) -> None:
        result = runner.invoke(app, ["audit", "duplicates", "--keep", "random"])
        assert result.exit_code == 1

    def test_repair_asks_for_confirmation(self, seeded: InMemoryGateway) -> None:
        result = runner.invoke(app, ["audit", "duplicates"], input="n\n")
        assert result.exit_code == 1
        assert "not serialized against audits running in the API" in result.output
        assert "Aborted" in result.output
        assert "Deleted" not in result.output

    def test_repair_confirmed_interactively(self, seeded: InMemoryGateway) -> None:
        result = runner.invoke(app, ["audit", "duplicates"], input="y\n")
        assert result.exit_code == 0
        assert "Deleted 1 duplicate vote(s)" in result.output

    def test_help_mentions_serialization(self) -> None:
        result = runner.invoke(app, ["audit", "duplicates", "--help"])
        assert result.exit_code == 0
        assert "Not serialized" in result.output

    def test_validate_dnis(self, seeded: InMemoryGateway) -> None:
        result = runner.invoke(app, ["audit", "validate-dnis"])
        assert result.exit_code == 0
        assert "Found 1 invalid DNI(s)" in result.output
        assert "999 (en votos)" in result.output

    def test_null_values(self, seeded: InMemoryGateway) -> None:
        result = runner.invoke(app, ["audit", "null-values", "--yes"])
        assert result.exit_code == 0
        assert "Deleted 0 record(s)" in result.output

    def test_normalize(self, seeded: InMemoryGateway) -> None:
        result = runner.invoke(app, ["audit", "normalize", "--yes"])
        assert result.exit_code == 0
        assert "Normalized 0 record(s)" in result.output

    def test_trends(self, seeded: InMemoryGateway) -> None:
        result = runner.invoke(app, ["audit", "trends"])
        assert result.exit_code == 0
        assert "2026-04-12" in result.output

    def test_anomalies(self, seeded: InMemoryGateway) -> None:
        result = runner.invoke(app, ["audit", "anomalies"])
        assert result.exit_code == 0
        assert "[low] duplicate: 1" in result.output

    def test_participation(self, seeded: InMemoryGateway) -> None:
        result = runner.invoke(app, ["audit", "participation"])
        assert result.exit_code == 0
        assert "Lima: 100.0% (1/1)" in result.output

    def test_store_failure_exits_1(self, gateway: InMemoryGateway) -> None:
        from evote_api.lib.gateway import GatewayError

        async def _fail() -> list:
            raise GatewayError("postgrest", "HTTP 503: unavailable", status_code=503)

        gateway.list_votes = lambda **_: _fail()
        with patch("evote_api.lib.gateway.create_gateway", return_value=gateway):
            result = runner.invoke(app, ["audit", "duplicates", "--yes"])
        assert result.exit_code == 1
        assert "HTTP 503" in result.output

"""Shared test fixtures: settings, a seeded in-memory gateway, and sample records."""

from datetime import UTC, datetime

import pytest

from evote_api.core.config import Settings
from evote_api.lib.gateway import InMemoryGateway
from evote_api.models import Candidate, Voter

TEST_SECRET = "test-secret-key-that-is-at-least-32-characters-long"
ADMIN_EMAIL = "admin@elecciones.pe"
ADMIN_PASSWORD = "admin-password"
SUPERADMIN_EMAIL = "superadmin@elecciones.pe"
SUPERADMIN_PASSWORD = "superadmin-password"


@pytest.fixture
def settings() -> Settings:
    """Test application settings backed by the in-memory gateway."""
    return Settings(
        _env_file=None,
        gateway_backend="memory",
        jwt_secret_key=TEST_SECRET,
        admin_email=ADMIN_EMAIL,
        admin_password=ADMIN_PASSWORD,
        superadmin_email=SUPERADMIN_EMAIL,
        superadmin_password=SUPERADMIN_PASSWORD,
    )


def _voter(dni: str = "12345678", **overrides) -> Voter:
    """Build a complete voter record."""
    fields = {
        "dni": dni,
        "full_name": "Juan Perez Garcia",
        "address": "Av. Arequipa 123",
        "district": "Miraflores",
        "province": "Lima",
        "department": "Lima",
        "has_voted": False,
        "created_at": datetime(2026, 4, 1, tzinfo=UTC),
    }
    fields.update(overrides)
    return Voter(**fields)


def _candidate(candidate_id: str, category: str, **overrides) -> Candidate:
    """Build a complete candidate record."""
    fields = {
        "id": candidate_id,
        "name": f"Candidato {candidate_id.upper()}",
        "photo_url": f"https://example.com/{candidate_id}.jpg",
        "description": "Propuesta de gobierno",
        "party_name": "Partido Ejemplo",
        "category": category,
        "vote_count": 0,
    }
    fields.update(overrides)
    return Candidate(**fields)


@pytest.fixture
def gateway() -> InMemoryGateway:
    """In-memory gateway seeded with one voter and one candidate per category."""
    gw = InMemoryGateway()
    gw.seed(
        voters=[_voter("12345678"), _voter("87654321", full_name="Maria Lopez", department="Cusco")],
        candidates=[
            _candidate("p1", "presidencial"),
            _candidate("p2", "presidencial"),
            _candidate("d1", "distrital"),
            _candidate("r1", "regional"),
        ],
    )
    return gw


@pytest.fixture
def make_voter():
    """Factory for complete voter records."""
    return _voter


@pytest.fixture
def make_candidate():
    """Factory for complete candidate records."""
    return _candidate

"""Unit tests for session token issuance and the token registry."""

import threading
from datetime import UTC, datetime, timedelta

import jwt
import pytest

from evote_api.core.security import (
    InMemoryTokenStore,
    create_session_token,
    credentials_match,
)

SECRET = "test-secret-key-that-is-at-least-32-characters-long"


class FakeClock:
    """Settable clock for TTL tests."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, delta: timedelta) -> None:
        self.now += delta


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2026, 4, 12, 9, 0, tzinfo=UTC))


class TestCredentialsMatch:
    """Tests for constant-time credential comparison."""

    def test_matching_pair(self) -> None:
        assert credentials_match("a@b.pe", "secret", "a@b.pe", "secret")

    def test_wrong_password(self) -> None:
        assert not credentials_match("a@b.pe", "wrong", "a@b.pe", "secret")

    def test_wrong_email(self) -> None:
        assert not credentials_match("x@b.pe", "secret", "a@b.pe", "secret")

    def test_empty_configured_password_never_matches(self) -> None:
        """An unset password disables the tier even for an empty submission."""
        assert not credentials_match("a@b.pe", "", "a@b.pe", "")


class TestCreateSessionToken:
    """Tests for HS256 token issuance."""

    def test_token_has_three_segments(self) -> None:
        token = create_session_token("a@b.pe", datetime.now(UTC) + timedelta(hours=1), SECRET)
        assert token.count(".") == 2

    def test_header_and_claims(self) -> None:
        expires = datetime.now(UTC) + timedelta(hours=24)
        token = create_session_token("a@b.pe", expires, SECRET, role="superadmin")

        header = jwt.get_unverified_header(token)
        assert header["alg"] == "HS256"
        assert header["typ"] == "JWT"

        payload = jwt.decode(token, SECRET, algorithms=["HS256"])
        assert payload["email"] == "a@b.pe"
        assert payload["role"] == "superadmin"
        assert payload["exp"] == int(expires.timestamp())

    def test_role_omitted_by_default(self) -> None:
        token = create_session_token("a@b.pe", datetime.now(UTC) + timedelta(hours=1), SECRET)
        payload = jwt.decode(token, SECRET, algorithms=["HS256"])
        assert "role" not in payload

    def test_signature_uses_secret(self) -> None:
        token = create_session_token("a@b.pe", datetime.now(UTC) + timedelta(hours=1), SECRET)
        with pytest.raises(jwt.InvalidSignatureError):
            jwt.decode(token, "another-secret-key-that-is-also-long-enough", algorithms=["HS256"])

    def test_tokens_issued_together_are_distinct(self) -> None:
        expires = datetime.now(UTC) + timedelta(hours=1)
        assert create_session_token("a@b.pe", expires, SECRET) != create_session_token("a@b.pe", expires, SECRET)


class TestInMemoryTokenStore:
    """Tests for the token registry's TTL semantics."""

    def test_registered_token_is_valid(self, clock: FakeClock) -> None:
        store = InMemoryTokenStore(clock=clock)
        store.put("tok", clock.now + timedelta(hours=24))
        assert store.validate("tok")

    def test_unknown_token_is_invalid(self, clock: FakeClock) -> None:
        store = InMemoryTokenStore(clock=clock)
        assert not store.validate("never-issued")
        assert not store.validate("")

    def test_valid_until_expiry_instant(self, clock: FakeClock) -> None:
        store = InMemoryTokenStore(clock=clock)
        store.put("tok", clock.now + timedelta(hours=24))
        clock.advance(timedelta(hours=24))
        assert store.validate("tok")

    def test_expired_token_is_evicted_on_lookup(self, clock: FakeClock) -> None:
        store = InMemoryTokenStore(clock=clock)
        store.put("tok", clock.now + timedelta(hours=24))
        clock.advance(timedelta(hours=24, seconds=1))

        assert not store.validate("tok")
        assert len(store) == 0

    def test_revoke(self, clock: FakeClock) -> None:
        store = InMemoryTokenStore(clock=clock)
        store.put("tok", clock.now + timedelta(hours=1))
        assert store.revoke("tok")
        assert not store.validate("tok")
        assert not store.revoke("tok")

    def test_purge_expired(self, clock: FakeClock) -> None:
        store = InMemoryTokenStore(clock=clock)
        store.put("short", clock.now + timedelta(minutes=5))
        store.put("long", clock.now + timedelta(hours=5))
        clock.advance(timedelta(hours=1))

        assert store.purge_expired() == 1
        assert len(store) == 1
        assert store.validate("long")

    def test_concurrent_puts(self, clock: FakeClock) -> None:
        store = InMemoryTokenStore(clock=clock)
        expires = clock.now + timedelta(hours=1)

        def worker(prefix: str) -> None:
            for i in range(200):
                store.put(f"{prefix}-{i}", expires)

        threads = [threading.Thread(target=worker, args=(str(n),)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(store) == 1600

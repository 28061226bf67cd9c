"""Session token issuance and the active-token registry.

Token issuance is pure: a signed HS256 token built with PyJWT. Session
validity is decided by registry membership only, so storage lives behind
the ``TokenStore`` protocol and can be swapped for an external TTL cache.
"""

import hmac
import threading
import uuid
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Protocol

import jwt

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Return the current UTC time."""
    return datetime.now(UTC)


def credentials_match(email: str, password: str, expected_email: str, expected_password: str) -> bool:
    """Compare a credential pair against the configured one in constant time.

    An empty configured password never matches, which disables the tier.

    Args:
        email: Submitted email.
        password: Submitted password.
        expected_email: Configured email.
        expected_password: Configured password.

    Returns:
        True if both values match.
    """
    if not expected_password:
        return False
    email_ok = hmac.compare_digest(email.encode("utf-8"), expected_email.encode("utf-8"))
    password_ok = hmac.compare_digest(password.encode("utf-8"), expected_password.encode("utf-8"))
    return email_ok and password_ok


def create_session_token(
    email: str,
    expires_at: datetime,
    secret_key: str,
    role: str | None = None,
) -> str:
    """Create a signed session token.

    The token is three base64url segments (header, payload, HMAC-SHA256
    signature). A random ``jti`` keeps two tokens issued in the same second
    distinct in the registry.

    Args:
        email: Authenticated email, stored in the payload.
        expires_at: Expiry instant, stored as the ``exp`` claim.
        secret_key: HMAC signing secret.
        role: Optional role tag (e.g. "superadmin").

    Returns:
        The encoded token string.
    """
    payload: dict[str, object] = {
        "email": email,
        "exp": expires_at,
        "jti": uuid.uuid4().hex,
    }
    if role is not None:
        payload["role"] = role
    return jwt.encode(payload, secret_key, algorithm="HS256", headers={"typ": "JWT"})


class TokenStore(Protocol):
    """Registry of issued tokens and their expiry instants."""

    def put(self, token: str, expires_at: datetime) -> None:
        """Register an issued token."""
        ...

    def validate(self, token: str) -> bool:
        """Return True if the token is registered and not expired."""
        ...

    def revoke(self, token: str) -> bool:
        """Evict a token. Returns True if it was registered."""
        ...

    def purge_expired(self) -> int:
        """Evict all expired tokens. Returns the number evicted."""
        ...


class InMemoryTokenStore:
    """Thread-safe process-local token registry.

    Expired entries are evicted lazily on lookup, or in bulk by
    ``purge_expired``. Tokens do not survive a restart and are not
    visible to other processes.

    Args:
        clock: Callable returning the current UTC time.
    """

    def __init__(self, clock: Clock = utc_now) -> None:
        self._clock = clock
        self._tokens: dict[str, datetime] = {}
        self._lock = threading.Lock()

    def put(self, token: str, expires_at: datetime) -> None:
        with self._lock:
            self._tokens[token] = expires_at

    def validate(self, token: str) -> bool:
        if not token:
            return False
        with self._lock:
            expires_at = self._tokens.get(token)
            if expires_at is None:
                return False
            if self._clock() > expires_at:
                del self._tokens[token]
                return False
            return True

    def revoke(self, token: str) -> bool:
        with self._lock:
            return self._tokens.pop(token, None) is not None

    def purge_expired(self) -> int:
        now = self._clock()
        with self._lock:
            expired = [token for token, expires_at in self._tokens.items() if now > expires_at]
            for token in expired:
                del self._tokens[token]
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._tokens)

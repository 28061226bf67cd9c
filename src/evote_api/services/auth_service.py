"""Administrator session authentication.

Each privilege tier (admin, superadmin) has one configured credential pair
and its own token registry, so a token issued for one tier is never valid
for the other.
"""

from datetime import timedelta

from evote_api.core.config import Settings
from evote_api.core.logging import audit_logger
from evote_api.core.security import (
    Clock,
    InMemoryTokenStore,
    TokenStore,
    create_session_token,
    credentials_match,
    utc_now,
)

TIER_ADMIN = "admin"
TIER_SUPERADMIN = "superadmin"


class SessionAuthenticator:
    """Issues and checks session tokens for one privilege tier.

    Args:
        tier: Tier name, used in logs.
        email: Configured login email.
        password: Configured login password; empty disables the tier.
        secret_key: HMAC signing secret.
        store: Token registry.
        ttl: Token lifetime.
        role: Optional role claim embedded in issued tokens.
        clock: Callable returning the current UTC time.
    """

    def __init__(
        self,
        tier: str,
        email: str,
        password: str,
        secret_key: str,
        store: TokenStore,
        ttl: timedelta = timedelta(hours=24),
        role: str | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self.tier = tier
        self._email = email
        self._password = password
        self._secret_key = secret_key
        self._store = store
        self._ttl = ttl
        self._role = role
        self._clock = clock

    def authenticate(self, email: str, password: str) -> str | None:
        """Issue a token if the credentials match the configured pair.

        Returns:
            The session token, or None on mismatch.
        """
        if not credentials_match(email, password, self._email, self._password):
            audit_logger("auth.login_rejected", tier=self.tier).warning("Rejected {} login attempt", self.tier)
            return None
        expires_at = self._clock() + self._ttl
        token = create_session_token(email, expires_at, self._secret_key, role=self._role)
        self._store.put(token, expires_at)
        audit_logger("auth.login", tier=self.tier).info(
            "Issued {} session token, expires {}", self.tier, expires_at.isoformat()
        )
        return token

    def validate(self, token: str | None) -> bool:
        """Whether the token was issued by this tier and has not expired.

        Validity is registry membership; the signature is not re-checked.
        """
        if not token:
            return False
        return self._store.validate(token)

    def revoke(self, token: str) -> bool:
        """End a session. Returns True if the token was active."""
        revoked = self._store.revoke(token)
        if revoked:
            audit_logger("auth.logout", tier=self.tier).info("Revoked {} session token", self.tier)
        return revoked

    def purge_expired(self) -> int:
        """Drop all expired tokens from the registry."""
        return self._store.purge_expired()


def build_authenticators(settings: Settings, clock: Clock = utc_now) -> dict[str, SessionAuthenticator]:
    """Create the admin and superadmin authenticators from settings.

    Args:
        settings: Application settings.
        clock: Callable returning the current UTC time.

    Returns:
        Mapping of tier name to authenticator.
    """
    ttl = timedelta(hours=settings.session_ttl_hours)
    return {
        TIER_ADMIN: SessionAuthenticator(
            TIER_ADMIN,
            settings.admin_email,
            settings.admin_password,
            settings.jwt_secret_key,
            InMemoryTokenStore(clock=clock),
            ttl=ttl,
            clock=clock,
        ),
        TIER_SUPERADMIN: SessionAuthenticator(
            TIER_SUPERADMIN,
            settings.superadmin_email,
            settings.superadmin_password,
            settings.jwt_secret_key,
            InMemoryTokenStore(clock=clock),
            ttl=ttl,
            role=TIER_SUPERADMIN,
            clock=clock,
        ),
    }

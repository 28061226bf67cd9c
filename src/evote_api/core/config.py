"""Application configuration via Pydantic Settings.

All configuration is loaded from environment variables following 12-factor principles.
"""

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Persistence gateway
    gateway_backend: str = Field(
        default="postgrest",
        description="Record store backend: 'postgrest' (Supabase REST) or 'memory' (process-local)",
    )
    supabase_url: str = Field(
        default="",
        description="Supabase project URL; the REST API is served under /rest/v1",
    )
    supabase_service_key: str = Field(
        default="",
        description="Supabase service-role key used for all gateway calls",
    )
    gateway_timeout: float = Field(
        default=10.0,
        description="Per-request timeout for gateway calls in seconds",
        gt=0,
    )

    @field_validator("gateway_backend")
    @classmethod
    def validate_gateway_backend(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in ("postgrest", "memory"):
            msg = "gateway_backend must be 'postgrest' or 'memory'"
            raise ValueError(msg)
        return v

    @field_validator("supabase_url")
    @classmethod
    def strip_supabase_url(cls, v: str) -> str:
        return v.strip().rstrip("/")

    # Identity registry
    identity_api_url: str = Field(
        default="https://api.factiliza.com/v1/dni/info",
        description="Base URL of the national identity lookup endpoint (DNI is appended)",
    )
    identity_api_key: str | None = Field(
        default=None,
        description="Bearer key for the identity lookup API",
    )
    identity_timeout: float = Field(
        default=10.0,
        description="Identity lookup request timeout in seconds",
        gt=0,
    )

    # Session tokens
    jwt_secret_key: str = Field(
        min_length=32,
        description="Secret key for signing session tokens (minimum 32 characters)",
    )
    session_ttl_hours: int = Field(
        default=24,
        description="Session token lifetime in hours",
        gt=0,
    )

    # Administrator credentials
    admin_email: str = Field(default="admin@elecciones.pe", description="Administrator login email")
    admin_password: str = Field(default="", description="Administrator login password (empty disables the tier)")
    superadmin_email: str = Field(default="superadmin@elecciones.pe", description="Super-administrator login email")
    superadmin_password: str = Field(
        default="",
        description="Super-administrator login password (empty disables the tier)",
    )

    # Integrity auditing
    duplicate_keep_policy: str = Field(
        default="newest",
        description="Which vote survives duplicate resolution per (voter, category): 'newest' or 'oldest'",
    )
    election_timezone: str = Field(
        default="America/Lima",
        description="IANA timezone used for the working-hours anomaly window",
    )

    @field_validator("duplicate_keep_policy")
    @classmethod
    def validate_duplicate_keep_policy(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in ("newest", "oldest"):
            msg = "duplicate_keep_policy must be 'newest' or 'oldest'"
            raise ValueError(msg)
        return v

    @field_validator("election_timezone")
    @classmethod
    def validate_election_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            msg = f"Unknown election_timezone: {v}"
            raise ValueError(msg) from exc
        return v

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_dir: str | None = Field(
        default=None,
        description="Directory for log files (enables file logging with 24h rotation when set)",
    )
    log_json: bool = Field(
        default=False,
        description="Emit stderr logs as JSON lines instead of human-readable text",
    )

    # CORS
    cors_origins: str = Field(
        default="",
        description="Comma-separated list of allowed CORS origins (must be explicitly configured)",
    )

    # Rate limiting
    rate_limit_per_minute: int = Field(
        default=120,
        description="Maximum requests per minute per client IP",
        gt=0,
    )
    trusted_proxies: str = Field(
        default="",
        description="Comma-separated reverse proxy addresses whose X-Forwarded-For is trusted (empty trusts none)",
    )

    # Environment
    environment: str = Field(
        default="production",
        description="Deployment environment name (e.g. production, dev, staging)",
    )

    # API
    api_prefix: str = Field(
        default="/api",
        description="API route prefix",
    )

    @property
    def gateway_rest_url(self) -> str:
        """PostgREST base URL derived from the Supabase project URL."""
        return f"{self.supabase_url}/rest/v1"

    @property
    def election_tzinfo(self) -> ZoneInfo:
        """Timezone object for ``election_timezone``."""
        return ZoneInfo(self.election_timezone)

    @property
    def cors_origin_list(self) -> list[str]:
        """Parse CORS origins string into a list."""
        if not self.cors_origins.strip():
            return []
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def trusted_proxy_list(self) -> list[str]:
        """Parse trusted proxy addresses into a list."""
        return [proxy.strip() for proxy in self.trusted_proxies.split(",") if proxy.strip()]


def get_settings() -> Settings:
    """Create and return application settings."""
    return Settings()  # type: ignore[call-arg]

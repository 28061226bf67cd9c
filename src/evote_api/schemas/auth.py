"""Administrator login and session schemas."""

from pydantic import Field

from evote_api.schemas.common import CamelModel


class LoginRequest(CamelModel):
    """Login request with email and password."""

    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class LoginResponse(CamelModel):
    """Issued session token."""

    success: bool = True
    token: str
    message: str | None = None


class VerifyResponse(CamelModel):
    """Session token check result."""

    success: bool = True
    valid: bool = True
    message: str | None = None

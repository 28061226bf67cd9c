"""Error taxonomy shared by every component.

Each error carries the HTTP status it maps to and a machine-readable kind.
Controllers only ever see these types; gateway and identity failures are
subclasses of ``UpstreamError``.
"""


class EvoteError(Exception):
    """Base class for all translated component failures.

    Args:
        message: Human-readable error description, safe to return to clients.
    """

    status_code: int = 500
    kind: str = "internal"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(EvoteError):
    """Malformed input: wrong-length ID, empty selections, category mismatch."""

    status_code = 400
    kind = "validation"


class NotFoundError(EvoteError):
    """A referenced voter or candidate does not exist."""

    status_code = 404
    kind = "not_found"


class ConflictError(EvoteError):
    """Duplicate vote, concurrent category collision, or an operation already in flight."""

    status_code = 409
    kind = "conflict"


class AuthError(EvoteError):
    """Missing, invalid or expired session token, or bad credentials."""

    status_code = 401
    kind = "auth"


class UpstreamError(EvoteError):
    """An external collaborator timed out, returned non-2xx, or sent garbage."""

    status_code = 500
    kind = "upstream"


class InternalError(EvoteError):
    """Unexpected failure."""

    status_code = 500
    kind = "internal"

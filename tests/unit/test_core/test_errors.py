"""Unit tests for the error taxonomy."""

import pytest

from evote_api.core.errors import (
    AuthError,
    ConflictError,
    EvoteError,
    InternalError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)
from evote_api.lib.gateway import GatewayConflictError, GatewayError
from evote_api.lib.identity import IdentityLookupError


class TestErrorTaxonomy:
    @pytest.mark.parametrize(
        ("error_cls", "status", "kind"),
        [
            (ValidationError, 400, "validation"),
            (NotFoundError, 404, "not_found"),
            (ConflictError, 409, "conflict"),
            (AuthError, 401, "auth"),
            (UpstreamError, 500, "upstream"),
            (InternalError, 500, "internal"),
        ],
    )
    def test_status_and_kind(self, error_cls: type[EvoteError], status: int, kind: str) -> None:
        err = error_cls("message")
        assert err.status_code == status
        assert err.kind == kind
        assert err.message == "message"
        assert isinstance(err, EvoteError)

    def test_gateway_errors_are_upstream(self) -> None:
        err = GatewayConflictError("postgrest", "duplicate", status_code=409)
        assert isinstance(err, GatewayError)
        assert isinstance(err, UpstreamError)
        assert err.backend == "postgrest"
        assert err.upstream_status == 409
        assert err.message == "postgrest: duplicate"

    def test_identity_error_is_upstream(self) -> None:
        err = IdentityLookupError("timed out", status_code=504)
        assert isinstance(err, UpstreamError)
        assert err.upstream_status == 504
        assert err.status_code == 500

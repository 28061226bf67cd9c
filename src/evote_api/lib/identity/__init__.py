"""Identity library: national ID registry lookups with tolerant parsing."""

from evote_api.lib.identity.client import (
    IdentityClient,
    IdentityLookupError,
    IdentityRecord,
    parse_birth_date,
    parse_identity_payload,
)

__all__ = [
    "IdentityClient",
    "IdentityLookupError",
    "IdentityRecord",
    "parse_birth_date",
    "parse_identity_payload",
]

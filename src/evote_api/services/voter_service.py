"""Voter verification and lookup service."""

from loguru import logger

from evote_api.core.errors import NotFoundError, ValidationError
from evote_api.lib.gateway import BaseGateway
from evote_api.lib.identity import IdentityClient, IdentityRecord
from evote_api.lib.integrity import is_valid_dni
from evote_api.models import Voter

UNSPECIFIED_ADDRESS = "No especificada"
UNSPECIFIED_PLACE = "No especificado"


def _require_valid_dni(dni: str) -> None:
    if not is_valid_dni(dni):
        msg = "DNI must be exactly 8 digits"
        raise ValidationError(msg)


def voter_fields_from_identity(record: IdentityRecord) -> dict:
    """Map registry data onto voter demographic fields.

    Missing places get a placeholder so the record passes the null-value
    purge; a missing birth date stays empty.
    """
    return {
        "full_name": record.full_name,
        "address": record.address or UNSPECIFIED_ADDRESS,
        "district": record.district or UNSPECIFIED_PLACE,
        "province": record.province or UNSPECIFIED_PLACE,
        "department": record.department or UNSPECIFIED_PLACE,
        "birth_date": record.birth_date,
    }


async def verify_voter(gateway: BaseGateway, identity_client: IdentityClient, dni: str) -> Voter:
    """Verify a DNI against the identity registry and store the voter.

    A new voter is created with ``has_voted`` false. An existing voter has
    its demographic fields refreshed; voting status is left untouched.

    Args:
        gateway: Persistence gateway.
        identity_client: Identity registry client.
        dni: National ID to verify.

    Returns:
        The stored voter.

    Raises:
        ValidationError: Malformed DNI.
        NotFoundError: The registry does not know the DNI.
        UpstreamError: The registry or the store could not be reached.
    """
    _require_valid_dni(dni)

    identity = await identity_client.lookup(dni)
    if identity is None:
        msg = f"DNI {dni} not found in the identity registry"
        raise NotFoundError(msg)

    fields = voter_fields_from_identity(identity)
    if await gateway.find_voter(dni) is not None:
        refreshed = await gateway.update_voter(dni, {k: v for k, v in fields.items() if v is not None})
        if refreshed is not None:
            logger.info("Refreshed voter {}", dni)
            return refreshed

    logger.info("Registering new voter {}", dni)
    return await gateway.upsert_voter(Voter(dni=dni, has_voted=False, **fields))


async def get_voter(gateway: BaseGateway, dni: str) -> Voter:
    """Fetch a voter by DNI.

    Raises:
        ValidationError: Malformed DNI.
        NotFoundError: No such voter.
    """
    _require_valid_dni(dni)
    voter = await gateway.find_voter(dni)
    if voter is None:
        msg = f"Voter {dni} not found"
        raise NotFoundError(msg)
    return voter


async def list_voters(gateway: BaseGateway, dni: str | None = None) -> list[Voter]:
    """List voters, optionally narrowed to DNIs containing ``dni``."""
    voters = await gateway.list_voters()
    if dni:
        voters = [v for v in voters if dni in v.dni]
    return voters

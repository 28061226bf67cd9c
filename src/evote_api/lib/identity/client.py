"""National identity registry client.

Looks up a DNI against the registry API and parses the response
tolerantly: the payload may be wrapped in ``data``, and each field may
arrive under any of several names depending on the upstream provider.
"""

import json
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

import httpx
from loguru import logger

from evote_api.core.errors import UpstreamError

DEFAULT_TIMEOUT = 10.0

# Candidate keys per field, tried in order; first non-blank value wins.
_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "first_names": (
        "nombres",
        "nombre",
        "nombres_completos",
        "primer_nombre",
        "nombresCompletos",
        "first_name",
        "firstName",
    ),
    "paternal_surname": (
        "apellido_paterno",
        "apellidoPaterno",
        "ap_paterno",
        "primer_apellido",
        "first_last_name",
        "firstLastName",
        "apellido_p",
        "paterno",
    ),
    "maternal_surname": (
        "apellido_materno",
        "apellidoMaterno",
        "ap_materno",
        "segundo_apellido",
        "second_last_name",
        "secondLastName",
        "apellido_m",
        "materno",
    ),
    "full_name": ("nombre_completo", "nombreCompleto", "full_name", "fullName", "nombres_apellidos"),
    "birth_date": ("fecha_nacimiento", "fechaNacimiento", "fecha_de_nacimiento", "fechaNac", "nacimiento"),
    "address": (
        "direccion",
        "direccion_completa",
        "domicilio",
        "direccionCompleta",
        "domicilio_completo",
        "address",
        "residence_address",
        "direccion_actual",
        "domicilio_actual",
    ),
    "district": (
        "distrito",
        "ubigeo_distrito",
        "distrito_nombre",
        "distritoNombre",
        "distrito_descripcion",
        "district",
        "district_name",
        "districtName",
    ),
    "province": (
        "provincia",
        "ubigeo_provincia",
        "provincia_nombre",
        "provinciaNombre",
        "provincia_descripcion",
        "province",
        "province_name",
        "provinceName",
    ),
    "department": (
        "departamento",
        "ubigeo_departamento",
        "departamento_nombre",
        "departamentoNombre",
        "departamento_descripcion",
        "department",
        "department_name",
        "departmentName",
        "region",
    ),
    "photo_url": ("foto", "foto_url", "imagen", "fotoUrl", "foto_dni"),
}


class IdentityLookupError(UpstreamError):
    """Raised when the identity registry cannot be queried.

    Args:
        message: Human-readable error description.
        status_code: Optional HTTP status code from the registry.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.upstream_status = status_code
        super().__init__(f"identity registry: {message}")


@dataclass
class IdentityRecord:
    """Normalized identity data for one DNI."""

    dni: str
    first_names: str | None = None
    paternal_surname: str | None = None
    maternal_surname: str | None = None
    birth_date: date | None = None
    address: str | None = None
    district: str | None = None
    province: str | None = None
    department: str | None = None
    photo_url: str | None = None
    raw_data: dict = field(default_factory=dict)

    @property
    def full_name(self) -> str:
        """Given names followed by both surnames, when present."""
        parts = [self.first_names, self.paternal_surname, self.maternal_surname]
        return " ".join(p for p in parts if p)


def _first_value(data: dict[str, Any], keys: tuple[str, ...]) -> str | None:
    for key in keys:
        value = data.get(key)
        if value is not None and str(value).strip():
            return str(value).strip()
    return None


def parse_birth_date(value: str | None) -> date | None:
    """Parse a birth date in ISO (``yyyy-mm-dd``) or ``dd/mm/yyyy`` form."""
    if not value:
        return None
    for fmt in ("%Y-%m-%d", "%d/%m/%Y"):
        try:
            return datetime.strptime(value[:10], fmt).date()
        except ValueError:
            continue
    logger.warning("Unparseable birth date from identity registry: {!r}", value)
    return None


def parse_identity_payload(dni: str, payload: dict[str, Any]) -> IdentityRecord | None:
    """Map a registry response onto an IdentityRecord.

    Args:
        dni: The DNI that was looked up.
        payload: Decoded JSON body.

    Returns:
        IdentityRecord, or None if the response carries neither a given
        name nor a surname.
    """
    data = payload.get("data") if isinstance(payload.get("data"), dict) else payload
    values = {name: _first_value(data, keys) for name, keys in _FIELD_ALIASES.items()}

    first_names = values["first_names"]
    paternal = values["paternal_surname"]
    maternal = values["maternal_surname"]

    if first_names is None and paternal is None and values["full_name"]:
        parts = values["full_name"].split()
        if len(parts) >= 2:
            first_names, paternal = parts[0], parts[1]
            maternal = parts[2] if len(parts) >= 3 else maternal

    if first_names is None and paternal is None:
        logger.warning("Identity registry returned no name data for DNI lookup")
        return None

    return IdentityRecord(
        dni=dni,
        first_names=first_names,
        paternal_surname=paternal,
        maternal_surname=maternal,
        birth_date=parse_birth_date(values["birth_date"]),
        address=values["address"],
        district=values["district"],
        province=values["province"],
        department=values["department"],
        photo_url=values["photo_url"],
        raw_data=payload,
    )


class IdentityClient:
    """HTTP client for the national identity registry.

    Args:
        base_url: Lookup endpoint; the DNI is appended as a path segment.
        api_key: Optional bearer key.
        timeout: Request timeout in seconds.
        transport: Optional httpx transport (used by tests).
    """

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        headers = {"Accept": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(headers=headers, timeout=timeout, transport=transport)

    async def lookup(self, dni: str) -> IdentityRecord | None:
        """Look up a DNI.

        Args:
            dni: 8-digit national ID.

        Returns:
            IdentityRecord, or None if the registry does not know the DNI.

        Raises:
            IdentityLookupError: On timeout, connection failure, non-2xx
                (other than 404) or a malformed body.
        """
        url = f"{self._base_url}/{dni}"
        try:
            response = await self._client.get(url)
            if response.status_code == 404:
                logger.info("Identity registry has no record for DNI lookup")
                return None
            response.raise_for_status()
            payload = response.json()
        except httpx.TimeoutException as exc:
            logger.warning("Identity registry timeout")
            raise IdentityLookupError("Lookup request timed out") from exc
        except httpx.HTTPStatusError as exc:
            logger.warning("Identity registry HTTP error {}", exc.response.status_code)
            raise IdentityLookupError(
                f"Registry returned HTTP {exc.response.status_code}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.RequestError as exc:
            logger.warning("Identity registry connection error: {}", exc)
            raise IdentityLookupError("Connection to identity registry failed") from exc
        except json.JSONDecodeError as exc:
            logger.error("Identity registry returned non-JSON response")
            raise IdentityLookupError("Invalid JSON response") from exc

        if not isinstance(payload, dict):
            raise IdentityLookupError("Unexpected response shape")
        return parse_identity_payload(dni, payload)

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

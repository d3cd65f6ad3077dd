"""Clients for the case registry (OpenZaak) and the party registry (OpenKlant)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, TypeVar
from urllib.parse import urlsplit

import httpx
from pydantic import BaseModel, ValidationError

from events_handler.core.exceptions import ConfigurationError, DataNotFound, MalformedResponse
from events_handler.features.querying.models import (
    Case,
    CaseStatus,
    CaseType,
    CommonPartyData,
)
from events_handler.features.querying.party import normalize_party
from events_handler.infra.external import BaseHTTPClient, bearer_headers

if TYPE_CHECKING:
    from events_handler.core.settings import CaseRegistrySettings, PartyRegistrySettings

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

STATUSES_PATH = "/zaken/api/v1/statussen"
ROLES_PATH = "/zaken/api/v1/rollen"
PARTY_SEARCH_PATHS = {
    "v1": "/klanten/api/v1/klanten",
    "v2": "/klantinteracties/api/v2/partijen",
}
CONTACT_MOMENT_PATHS = {
    "v1": "/contactmomenten/api/v1/contactmomenten",
    "v2": "/klantinteracties/api/v2/klantcontacten",
}


def parse_model(model: type[M], data: Any, source: str) -> M:
    """Validate upstream JSON against a model, mapping failures to MalformedResponse."""
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise MalformedResponse(
            f"{source} does not match the expected {model.__name__} schema",
            extra={"errors": e.errors(include_url=False, include_input=False)},
        ) from e


def paginated_results(data: Any, source: str) -> list[Any]:
    """Extract ``results`` from a ZGW paginated response (or accept a bare list)."""
    if isinstance(data, list):
        return data
    if isinstance(data, dict) and isinstance(data.get("results"), list):
        return data["results"]
    raise MalformedResponse(f"{source} is not a paginated list")


class CaseRegistryClient(BaseHTTPClient):
    """Read access to cases, statuses, case types and roles."""

    def __init__(
        self,
        base_url: str = "",
        token: str | None = None,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(
            service="openzaak",
            base_url=base_url,
            timeout=timeout,
            headers=bearer_headers(token),
            transport=transport,
        )

    @classmethod
    def from_settings(
        cls,
        settings: CaseRegistrySettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> CaseRegistryClient:
        return cls(
            base_url=str(settings.base_url).rstrip("/") if settings.base_url else "",
            token=settings.token.get_secret_value() if settings.token else None,
            timeout=settings.timeout_seconds,
            transport=transport,
        )

    def _endpoint(self, case_ref: str, path: str) -> str:
        # Without a configured base URL the API lives next to the case itself
        if self.base_url:
            return path
        parts = urlsplit(case_ref)
        return f"{parts.scheme}://{parts.netloc}{path}"

    async def get_case_statuses(self, case_ref: str) -> list[CaseStatus]:
        """Statuses of a case, ordered by occurrence time ascending."""
        data = await self.get_json(self._endpoint(case_ref, STATUSES_PATH), params={"zaak": case_ref})
        statuses = [
            parse_model(CaseStatus, item, "Case status")
            for item in paginated_results(data, "Case statuses")
        ]
        return sorted(statuses, key=lambda status: status.occurred_at)

    async def get_case_type(self, case_type_ref: str) -> CaseType:
        data = await self.get_json(case_type_ref)
        return parse_model(CaseType, data, "Case type")

    async def get_case(self, case_ref: str) -> Case:
        data = await self.get_json(case_ref)
        return parse_model(Case, data, "Case")

    async def get_citizen_ref(self, case_ref: str) -> str:
        """Citizen service number (BSN) of the natural person involved in the case.

        The initiator role wins when several natural persons are linked.

        Raises:
            DataNotFound: No natural person is linked to the case.
        """
        data = await self.get_json(
            self._endpoint(case_ref, ROLES_PATH),
            params={"zaak": case_ref, "betrokkeneType": "natuurlijk_persoon"},
        )
        roles = paginated_results(data, "Case roles")

        candidates: list[tuple[bool, str]] = []
        for role in roles:
            if not isinstance(role, dict):
                raise MalformedResponse("Case role is not an object", instance=case_ref)
            identification = role.get("betrokkeneIdentificatie") or {}
            if not isinstance(identification, dict):
                raise MalformedResponse(
                    "Case role 'betrokkeneIdentificatie' is not an object", instance=case_ref
                )
            citizen_ref = identification.get("inpBsn")
            if citizen_ref:
                is_initiator = (role.get("omschrijvingGeneriek") or "").lower() == "initiator"
                candidates.append((is_initiator, str(citizen_ref)))

        if not candidates:
            raise DataNotFound(
                "No citizen is linked to the case",
                instance=case_ref,
            )
        # Initiators first, otherwise registry order
        candidates.sort(key=lambda candidate: not candidate[0])
        return candidates[0][1]


class PartyRegistryClient(BaseHTTPClient):
    """Citizen contact data and contact-moment registration."""

    def __init__(
        self,
        base_url: str,
        token: str | None = None,
        api_version: str = "v1",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(
            service="openklant",
            base_url=base_url,
            timeout=timeout,
            headers=bearer_headers(token),
            transport=transport,
        )
        if api_version not in PARTY_SEARCH_PATHS:
            msg = f"Unsupported party registry API version: {api_version}"
            raise ValueError(msg)
        self.api_version = api_version

    @classmethod
    def from_settings(
        cls,
        settings: PartyRegistrySettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> PartyRegistryClient:
        return cls(
            base_url=str(settings.base_url).rstrip("/") if settings.base_url else "",
            token=settings.token.get_secret_value() if settings.token else None,
            api_version=settings.api_version,
            timeout=settings.timeout_seconds,
            transport=transport,
        )

    def _require_base_url(self) -> None:
        if not self.base_url:
            raise ConfigurationError("OPENKLANT_BASE_URL")

    async def get_party_data(self, citizen_ref: str) -> CommonPartyData:
        self._require_base_url()
        if self.api_version == "v2":
            params = {
                "partijIdentificator__codeSoortObjectId": "bsn",
                "partijIdentificator__objectId": citizen_ref,
                "expand": "digitaleAdressen",
            }
        else:
            params = {"subjectNatuurlijkPersoon__inpBsn": citizen_ref}

        data = await self.get_json(PARTY_SEARCH_PATHS[self.api_version], params=params)
        return normalize_party(data, citizen_ref)

    async def register_contact_moment(self, body: dict[str, Any]) -> dict[str, Any]:
        """POST a contact moment and return the created resource."""
        self._require_base_url()
        data = await self.post_json(CONTACT_MOMENT_PATHS[self.api_version], json=body)
        if not isinstance(data, dict):
            raise MalformedResponse("Contact moment response is not an object")
        return data

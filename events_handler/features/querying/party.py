"""Normalization of party registry responses into CommonPartyData.

Two upstream generations are understood:

- v1 ``klanten``: flat records with ``voornaam``, ``achternaam``,
  ``emailadres`` and ``telefoonnummer``.
- v2 ``partijen``: ``partijIdentificatie.contactnaam`` for the name and
  expanded ``digitaleAdressen`` for contact details, with an optional
  ``voorkeursDigitaalAdres`` pointing at the preferred one.
"""

from __future__ import annotations

from typing import Any

from events_handler.core.exceptions import DataNotFound, MalformedResponse
from events_handler.features.querying.models import CommonPartyData, DistributionChannel

_EMAIL_KINDS = {"email"}
_PHONE_KINDS = {"telefoonnummer", "telefoon", "sms"}


def normalize_party(payload: Any, citizen_ref: str) -> CommonPartyData:
    """Pick the party out of a registry search response and normalize it.

    Args:
        payload: Decoded JSON (a paginated ``{"count", "results"}`` object,
            a bare list or a single record).
        citizen_ref: Citizen reference the search was made for (diagnostics).

    Raises:
        DataNotFound: The search returned no party.
        MalformedResponse: The record has neither known shape.
    """
    results = _results(payload)
    if not results:
        raise DataNotFound(
            "No party is registered for the citizen linked to this case",
            extra={"citizen_ref": _mask(citizen_ref)},
        )

    record = results[0]
    if not isinstance(record, dict):
        raise MalformedResponse("Party record is not an object")

    if "partijIdentificatie" in record or "_expand" in record:
        return _from_v2(record)
    if any(key in record for key in ("voornaam", "achternaam", "emailadres", "telefoonnummer")):
        return _from_v1(record)

    raise MalformedResponse(
        "Party record matches no known party registry shape",
        extra={"keys": sorted(record)[:20]},
    )


def _results(payload: Any) -> list[Any]:
    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        if "results" in payload:
            results = payload["results"]
            if not isinstance(results, list):
                raise MalformedResponse("Party search 'results' is not a list")
            return results
        return [payload]
    raise MalformedResponse("Party search response is not a JSON object")


def _from_v1(record: dict[str, Any]) -> CommonPartyData:
    email = _text(record.get("emailadres"))
    phone = _text(record.get("telefoonnummer"))
    return CommonPartyData(
        name=_text(record.get("voornaam")),
        surname_prefix=_text(record.get("voorvoegselAchternaam")),
        surname=_text(record.get("achternaam")),
        email_address=email,
        phone_number=phone,
        distribution_channel=_channel_from(email, phone),
    )


def _from_v2(record: dict[str, Any]) -> CommonPartyData:
    identification = _object(record.get("partijIdentificatie"), "partijIdentificatie")
    contact_name = _object(identification.get("contactnaam"), "contactnaam")

    addresses = _object(record.get("_expand"), "_expand").get("digitaleAdressen") or []
    if not isinstance(addresses, list):
        raise MalformedResponse("Party 'digitaleAdressen' is not a list")
    preferred = _object(record.get("voorkeursDigitaalAdres"), "voorkeursDigitaalAdres")
    preferred_uuid = preferred.get("uuid")

    email = phone = ""
    preferred_kind = None
    for item in addresses:
        address = _object(item, "digitaleAdressen item")
        kind = _text(address.get("soortDigitaalAdres")).lower()
        value = _text(address.get("adres"))
        if not value:
            continue
        if kind in _EMAIL_KINDS and not email:
            email = value
        elif kind in _PHONE_KINDS and not phone:
            phone = value
        if preferred_uuid and address.get("uuid") == preferred_uuid:
            preferred_kind = kind

    if preferred_kind in _EMAIL_KINDS:
        channel = DistributionChannel.EMAIL
    elif preferred_kind in _PHONE_KINDS:
        channel = DistributionChannel.SMS
    else:
        channel = _channel_from(email, phone)

    return CommonPartyData(
        name=_text(contact_name.get("voornaam")),
        surname_prefix=_text(contact_name.get("voorvoegselAchternaam")),
        surname=_text(contact_name.get("achternaam")),
        email_address=email,
        phone_number=phone,
        distribution_channel=channel,
    )


def _channel_from(email: str, phone: str) -> DistributionChannel:
    if email and phone:
        return DistributionChannel.BOTH
    if email:
        return DistributionChannel.EMAIL
    if phone:
        return DistributionChannel.SMS
    return DistributionChannel.NONE


def _object(value: Any, what: str) -> dict[str, Any]:
    """A nested JSON object, empty when absent."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise MalformedResponse(f"Party '{what}' is not an object")
    return value


def _text(value: Any) -> str:
    return "" if value is None else str(value).strip()


def _mask(citizen_ref: str) -> str:
    # Citizen service numbers are personal data
    return f"***{citizen_ref[-3:]}" if len(citizen_ref) > 3 else "***"

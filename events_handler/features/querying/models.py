"""Upstream data models.

Field aliases follow the Dutch ZGW/Klantinteractie API names; the models
expose English attribute names to the rest of the service.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class _UpstreamModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class CaseStatus(_UpstreamModel):
    """A status set on a case; the source of the case-type reference."""

    url: str | None = None
    case_type_ref: str = Field(
        validation_alias=AliasChoices("statustype", "caseTypeRef", "case_type_ref"),
        min_length=1,
    )
    occurred_at: datetime = Field(
        validation_alias=AliasChoices("datumStatusGezet", "time", "occurred_at"),
    )
    description: str = Field(
        default="",
        validation_alias=AliasChoices("statustoelichting", "description"),
    )


class CaseType(_UpstreamModel):
    """Metadata for a category of case. Never mutated after creation."""

    identification: str = Field(
        validation_alias=AliasChoices("identificatie", "zaaktypeIdentificatie", "identification"),
        min_length=1,
    )
    name: str = Field(
        default="",
        validation_alias=AliasChoices("omschrijving", "name"),
    )
    is_notification_expected: bool = Field(
        validation_alias=AliasChoices("informeren", "isNotificationExpected", "is_notification_expected"),
    )


class Case(_UpstreamModel):
    """Display attributes of one case, used for personalization only."""

    identification: str = Field(
        validation_alias=AliasChoices("identificatie", "identification"),
    )
    name: str = Field(
        default="",
        validation_alias=AliasChoices("omschrijving", "name"),
    )


class DistributionChannel(str, Enum):
    """Channels through which a party wants to be notified."""

    EMAIL = "email"
    SMS = "sms"
    BOTH = "both"
    NONE = "none"


class CommonPartyData(_UpstreamModel):
    """Normalized citizen/organization contact data."""

    name: str = ""
    surname_prefix: str = ""
    surname: str = ""
    email_address: str = ""
    phone_number: str = ""
    distribution_channel: DistributionChannel = DistributionChannel.NONE


__all__ = [
    "Case",
    "CaseStatus",
    "CaseType",
    "CommonPartyData",
    "DistributionChannel",
]

"""Inbound webhook event schemas."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime
from enum import Enum
from types import MappingProxyType
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class SubjectType(str, Enum):
    """What the event is about."""

    CASE = "case"
    OBJECT = "object"
    UNKNOWN = "unknown"


class EventAction(str, Enum):
    """What happened to the subject."""

    CREATED = "created"
    UPDATED = "updated"
    CLOSED = "closed"
    DELETED = "deleted"
    UNKNOWN = "unknown"


# OpenNotificaties channel ("kanaal") -> subject
_CHANNEL_SUBJECTS = {
    "zaken": SubjectType.CASE,
    "objecten": SubjectType.OBJECT,
}

# (kanaal, resource, actie) -> action, checked before the generic verbs below
_RESOURCE_ACTIONS = {
    ("zaken", "zaak", "create"): EventAction.CREATED,
    ("zaken", "status", "create"): EventAction.UPDATED,
    ("zaken", "resultaat", "create"): EventAction.CLOSED,
}

_VERB_ACTIONS = {
    "create": EventAction.CREATED,
    "update": EventAction.UPDATED,
    "partial_update": EventAction.UPDATED,
    "destroy": EventAction.DELETED,
}


class NotificationEvent(BaseModel):
    """Inbound case-management event. Immutable once received.

    Attributes:
        subject: Subject type (case, object, ...).
        action: What happened (created, updated, closed, ...).
        reference: URL of the subject resource (the case for case events).
        resource_url: URL of the resource that changed (e.g. the new status).
        attributes: Key-value attributes describing the change.
        created_at: When the source system emitted the event.
    """

    model_config = ConfigDict(frozen=True)

    subject: SubjectType
    action: EventAction
    reference: str = Field(min_length=1)
    resource_url: str | None = None
    attributes: Mapping[str, Any] = Field(default_factory=dict, validate_default=True)
    created_at: datetime | None = None

    @field_validator("attributes", mode="after")
    @classmethod
    def _read_only_attributes(cls, v: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(v))

    @field_serializer("attributes")
    def _serialize_attributes(self, v: Mapping[str, Any]) -> dict[str, Any]:
        return dict(v)

    @classmethod
    def from_open_notificaties(cls, payload: OpenNotificatiesPayload) -> NotificationEvent:
        """Translate the OpenNotificaties wire shape into a NotificationEvent.

        ``zaken/zaak/create`` is a case creation, ``zaken/status/create`` a status
        update and ``zaken/resultaat/create`` a case closure. Unknown channels or
        verbs map to UNKNOWN, which no scenario handles.
        """
        channel = payload.kanaal.lower()
        resource = payload.resource.lower()
        verb = payload.actie.lower()

        subject = _CHANNEL_SUBJECTS.get(channel, SubjectType.UNKNOWN)
        action = _RESOURCE_ACTIONS.get(
            (channel, resource, verb),
            _VERB_ACTIONS.get(verb, EventAction.UNKNOWN),
        )

        return cls(
            subject=subject,
            action=action,
            reference=payload.hoofd_object,
            resource_url=payload.resource_url,
            attributes={
                "kanaal": payload.kanaal,
                "resource": payload.resource,
                "actie": payload.actie,
                **payload.kenmerken,
            },
            created_at=payload.aanmaakdatum,
        )


class OpenNotificatiesPayload(BaseModel):
    """Webhook body as posted by OpenNotificaties."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    actie: str = Field(min_length=1)
    kanaal: str = Field(min_length=1)
    resource: str = Field(min_length=1)
    hoofd_object: str = Field(alias="hoofdObject", min_length=1)
    resource_url: str | None = Field(default=None, alias="resourceUrl")
    aanmaakdatum: datetime | None = None
    kenmerken: dict[str, Any] = Field(default_factory=dict)

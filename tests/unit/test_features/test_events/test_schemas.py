"""Tests for inbound event translation."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from events_handler.features.events import (
    EventAction,
    NotificationEvent,
    OpenNotificatiesPayload,
    SubjectType,
)
from factories import CASE_URL


def payload(**overrides) -> OpenNotificatiesPayload:
    data = {
        "kanaal": "zaken",
        "resource": "zaak",
        "actie": "create",
        "hoofdObject": CASE_URL,
        "resourceUrl": CASE_URL,
        "aanmaakdatum": "2024-05-01T09:00:00Z",
        "kenmerken": {"zaaktype": "https://openzaak.example/catalogi/api/v1/zaaktypen/1"},
    }
    data.update(overrides)
    return OpenNotificatiesPayload.model_validate(data)


@pytest.mark.parametrize(
    ("resource", "actie", "action"),
    [
        ("zaak", "create", EventAction.CREATED),
        ("status", "create", EventAction.UPDATED),
        ("resultaat", "create", EventAction.CLOSED),
        ("zaak", "partial_update", EventAction.UPDATED),
        ("zaak", "destroy", EventAction.DELETED),
        ("zaak", "archive", EventAction.UNKNOWN),
    ],
)
def test_case_actions(resource: str, actie: str, action: EventAction) -> None:
    event = NotificationEvent.from_open_notificaties(payload(resource=resource, actie=actie))

    assert event.subject is SubjectType.CASE
    assert event.action is action


def test_reference_attributes_and_timestamp() -> None:
    event = NotificationEvent.from_open_notificaties(
        payload(resource="status", resourceUrl="https://openzaak.example/zaken/api/v1/statussen/9")
    )

    assert event.reference == CASE_URL
    assert event.resource_url == "https://openzaak.example/zaken/api/v1/statussen/9"
    assert event.attributes["kanaal"] == "zaken"
    assert event.attributes["resource"] == "status"
    assert event.attributes["zaaktype"].endswith("/zaaktypen/1")
    assert event.created_at is not None


def test_event_attributes_are_read_only() -> None:
    source = {"zaaktype": "T-1"}
    event = NotificationEvent(
        subject=SubjectType.CASE, action=EventAction.CREATED, reference=CASE_URL, attributes=source
    )
    source["zaaktype"] = "T-2"

    assert event.attributes["zaaktype"] == "T-1"
    with pytest.raises(TypeError):
        event.attributes["zaaktype"] = "T-3"  # type: ignore[index]
    with pytest.raises(TypeError):
        NotificationEvent(
            subject=SubjectType.CASE, action=EventAction.CREATED, reference=CASE_URL
        ).attributes["x"] = 1  # type: ignore[index]
    assert event.model_dump()["attributes"] == {"zaaktype": "T-1"}


def test_channel_matching_ignores_case() -> None:
    event = NotificationEvent.from_open_notificaties(payload(kanaal="Zaken", actie="CREATE"))

    assert event.subject is SubjectType.CASE
    assert event.action is EventAction.CREATED


def test_unknown_channel() -> None:
    event = NotificationEvent.from_open_notificaties(payload(kanaal="besluiten"))

    assert event.subject is SubjectType.UNKNOWN


def test_objects_channel() -> None:
    event = NotificationEvent.from_open_notificaties(payload(kanaal="objecten", resource="object"))

    assert event.subject is SubjectType.OBJECT
    assert event.action is EventAction.CREATED


def test_events_are_immutable() -> None:
    event = NotificationEvent.from_open_notificaties(payload())

    with pytest.raises(ValidationError):
        event.reference = "other"


def test_missing_main_object_is_invalid() -> None:
    with pytest.raises(ValidationError):
        OpenNotificatiesPayload.model_validate({"kanaal": "zaken", "resource": "zaak", "actie": "create"})

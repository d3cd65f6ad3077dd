"""Tests for processing outcomes."""

from __future__ import annotations

import pytest

from events_handler.core.exceptions import (
    DataNotFound,
    DeliveryFailed,
    NotWhitelisted,
    UnsupportedScenario,
)
from events_handler.features.events import OutcomeStatus, ProcessingOutcome
from factories import CASE_URL


@pytest.mark.parametrize(
    ("outcome_status", "error", "expected"),
    [
        (OutcomeStatus.SKIPPED, UnsupportedScenario("case", "deleted"), 202),
        (OutcomeStatus.REJECTED, NotWhitelisted("T-9", "ZAAKCREATE_IDS"), 202),
        (OutcomeStatus.FAILED, DeliveryFailed("timeout"), 503),
        (OutcomeStatus.FAILED, DataNotFound("no party"), 422),
    ],
)
def test_http_status_code(outcome_status, error, expected) -> None:
    outcome = ProcessingOutcome.from_error(outcome_status, error, CASE_URL)

    assert outcome.http_status_code == expected


def test_delivered_is_accepted() -> None:
    outcome = ProcessingOutcome(status=OutcomeStatus.DELIVERED, event_reference=CASE_URL)

    assert outcome.http_status_code == 202
    assert outcome.contact_moment is None


def test_from_error_carries_classification() -> None:
    outcome = ProcessingOutcome.from_error(
        OutcomeStatus.FAILED, DeliveryFailed("Notify answered HTTP 502"), CASE_URL, "case_created"
    )

    assert outcome.reason == "DeliveryFailed"
    assert outcome.detail == "Notify answered HTTP 502"
    assert outcome.transient is True
    assert outcome.scenario == "case_created"


def test_serializes_to_json() -> None:
    outcome = ProcessingOutcome(
        status=OutcomeStatus.DELIVERED,
        event_reference=CASE_URL,
        contact_moments=["cm-1"],
    )

    data = outcome.model_dump(mode="json")

    assert data["status"] == "delivered"
    assert data["contact_moments"] == ["cm-1"]
    assert data["receipts"] == []

"""Terminal outcome of processing one event."""

from __future__ import annotations

from enum import Enum

from fastapi import status
from pydantic import BaseModel, ConfigDict, Field

from events_handler.core.exceptions import PipelineError
from events_handler.features.notify.models import DeliveryReceipt, NotifyChannel

INTERNAL_ERROR = "InternalError"


class OutcomeStatus(str, Enum):
    """How processing of an event ended."""

    DELIVERED = "delivered"
    REJECTED = "rejected"
    FAILED = "failed"
    SKIPPED = "skipped"


class ProcessingOutcome(BaseModel):
    """Exactly one of these is produced for every event.

    Attributes:
        status: Terminal status.
        reason: Error class name for rejected, failed and skipped outcomes.
        detail: Human-readable explanation.
        transient: True when retrying the same event later may succeed.
        event_reference: Reference of the processed event.
        scenario: Key of the scenario that handled the event, if any.
        receipts: Provider receipts of delivered notifications.
        failed_channels: Channels whose delivery attempt failed.
        contact_moments: References of the completion reports that were stored.
    """

    model_config = ConfigDict(frozen=True)

    status: OutcomeStatus
    reason: str | None = None
    detail: str | None = None
    transient: bool = False
    event_reference: str
    scenario: str | None = None
    receipts: list[DeliveryReceipt] = Field(default_factory=list)
    failed_channels: list[NotifyChannel] = Field(default_factory=list)
    contact_moments: list[str] = Field(default_factory=list)

    @classmethod
    def from_error(
        cls,
        outcome_status: OutcomeStatus,
        error: PipelineError,
        event_reference: str,
        scenario: str | None = None,
    ) -> ProcessingOutcome:
        return cls(
            status=outcome_status,
            reason=error.reason,
            detail=error.detail,
            transient=error.transient,
            event_reference=event_reference,
            scenario=scenario,
        )

    @property
    def contact_moment(self) -> str | None:
        """First stored contact moment, None when nothing was reported."""
        return self.contact_moments[0] if self.contact_moments else None

    @property
    def http_status_code(self) -> int:
        """Status returned to whoever delivered the event.

        Only failures are answered with an error, so the sender retries
        transient failures and stops on everything else.
        """
        if self.status is not OutcomeStatus.FAILED:
            return status.HTTP_202_ACCEPTED
        if self.transient:
            return status.HTTP_503_SERVICE_UNAVAILABLE
        return status.HTTP_422_UNPROCESSABLE_ENTITY


__all__ = ["INTERNAL_ERROR", "OutcomeStatus", "ProcessingOutcome"]

"""Completion reporting: registers a contact moment at the party registry."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from events_handler.core.exceptions import PipelineError, TelemetryFailed
from events_handler.features.notify.models import ContactMoment
from events_handler.infra.metrics.prometheus import completion_reports_total

if TYPE_CHECKING:
    from events_handler.features.events.schemas import NotificationEvent
    from events_handler.features.notify.models import NotifyChannel
    from events_handler.features.querying.clients import PartyRegistryClient

logger = logging.getLogger(__name__)

UNKNOWN_CHANNEL = "onbekend"


class CompletionReporter:
    """Tells the originating system that an event has been processed."""

    def __init__(self, party_registry: PartyRegistryClient, source_organization: str) -> None:
        self.party_registry = party_registry
        self.source_organization = source_organization

    async def report_completion(
        self,
        event: NotificationEvent,
        channel: NotifyChannel | None,
        outcome: str,
        message: str = "",
    ) -> ContactMoment:
        """Register a contact moment describing how the event ended.

        Args:
            event: The processed event.
            channel: Channel the notification went out on, None when processing
                failed before any channel was chosen.
            outcome: Outcome status value (``delivered``, ``failed``, ...).
            message: Human-readable detail stored with the contact moment.

        Raises:
            TelemetryFailed: The registry could not store the contact moment.
        """
        body = self._build_body(event, channel, outcome, message)
        try:
            data = await self.party_registry.register_contact_moment(body)
        except PipelineError as e:
            completion_reports_total.labels(result="failed").inc()
            raise TelemetryFailed(
                f"Completion could not be reported: {e.detail}",
                instance=event.reference,
                extra={"cause": e.reason},
            ) from e

        reference = data.get("url") or data.get("uuid")
        if not reference:
            completion_reports_total.labels(result="failed").inc()
            raise TelemetryFailed(
                "Contact moment was stored without an identifier",
                instance=event.reference,
            )

        completion_reports_total.labels(result="reported").inc()
        logger.info(
            "Completion reported",
            extra={"contact_moment": reference, "outcome": outcome},
        )
        return ContactMoment(reference=str(reference), status=outcome, channel=channel)

    def _build_body(
        self,
        event: NotificationEvent,
        channel: NotifyChannel | None,
        outcome: str,
        message: str,
    ) -> dict[str, Any]:
        channel_name = channel.value if channel else UNKNOWN_CHANNEL
        text = message or f"Notification {outcome}"
        now = datetime.now(UTC).isoformat(timespec="seconds")

        if self.party_registry.api_version == "v2":
            return {
                "kanaal": channel_name,
                "onderwerp": "Notificatie",
                "inhoud": text,
                "indicatieContactGelukt": outcome == "delivered",
                "taal": "nld",
                "vertrouwelijk": False,
                "plaatsgevondenOp": now,
            }

        return {
            "bronorganisatie": self.source_organization,
            "registratiedatum": now,
            "kanaal": channel_name,
            "tekst": text,
            "initiatiefnemer": "gemeente",
            "onderwerpLinks": [event.reference],
        }

"""Event processing pipeline.

Received -> ScenarioResolved -> DataPrepared -> Validated -> PersonalizationBuilt
-> Dispatched -> Reported, with early exits to Skipped (no scenario), Rejected
(eligibility) and Failed (upstream, configuration or delivery errors).

Completion reporting:
    - one contact moment per channel a delivery was attempted on
    - one contact moment without a channel for an upstream failure before any
      dispatch
    - nothing for configuration errors, which fail before any side effect
    - nothing for skipped and rejected events

Once a dispatch has started, reporting also runs when the event's task is
cancelled, shielded from further cancellation.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
import logging
from typing import TYPE_CHECKING

from events_handler.core.exceptions import (
    BusinessRejection,
    ConfigurationError,
    DeliveryFailed,
    DeliveryRejected,
    NotificationsDisabled,
    PipelineError,
    TelemetryFailed,
    UnsupportedScenario,
)
from events_handler.features.events.outcomes import (
    INTERNAL_ERROR,
    OutcomeStatus,
    ProcessingOutcome,
)
from events_handler.features.notify.dispatch import NotificationDispatcher
from events_handler.features.notify.models import NotifyChannel
from events_handler.features.notify.telemetry import CompletionReporter
from events_handler.features.querying import (
    CaseRegistryClient,
    DataQueryService,
    DistributionChannel,
    PartyRegistryClient,
)
from events_handler.features.scenarios import ScenarioConfiguration, scenario_registry
from events_handler.infra.logging import log_context
from events_handler.infra.metrics.prometheus import (
    event_outcomes_total,
    events_received_total,
)

if TYPE_CHECKING:
    from uuid import UUID

    from events_handler.core.settings import Settings
    from events_handler.features.events.schemas import NotificationEvent
    from events_handler.features.notify.models import DeliveryReceipt, PersonalizationMap
    from events_handler.features.querying import CommonPartyData
    from events_handler.features.scenarios import NotifyScenario, ScenarioRegistry

logger = logging.getLogger(__name__)

CANCELLED_DURING_DELIVERY = "Processing was cancelled while the notification was being sent"

_PREFERRED_CHANNELS = {
    DistributionChannel.EMAIL: (NotifyChannel.EMAIL,),
    DistributionChannel.SMS: (NotifyChannel.SMS,),
    DistributionChannel.BOTH: (NotifyChannel.EMAIL, NotifyChannel.SMS),
}


def contact_details(party_data: CommonPartyData, channel: NotifyChannel) -> str:
    if channel is NotifyChannel.EMAIL:
        return party_data.email_address
    return party_data.phone_number


def select_channels(
    party_data: CommonPartyData, configuration: ScenarioConfiguration
) -> list[NotifyChannel]:
    """Channels the party prefers, is reachable on and that are switched on."""
    return [
        channel
        for channel in _PREFERRED_CHANNELS.get(party_data.distribution_channel, ())
        if configuration.channel_enabled(channel) and contact_details(party_data, channel)
    ]


@dataclass(frozen=True)
class Delivery:
    """A fully prepared notification for one channel."""

    channel: NotifyChannel
    template_id: UUID
    contact_details: str
    personalization: PersonalizationMap


@dataclass
class ChannelAttempt:
    channel: NotifyChannel
    receipt: DeliveryReceipt | None = None
    error: PipelineError | None = None

    @property
    def delivered(self) -> bool:
        return self.receipt is not None


@dataclass
class EventScope:
    """Bookkeeping of one in-flight event. Never shared between events."""

    event: NotificationEvent
    scenario_key: str
    attempts: list[ChannelAttempt] = field(default_factory=list)
    in_flight: NotifyChannel | None = None

    @property
    def dispatch_started(self) -> bool:
        return bool(self.attempts) or self.in_flight is not None


class NotificationPipeline:
    """Turns one event into exactly one ProcessingOutcome.

    The CaseType cache inside ``data_query`` is the only state shared between
    concurrently processed events.
    """

    def __init__(
        self,
        configuration: ScenarioConfiguration,
        data_query: DataQueryService,
        dispatcher: NotificationDispatcher,
        reporter: CompletionReporter,
        registry: ScenarioRegistry = scenario_registry,
    ) -> None:
        self.configuration = configuration
        self.data_query = data_query
        self.dispatcher = dispatcher
        self.reporter = reporter
        self.registry = registry

    @classmethod
    def from_settings(cls, settings: Settings) -> NotificationPipeline:
        """Wire the pipeline and its HTTP clients from settings."""
        party_registry = PartyRegistryClient.from_settings(settings.party_registry)
        return cls(
            configuration=ScenarioConfiguration(settings.scenarios),
            data_query=DataQueryService(
                case_registry=CaseRegistryClient.from_settings(settings.case_registry),
                party_registry=party_registry,
            ),
            dispatcher=NotificationDispatcher.from_settings(settings.notify),
            reporter=CompletionReporter(
                party_registry=party_registry,
                source_organization=settings.party_registry.source_organization,
            ),
        )

    async def close(self) -> None:
        await self.data_query.close()
        await self.dispatcher.close()

    async def process(self, event: NotificationEvent) -> ProcessingOutcome:
        """Process one event to its terminal outcome.

        Taxonomy errors never escape; they become the outcome. Only task
        cancellation propagates.
        """
        events_received_total.labels(subject=event.subject.value, action=event.action.value).inc()

        with log_context(event_reference=event.reference):
            outcome = await self._process(event)

            event_outcomes_total.labels(
                status=outcome.status.value, reason=outcome.reason or "none"
            ).inc()
            logger.log(
                logging.WARNING if outcome.status is OutcomeStatus.FAILED else logging.INFO,
                "Event processed",
                extra={
                    "status": outcome.status.value,
                    "reason": outcome.reason,
                    "contact_moment": outcome.contact_moment,
                },
            )
        return outcome

    async def _process(self, event: NotificationEvent) -> ProcessingOutcome:
        try:
            scenario = self.registry.create(event, self.configuration, self.data_query)
        except UnsupportedScenario as e:
            logger.info(
                "No scenario handles this event",
                extra={"subject": event.subject.value, "action": event.action.value},
            )
            return ProcessingOutcome.from_error(OutcomeStatus.SKIPPED, e, event.reference)

        scope = EventScope(event=event, scenario_key=scenario.key)
        with log_context(scenario=scenario.key):
            try:
                outcome = await self._run(scenario, scope)
            except BusinessRejection as e:
                logger.info("Event rejected", extra={"reason": e.reason, "detail": e.detail})
                return ProcessingOutcome.from_error(
                    OutcomeStatus.REJECTED, e, event.reference, scenario.key
                )
            except ConfigurationError as e:
                # Nothing was sent and nothing is reported
                logger.error("Event failed on configuration", extra={"detail": e.detail})
                return ProcessingOutcome.from_error(
                    OutcomeStatus.FAILED, e, event.reference, scenario.key
                )
            except PipelineError as e:
                outcome = ProcessingOutcome.from_error(
                    OutcomeStatus.FAILED, e, event.reference, scenario.key
                )
            except asyncio.CancelledError:
                if scope.dispatch_started:
                    await self._report_shielded(scope, None)
                raise
            except Exception as e:
                logger.exception("Unexpected error while processing event")
                outcome = ProcessingOutcome(
                    status=OutcomeStatus.FAILED,
                    reason=INTERNAL_ERROR,
                    detail=str(e) or type(e).__name__,
                    event_reference=event.reference,
                    scenario=scenario.key,
                )

            if scope.dispatch_started:
                contact_moments = await self._report_shielded(scope, outcome)
            else:
                contact_moments = await self._report(scope, outcome)
        return outcome.model_copy(update={"contact_moments": contact_moments})

    async def _run(self, scenario: NotifyScenario, scope: EventScope) -> ProcessingOutcome:
        party_data = await scenario.prepare_data(scope.event)

        channels = select_channels(party_data, self.configuration)
        if not channels:
            raise NotificationsDisabled(
                "No enabled delivery channel matches the party's contact preferences"
            )

        # Everything that can fail on configuration fails before the first send
        deliveries = [
            Delivery(
                channel=channel,
                template_id=scenario.template_id(channel),
                contact_details=contact_details(party_data, channel),
                personalization=scenario.personalization(channel, party_data),
            )
            for channel in channels
        ]
        self.dispatcher.check_configured()

        for delivery in deliveries:
            scope.attempts.append(await self._dispatch(delivery, scope))

        return self._delivery_outcome(scope)

    async def _dispatch(self, delivery: Delivery, scope: EventScope) -> ChannelAttempt:
        scope.in_flight = delivery.channel
        with log_context(channel=delivery.channel.value):
            try:
                receipt = await self.dispatcher.dispatch(
                    channel=delivery.channel,
                    template_id=delivery.template_id,
                    contact_details=delivery.contact_details,
                    personalization=delivery.personalization,
                    reference=scope.event.reference,
                )
            except (DeliveryFailed, DeliveryRejected) as e:
                attempt = ChannelAttempt(channel=delivery.channel, error=e)
            else:
                attempt = ChannelAttempt(channel=delivery.channel, receipt=receipt)
        scope.in_flight = None
        return attempt

    @staticmethod
    def _delivery_outcome(scope: EventScope) -> ProcessingOutcome:
        receipts = [a.receipt for a in scope.attempts if a.receipt is not None]
        failed = [a for a in scope.attempts if not a.delivered]
        failed_channels = [a.channel for a in failed]

        # A partial success is still Delivered: retrying would resend the delivered channel
        if receipts:
            return ProcessingOutcome(
                status=OutcomeStatus.DELIVERED,
                event_reference=scope.event.reference,
                scenario=scope.scenario_key,
                receipts=receipts,
                failed_channels=failed_channels,
            )

        errors = [a.error for a in failed if a.error is not None]
        error = next((e for e in errors if e.transient), errors[0])
        return ProcessingOutcome.from_error(
            OutcomeStatus.FAILED, error, scope.event.reference, scope.scenario_key
        ).model_copy(update={"failed_channels": failed_channels})

    async def _report_shielded(
        self, scope: EventScope, outcome: ProcessingOutcome | None
    ) -> list[str]:
        """Report every channel even when the event's task is cancelled meanwhile.

        The reports run to completion before the cancellation is re-raised.
        """
        reporting = asyncio.ensure_future(self._report(scope, outcome))
        try:
            return await asyncio.shield(reporting)
        except asyncio.CancelledError:
            await reporting
            raise

    async def _report(self, scope: EventScope, outcome: ProcessingOutcome | None) -> list[str]:
        reports: list[tuple[NotifyChannel | None, str, str]] = []
        for attempt in scope.attempts:
            if attempt.delivered:
                reports.append((attempt.channel, OutcomeStatus.DELIVERED.value, ""))
            else:
                detail = attempt.error.detail if attempt.error else ""
                reports.append((attempt.channel, OutcomeStatus.FAILED.value, detail))
        if scope.in_flight is not None:
            reports.append((scope.in_flight, OutcomeStatus.FAILED.value, CANCELLED_DURING_DELIVERY))
        if not reports and outcome is not None and outcome.status is OutcomeStatus.FAILED:
            reports.append((None, OutcomeStatus.FAILED.value, outcome.detail or ""))

        contact_moments: list[str] = []
        for channel, status, message in reports:
            try:
                moment = await self.reporter.report_completion(
                    scope.event, channel, status, message
                )
            except TelemetryFailed as e:
                # The delivery stands; only the report is lost
                logger.warning(
                    "Completion report failed",
                    extra={"channel": channel.value if channel else None, "detail": e.detail},
                )
            else:
                contact_moments.append(moment.reference)
        return contact_moments

"""Single-attempt notification dispatch."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from events_handler.core.exceptions import ConfigurationError, DeliveryFailed, DeliveryRejected
from events_handler.features.notify.client import NotifyClient
from events_handler.infra.metrics.prometheus import notifications_dispatched_total

if TYPE_CHECKING:
    from uuid import UUID

    from events_handler.core.settings import NotifySettings
    from events_handler.features.notify.models import (
        DeliveryReceipt,
        NotifyChannel,
        PersonalizationMap,
    )

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Sends one notification per call through the delivery provider.

    Each call makes exactly one provider request. A request that timed out
    may still have been delivered, so failures are never retried here.
    """

    def __init__(
        self,
        client: NotifyClient | None,
        configuration_error: ConfigurationError | None = None,
    ) -> None:
        self.client = client
        self.configuration_error = configuration_error

    @classmethod
    def from_settings(cls, settings: NotifySettings) -> NotificationDispatcher:
        """Build a dispatcher, deferring a missing provider setting to dispatch time."""
        try:
            return cls(NotifyClient.from_settings(settings))
        except ConfigurationError as e:
            logger.warning("Delivery provider is not configured", extra={"key": e.key})
            return cls(None, configuration_error=e)

    def check_configured(self) -> NotifyClient:
        """Return the provider client or raise the configuration error it lacks."""
        if self.client is None:
            raise self.configuration_error or ConfigurationError("NOTIFY_BASE_URL")
        return self.client

    async def close(self) -> None:
        if self.client is not None:
            await self.client.close()

    async def dispatch(
        self,
        channel: NotifyChannel,
        template_id: UUID,
        contact_details: str,
        personalization: PersonalizationMap,
        reference: str | None = None,
    ) -> DeliveryReceipt:
        """Deliver a notification.

        Args:
            channel: Email or SMS.
            template_id: Provider template to render.
            contact_details: Email address or phone number.
            personalization: Placeholder values; empty sends without personalization.
            reference: Client reference stored with the notification at the provider.

        Returns:
            Receipt of the accepted notification.

        Raises:
            DeliveryFailed: Transient provider failure.
            ConfigurationError: The provider is not configured.
        """
        client = self.check_configured()
        try:
            receipt = await client.send_notification(
                channel=channel,
                contact_details=contact_details,
                template_id=template_id,
                personalization=personalization,
                reference=reference,
            )
        except DeliveryRejected as e:
            notifications_dispatched_total.labels(channel=channel.value, result="rejected").inc()
            logger.warning(
                "Notification rejected by provider",
                extra={"channel": channel.value, "template_id": str(template_id), "detail": e.detail},
            )
            raise
        except DeliveryFailed as e:
            notifications_dispatched_total.labels(channel=channel.value, result="failed").inc()
            logger.warning(
                "Notification delivery failed",
                extra={"channel": channel.value, "template_id": str(template_id), "detail": e.detail},
            )
            raise

        notifications_dispatched_total.labels(channel=channel.value, result="delivered").inc()
        logger.info(
            "Notification delivered",
            extra={
                "channel": channel.value,
                "template_id": str(template_id),
                "notification_id": receipt.notification_id,
            },
        )
        return receipt

"""Operator endpoints for checking the delivery provider and the party registry.

Endpoints:
    GET  /test/notify/health-check        provider status
    POST /test/notify/send-email          send one email
    POST /test/notify/send-sms            send one SMS
    POST /test/open/contact-registration  register one contact moment
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Response, status

from events_handler.core.exceptions import DataNotFound
from events_handler.features.events.dependencies import PipelineDep  # noqa: TC001
from events_handler.features.events.schemas import EventAction, NotificationEvent, SubjectType
from events_handler.features.notify.client import NotifyClient  # noqa: TC001
from events_handler.features.notify.models import ContactMoment, DeliveryReceipt, NotifyChannel
from events_handler.features.notify.schemas import (
    ContactRegistrationRequest,
    EmailTestRequest,
    HealthCheckResponse,
    SmsTestRequest,
)

if TYPE_CHECKING:
    from uuid import UUID

router = APIRouter(prefix="/test", tags=["test"])

logger = logging.getLogger(__name__)


async def _default_template(client: NotifyClient, channel: NotifyChannel) -> UUID:
    templates = await client.list_templates(channel)
    if not templates:
        raise DataNotFound(f"No {channel.value} templates are registered at Notify")
    return templates[0].id


@router.get(
    "/notify/health-check",
    response_model=HealthCheckResponse,
    summary="Check the delivery provider",
)
async def notify_health_check(pipeline: PipelineDep, response: Response) -> HealthCheckResponse:
    client = pipeline.dispatcher.check_configured()
    healthy = await client.health_check()
    if not healthy:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return HealthCheckResponse(healthy=healthy, base_url=client.base_url)


@router.post(
    "/notify/send-email",
    response_model=DeliveryReceipt,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Send a test email",
)
async def send_test_email(payload: EmailTestRequest, pipeline: PipelineDep) -> DeliveryReceipt:
    client = pipeline.dispatcher.check_configured()
    template_id = payload.template_id or await _default_template(client, NotifyChannel.EMAIL)
    return await pipeline.dispatcher.dispatch(
        channel=NotifyChannel.EMAIL,
        template_id=template_id,
        contact_details=payload.email_address,
        personalization=payload.personalization,
    )


@router.post(
    "/notify/send-sms",
    response_model=DeliveryReceipt,
    status_code=status.HTTP_202_ACCEPTED,
    summary="Send a test SMS",
)
async def send_test_sms(payload: SmsTestRequest, pipeline: PipelineDep) -> DeliveryReceipt:
    client = pipeline.dispatcher.check_configured()
    template_id = payload.template_id or await _default_template(client, NotifyChannel.SMS)
    return await pipeline.dispatcher.dispatch(
        channel=NotifyChannel.SMS,
        template_id=template_id,
        contact_details=payload.phone_number,
        personalization=payload.personalization,
    )


@router.post(
    "/open/contact-registration",
    response_model=ContactMoment,
    status_code=status.HTTP_201_CREATED,
    summary="Register a test contact moment",
)
async def register_test_contact(
    payload: ContactRegistrationRequest, pipeline: PipelineDep
) -> ContactMoment:
    event = NotificationEvent(
        subject=SubjectType.CASE,
        action=EventAction.UNKNOWN,
        reference=payload.reference,
    )
    logger.info("Registering test contact moment", extra={"reference": payload.reference})
    return await pipeline.reporter.report_completion(
        event, payload.channel, payload.outcome, payload.message
    )

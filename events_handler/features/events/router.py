"""Webhook endpoint receiving case-management events."""

from __future__ import annotations

import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from events_handler.features.events.dependencies import PipelineDep  # noqa: TC001
from events_handler.features.events.outcomes import ProcessingOutcome
from events_handler.features.events.schemas import NotificationEvent, OpenNotificatiesPayload

router = APIRouter(prefix="/events", tags=["events"])

logger = logging.getLogger(__name__)


@router.post(
    "/listen",
    response_model=ProcessingOutcome,
    summary="Receive a case-management event",
    description=(
        "Processes one OpenNotificaties webhook event. Delivered, rejected and "
        "skipped events are acknowledged with 202; transient failures answer 503 "
        "so the sender retries, permanent failures 422."
    ),
    responses={
        503: {"model": ProcessingOutcome, "description": "Transient failure"},
        422: {"model": ProcessingOutcome, "description": "Permanent failure"},
    },
)
async def listen(payload: OpenNotificatiesPayload, pipeline: PipelineDep) -> JSONResponse:
    event = NotificationEvent.from_open_notificaties(payload)
    outcome = await pipeline.process(event)
    return JSONResponse(
        status_code=outcome.http_status_code,
        content=outcome.model_dump(mode="json"),
    )

"""Run the notification pipeline for a single event from the command line."""

import json
from pathlib import Path
import sys
from typing import Any

import click
from pydantic import ValidationError

from events_handler.cli.utils import coro, error, info, success, warning
from events_handler.core.settings import get_settings
from events_handler.features.events.outcomes import OutcomeStatus, ProcessingOutcome
from events_handler.features.events.pipeline import NotificationPipeline
from events_handler.features.events.schemas import NotificationEvent, OpenNotificatiesPayload


def load_event(data: Any) -> NotificationEvent:
    """Accept either the OpenNotificaties webhook body or a NotificationEvent."""
    if isinstance(data, dict) and "kanaal" in data:
        return NotificationEvent.from_open_notificaties(OpenNotificatiesPayload.model_validate(data))
    return NotificationEvent.model_validate(data)


async def run_pipeline(event: NotificationEvent) -> ProcessingOutcome:
    pipeline = NotificationPipeline.from_settings(get_settings())
    try:
        return await pipeline.process(event)
    finally:
        await pipeline.close()


@click.command(name="process")
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@coro
async def process(file: Path) -> None:
    """Process one event read from a JSON FILE and print its outcome.

    Exits with status 1 when the outcome is failed.
    """
    try:
        event = load_event(json.loads(file.read_text(encoding="utf-8")))
    except json.JSONDecodeError as e:
        error(f"{file} is not valid JSON: {e}")
        sys.exit(2)
    except ValidationError as e:
        error(f"{file} is not a valid event: {e.error_count()} error(s)")
        click.echo(e, err=True)
        sys.exit(2)

    info(f"Processing {event.subject.value}/{event.action.value} event for {event.reference}")
    outcome = await run_pipeline(event)
    click.echo(outcome.model_dump_json(indent=2))

    if outcome.status is OutcomeStatus.FAILED:
        error(f"Event failed: {outcome.reason}")
        sys.exit(1)
    if outcome.status is OutcomeStatus.DELIVERED:
        success("Event delivered")
    else:
        warning(f"Event {outcome.status.value}: {outcome.reason}")

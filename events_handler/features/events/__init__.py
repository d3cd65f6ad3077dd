"""Inbound events and their processing outcomes.

The pipeline and router are imported from their modules directly; they
depend on the scenarios, which depend on the schemas defined here.
"""

from __future__ import annotations

from .outcomes import OutcomeStatus, ProcessingOutcome
from .schemas import EventAction, NotificationEvent, OpenNotificatiesPayload, SubjectType

__all__ = [
    "EventAction",
    "NotificationEvent",
    "OpenNotificatiesPayload",
    "OutcomeStatus",
    "ProcessingOutcome",
    "SubjectType",
]

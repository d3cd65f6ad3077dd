"""Delivery and completion-reporting models."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, TypeAlias
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

# Placeholder name -> value; insertion order is the order placeholders were added
PersonalizationMap: TypeAlias = dict[str, Any]


class NotifyChannel(str, Enum):
    """Delivery channels supported by the provider."""

    EMAIL = "email"
    SMS = "sms"


class Template(BaseModel):
    """A template registered at the delivery provider."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: UUID
    type: NotifyChannel
    name: str = ""
    version: int | None = None


class DeliveryReceipt(BaseModel):
    """Acknowledgement of one accepted delivery request."""

    model_config = ConfigDict(frozen=True)

    notification_id: str | None = Field(description="Provider notification id")
    channel: NotifyChannel
    template_id: UUID
    reference: str | None = None
    personalization: PersonalizationMap = Field(default_factory=dict)
    sent_at: datetime


class ContactMoment(BaseModel):
    """Receipt of reporting an event's completion to the originating system."""

    model_config = ConfigDict(frozen=True)

    reference: str = Field(description="URL or id of the registered contact moment")
    status: str = Field(description="Outcome that was reported")
    channel: NotifyChannel | None = None


__all__ = [
    "ContactMoment",
    "DeliveryReceipt",
    "NotifyChannel",
    "PersonalizationMap",
    "Template",
]

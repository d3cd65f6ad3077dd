"""Request and response bodies of the operator test endpoints."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from events_handler.features.notify.models import NotifyChannel


class HealthCheckResponse(BaseModel):
    healthy: bool
    base_url: str


class EmailTestRequest(BaseModel):
    """Send a test email. Without ``template_id`` the first email template is used."""

    email_address: str = Field(min_length=3, description="Recipient email address")
    template_id: UUID | None = None
    personalization: dict[str, Any] = Field(
        default_factory=dict,
        description="Placeholder values; empty sends without personalization",
    )


class SmsTestRequest(BaseModel):
    """Send a test SMS. Without ``template_id`` the first SMS template is used."""

    phone_number: str = Field(min_length=3, description="Recipient phone number")
    template_id: UUID | None = None
    personalization: dict[str, Any] = Field(default_factory=dict)


class ContactRegistrationRequest(BaseModel):
    """Register a contact moment for a case as if an event completed."""

    reference: str = Field(min_length=1, description="Case URL the contact moment links to")
    channel: NotifyChannel | None = None
    outcome: str = Field(default="delivered", min_length=1)
    message: str = ""

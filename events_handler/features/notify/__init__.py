"""Delivery provider integration and completion reporting."""

from __future__ import annotations

from .client import NotifyClient, create_token, split_api_key
from .dispatch import NotificationDispatcher
from .models import ContactMoment, DeliveryReceipt, NotifyChannel, PersonalizationMap, Template
from .telemetry import CompletionReporter

__all__ = [
    "CompletionReporter",
    "ContactMoment",
    "DeliveryReceipt",
    "NotificationDispatcher",
    "NotifyChannel",
    "NotifyClient",
    "PersonalizationMap",
    "Template",
    "create_token",
    "split_api_key",
]

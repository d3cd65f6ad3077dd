"""HTTP client for the Notify delivery provider (GOV.UK Notify compatible API).

Requests are authenticated with a short-lived HS256 JWT whose issuer is the
service id and whose signing key is the secret, both embedded in the API key
(``<key name>-<service id>-<secret key>``).
"""

from __future__ import annotations

import logging
import time
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any
from uuid import UUID

import httpx
import jwt

from events_handler.core.exceptions import (
    ConfigurationError,
    DeliveryFailed,
    DeliveryRejected,
    MalformedResponse,
    UpstreamUnavailable,
)
from events_handler.features.notify.models import (
    DeliveryReceipt,
    NotifyChannel,
    PersonalizationMap,
    Template,
)
from events_handler.features.querying.clients import parse_model
from events_handler.infra.external import BaseHTTPClient

if TYPE_CHECKING:
    from events_handler.core.settings import NotifySettings

logger = logging.getLogger(__name__)

# service id and secret key are UUIDs at the end of the API key
_UUID_LENGTH = 36

SEND_PATHS = {
    NotifyChannel.EMAIL: "/v2/notifications/email",
    NotifyChannel.SMS: "/v2/notifications/sms",
}
RECIPIENT_FIELDS = {
    NotifyChannel.EMAIL: "email_address",
    NotifyChannel.SMS: "phone_number",
}


def split_api_key(api_key: str) -> tuple[str, str]:
    """Return ``(service_id, secret_key)`` from a combined API key.

    Raises:
        ConfigurationError: The key is too short to hold both identifiers.
    """
    if len(api_key) < 2 * _UUID_LENGTH + 1:
        raise ConfigurationError("NOTIFY_API_KEY", "Notify API key is malformed")
    secret_key = api_key[-_UUID_LENGTH:]
    service_id = api_key[-(2 * _UUID_LENGTH + 1) : -(_UUID_LENGTH + 1)]
    return service_id, secret_key


def create_token(service_id: str, secret_key: str) -> str:
    """Sign a provider access token valid for the current request."""
    return jwt.encode(
        {"iss": service_id, "iat": int(time.time())},
        secret_key,
        algorithm="HS256",
        headers={"typ": "JWT", "alg": "HS256"},
    )


class NotifyClient(BaseHTTPClient):
    """Delivery provider client.

    ``send`` performs exactly one HTTP request. Transient failures become
    DeliveryFailed and permanent refusals DeliveryRejected; nothing is retried.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(
            service="notify",
            base_url=base_url,
            timeout=timeout,
            headers={"User-Agent": "events-handler"},
            transport=transport,
        )
        self._service_id, self._secret_key = split_api_key(api_key)

    @classmethod
    def from_settings(
        cls,
        settings: NotifySettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> NotifyClient:
        if settings.base_url is None:
            raise ConfigurationError("NOTIFY_BASE_URL")
        if settings.api_key is None or not settings.api_key.get_secret_value():
            raise ConfigurationError("NOTIFY_API_KEY")
        return cls(
            base_url=str(settings.base_url).rstrip("/"),
            api_key=settings.api_key.get_secret_value(),
            timeout=settings.timeout_seconds,
            transport=transport,
        )

    def _auth_headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_token(self._service_id, self._secret_key)}"}

    async def health_check(self) -> bool:
        """True when the provider reports itself healthy."""
        try:
            response = await self.send("GET", "/_status", params={"simple": "true"})
        except UpstreamUnavailable:
            return False
        return response.is_success

    async def list_templates(self, channel: NotifyChannel) -> list[Template]:
        """Templates of one channel, as registered at the provider."""
        response = await self.send(
            "GET",
            "/v2/templates",
            params={"type": channel.value},
            headers=self._auth_headers(),
        )
        self.raise_for_status(response)
        data = self.decode_json(response)
        if not isinstance(data, dict):
            raise MalformedResponse("Template listing is not an object")
        templates = data.get("templates") or []
        if not isinstance(templates, list):
            raise MalformedResponse("Template listing 'templates' is not a list")
        return [parse_model(Template, item, "Template") for item in templates]

    async def send_notification(
        self,
        channel: NotifyChannel,
        contact_details: str,
        template_id: UUID,
        personalization: PersonalizationMap,
        reference: str | None = None,
    ) -> DeliveryReceipt:
        """Submit one notification to the provider.

        An empty personalization map sends the template without placeholders.

        Raises:
            DeliveryFailed: Timeout, network error, 429 or 5xx.
            DeliveryRejected: Any other non-2xx answer (bad template, bad address, bad key).
        """
        body: dict[str, Any] = {
            RECIPIENT_FIELDS[channel]: contact_details,
            "template_id": str(template_id),
        }
        if personalization:
            body["personalisation"] = dict(personalization)
        if reference:
            body["reference"] = reference

        try:
            response = await self.send(
                "POST",
                SEND_PATHS[channel],
                json=body,
                headers=self._auth_headers(),
            )
        except UpstreamUnavailable as e:
            raise DeliveryFailed(e.detail, extra={"channel": channel.value}) from e

        status_code = response.status_code
        if status_code == 429 or status_code >= 500:
            raise DeliveryFailed(
                f"Notify answered HTTP {status_code}",
                extra={"channel": channel.value, "status_code": status_code},
            )
        if not response.is_success:
            raise DeliveryRejected(
                f"Notify refused the {channel.value}: {_provider_errors(response)}",
                extra={
                    "channel": channel.value,
                    "status_code": status_code,
                    "template_id": str(template_id),
                },
            )

        # The message is accepted at this point; a broken body must not turn it into a failure
        try:
            notification_id = response.json().get("id")
        except (ValueError, AttributeError):
            logger.warning("Notify accepted the notification but returned no JSON body")
            notification_id = None

        return DeliveryReceipt(
            notification_id=notification_id,
            channel=channel,
            template_id=template_id,
            reference=reference,
            personalization=dict(personalization),
            sent_at=datetime.now(UTC),
        )


def _provider_errors(response: httpx.Response) -> str:
    try:
        errors = response.json().get("errors") or []
        messages = [str(error.get("message")) for error in errors if isinstance(error, dict)]
    except (ValueError, AttributeError):
        messages = []
    return "; ".join(messages) or f"HTTP {response.status_code}"

"""Custom exception classes for the events handler.

The notification pipeline classifies every failure into one of the error
types below. Each one carries enough information for the pipeline to turn it
into a terminal outcome, and for the HTTP layer to render it as an RFC 7807
problem detail when it does escape.
"""

from __future__ import annotations

from typing import Any


class AppException(Exception):
    """Base application exception.

    All custom exceptions should inherit from this class.
    Follows RFC 7807 Problem Details for HTTP APIs.

    Attributes:
        status_code: HTTP status code for the error.
        detail: Human-readable error message.
        type: Error type identifier (used in RFC 7807 problem details).
        title: Short, human-readable summary of the problem type.
        instance: URI reference that identifies the specific occurrence of the problem.
        extra: Additional context-specific information about the error.

    Example:
            raise AppException(
            status_code=404,
            detail="Case not found",
            type="data-not-found",
            title="Not Found",
            instance="https://openzaak.example/zaken/api/v1/zaken/abc123",
            extra={"case_ref": "abc123"}
        )
    """

    def __init__(
        self,
        status_code: int,
        detail: str,
        type: str = "about:blank",
        title: str | None = None,
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        """Initialize application exception.

        Args:
            status_code: HTTP status code.
            detail: Human-readable error message.
            type: Error type identifier.
            title: Short summary of the problem type.
            instance: URI reference identifying this specific occurrence.
            extra: Additional context about the error.
        """
        self.status_code = status_code
        self.detail = detail
        self.type = type
        self.title = title or self._default_title(status_code)
        self.instance = instance
        self.extra = extra or {}
        super().__init__(detail)

    @staticmethod
    def _default_title(status_code: int) -> str:
        """Get default title for HTTP status code.

        Args:
            status_code: HTTP status code.

        Returns:
            Human-readable title for the status code.
        """
        titles = {
            400: "Bad Request",
            403: "Forbidden",
            404: "Not Found",
            409: "Conflict",
            422: "Unprocessable Entity",
            500: "Internal Server Error",
            502: "Bad Gateway",
            503: "Service Unavailable",
            504: "Gateway Timeout",
        }
        return titles.get(status_code, "Error")


class PipelineError(AppException):
    """Base class for every error the notification pipeline classifies.

    Subclasses fix the HTTP status, the problem ``type`` slug and whether the
    condition is transient. Transient errors are eligible for a retry by
    whoever delivered the event; nothing inside the pipeline retries them.
    """

    status_code_default: int = 500
    type_default: str = "pipeline-error"
    transient: bool = False

    def __init__(
        self,
        detail: str,
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            status_code=self.status_code_default,
            detail=detail,
            type=self.type_default,
            instance=instance,
            extra=extra,
        )

    @property
    def reason(self) -> str:
        """Short reason name used in outcomes, logs and metric labels."""
        return type(self).__name__


class ConfigurationError(PipelineError):
    """A required setting is missing. Fatal to the event, not to the process."""

    status_code_default = 500
    type_default = "configuration-error"

    def __init__(self, key: str, detail: str | None = None) -> None:
        self.key = key
        super().__init__(
            detail=detail or f"Required setting '{key}' is missing or empty",
            extra={"key": key},
        )


class UnsupportedScenario(PipelineError):
    """No scenario is mapped for the event's subject/action pair."""

    status_code_default = 422
    type_default = "unsupported-scenario"

    def __init__(self, subject: str, action: str) -> None:
        self.subject = subject
        self.action = action
        super().__init__(
            detail=f"No scenario is registered for {subject}/{action}",
            extra={"subject": subject, "action": action},
        )


class UpstreamUnavailable(PipelineError):
    """An upstream registry could not be reached, timed out or answered 5xx."""

    status_code_default = 503
    type_default = "upstream-unavailable"
    transient = True


class DataNotFound(PipelineError):
    """The requested upstream resource does not exist or is not linked."""

    status_code_default = 404
    type_default = "data-not-found"


class MalformedResponse(PipelineError):
    """An upstream response did not match the expected schema."""

    status_code_default = 502
    type_default = "malformed-response"


class BusinessRejection(PipelineError):
    """Base for eligibility rules that stop an event before any side effect."""

    status_code_default = 403
    type_default = "business-rejection"


class NotWhitelisted(BusinessRejection):
    """The case type is not on the allow-list configured for the scenario."""

    type_default = "not-whitelisted"

    def __init__(self, case_type_id: str, whitelist_name: str) -> None:
        self.case_type_id = case_type_id
        self.whitelist_name = whitelist_name
        super().__init__(
            detail=(
                f"Case type '{case_type_id}' is not included in the "
                f"'{whitelist_name}' allow-list"
            ),
            extra={"case_type_id": case_type_id, "whitelist_name": whitelist_name},
        )


class NotificationsDisabled(BusinessRejection):
    """The case type does not expect citizens to be notified."""

    type_default = "notifications-disabled"

    def __init__(self, detail: str = "Notifications are disabled for this case type") -> None:
        super().__init__(detail=detail)


class DeliveryFailed(PipelineError):
    """The delivery provider failed transiently (network, 429, 5xx)."""

    status_code_default = 502
    type_default = "delivery-failed"
    transient = True


class DeliveryRejected(PipelineError):
    """The delivery provider permanently refused the message (bad template or address)."""

    status_code_default = 422
    type_default = "delivery-rejected"


class TelemetryFailed(PipelineError):
    """Completion could not be reported back to the originating system."""

    status_code_default = 502
    type_default = "telemetry-failed"
    transient = True


__all__ = [
    "AppException",
    "BusinessRejection",
    "ConfigurationError",
    "DataNotFound",
    "DeliveryFailed",
    "DeliveryRejected",
    "MalformedResponse",
    "NotWhitelisted",
    "NotificationsDisabled",
    "PipelineError",
    "TelemetryFailed",
    "UnsupportedScenario",
    "UpstreamUnavailable",
]

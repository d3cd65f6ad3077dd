"""Per-scenario notification settings.

Template identifiers are provisioned in the delivery provider's admin portal,
one per scenario and channel. Allow-lists hold the case type identifications
that may trigger a notification for a scenario; the field name is the
whitelist name in lower case (``ZAAKCREATE_IDS`` -> ``zaakcreate_ids``).
"""

from __future__ import annotations

from typing import Annotated
from uuid import UUID

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from ._sanitizers import split_csv

AllowList = Annotated[list[str] | None, NoDecode]


class ScenarioSettings(BaseSettings):
    """Template identifiers, allow-lists and channel toggles.

    Environment variables use SCENARIO_ prefix.
    Example: SCENARIO_ZAAKCREATE_IDS='["ZAAKTYPE-1", "ZAAKTYPE-2"]' or "*"
    """

    # ──────────────────────────────────────────────────────────────
    # Template identifiers
    # ──────────────────────────────────────────────────────────────

    case_created_email_template_id: UUID | None = Field(default=None)
    case_created_sms_template_id: UUID | None = Field(default=None)
    case_status_updated_email_template_id: UUID | None = Field(default=None)
    case_status_updated_sms_template_id: UUID | None = Field(default=None)
    case_closed_email_template_id: UUID | None = Field(default=None)
    case_closed_sms_template_id: UUID | None = Field(default=None)

    # ──────────────────────────────────────────────────────────────
    # Allow-lists (None = not configured)
    # ──────────────────────────────────────────────────────────────

    zaakcreate_ids: AllowList = Field(
        default=None,
        description="Case types allowed to notify on case creation ('*' allows all)",
    )
    zaakupdate_ids: AllowList = Field(
        default=None,
        description="Case types allowed to notify on status updates ('*' allows all)",
    )
    zaakclose_ids: AllowList = Field(
        default=None,
        description="Case types allowed to notify on case closure ('*' allows all)",
    )

    # ──────────────────────────────────────────────────────────────
    # Channel toggles
    # ──────────────────────────────────────────────────────────────

    email_enabled: bool = Field(default=True, description="Send email notifications")
    sms_enabled: bool = Field(default=True, description="Send SMS notifications")

    model_config = SettingsConfigDict(
        env_prefix="SCENARIO_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
    )

    @field_validator("zaakcreate_ids", "zaakupdate_ids", "zaakclose_ids", mode="before")
    @classmethod
    def _split_ids(cls, v: object) -> object:
        return split_csv(v)


__all__ = ["ScenarioSettings"]

"""Pydantic model for the notification settings document."""

from datetime import datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, field_validator

from config.notification_defaults import (
    DEFAULT_EMAIL_BODY_TEMPLATE,
    DEFAULT_EMAIL_SUBJECT_TEMPLATE,
    DEFAULT_NON_SENDING_WEEKDAYS,
    DEFAULT_REMINDER_THRESHOLDS,
    DEFAULT_SMS_TEMPLATE,
    DEFAULT_TIMEZONE,
)
from models.types import RecipientID, TimeOfDay, Weekday
from models.work_item import Urgency

SETTINGS_DOCUMENT_ID = "default"

_TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


class NotificationSettings(BaseModel):
    """
    Admin-managed configuration for every notification kind.

    Loaded once per run and passed explicitly into the dispatcher.
    """

    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    # Per-item reminders
    reminders_enabled: bool = False
    reminder_thresholds: dict[Urgency, int] = Field(
        default_factory=lambda: dict(DEFAULT_REMINDER_THRESHOLDS),
        validate_default=True,
    )
    email_subject_template: str = DEFAULT_EMAIL_SUBJECT_TEMPLATE
    email_body_template: str = DEFAULT_EMAIL_BODY_TEMPLATE
    sms_enabled: bool = False
    sms_template: str = DEFAULT_SMS_TEMPLATE

    # Digests
    daily_digest_enabled: bool = False
    daily_digest_time: TimeOfDay | None = Field(None, pattern=_TIME_PATTERN)
    weekly_digest_enabled: bool = False
    weekly_digest_day: Weekday | None = Field(None, ge=0, le=6)
    weekly_digest_time: TimeOfDay | None = Field(None, pattern=_TIME_PATTERN)

    # Report delay notices
    report_delay_enabled: bool = False
    report_delay_threshold_days: int = Field(0, ge=0)

    # Calendar
    recipient_ids: list[RecipientID] = Field(default_factory=list)
    non_sending_weekdays: list[Weekday] = Field(
        default_factory=lambda: list(DEFAULT_NON_SENDING_WEEKDAYS)
    )
    timezone: str = DEFAULT_TIMEZONE
    updated_at: datetime | None = None

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {value}") from e
        return value


def parse_time_of_day(value: TimeOfDay) -> tuple[int, int]:
    """Split an ``HH:MM`` string into ``(hour, minute)``."""
    hour, minute = value.split(":")
    return int(hour), int(minute)

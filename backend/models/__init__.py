"""Pydantic models for data validation and type checking."""

from models.delivery import (
    DeliveryLogEntry,
    DeliveryTally,
    DispatchResult,
    RunLock,
    RunStage,
    SendResult,
)
from models.digest import (
    DailyDigest,
    DigestItem,
    OverdueReport,
    ReminderMessage,
    ReportDelayMessage,
    WeeklyDigest,
)
from models.recipient import Recipient
from models.settings import NotificationSettings
from models.work_item import (
    AnalyticsTask,
    Campaign,
    Report,
    Urgency,
    WorkItem,
    WorkStatus,
    anchor_time,
    schedule_date,
)

__all__ = [
    "AnalyticsTask",
    "Campaign",
    "Report",
    "Urgency",
    "WorkItem",
    "WorkStatus",
    "anchor_time",
    "schedule_date",
    "Recipient",
    "NotificationSettings",
    "DeliveryLogEntry",
    "DeliveryTally",
    "DispatchResult",
    "RunLock",
    "RunStage",
    "SendResult",
    "DailyDigest",
    "DigestItem",
    "OverdueReport",
    "ReminderMessage",
    "ReportDelayMessage",
    "WeeklyDigest",
]

"""Pydantic models for delivery tracking, run locks and dispatch results."""

from datetime import datetime
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

from models.types import LogicalEventID

EventKind = Literal[
    "campaign", "analytics", "report", "daily-digest", "weekly-digest"
]
Channel = Literal["email", "sms"]
DeliveryStatus = Literal["success", "failed"]


class DeliveryLogEntry(BaseModel):
    """One notification attempt. Written once, never updated."""

    model_config = ConfigDict(frozen=True)

    event_id: LogicalEventID
    event_kind: EventKind
    event_title: str = ""
    recipient_email: str
    recipient_name: str = ""
    recipient_phone: str | None = None
    channel: Channel = "email"
    status: DeliveryStatus
    sent_at: datetime
    error_message: str | None = None
    message_id: str | None = None
    digest_stats: dict[str, int] | None = None

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


class RunLock(BaseModel):
    """Claim ticket for one logical period. Its existence is the lock."""

    id: LogicalEventID
    created_at: datetime
    status: str = "processing"


class SendResult(BaseModel):
    """Outcome of a single transport call."""

    success: bool
    message_id: str | None = None
    error: str | None = None


class RunStage(str, Enum):
    IDLE = "idle"
    ELIGIBILITY_CHECKED = "eligibility_checked"
    LOG_CHECKED = "log_checked"
    LOCK_ACQUIRED = "lock_acquired"
    CONTENT_BUILT = "content_built"
    DISPATCHING = "dispatching"
    COMPLETED = "completed"


class DispatchResult(BaseModel):
    """Tagged result of one run-once invocation."""

    status: Literal["completed", "skipped", "failed"]
    stage: RunStage = RunStage.IDLE
    reason: str | None = None
    sent: int = 0
    failed: int = 0
    skipped: int = 0
    first_error: str | None = None

    @classmethod
    def skip(cls, stage: RunStage, reason: str) -> "DispatchResult":
        return cls(status="skipped", stage=stage, reason=reason)

    @classmethod
    def fail(cls, stage: RunStage, reason: str) -> "DispatchResult":
        return cls(status="failed", stage=stage, reason=reason, first_error=reason)

    def counts(self) -> dict[str, int]:
        return {"sent": self.sent, "failed": self.failed, "skipped": self.skipped}


class DeliveryTally(BaseModel):
    """Mutable counters accumulated while dispatching."""

    sent: int = 0
    failed: int = 0
    skipped: int = 0
    first_error: str | None = None

    def record_failure(self, error: str | None) -> None:
        self.failed += 1
        if self.first_error is None and error:
            self.first_error = error

    def finish(self, stage: RunStage = RunStage.COMPLETED) -> DispatchResult:
        return DispatchResult(
            status="completed",
            stage=stage,
            sent=self.sent,
            failed=self.failed,
            skipped=self.skipped,
            first_error=self.first_error,
        )

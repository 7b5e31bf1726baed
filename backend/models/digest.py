"""Pydantic models for digest payloads and single-item messages."""

from datetime import date, datetime

from pydantic import BaseModel, Field

from models.types import WorkItemID


class DigestItem(BaseModel):
    """Campaign row shown in a daily or weekly digest."""

    id: WorkItemID
    title: str
    date: datetime
    urgency: str
    urgency_label: str
    assignee_id: str | None = None
    assignee_name: str
    status: str
    delay_text: str = ""


class OverdueReport(BaseModel):
    """Pending report past its due date."""

    id: WorkItemID
    title: str
    campaign_title: str | None = None
    due_date: datetime
    days_overdue: int
    assignee_id: str | None = None
    assignee_name: str


class DailyDigest(BaseModel):
    """End-of-day summary of campaigns scheduled for one calendar day."""

    digest_date: date
    completed: list[DigestItem] = Field(default_factory=list)
    incomplete: list[DigestItem] = Field(default_factory=list)

    @property
    def total_completed(self) -> int:
        return len(self.completed)

    @property
    def total_incomplete(self) -> int:
        return len(self.incomplete)

    def stats(self) -> dict[str, int]:
        return {
            "completed_count": self.total_completed,
            "incomplete_count": self.total_incomplete,
        }


class WeeklyDigest(BaseModel):
    """Overdue reports plus campaigns scheduled in the current ISO week."""

    week_start: datetime
    week_end: datetime
    overdue_reports: list[OverdueReport] = Field(default_factory=list)
    this_week_campaigns: list[DigestItem] = Field(default_factory=list)

    @property
    def total_overdue_reports(self) -> int:
        return len(self.overdue_reports)

    @property
    def total_this_week_campaigns(self) -> int:
        return len(self.this_week_campaigns)

    def stats(self) -> dict[str, int]:
        return {
            "overdue_reports_count": self.total_overdue_reports,
            "this_week_campaigns_count": self.total_this_week_campaigns,
        }


class ReminderMessage(BaseModel):
    """Rendered per-item reminder."""

    subject: str
    body: str
    html: str
    sms_body: str
    days_elapsed: int


class ReportDelayMessage(BaseModel):
    """Rendered overdue-report notice."""

    subject: str
    html: str
    days_overdue: int
    cc: list[str] = Field(default_factory=list)

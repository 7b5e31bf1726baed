"""Pydantic models for calendar work items (campaigns, analytics tasks, reports)."""

from datetime import datetime
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

from models.types import RecipientID, WorkItemID


class Urgency(str, Enum):
    VERY_HIGH = "Very High"
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class WorkStatus(str, Enum):
    PLANNED = "Planned"
    DONE = "Done"
    CANCELLED = "Cancelled"
    PENDING = "Pending"


TERMINAL_STATUSES = frozenset({WorkStatus.DONE, WorkStatus.CANCELLED})

# Unknown urgency sorts after every known level
URGENCY_RANK: dict[Urgency, int] = {
    Urgency.VERY_HIGH: 0,
    Urgency.HIGH: 1,
    Urgency.MEDIUM: 2,
    Urgency.LOW: 3,
}
UNKNOWN_URGENCY_RANK = 99


class WorkItemBase(BaseModel):
    """Fields shared by every kind of work item."""

    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: WorkItemID
    title: str = Field(..., min_length=1)
    assignee_id: RecipientID | None = None
    urgency: Urgency | str = Field(Urgency.MEDIUM, union_mode="left_to_right")
    status: WorkStatus = WorkStatus.PLANNED
    note: str | None = None


class Campaign(WorkItemBase):
    """Campaign scheduled on the calendar."""

    kind: Literal["campaign"] = "campaign"
    date: datetime
    created_at: datetime | None = None


class AnalyticsTask(WorkItemBase):
    """Analytics task scheduled on the analytics calendar."""

    kind: Literal["analytics"] = "analytics"
    date: datetime
    created_at: datetime | None = None


class Report(WorkItemBase):
    """Post-campaign report with a due date."""

    kind: Literal["report"] = "report"
    status: WorkStatus = WorkStatus.PENDING
    due_date: datetime
    campaign_title: str | None = None


WorkItem = Annotated[
    Union[Campaign, AnalyticsTask, Report], Field(discriminator="kind")
]


def anchor_time(item: Campaign | AnalyticsTask | Report) -> datetime | None:
    """Timestamp that elapsed-time rules are measured from."""
    if isinstance(item, Report):
        return item.due_date
    return item.created_at


def schedule_date(item: Campaign | AnalyticsTask | Report) -> datetime:
    """Calendar date the item is placed on."""
    if isinstance(item, Report):
        return item.due_date
    return item.date


def urgency_rank(urgency: Urgency | str) -> int:
    try:
        return URGENCY_RANK[Urgency(urgency)]
    except ValueError:
        return UNKNOWN_URGENCY_RANK

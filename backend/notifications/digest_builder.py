"""
Digest content aggregation.

Selects and groups work items for the end-of-day and weekly digests.
No I/O: output depends only on the item snapshot, the recipient list used
for name lookups and the reference time.
"""

from datetime import datetime, time, timedelta
from typing import Iterable, Literal

from dateutil.relativedelta import MO, relativedelta

from config.notification_defaults import UNASSIGNED_LABEL, UNKNOWN_ASSIGNEE_LABEL
from models.digest import DailyDigest, DigestItem, OverdueReport, WeeklyDigest
from models.recipient import Recipient
from models.work_item import (
    AnalyticsTask,
    Campaign,
    Report,
    WorkStatus,
    schedule_date,
    urgency_rank,
)
from notifications.eligibility import days_overdue, is_report_overdue
from shared.utils import to_local, urgency_label

DigestPeriod = Literal["day", "week"]


def get_assignee_name(assignee_id: str | None, recipients: Iterable[Recipient]) -> str:
    """Display name for an assignee id, with placeholders for unassigned/unknown."""
    if not assignee_id:
        return UNASSIGNED_LABEL
    for recipient in recipients:
        if recipient.id == assignee_id:
            return recipient.display_name or UNKNOWN_ASSIGNEE_LABEL
    return UNKNOWN_ASSIGNEE_LABEL


def calculate_delay_text(created_at: datetime | None, now: datetime) -> str:
    """Human readable time since creation, e.g. ``2 gün 3 saat``."""
    if created_at is None:
        return "-"
    created_at = _local(created_at, now)
    diff_seconds = (now - created_at).total_seconds()
    if diff_seconds < 0:
        return "-"

    total_hours = int(diff_seconds // 3600)
    days, hours = divmod(total_hours, 24)
    if days > 0 and hours > 0:
        return f"{days} gün {hours} saat"
    if days > 0:
        return f"{days} gün"
    if hours > 0:
        return f"{hours} saat"
    return "< 1 saat"


def week_window(now: datetime) -> tuple[datetime, datetime]:
    """Monday 00:00 through Sunday 23:59:59.999999 of the ISO week containing ``now``."""
    monday = (now + relativedelta(weekday=MO(-1))).date()
    week_start = datetime.combine(monday, time.min, tzinfo=now.tzinfo)
    week_end = datetime.combine(monday + timedelta(days=6), time.max, tzinfo=now.tzinfo)
    return week_start, week_end


def _local(value: datetime, now: datetime) -> datetime:
    return to_local(value, now.tzinfo)


def _to_digest_item(
    campaign: Campaign, recipients: list[Recipient], now: datetime
) -> DigestItem:
    return DigestItem(
        id=campaign.id,
        title=campaign.title,
        date=_local(campaign.date, now),
        urgency=str(getattr(campaign.urgency, "value", campaign.urgency)),
        urgency_label=urgency_label(campaign.urgency),
        assignee_id=campaign.assignee_id,
        assignee_name=get_assignee_name(campaign.assignee_id, recipients),
        status=campaign.status.value,
        delay_text=calculate_delay_text(campaign.created_at, now),
    )


def build_daily_digest(
    campaigns: list[Campaign], recipients: list[Recipient], now: datetime
) -> DailyDigest:
    """
    Build the end-of-day digest.

    Campaigns on the same local calendar day as ``now`` are split into
    completed and incomplete; cancelled campaigns are left out.

    Args:
        campaigns: Campaign snapshot (other dates are ignored)
        recipients: Known people, used for assignee names
        now: Reference time in the local timezone

    Returns:
        DailyDigest payload
    """
    today = now.date()
    completed: list[DigestItem] = []
    incomplete: list[DigestItem] = []

    for campaign in campaigns:
        if campaign.status == WorkStatus.CANCELLED:
            continue
        if _local(schedule_date(campaign), now).date() != today:
            continue

        details = _to_digest_item(campaign, recipients, now)
        if campaign.status == WorkStatus.DONE:
            completed.append(details)
        else:
            incomplete.append(details)

    return DailyDigest(digest_date=today, completed=completed, incomplete=incomplete)


def build_weekly_digest(
    reports: list[Report],
    campaigns: list[Campaign],
    recipients: list[Recipient],
    now: datetime,
) -> WeeklyDigest:
    """
    Build the weekly digest.

    Two independent selections:
    - pending reports past their due date, most overdue first
    - non-cancelled campaigns inside this Monday-Sunday week, by date then urgency
    """
    week_start, week_end = week_window(now)

    overdue = [
        OverdueReport(
            id=report.id,
            title=report.title,
            campaign_title=report.campaign_title,
            due_date=_local(report.due_date, now),
            days_overdue=days_overdue(report, now),
            assignee_id=report.assignee_id,
            assignee_name=get_assignee_name(report.assignee_id, recipients),
        )
        for report in reports
        if is_report_overdue(report, now)
    ]
    overdue.sort(key=lambda r: r.days_overdue, reverse=True)

    this_week = [
        campaign
        for campaign in campaigns
        if campaign.status != WorkStatus.CANCELLED
        and week_start <= _local(schedule_date(campaign), now) <= week_end
    ]
    this_week.sort(key=lambda c: (_local(schedule_date(c), now), urgency_rank(c.urgency)))

    return WeeklyDigest(
        week_start=week_start,
        week_end=week_end,
        overdue_reports=overdue,
        this_week_campaigns=[_to_digest_item(c, recipients, now) for c in this_week],
    )


def build_digest(
    items: list[Campaign | AnalyticsTask | Report],
    recipients: list[Recipient],
    period: DigestPeriod,
    now: datetime,
) -> DailyDigest | WeeklyDigest:
    """Build a digest for ``period`` from a mixed work item snapshot."""
    campaigns = [item for item in items if isinstance(item, Campaign)]
    if period == "day":
        return build_daily_digest(campaigns, recipients, now)
    if period == "week":
        reports = [item for item in items if isinstance(item, Report)]
        return build_weekly_digest(reports, campaigns, recipients, now)
    raise ValueError(f"Unknown digest period: {period}")

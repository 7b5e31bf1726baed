"""
Eligibility rules for reminders, report-delay notices and digests.

Every function here is pure: the answer depends only on the work item,
the settings and the reference time passed in. Callers layer the
"already sent" check on top, since that needs the delivery log.
"""

from datetime import datetime

from models.settings import NotificationSettings, parse_time_of_day
from models.work_item import (
    TERMINAL_STATUSES,
    AnalyticsTask,
    Campaign,
    Report,
    Urgency,
    WorkStatus,
    anchor_time,
)
from shared.utils import elapsed_whole_days, is_before


def is_non_sending_day(now: datetime, settings: NotificationSettings) -> bool:
    """True on configured quiet weekdays (Saturday/Sunday by default)."""
    return now.weekday() in settings.non_sending_weekdays


def reminder_threshold_days(
    settings: NotificationSettings, urgency: Urgency | str
) -> int | None:
    """Days an item of this urgency may sit before a reminder, None if unconfigured."""
    try:
        return settings.reminder_thresholds.get(Urgency(urgency))
    except ValueError:
        return None


def is_reminder_due(
    item: Campaign | AnalyticsTask,
    settings: NotificationSettings,
    now: datetime,
    test_mode: bool = False,
) -> bool:
    """
    Decide whether a campaign or analytics task qualifies for a reminder.

    Checks run in order and the first failing one wins:
    reminders enabled, item assigned, item not finished, not a quiet day,
    anchor timestamp present, whole days elapsed >= urgency threshold.
    Test mode short-circuits after the status check.

    Args:
        item: Work item snapshot
        settings: Notification settings for this run
        now: Reference time, in the settings' local timezone
        test_mode: Skip calendar and elapsed-time rules

    Returns:
        True if a reminder is due
    """
    if not settings.reminders_enabled:
        return False
    if not item.assignee_id:
        return False
    if item.status in TERMINAL_STATUSES:
        return False

    if test_mode:
        return True

    if is_non_sending_day(now, settings):
        return False

    anchor = anchor_time(item)
    if anchor is None:
        return False

    threshold = reminder_threshold_days(settings, item.urgency)
    if threshold is None:
        return False

    return elapsed_whole_days(now, anchor) >= threshold


def days_overdue(report: Report, now: datetime) -> int:
    return elapsed_whole_days(now, report.due_date)


def is_report_overdue(report: Report, now: datetime) -> bool:
    """Pending report whose due date lies strictly before ``now``."""
    if report.status != WorkStatus.PENDING:
        return False
    return is_before(report.due_date, now)


def is_report_delay_due(
    report: Report,
    settings: NotificationSettings,
    now: datetime,
    test_mode: bool = False,
) -> bool:
    """
    Decide whether an overdue report should trigger a delay notice.

    A grace of 0 days notifies as soon as the report becomes overdue.
    """
    if not settings.report_delay_enabled and not test_mode:
        return False
    if not test_mode and is_non_sending_day(now, settings):
        return False
    if not is_report_overdue(report, now):
        return False
    return days_overdue(report, now) >= settings.report_delay_threshold_days


# ── Digest gates ───────────────────────────────────────────────────────


def is_digest_time_reached(now: datetime, target_time: str) -> bool:
    """(hour, minute) of ``now`` is at or after the ``HH:MM`` target, no upper bound."""
    target_hour, target_minute = parse_time_of_day(target_time)
    return (now.hour, now.minute) >= (target_hour, target_minute)


def daily_digest_skip_reason(
    settings: NotificationSettings, now: datetime, ignore_schedule: bool = False
) -> str | None:
    """Reason the daily digest must not run now, or None if it may."""
    if not settings.daily_digest_enabled:
        return "disabled"
    if ignore_schedule:
        return None
    if not settings.daily_digest_time:
        return "no_time_set"
    if not is_digest_time_reached(now, settings.daily_digest_time):
        return "not_time_yet"
    return None


def weekly_digest_skip_reason(
    settings: NotificationSettings, now: datetime, ignore_schedule: bool = False
) -> str | None:
    """Reason the weekly digest must not run now, or None if it may."""
    if not settings.weekly_digest_enabled:
        return "disabled"
    if ignore_schedule:
        return None
    if settings.weekly_digest_day is None:
        return "no_day_set"
    if not settings.weekly_digest_time:
        return "no_time_set"
    if now.weekday() != settings.weekly_digest_day:
        return "wrong_day"
    if not is_digest_time_reached(now, settings.weekly_digest_time):
        return "not_time_yet"
    return None

"""
Placeholder templates for per-item reminders and report-delay notices.

Admin-configured subject/body/SMS templates contain ``{name}`` placeholders.
Only names listed for the template kind in ``TEMPLATE_PLACEHOLDERS`` are
substituted; any other brace text is left as written.
"""

import re
from datetime import datetime
from typing import Mapping

from config.notification_defaults import (
    EVENT_TYPE_LABELS,
    TEMPLATE_PLACEHOLDERS,
)
from models.digest import ReminderMessage, ReportDelayMessage
from models.recipient import Recipient
from models.settings import NotificationSettings
from models.work_item import AnalyticsTask, Campaign, Report, anchor_time
from notifications.email_sender import build_reminder_html, build_report_delay_html
from notifications.eligibility import days_overdue
from shared.utils import elapsed_whole_days, urgency_label

_PLACEHOLDER_RE = re.compile(r"\{([A-Za-z_]+)\}")


def render_template(
    template: str,
    variables: Mapping[str, str],
    kind: str | None = None,
) -> str:
    """
    Substitute ``{name}`` placeholders in a single pass.

    Every occurrence of a recognised placeholder is replaced literally;
    substituted values are never rescanned. Placeholders without a value
    (or not recognised for ``kind``) stay in the output unchanged.

    Args:
        template: Template text
        variables: Placeholder name -> replacement text
        kind: Template kind from TEMPLATE_PLACEHOLDERS; None accepts any name

    Returns:
        Rendered text

    Examples:
        >>> render_template("{title} - {days} gün", {"title": "X", "days": "3"})
        'X - 3 gün'
    """
    allowed = TEMPLATE_PLACEHOLDERS.get(kind) if kind else None

    def _substitute(match: re.Match) -> str:
        name = match.group(1)
        if allowed is not None and name not in allowed:
            return match.group(0)
        if name not in variables:
            return match.group(0)
        return str(variables[name])

    return _PLACEHOLDER_RE.sub(_substitute, template)


def reminder_variables(
    item: Campaign | AnalyticsTask, assignee: Recipient, days_elapsed: int
) -> dict[str, str]:
    return {
        "title": item.title,
        "urgency": urgency_label(item.urgency),
        "days": str(days_elapsed),
        "assignee": assignee.name,
        "eventType": EVENT_TYPE_LABELS.get(item.kind, item.kind),
    }


def build_reminder_message(
    item: Campaign | AnalyticsTask,
    assignee: Recipient,
    settings: NotificationSettings,
    now: datetime,
) -> ReminderMessage:
    """Render subject, body, HTML and SMS text for one work item reminder."""
    anchor = anchor_time(item)
    days_elapsed = max(elapsed_whole_days(now, anchor), 0) if anchor else 0
    variables = reminder_variables(item, assignee, days_elapsed)

    subject = render_template(settings.email_subject_template, variables, "email_subject")
    body = render_template(settings.email_body_template, variables, "email_body")
    sms_body = render_template(settings.sms_template, variables, "sms")

    html = build_reminder_html(
        assignee_name=assignee.name,
        event_title=item.title,
        event_type_label=variables["eventType"],
        urgency=item.urgency,
        days_elapsed=days_elapsed,
        body=body,
    )

    return ReminderMessage(
        subject=subject,
        body=body,
        html=html,
        sms_body=sms_body,
        days_elapsed=days_elapsed,
    )


def resolve_cc_emails(
    recipient_ids: list[str], recipients: list[Recipient]
) -> list[str]:
    """Map configured recipient ids to email addresses, dropping ids without one."""
    by_id = {recipient.id: recipient for recipient in recipients}
    emails = []
    for recipient_id in recipient_ids:
        recipient = by_id.get(recipient_id)
        if recipient and recipient.email:
            emails.append(recipient.email)
    return emails


def build_report_delay_message(
    report: Report,
    assignee: Recipient,
    now: datetime,
    cc: list[str] | None = None,
) -> ReportDelayMessage:
    """Render the overdue notice for one report."""
    overdue_days = days_overdue(report, now)
    subject = f"⚠️ Rapor Gecikmesi: {report.title} ({overdue_days} gün)"
    html = build_report_delay_html(
        assignee_name=assignee.name,
        report_title=report.title,
        campaign_title=report.campaign_title,
        days_overdue=overdue_days,
    )
    return ReportDelayMessage(
        subject=subject,
        html=html,
        days_overdue=overdue_days,
        cc=list(cc or []),
    )

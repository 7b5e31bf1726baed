"""
Run-once dispatch for digests, reminders and report-delay notices.

Each ``run_*`` function is a single invocation from the external scheduler.
Gates are evaluated in a fixed order and every expected early exit is
returned as a skipped ``DispatchResult``:

    eligibility -> delivery log -> lock -> credentials -> content -> send

Digests share one logical event id per period, so one lock and one log
check cover every recipient. Reminders and report-delay notices are
deduplicated per work item inside the loop.
"""

import os
import time
from datetime import datetime
from typing import Callable, Optional

from config.notification_defaults import DEFAULT_SEND_DELAY_SECONDS
from models.delivery import (
    Channel,
    DeliveryLogEntry,
    DeliveryTally,
    DispatchResult,
    EventKind,
    RunStage,
    SendResult,
)
from models.digest import DailyDigest, WeeklyDigest
from models.recipient import Recipient
from models.settings import NotificationSettings
from models.work_item import AnalyticsTask, Campaign, Report
from notifications import delivery_log, run_lock
from notifications.digest_builder import (
    build_daily_digest,
    build_weekly_digest,
    week_window,
)
from notifications.eligibility import (
    daily_digest_skip_reason,
    is_reminder_due,
    is_report_delay_due,
    weekly_digest_skip_reason,
)
from notifications.email_sender import (
    EmailTransport,
    build_daily_digest_html,
    build_weekly_digest_html,
    daily_digest_subject,
    weekly_digest_subject,
)
from notifications.error_logger import log_notification_error
from notifications.sms_sender import SmsTransport
from notifications.templates import (
    build_reminder_message,
    build_report_delay_message,
    resolve_cc_emails,
)
from shared.db import DocumentStore


def default_send_delay() -> float:
    """Inter-send throttle in seconds (``NOTIFICATION_SEND_DELAY``)."""
    return float(os.getenv("NOTIFICATION_SEND_DELAY", DEFAULT_SEND_DELAY_SECONDS))


# ── Logical event ids ──────────────────────────────────────────────────


def daily_digest_event_id(now: datetime) -> str:
    return f"daily-digest-{now.date().isoformat()}"


def weekly_digest_event_id(now: datetime) -> str:
    week_start, _ = week_window(now)
    return f"weekly-digest-{week_start.date().isoformat()}"


def reminder_lock_id(item_id: str, now: datetime) -> str:
    return f"reminder-{item_id}-{now.date().isoformat()}"


def report_delay_event_id(report_id: str, now: datetime) -> str:
    return f"report-delay-{report_id}-{now.date().isoformat()}"


# ── Shared steps ───────────────────────────────────────────────────────


def resolve_digest_recipients(
    settings: NotificationSettings, recipients: list[Recipient]
) -> list[Recipient]:
    """Configured recipient set, narrowed to digest recipients with an email."""
    configured = set(settings.recipient_ids)
    return [
        recipient
        for recipient in recipients
        if recipient.id in configured and recipient.email and recipient.is_digest_recipient
    ]


def _already_sent(
    store: DocumentStore,
    event_id: str,
    event_kind: EventKind | None = None,
    channel: Channel | None = None,
) -> bool:
    # The lock is the correctness gate; an unreadable log only loses the fast path
    try:
        return delivery_log.was_already_sent(store, event_id, event_kind, channel)
    except Exception as e:
        print(f"  ⚠️  Delivery log check failed for {event_id}: {e}")
        return False


def _send_email(
    transport: EmailTransport,
    to: str,
    subject: str,
    html: str,
    cc: Optional[list[str]] = None,
) -> SendResult:
    try:
        return transport.send(to, subject, html, cc=cc)
    except Exception as e:
        return SendResult(success=False, error=str(e))


def _send_sms(transport: SmsTransport, to: str, body: str) -> SendResult:
    try:
        return transport.send(to, body)
    except Exception as e:
        return SendResult(success=False, error=str(e))


def _handle_result(
    store: DocumentStore,
    tally: DeliveryTally,
    result: SendResult,
    entry_fields: dict,
    now: datetime,
) -> None:
    """Count, report and log one transport outcome."""
    target = entry_fields.get("recipient_phone") or entry_fields["recipient_email"]

    if result.success:
        print(f"  ✓ Sent {entry_fields['event_kind']} {entry_fields['event_id']} to {target}")
        tally.sent += 1
    else:
        error_msg = result.error or "Unknown error"
        print(f"  ✗ Failed to send {entry_fields['event_id']} to {target}: {error_msg}")
        tally.record_failure(error_msg)
        error_file = log_notification_error(
            error_type="sending",
            error_message=error_msg,
            context={
                "event_id": entry_fields["event_id"],
                "event_kind": entry_fields["event_kind"],
                "recipient": target,
                "channel": entry_fields.get("channel", "email"),
            },
        )
        print(f"    Error details logged to: {error_file}")

    delivery_log.record(
        store,
        DeliveryLogEntry(
            **entry_fields,
            status="success" if result.success else "failed",
            sent_at=now,
            error_message=None if result.success else (result.error or "Unknown error"),
            message_id=result.message_id,
        ),
    )


# ── Digests ────────────────────────────────────────────────────────────


def _run_digest(
    *,
    store: DocumentStore,
    settings: NotificationSettings,
    recipients: list[Recipient],
    email_transport: EmailTransport,
    now: datetime,
    skip_reason: Optional[str],
    event_id: str,
    event_kind: EventKind,
    build: Callable[[], DailyDigest | WeeklyDigest],
    subject_for: Callable,
    html_for: Callable,
    dry_run: bool,
    send_delay: float,
) -> DispatchResult:
    if skip_reason:
        return DispatchResult.skip(RunStage.IDLE, skip_reason)

    if _already_sent(store, event_id):
        print(f"{event_id} already sent, skipping")
        return DispatchResult.skip(RunStage.ELIGIBILITY_CHECKED, "already_sent")

    if not dry_run:
        if not run_lock.try_acquire(store, event_id, now):
            print(f"{event_id} is locked by another run, skipping")
            return DispatchResult.skip(RunStage.LOG_CHECKED, "lock_not_acquired")

        if not email_transport.is_configured():
            error_file = log_notification_error(
                error_type="setup",
                error_message="Email transport credentials are missing",
                context={"event_id": event_id},
            )
            print(f"✗ Email credentials missing; {event_id} stays locked. Details: {error_file}")
            return DispatchResult.fail(RunStage.LOCK_ACQUIRED, "missing_credentials")

    digest = build()
    targets = resolve_digest_recipients(settings, recipients)
    if not targets:
        print(f"No eligible recipients for {event_id}")
        return DispatchResult.skip(RunStage.CONTENT_BUILT, "no_recipients")

    subject = subject_for(digest)
    print(f"Dispatching {event_id} to {len(targets)} recipient(s)...")

    tally = DeliveryTally()
    for index, recipient in enumerate(targets):
        html = html_for(recipient.name, digest)

        if dry_run:
            print(f"  [DRY RUN] Would send {event_id} to {recipient.email}")
            tally.sent += 1
            continue

        if index > 0 and send_delay:
            time.sleep(send_delay)

        result = _send_email(email_transport, recipient.email, subject, html)
        _handle_result(
            store,
            tally,
            result,
            {
                "event_id": event_id,
                "event_kind": event_kind,
                "event_title": subject,
                "recipient_email": recipient.email,
                "recipient_name": recipient.name,
                "channel": "email",
                "digest_stats": digest.stats(),
            },
            now,
        )

    return tally.finish()


def run_daily_digest(
    store: DocumentStore,
    settings: NotificationSettings,
    campaigns: list[Campaign],
    recipients: list[Recipient],
    email_transport: EmailTransport,
    now: datetime,
    ignore_schedule: bool = False,
    dry_run: bool = False,
    send_delay: Optional[float] = None,
) -> DispatchResult:
    """
    Send today's end-of-day digest at most once.

    Args:
        store: Document store holding logs and locks
        settings: Settings for this run
        campaigns: Campaign snapshot
        recipients: Known people
        email_transport: Outbound email collaborator
        now: Reference time in the settings' timezone
        ignore_schedule: Bypass the time-of-day gate (manual "send now")
        dry_run: Build and count without claiming the lock or sending
        send_delay: Seconds between sends (defaults to NOTIFICATION_SEND_DELAY)

    Returns:
        DispatchResult with sent/failed/skipped counts
    """
    return _run_digest(
        store=store,
        settings=settings,
        recipients=recipients,
        email_transport=email_transport,
        now=now,
        skip_reason=daily_digest_skip_reason(settings, now, ignore_schedule),
        event_id=daily_digest_event_id(now),
        event_kind="daily-digest",
        build=lambda: build_daily_digest(campaigns, recipients, now),
        subject_for=daily_digest_subject,
        html_for=build_daily_digest_html,
        dry_run=dry_run,
        send_delay=default_send_delay() if send_delay is None else send_delay,
    )


def run_weekly_digest(
    store: DocumentStore,
    settings: NotificationSettings,
    reports: list[Report],
    campaigns: list[Campaign],
    recipients: list[Recipient],
    email_transport: EmailTransport,
    now: datetime,
    ignore_schedule: bool = False,
    dry_run: bool = False,
    send_delay: Optional[float] = None,
) -> DispatchResult:
    """Send this week's digest at most once. Arguments as ``run_daily_digest``."""
    return _run_digest(
        store=store,
        settings=settings,
        recipients=recipients,
        email_transport=email_transport,
        now=now,
        skip_reason=weekly_digest_skip_reason(settings, now, ignore_schedule),
        event_id=weekly_digest_event_id(now),
        event_kind="weekly-digest",
        build=lambda: build_weekly_digest(reports, campaigns, recipients, now),
        subject_for=weekly_digest_subject,
        html_for=build_weekly_digest_html,
        dry_run=dry_run,
        send_delay=default_send_delay() if send_delay is None else send_delay,
    )


# ── Per-item notices ───────────────────────────────────────────────────


def run_reminders(
    store: DocumentStore,
    settings: NotificationSettings,
    items: list[Campaign | AnalyticsTask],
    recipients: list[Recipient],
    email_transport: EmailTransport,
    now: datetime,
    sms_transport: Optional[SmsTransport] = None,
    test_mode: bool = False,
    dry_run: bool = False,
    send_delay: Optional[float] = None,
) -> DispatchResult:
    """
    Send reminders for every work item that is due.

    Items are handled one by one: log check by item id, a per-item lock for
    today, email send, optional SMS, log write. A failure on one item never
    stops the loop.

    Args:
        test_mode: Ignore the calendar gate, thresholds and the delivery log
    """
    if not settings.reminders_enabled:
        return DispatchResult.skip(RunStage.IDLE, "disabled")

    if not dry_run and not email_transport.is_configured():
        print("✗ Email credentials missing, reminders not processed")
        return DispatchResult.skip(RunStage.IDLE, "missing_credentials")

    send_delay = default_send_delay() if send_delay is None else send_delay
    sms_active = bool(
        settings.sms_enabled and sms_transport is not None and sms_transport.is_configured()
    )
    by_id = {recipient.id: recipient for recipient in recipients}

    due = [item for item in items if is_reminder_due(item, settings, now, test_mode)]
    print(f"Found {len(due)} item(s) due for a reminder")

    tally = DeliveryTally()
    sent_any = False
    for item in due:
        assignee = by_id.get(item.assignee_id)
        if assignee is None or not assignee.email:
            print(f"  ⚠️  Skipping {item.id}: assignee not found or has no email")
            tally.skipped += 1
            continue

        wants_sms = bool(sms_active and assignee.phone)
        email_done = not test_mode and _already_sent(store, item.id, item.kind, "email")
        sms_done = wants_sms and not test_mode and _already_sent(store, item.id, item.kind, "sms")
        if email_done and (sms_done or not wants_sms):
            tally.skipped += 1
            continue

        if dry_run:
            print(f"  [DRY RUN] Would remind {assignee.email} about {item.title}")
            tally.sent += 1
            continue

        if not run_lock.try_acquire(store, reminder_lock_id(item.id, now), now):
            tally.skipped += 1
            continue

        if sent_any and send_delay:
            time.sleep(send_delay)
        sent_any = True

        message = build_reminder_message(item, assignee, settings, now)
        entry = {
            "event_id": item.id,
            "event_kind": item.kind,
            "event_title": item.title,
            "recipient_email": assignee.email,
            "recipient_name": assignee.name,
        }

        # Each channel is deduplicated on its own log entries
        if not email_done:
            result = _send_email(email_transport, assignee.email, message.subject, message.html)
            _handle_result(store, tally, result, {**entry, "channel": "email"}, now)

        if wants_sms and not sms_done:
            result = _send_sms(sms_transport, assignee.phone, message.sms_body)
            _handle_result(
                store,
                tally,
                result,
                {**entry, "channel": "sms", "recipient_phone": assignee.phone},
                now,
            )

    return tally.finish()


def run_report_delay_notices(
    store: DocumentStore,
    settings: NotificationSettings,
    reports: list[Report],
    recipients: list[Recipient],
    email_transport: EmailTransport,
    now: datetime,
    test_mode: bool = False,
    dry_run: bool = False,
    send_delay: Optional[float] = None,
) -> DispatchResult:
    """
    Notify assignees of overdue reports, once per report per day.

    Configured recipients are copied on every notice.
    """
    if not settings.report_delay_enabled and not test_mode:
        return DispatchResult.skip(RunStage.IDLE, "disabled")

    if not dry_run and not email_transport.is_configured():
        print("✗ Email credentials missing, report delays not processed")
        return DispatchResult.skip(RunStage.IDLE, "missing_credentials")

    send_delay = default_send_delay() if send_delay is None else send_delay
    by_id = {recipient.id: recipient for recipient in recipients}
    cc_emails = resolve_cc_emails(settings.recipient_ids, recipients)

    overdue = [
        report for report in reports if is_report_delay_due(report, settings, now, test_mode)
    ]
    print(f"Found {len(overdue)} overdue report(s)")

    tally = DeliveryTally()
    sent_any = False
    for report in overdue:
        assignee = by_id.get(report.assignee_id) if report.assignee_id else None
        if assignee is None or not assignee.email:
            print(f"  ⚠️  Skipping report {report.id}: assignee not found or has no email")
            tally.skipped += 1
            continue

        event_id = report_delay_event_id(report.id, now)
        if not test_mode and _already_sent(store, event_id, "report"):
            tally.skipped += 1
            continue

        if dry_run:
            print(f"  [DRY RUN] Would notify {assignee.email} about {report.title}")
            tally.sent += 1
            continue

        if not run_lock.try_acquire(store, event_id, now):
            tally.skipped += 1
            continue

        if sent_any and send_delay:
            time.sleep(send_delay)
        sent_any = True

        cc = [email for email in cc_emails if email != assignee.email]
        message = build_report_delay_message(report, assignee, now, cc=cc)
        result = _send_email(
            email_transport, assignee.email, message.subject, message.html, cc=message.cc or None
        )
        _handle_result(
            store,
            tally,
            result,
            {
                "event_id": event_id,
                "event_kind": "report",
                "event_title": report.title,
                "recipient_email": assignee.email,
                "recipient_name": assignee.name,
                "channel": "email",
            },
            now,
        )

    return tally.finish()


# ── Admin operations ───────────────────────────────────────────────────


def preview_daily_digest(
    campaigns: list[Campaign], recipients: list[Recipient], now: datetime
) -> DailyDigest:
    """Build today's digest without touching the log, the lock or a transport."""
    return build_daily_digest(campaigns, recipients, now)


def preview_weekly_digest(
    reports: list[Report],
    campaigns: list[Campaign],
    recipients: list[Recipient],
    now: datetime,
) -> WeeklyDigest:
    return build_weekly_digest(reports, campaigns, recipients, now)


def send_now(kind: str, **kwargs) -> DispatchResult:
    """
    Manual trigger: run a digest with the time/day gate bypassed.

    Dedup and lock gates still apply, so a digest already sent for the
    period is not sent again.
    """
    if kind == "daily":
        return run_daily_digest(ignore_schedule=True, **kwargs)
    if kind == "weekly":
        return run_weekly_digest(ignore_schedule=True, **kwargs)
    raise ValueError(f"Unknown digest kind: {kind}")

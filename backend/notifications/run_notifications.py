"""
CLI entry point invoked by the external scheduler.

Usage:
    # Send today's end-of-day digest if its scheduled time has passed
    uv run python -m notifications.run_notifications --daily-digest

    # Send this week's digest right now (dedup and lock still apply)
    uv run python -m notifications.run_notifications --weekly-digest --send-now

    # Per-item reminders / overdue report notices
    uv run python -m notifications.run_notifications --reminders
    uv run python -m notifications.run_notifications --report-delays --test-mode

    # Print a digest payload without sending anything
    uv run python -m notifications.run_notifications --daily-digest --preview

    # Dry run (don't claim locks or send)
    uv run python -m notifications.run_notifications --reminders --dry-run

    # Manual override after a crashed run
    uv run python -m notifications.run_notifications --release-lock daily-digest-2024-06-12
"""

import argparse
import sys

from models.delivery import DispatchResult
from models.settings import NotificationSettings
from notifications import repository
from notifications.dispatcher import (
    preview_daily_digest,
    preview_weekly_digest,
    run_daily_digest,
    run_reminders,
    run_report_delay_notices,
    run_weekly_digest,
)
from notifications.email_sender import ResendEmailTransport
from notifications.error_logger import log_notification_error
from notifications.run_lock import release_lock
from notifications.sms_sender import TwilioSmsTransport
from shared.db import DocumentStore, SupabaseDocumentStore
from shared.utils import local_now, print_summary

TITLES = {
    "daily_digest": "Daily Digest",
    "weekly_digest": "Weekly Digest",
    "reminders": "Reminders",
    "report_delays": "Report Delay Notices",
}


def run(
    kind: str,
    store: DocumentStore,
    settings: NotificationSettings,
    send_now: bool = False,
    test_mode: bool = False,
    dry_run: bool = False,
    preview: bool = False,
) -> DispatchResult | None:
    """
    Load snapshots and run one notification kind.

    Returns:
        DispatchResult, or None when only a preview was printed
    """
    now = local_now(settings.timezone)
    print(f"Processing {TITLES[kind]} at {now.isoformat()} ({settings.timezone})")

    recipients = repository.load_recipients(store)
    email_transport = ResendEmailTransport()

    if kind == "daily_digest":
        campaigns = repository.load_campaigns(store)
        if preview:
            digest = preview_daily_digest(campaigns, recipients, now)
            print(digest.model_dump_json(indent=2))
            return None
        return run_daily_digest(
            store, settings, campaigns, recipients, email_transport, now,
            ignore_schedule=send_now, dry_run=dry_run,
        )

    if kind == "weekly_digest":
        reports = repository.load_reports(store)
        campaigns = repository.load_campaigns(store)
        if preview:
            digest = preview_weekly_digest(reports, campaigns, recipients, now)
            print(digest.model_dump_json(indent=2))
            return None
        return run_weekly_digest(
            store, settings, reports, campaigns, recipients, email_transport, now,
            ignore_schedule=send_now, dry_run=dry_run,
        )

    if kind == "reminders":
        items = [*repository.load_campaigns(store), *repository.load_analytics_tasks(store)]
        return run_reminders(
            store, settings, items, recipients, email_transport, now,
            sms_transport=TwilioSmsTransport(), test_mode=test_mode, dry_run=dry_run,
        )

    if kind == "report_delays":
        reports = repository.load_reports(store)
        return run_report_delay_notices(
            store, settings, reports, recipients, email_transport, now,
            test_mode=test_mode, dry_run=dry_run,
        )

    raise ValueError(f"Unknown notification kind: {kind}")


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Run campaign calendar notifications once"
    )

    kinds = parser.add_mutually_exclusive_group(required=True)
    kinds.add_argument("--daily-digest", action="store_true", help="Send the end-of-day digest")
    kinds.add_argument("--weekly-digest", action="store_true", help="Send the weekly digest")
    kinds.add_argument("--reminders", action="store_true", help="Send per-item reminders")
    kinds.add_argument("--report-delays", action="store_true", help="Send overdue report notices")
    kinds.add_argument(
        "--release-lock",
        type=str,
        metavar="LOCK_ID",
        help="Delete a run lock so its period can be sent again",
    )

    parser.add_argument(
        "--send-now",
        action="store_true",
        help="Ignore the configured digest time/day (dedup and lock still apply)",
    )
    parser.add_argument(
        "--test-mode",
        action="store_true",
        help="Reminders/report delays: ignore calendar rules and the delivery log",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Dry run mode (don't claim locks or send messages)",
    )
    parser.add_argument(
        "--preview",
        action="store_true",
        help="Digests only: print the payload and exit",
    )

    args = parser.parse_args()

    if args.preview and not (args.daily_digest or args.weekly_digest):
        parser.error("--preview requires --daily-digest or --weekly-digest")

    store = SupabaseDocumentStore()

    if args.release_lock:
        released = release_lock(store, args.release_lock, operator="cli")
        sys.exit(0 if released else 1)

    kind = next(
        name for name in TITLES if getattr(args, name)
    )

    try:
        settings = repository.load_settings(store)
    except Exception as e:
        error_file = log_notification_error(
            error_type="setup",
            error_message=str(e),
            context={"kind": kind},
        )
        print(f"✗ Could not load notification settings. Details logged to: {error_file}")
        sys.exit(1)

    result = run(
        kind,
        store,
        settings,
        send_now=args.send_now,
        test_mode=args.test_mode,
        dry_run=args.dry_run,
        preview=args.preview,
    )
    if result is None:
        return

    if result.status != "completed":
        print(f"Run {result.status} at stage '{result.stage.value}': {result.reason}")

    print_summary(TITLES[kind], result.sent, result.failed, result.skipped)
    if result.first_error:
        print(f"First error: {result.first_error}")

    if result.status == "failed":
        sys.exit(1)


if __name__ == "__main__":
    main()

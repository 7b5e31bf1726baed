"""
Notification system for the campaign calendar.

This module handles:
- Deciding when reminders, report-delay notices and digests are due
- Claiming run-once locks per logical period
- Building digest and reminder content
- Sending via Resend (email) and Twilio (SMS) and logging every attempt
"""

from .dispatcher import (
    run_daily_digest,
    run_reminders,
    run_report_delay_notices,
    run_weekly_digest,
    send_now,
)

__all__ = [
    'run_daily_digest',
    'run_weekly_digest',
    'run_reminders',
    'run_report_delay_notices',
    'send_now',
]

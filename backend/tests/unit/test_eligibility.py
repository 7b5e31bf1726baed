"""
Unit tests for notifications/eligibility.py

Tests reminder thresholds, weekend suppression, report-delay rules
and the digest time/day gates.
"""

import unittest
from datetime import timedelta

from notifications.eligibility import (
    daily_digest_skip_reason,
    days_overdue,
    is_digest_time_reached,
    is_reminder_due,
    is_report_delay_due,
    is_report_overdue,
    reminder_threshold_days,
    weekly_digest_skip_reason,
)
from tests.fixtures.work_item_factory import (
    SATURDAY,
    WEDNESDAY,
    create_test_campaign,
    create_test_report,
    create_test_settings,
)


class TestIsReminderDue(unittest.TestCase):
    """Tests for is_reminder_due() function."""

    def setUp(self):
        self.now = WEDNESDAY
        self.created = self.now - timedelta(days=2, hours=1)

    def test_two_days_one_hour_meets_two_day_threshold(self):
        """2 days 1 hour floors to 2 whole days."""
        item = create_test_campaign(urgency="High", created_at=self.created)
        settings = create_test_settings(reminder_thresholds={"High": 2})

        self.assertTrue(is_reminder_due(item, settings, self.now))

    def test_two_days_one_hour_below_three_day_threshold(self):
        item = create_test_campaign(urgency="High", created_at=self.created)
        settings = create_test_settings(reminder_thresholds={"High": 3})

        self.assertFalse(is_reminder_due(item, settings, self.now))

    def test_saturday_is_suppressed(self):
        """Weekend suppression wins regardless of elapsed days."""
        item = create_test_campaign(created_at=SATURDAY - timedelta(days=30))
        settings = create_test_settings()

        self.assertFalse(is_reminder_due(item, settings, SATURDAY))

    def test_test_mode_bypasses_weekend_and_threshold(self):
        item = create_test_campaign(created_at=SATURDAY - timedelta(hours=1))
        settings = create_test_settings()

        self.assertTrue(is_reminder_due(item, settings, SATURDAY, test_mode=True))

    def test_disabled_reminders(self):
        item = create_test_campaign(created_at=self.created)
        settings = create_test_settings(reminders_enabled=False)

        self.assertFalse(is_reminder_due(item, settings, self.now))
        self.assertFalse(is_reminder_due(item, settings, self.now, test_mode=True))

    def test_unassigned_item(self):
        item = create_test_campaign(assignee_id=None, created_at=self.created)

        self.assertFalse(is_reminder_due(item, create_test_settings(), self.now, test_mode=True))

    def test_terminal_status(self):
        settings = create_test_settings()
        for status in ("Done", "Cancelled"):
            item = create_test_campaign(status=status, created_at=self.created)
            self.assertFalse(is_reminder_due(item, settings, self.now, test_mode=True))

    def test_missing_anchor(self):
        item = create_test_campaign(created_at=None)
        item = item.model_copy(update={"created_at": None})

        self.assertFalse(is_reminder_due(item, create_test_settings(), self.now))

    def test_unknown_urgency_has_no_threshold(self):
        item = create_test_campaign(urgency="Someday", created_at=self.created)
        settings = create_test_settings()

        self.assertIsNone(reminder_threshold_days(settings, "Someday"))
        self.assertFalse(is_reminder_due(item, settings, self.now))

    def test_custom_non_sending_days(self):
        """Configured quiet weekdays replace the weekend default."""
        item = create_test_campaign(created_at=self.created)
        settings = create_test_settings(non_sending_weekdays=[2])

        self.assertFalse(is_reminder_due(item, settings, self.now))
        self.assertTrue(
            is_reminder_due(item, create_test_settings(non_sending_weekdays=[]), self.now)
        )

    def test_same_inputs_same_answer(self):
        item = create_test_campaign(created_at=self.created)
        settings = create_test_settings()

        answers = {is_reminder_due(item, settings, self.now) for _ in range(5)}
        self.assertEqual(len(answers), 1)


class TestReportDelay(unittest.TestCase):
    """Tests for report overdue and delay-notice rules."""

    def test_days_overdue_floors(self):
        report = create_test_report(due_date=WEDNESDAY - timedelta(days=3, hours=23))

        self.assertEqual(days_overdue(report, WEDNESDAY), 3)

    def test_only_pending_reports_are_overdue(self):
        report = create_test_report(days_overdue=2, status="Done")

        self.assertFalse(is_report_overdue(report, WEDNESDAY))

    def test_future_due_date_not_overdue(self):
        report = create_test_report(due_date=WEDNESDAY + timedelta(hours=1))

        self.assertFalse(is_report_overdue(report, WEDNESDAY))

    def test_zero_grace_notifies_on_first_overdue_hour(self):
        report = create_test_report(due_date=WEDNESDAY - timedelta(hours=1))
        settings = create_test_settings(report_delay_threshold_days=0)

        self.assertTrue(is_report_delay_due(report, settings, WEDNESDAY))

    def test_grace_days_threshold(self):
        report = create_test_report(days_overdue=2)

        self.assertTrue(
            is_report_delay_due(report, create_test_settings(report_delay_threshold_days=2), WEDNESDAY)
        )
        self.assertFalse(
            is_report_delay_due(report, create_test_settings(report_delay_threshold_days=3), WEDNESDAY)
        )

    def test_weekend_and_disabled(self):
        report = create_test_report(due_date=SATURDAY - timedelta(days=4))

        self.assertFalse(is_report_delay_due(report, create_test_settings(), SATURDAY))
        self.assertTrue(is_report_delay_due(report, create_test_settings(), SATURDAY, test_mode=True))
        self.assertFalse(
            is_report_delay_due(report, create_test_settings(report_delay_enabled=False), WEDNESDAY)
        )


class TestDigestGates(unittest.TestCase):
    """Tests for the daily and weekly digest gates."""

    def test_time_reached_has_no_upper_bound(self):
        self.assertTrue(is_digest_time_reached(WEDNESDAY.replace(hour=17, minute=0), "17:00"))
        self.assertTrue(is_digest_time_reached(WEDNESDAY.replace(hour=23, minute=59), "17:00"))
        self.assertFalse(is_digest_time_reached(WEDNESDAY.replace(hour=16, minute=59), "17:00"))

    def test_daily_reasons(self):
        early = WEDNESDAY.replace(hour=9)

        self.assertEqual(
            daily_digest_skip_reason(create_test_settings(daily_digest_enabled=False), WEDNESDAY),
            "disabled",
        )
        self.assertEqual(
            daily_digest_skip_reason(create_test_settings(daily_digest_time=None), WEDNESDAY),
            "no_time_set",
        )
        self.assertEqual(daily_digest_skip_reason(create_test_settings(), early), "not_time_yet")
        self.assertIsNone(daily_digest_skip_reason(create_test_settings(), WEDNESDAY))

    def test_daily_ignore_schedule_keeps_enabled_check(self):
        early = WEDNESDAY.replace(hour=9)

        self.assertIsNone(daily_digest_skip_reason(create_test_settings(), early, ignore_schedule=True))
        self.assertEqual(
            daily_digest_skip_reason(
                create_test_settings(daily_digest_enabled=False), early, ignore_schedule=True
            ),
            "disabled",
        )

    def test_weekly_requires_target_weekday(self):
        thursday = WEDNESDAY + timedelta(days=1)

        self.assertIsNone(weekly_digest_skip_reason(create_test_settings(weekly_digest_day=2), WEDNESDAY))
        self.assertEqual(
            weekly_digest_skip_reason(create_test_settings(weekly_digest_day=2), thursday),
            "wrong_day",
        )
        self.assertEqual(
            weekly_digest_skip_reason(create_test_settings(weekly_digest_day=None), WEDNESDAY),
            "no_day_set",
        )
        self.assertEqual(
            weekly_digest_skip_reason(create_test_settings(), WEDNESDAY.replace(hour=8)),
            "not_time_yet",
        )


if __name__ == "__main__":
    unittest.main()

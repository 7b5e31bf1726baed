"""
Unit tests for Pydantic models

Tests validation rules for work items, recipients, settings and
delivery records.
"""

import unittest
from datetime import datetime, timezone

from pydantic import TypeAdapter, ValidationError

from models import (
    AnalyticsTask,
    Campaign,
    DeliveryLogEntry,
    DeliveryTally,
    DispatchResult,
    NotificationSettings,
    Recipient,
    Report,
    RunStage,
    Urgency,
    WorkItem,
    WorkStatus,
    anchor_time,
    schedule_date,
)
from models.work_item import urgency_rank


class TestWorkItemModels(unittest.TestCase):
    """Tests for the work item union."""

    def test_discriminated_union(self):
        adapter = TypeAdapter(WorkItem)

        item = adapter.validate_python(
            {"kind": "report", "id": "r1", "title": "Report", "due_date": "2024-06-10T09:00:00Z"}
        )

        self.assertIsInstance(item, Report)
        self.assertEqual(item.status, WorkStatus.PENDING)

    def test_known_urgency_becomes_enum(self):
        campaign = Campaign(id="c1", title="X", date="2024-06-12T10:00:00Z", urgency="High")

        self.assertIs(campaign.urgency, Urgency.HIGH)

    def test_unknown_urgency_kept_as_text(self):
        campaign = Campaign(id="c1", title="X", date="2024-06-12T10:00:00Z", urgency="Urgent!!")

        self.assertEqual(campaign.urgency, "Urgent!!")
        self.assertEqual(urgency_rank(campaign.urgency), 99)
        self.assertEqual(urgency_rank("Very High"), 0)

    def test_empty_title_rejected(self):
        with self.assertRaises(ValidationError):
            Campaign(id="c1", title="   ", date="2024-06-12T10:00:00Z")

    def test_anchor_and_schedule_date(self):
        created = datetime(2024, 6, 1, tzinfo=timezone.utc)
        date = datetime(2024, 6, 12, tzinfo=timezone.utc)
        task = AnalyticsTask(id="t1", title="T", date=date, created_at=created)
        report = Report(id="r1", title="R", due_date=date)

        self.assertEqual(anchor_time(task), created)
        self.assertEqual(schedule_date(task), date)
        self.assertEqual(anchor_time(report), date)


class TestRecipient(unittest.TestCase):
    def test_blank_contact_fields_become_none(self):
        recipient = Recipient(id="u1", email="", phone="  ")

        self.assertIsNone(recipient.email)
        self.assertIsNone(recipient.phone)
        self.assertEqual(recipient.name, "u1")

    def test_invalid_email(self):
        with self.assertRaises(ValidationError):
            Recipient(id="u1", email="not-an-email")


class TestNotificationSettings(unittest.TestCase):
    def test_defaults(self):
        settings = NotificationSettings()

        self.assertFalse(settings.daily_digest_enabled)
        self.assertEqual(settings.non_sending_weekdays, [5, 6])
        self.assertEqual(settings.timezone, "Europe/Istanbul")
        self.assertEqual(settings.reminder_thresholds[Urgency.VERY_HIGH], 1)

    def test_time_format(self):
        with self.assertRaises(ValidationError):
            NotificationSettings(daily_digest_time="25:00")
        with self.assertRaises(ValidationError):
            NotificationSettings(weekly_digest_day=7)

    def test_unknown_timezone_rejected(self):
        with self.assertRaises(ValidationError):
            NotificationSettings(timezone="Europe/Istanbull")

        self.assertEqual(NotificationSettings(timezone="UTC").timezone, "UTC")

    def test_thresholds_keyed_by_urgency(self):
        settings = NotificationSettings(reminder_thresholds={"Low": 5})

        self.assertEqual(settings.reminder_thresholds, {Urgency.LOW: 5})


class TestDeliveryModels(unittest.TestCase):
    def test_log_entry_document(self):
        entry = DeliveryLogEntry(
            event_id="c1",
            event_kind="campaign",
            recipient_email="a@example.com",
            status="success",
            sent_at=datetime(2024, 6, 12, tzinfo=timezone.utc),
        )

        doc = entry.to_document()

        self.assertEqual(doc["sent_at"], "2024-06-12T00:00:00Z")
        self.assertNotIn("message_id", doc)

    def test_log_entry_rejects_unknown_status(self):
        with self.assertRaises(ValidationError):
            DeliveryLogEntry(
                event_id="c1",
                event_kind="campaign",
                recipient_email="a@example.com",
                status="queued",
                sent_at=datetime.now(timezone.utc),
            )

    def test_tally_keeps_first_error(self):
        tally = DeliveryTally()
        tally.sent += 1
        tally.record_failure("first")
        tally.record_failure("second")

        result = tally.finish()

        self.assertEqual(result.status, "completed")
        self.assertEqual(result.counts(), {"sent": 1, "failed": 2, "skipped": 0})
        self.assertEqual(result.first_error, "first")

    def test_skip_and_fail(self):
        skipped = DispatchResult.skip(RunStage.LOG_CHECKED, "lock_not_acquired")
        failed = DispatchResult.fail(RunStage.LOCK_ACQUIRED, "missing_credentials")

        self.assertEqual(skipped.status, "skipped")
        self.assertEqual(failed.first_error, "missing_credentials")


if __name__ == "__main__":
    unittest.main()

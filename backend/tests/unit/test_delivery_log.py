"""
Unit tests for notifications/delivery_log.py
"""

import os
import tempfile
import unittest
from unittest.mock import patch

from models.delivery import DeliveryLogEntry
from notifications.delivery_log import record, was_already_sent
from shared.db import LOGS_TABLE
from tests.fixtures.mock_helpers import InMemoryDocumentStore
from tests.fixtures.work_item_factory import WEDNESDAY


def make_entry(**overrides) -> DeliveryLogEntry:
    data = {
        "event_id": "daily-digest-2024-06-12",
        "event_kind": "daily-digest",
        "recipient_email": "ayse@example.com",
        "status": "success",
        "sent_at": WEDNESDAY,
    }
    data.update(overrides)
    return DeliveryLogEntry(**data)


class TestWasAlreadySent(unittest.TestCase):
    """Tests for was_already_sent() function."""

    def setUp(self):
        self.store = InMemoryDocumentStore()

    def test_success_entry_marks_sent(self):
        self.assertFalse(was_already_sent(self.store, "daily-digest-2024-06-12"))

        record(self.store, make_entry())

        self.assertTrue(was_already_sent(self.store, "daily-digest-2024-06-12"))

    def test_failed_entry_does_not_count(self):
        record(self.store, make_entry(status="failed", error_message="bounced"))

        self.assertFalse(was_already_sent(self.store, "daily-digest-2024-06-12"))

    def test_kind_and_channel_filters(self):
        """Item ids are only unique per kind; SMS dedups apart from email."""
        record(self.store, make_entry(event_id="abc", event_kind="campaign", channel="email"))

        self.assertTrue(was_already_sent(self.store, "abc", "campaign", "email"))
        self.assertFalse(was_already_sent(self.store, "abc", "analytics", "email"))
        self.assertFalse(was_already_sent(self.store, "abc", "campaign", "sms"))


class TestRecord(unittest.TestCase):
    """Tests for record() function."""

    def setUp(self):
        self.store = InMemoryDocumentStore()

    def test_appends_without_overwriting(self):
        record(self.store, make_entry(status="failed", error_message="timeout"))
        record(self.store, make_entry())

        rows = self.store.rows(LOGS_TABLE)
        self.assertEqual(len(rows), 2)
        self.assertEqual(sorted(row["status"] for row in rows), ["failed", "success"])

    def test_optional_fields_omitted(self):
        record(self.store, make_entry())

        row = self.store.rows(LOGS_TABLE)[0]
        self.assertNotIn("error_message", row)
        self.assertEqual(row["channel"], "email")

    @patch("notifications.delivery_log.log_notification_error", return_value="/tmp/err.txt")
    def test_write_failure_is_swallowed(self, mock_log_error):
        self.store.fail_on.add("add_document")

        self.assertFalse(record(self.store, make_entry()))
        mock_log_error.assert_called_once()
        self.assertEqual(mock_log_error.call_args.kwargs["error_type"], "logging")

    @patch("builtins.print")
    def test_write_failure_with_unwritable_error_log(self, _):
        self.store.fail_on.add("add_document")

        with tempfile.NamedTemporaryFile() as blocker:
            log_dir = os.path.join(blocker.name, "logs")
            with patch.dict(os.environ, {"NOTIFICATION_LOG_DIR": log_dir}):
                stored = record(self.store, make_entry())

        self.assertFalse(stored)


if __name__ == "__main__":
    unittest.main()

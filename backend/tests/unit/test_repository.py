"""
Unit tests for notifications/repository.py
"""

import unittest

from models.settings import NotificationSettings
from models.work_item import Campaign, Report
from notifications.repository import (
    load_campaigns,
    load_recipients,
    load_reports,
    load_settings,
    save_settings,
)
from shared.db import CAMPAIGNS_TABLE, RECIPIENTS_TABLE, REPORTS_TABLE, SETTINGS_TABLE
from tests.fixtures.mock_helpers import InMemoryDocumentStore


class TestSettings(unittest.TestCase):
    def setUp(self):
        self.store = InMemoryDocumentStore()

    def test_missing_document_gives_defaults(self):
        settings = load_settings(self.store)

        self.assertEqual(settings, NotificationSettings())

    def test_round_trip_stamps_updated_at(self):
        saved = save_settings(self.store, NotificationSettings(daily_digest_enabled=True))

        loaded = load_settings(self.store)

        self.assertIsNotNone(saved.updated_at)
        self.assertTrue(loaded.daily_digest_enabled)
        self.assertEqual(self.store.get_document(SETTINGS_TABLE, "default")["id"], "default")


class TestLoadSnapshots(unittest.TestCase):
    def setUp(self):
        self.store = InMemoryDocumentStore()

    def test_campaign_rows_parsed_with_kind(self):
        self.store.set_document(
            CAMPAIGNS_TABLE, "c1", {"title": "Promo", "date": "2024-06-12T10:00:00Z"}
        )

        campaigns = load_campaigns(self.store)

        self.assertEqual(len(campaigns), 1)
        self.assertIsInstance(campaigns[0], Campaign)
        self.assertEqual(campaigns[0].kind, "campaign")

    def test_malformed_rows_skipped(self):
        self.store.set_document(REPORTS_TABLE, "ok", {"title": "R", "due_date": "2024-06-10T00:00:00Z"})
        self.store.set_document(REPORTS_TABLE, "bad", {"title": "R"})

        reports = load_reports(self.store)

        self.assertEqual([r.id for r in reports], ["ok"])
        self.assertIsInstance(reports[0], Report)

    def test_recipients(self):
        self.store.set_document(RECIPIENTS_TABLE, "u1", {"display_name": "Ayşe", "email": ""})

        recipients = load_recipients(self.store)

        self.assertEqual(recipients[0].name, "Ayşe")
        self.assertIsNone(recipients[0].email)


if __name__ == "__main__":
    unittest.main()

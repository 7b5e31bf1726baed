"""
Unit tests for notifications/run_lock.py

Tests the compare-and-set lock: sequential and concurrent acquisition,
store failures and the manual release override.
"""

import os
import tempfile
import threading
import unittest
from unittest.mock import patch

from notifications.run_lock import is_locked, release_lock, try_acquire
from shared.db import LOCKS_TABLE
from tests.fixtures.mock_helpers import InMemoryDocumentStore
from tests.fixtures.work_item_factory import WEDNESDAY


class TestTryAcquire(unittest.TestCase):
    """Tests for try_acquire() function."""

    def setUp(self):
        self.store = InMemoryDocumentStore()

    def test_second_call_loses(self):
        """Sequential calls return (True, False)."""
        first = try_acquire(self.store, "daily-digest-2024-06-12", WEDNESDAY)
        second = try_acquire(self.store, "daily-digest-2024-06-12", WEDNESDAY)

        self.assertEqual((first, second), (True, False))

    def test_lock_document_shape(self):
        try_acquire(self.store, "daily-digest-2024-06-12", WEDNESDAY)

        lock = self.store.get_document(LOCKS_TABLE, "daily-digest-2024-06-12")
        self.assertEqual(lock["status"], "processing")
        self.assertTrue(lock["created_at"].startswith("2024-06-12T18:00:00"))

    def test_different_periods_are_independent(self):
        self.assertTrue(try_acquire(self.store, "daily-digest-2024-06-12"))
        self.assertTrue(try_acquire(self.store, "daily-digest-2024-06-13"))

    def test_concurrent_callers_exactly_one_wins(self):
        """N threads racing on one id produce a single True."""
        results = []
        results_lock = threading.Lock()
        barrier = threading.Barrier(20)

        def worker():
            barrier.wait()
            acquired = try_acquire(self.store, "weekly-digest-2024-06-10", WEDNESDAY)
            with results_lock:
                results.append(acquired)

        threads = [threading.Thread(target=worker) for _ in range(20)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        self.assertEqual(len(results), 20)
        self.assertEqual(results.count(True), 1)

    @patch("notifications.run_lock.log_notification_error", return_value="/tmp/err.txt")
    def test_store_error_returns_false(self, mock_log_error):
        """Store failure means exclusivity is unconfirmed, not an exception."""
        self.store.fail_on.add("create_if_absent")

        self.assertFalse(try_acquire(self.store, "daily-digest-2024-06-12"))
        mock_log_error.assert_called_once()
        self.assertEqual(mock_log_error.call_args.kwargs["error_type"], "locking")

    @patch("builtins.print")
    def test_store_error_with_unwritable_error_log(self, _):
        self.store.fail_on.add("create_if_absent")

        with tempfile.NamedTemporaryFile() as blocker:
            log_dir = os.path.join(blocker.name, "logs")
            with patch.dict(os.environ, {"NOTIFICATION_LOG_DIR": log_dir}):
                acquired = try_acquire(self.store, "daily-digest-2024-06-12")

        self.assertFalse(acquired)


class TestReleaseLock(unittest.TestCase):
    """Tests for the manual release override."""

    def setUp(self):
        self.store = InMemoryDocumentStore()

    def test_release_allows_reacquire(self):
        try_acquire(self.store, "daily-digest-2024-06-12")
        self.assertTrue(is_locked(self.store, "daily-digest-2024-06-12"))

        self.assertTrue(release_lock(self.store, "daily-digest-2024-06-12"))

        self.assertFalse(is_locked(self.store, "daily-digest-2024-06-12"))
        self.assertTrue(try_acquire(self.store, "daily-digest-2024-06-12"))

    def test_release_missing_lock(self):
        self.assertFalse(release_lock(self.store, "daily-digest-2024-06-12"))


if __name__ == "__main__":
    unittest.main()

"""
Error logging utility for the notification dispatcher.

Writes one timestamped report file per error so failed sends, lock
conflicts and log-write failures can be inspected after a cron run.
"""

import os
from datetime import datetime
from typing import Any


def _log_dir() -> str:
    default_dir = os.path.join(os.path.dirname(__file__), "logs")
    return os.getenv("NOTIFICATION_LOG_DIR", default_dir)


def log_notification_error(
    error_type: str, error_message: str, context: dict[str, Any] | None = None
) -> str:
    """
    Log a notification error to a timestamped file.

    Args:
        error_type: Type of error (e.g., 'sending', 'locking', 'logging', 'setup')
        error_message: The error message
        context: Optional dictionary with additional context (event_id, recipient, etc.)

    Returns:
        Path to the log file created, or an empty string if the report
        could not be written
    """
    log_dir = _log_dir()

    # Microseconds keep files from one run apart
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
    filename = os.path.join(log_dir, f"notification_error_{error_type}_{timestamp}.txt")

    try:
        os.makedirs(log_dir, exist_ok=True)
        with open(filename, "w", encoding="utf-8") as f:
            f.write(f"Notification Error Report - {datetime.now()}\n")
            f.write("=" * 60 + "\n\n")
            f.write(f"Error Type: {error_type}\n")
            f.write(f"Error Message: {error_message}\n\n")

            if context:
                f.write("Context:\n")
                f.write("-" * 60 + "\n")
                for key, value in context.items():
                    f.write(f"{key}: {value}\n")
    except OSError as e:
        print(f"  ⚠️  Could not write error report to {log_dir}: {e}")
        print(f"      {error_type}: {error_message}")
        return ""

    return filename

from datetime import datetime, timezone, tzinfo
from zoneinfo import ZoneInfo

from config.notification_defaults import TURKISH_MONTHS, URGENCY_LABELS

SECONDS_PER_DAY = 24 * 60 * 60


def local_now(tz_name: str) -> datetime:
    """Current wall-clock time in the given IANA timezone."""
    return datetime.now(ZoneInfo(tz_name))


def to_local(value: datetime, tz: tzinfo | None) -> datetime:
    """
    Express ``value`` in ``tz``. Naive datetimes are assumed to be UTC.

    With ``tz=None`` the result is naive UTC, comparable with other naive values.
    """
    if tz is None:
        if value.tzinfo is None:
            return value
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(tz)


def elapsed_whole_days(now: datetime, anchor: datetime) -> int:
    """Floor of (now - anchor) in 24 hour units. Negative when anchor is in the future."""
    delta = _comparable(now, anchor) - _comparable(anchor, now)
    return int(delta.total_seconds() // SECONDS_PER_DAY)


def is_before(value: datetime, reference: datetime) -> bool:
    return _comparable(value, reference) < _comparable(reference, value)


def _comparable(value: datetime, other: datetime) -> datetime:
    # Mixing naive and aware values: treat the naive side as UTC
    if value.tzinfo is None and other.tzinfo is not None:
        return value.replace(tzinfo=timezone.utc)
    return value


def format_turkish_date(value: datetime, with_year: bool = True) -> str:
    """Format a date as ``12 Haziran 2024`` (or ``12 Haziran``)."""
    month = TURKISH_MONTHS[value.month - 1]
    if with_year:
        return f"{value.day} {month} {value.year}"
    return f"{value.day} {month}"


def print_summary(title: str, sent: int, failed: int, skipped: int) -> None:
    """Print processing summary."""
    print(f"\n{'=' * 60}")
    print(f"[{datetime.now()}] {title} Complete")
    print(f"{'=' * 60}")
    print(f"✓ Sent:    {sent}")
    print(f"⊘ Skipped: {skipped}")
    print(f"✗ Failed:  {failed}")
    print(f"{'=' * 60}\n")


def format_week_range(week_start: datetime, week_end: datetime) -> str:
    """``10 Haziran - 16 Haziran 2024``"""
    return f"{format_turkish_date(week_start, with_year=False)} - {format_turkish_date(week_end)}"


def urgency_label(urgency: str) -> str:
    """Turkish label for a stored urgency value, falling back to the value itself."""
    value = str(getattr(urgency, "value", urgency))
    return URGENCY_LABELS.get(value, value)

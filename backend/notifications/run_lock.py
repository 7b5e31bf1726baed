"""
Run-once locks for notification periods.

A lock document in ``system_locks`` keyed by the logical event id is a
permanent claim ticket: whoever creates it owns that period (a day's
digest, a week's digest, one item's reminder for one day). Locks are
never released by the dispatcher. ``release_lock`` exists only as an
explicit administrative override after a crashed run.
"""

from datetime import datetime, timezone

from models.delivery import RunLock
from notifications.error_logger import log_notification_error
from shared.db import LOCKS_TABLE, DocumentStore


def try_acquire(
    store: DocumentStore, logical_event_id: str, now: datetime | None = None
) -> bool:
    """
    Claim the lock for ``logical_event_id``.

    The existence check and the write are a single compare-and-set on the
    store. Any store failure means exclusivity could not be confirmed, so
    the caller is told not to proceed.

    Args:
        store: Document store
        logical_event_id: Period identity (e.g. ``daily-digest-2024-06-12``)
        now: Creation timestamp to record (defaults to current UTC time)

    Returns:
        True if this call created the lock, False if it already existed or
        the store could not confirm it
    """
    lock = RunLock(
        id=logical_event_id,
        created_at=now or datetime.now(timezone.utc),
    )

    try:
        return store.create_if_absent(
            LOCKS_TABLE,
            lock.id,
            lock.model_dump(mode="json", exclude={"id"}),
        )
    except Exception as e:
        error_file = log_notification_error(
            error_type="locking",
            error_message=str(e),
            context={"logical_event_id": logical_event_id},
        )
        print(f"  ⚠️  Could not acquire lock {logical_event_id}. Details logged to: {error_file}")
        return False


def is_locked(store: DocumentStore, logical_event_id: str) -> bool:
    return store.get_document(LOCKS_TABLE, logical_event_id) is not None


def release_lock(store: DocumentStore, logical_event_id: str, operator: str = "admin") -> bool:
    """
    Delete a lock so the period can be dispatched again.

    Manual override only. Re-running a period whose run crashed midway can
    resend to recipients who already received it.

    Returns:
        True if a lock document was deleted
    """
    deleted = store.delete_document(LOCKS_TABLE, logical_event_id)
    if deleted:
        print(f"⚠️  Lock {logical_event_id} released manually by {operator}")
    else:
        print(f"No lock found for {logical_event_id}")
    return deleted

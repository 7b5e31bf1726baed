"""
Delivery log and dedup index.

Every notification attempt is appended to ``reminder_logs``. Before a send,
the log is asked whether the same logical event already went out
successfully; after a send, the outcome is recorded. Entries are never
updated or deleted.
"""

from models.delivery import Channel, DeliveryLogEntry, EventKind
from notifications.error_logger import log_notification_error
from shared.db import LOGS_TABLE, DocumentStore


def was_already_sent(
    store: DocumentStore,
    logical_event_id: str,
    event_kind: EventKind | None = None,
    channel: Channel | None = None,
) -> bool:
    """
    Check whether a successful delivery exists for ``logical_event_id``.

    Args:
        store: Document store
        logical_event_id: Event identity (item id or digest period id)
        event_kind: Optional kind filter (item ids are only unique per kind)
        channel: Optional channel filter ('email' or 'sms')

    Returns:
        True if at least one success entry matches
    """
    filters: dict[str, str] = {"event_id": logical_event_id, "status": "success"}
    if event_kind:
        filters["event_kind"] = event_kind
    if channel:
        filters["channel"] = channel

    return len(store.query_documents(LOGS_TABLE, filters, limit=1)) > 0


def record(store: DocumentStore, entry: DeliveryLogEntry) -> bool:
    """
    Append a delivery entry.

    A failed write is reported and swallowed: the transport call already
    happened and must not be undone. Losing the entry only risks a later
    duplicate.

    Returns:
        True if the entry was stored
    """
    try:
        store.add_document(LOGS_TABLE, entry.to_document())
        return True
    except Exception as e:
        error_file = log_notification_error(
            error_type="logging",
            error_message=str(e),
            context={
                "event_id": entry.event_id,
                "event_kind": entry.event_kind,
                "recipient_email": entry.recipient_email,
                "status": entry.status,
            },
        )
        print(f"  ⚠️  Could not write delivery log. Details logged to: {error_file}")
        return False

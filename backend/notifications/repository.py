"""
Loading and saving the documents the notification core reads.

Settings are loaded once per run by the caller and passed into the
dispatcher. Work item and recipient snapshots are parsed into models;
rows that fail validation are skipped with a warning.
"""

from datetime import datetime, timezone
from typing import Any, Type, TypeVar

from pydantic import BaseModel, ValidationError

from models.recipient import Recipient
from models.settings import SETTINGS_DOCUMENT_ID, NotificationSettings
from models.work_item import AnalyticsTask, Campaign, Report
from shared.db import (
    ANALYTICS_TASKS_TABLE,
    CAMPAIGNS_TABLE,
    RECIPIENTS_TABLE,
    REPORTS_TABLE,
    SETTINGS_TABLE,
    DocumentStore,
)

ModelT = TypeVar("ModelT", bound=BaseModel)


def load_settings(store: DocumentStore) -> NotificationSettings:
    """
    Read the ``default`` settings document.

    A missing document yields the built-in defaults (every notification
    kind disabled). A malformed document raises ``ValidationError``.
    """
    data = store.get_document(SETTINGS_TABLE, SETTINGS_DOCUMENT_ID)
    if data is None:
        return NotificationSettings()

    data = {key: value for key, value in data.items() if key != "id"}
    return NotificationSettings.model_validate(data)


def save_settings(
    store: DocumentStore, settings: NotificationSettings
) -> NotificationSettings:
    """Write settings back, stamping ``updated_at``."""
    saved = settings.model_copy(update={"updated_at": datetime.now(timezone.utc)})
    store.set_document(
        SETTINGS_TABLE,
        SETTINGS_DOCUMENT_ID,
        saved.model_dump(mode="json"),
    )
    return saved


def _parse_rows(
    rows: list[dict[str, Any]], model: Type[ModelT], label: str
) -> list[ModelT]:
    parsed: list[ModelT] = []
    for row in rows:
        try:
            parsed.append(model.model_validate(row))
        except ValidationError as e:
            print(
                f"  ⚠️  Skipping malformed {label} {row.get('id', '<no id>')}: "
                f"{e.error_count()} validation error(s)"
            )
    return parsed


def _load_work_items(
    store: DocumentStore, table: str, model: Type[ModelT], kind: str
) -> list[ModelT]:
    rows = [{**row, "kind": kind} for row in store.query_documents(table)]
    return _parse_rows(rows, model, kind)


def load_campaigns(store: DocumentStore) -> list[Campaign]:
    return _load_work_items(store, CAMPAIGNS_TABLE, Campaign, "campaign")


def load_analytics_tasks(store: DocumentStore) -> list[AnalyticsTask]:
    return _load_work_items(store, ANALYTICS_TASKS_TABLE, AnalyticsTask, "analytics")


def load_reports(store: DocumentStore) -> list[Report]:
    return _load_work_items(store, REPORTS_TABLE, Report, "report")


def load_recipients(store: DocumentStore) -> list[Recipient]:
    return _parse_rows(store.query_documents(RECIPIENTS_TABLE), Recipient, "recipient")

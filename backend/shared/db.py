from typing import Any, Protocol

from supabase import create_client, Client
from dotenv import load_dotenv
import os

load_dotenv()

# Collections (Supabase tables). Every table has a text primary key ``id``.
SETTINGS_TABLE = "reminder_settings"
LOGS_TABLE = "reminder_logs"
LOCKS_TABLE = "system_locks"
CAMPAIGNS_TABLE = "events"
ANALYTICS_TASKS_TABLE = "analytics_tasks"
REPORTS_TABLE = "reports"
RECIPIENTS_TABLE = "department_users"

# Postgres unique_violation surfaces in the PostgREST error text
_DUPLICATE_MARKERS = ("duplicate", "unique", "23505")


def get_supabase_client() -> Client:
    """Get initialized Supabase client."""
    url: str | None = os.getenv("SUPABASE_URL")
    key: str | None = os.getenv("SUPABASE_SERVICE_KEY")

    if not url or not key:
        raise ValueError("SUPABASE_URL and SUPABASE_SERVICE_KEY must be set")

    return create_client(url, key)


def is_duplicate_error(error: Exception) -> bool:
    """True when an insert failed because the primary key already exists."""
    error_str = str(error).lower()
    return any(marker in error_str for marker in _DUPLICATE_MARKERS)


class DocumentStore(Protocol):
    """Document store operations the notification core depends on."""

    def get_document(self, collection: str, doc_id: str) -> dict[str, Any] | None: ...

    def query_documents(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]: ...

    def add_document(self, collection: str, data: dict[str, Any]) -> str: ...

    def create_if_absent(
        self, collection: str, doc_id: str, data: dict[str, Any]
    ) -> bool: ...

    def set_document(self, collection: str, doc_id: str, data: dict[str, Any]) -> None: ...

    def delete_document(self, collection: str, doc_id: str) -> bool: ...


class SupabaseDocumentStore:
    """
    DocumentStore backed by Supabase tables.

    ``create_if_absent`` is the compare-and-set primitive: a single INSERT
    against the primary key, so the existence check and the write are one
    atomic statement on the database side.
    """

    def __init__(self, client: Client | None = None):
        self.client = client if client is not None else get_supabase_client()

    def get_document(self, collection: str, doc_id: str) -> dict[str, Any] | None:
        response = (
            self.client.table(collection)
            .select("*")
            .eq("id", doc_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return response.data[0]

    def query_documents(
        self,
        collection: str,
        filters: dict[str, Any] | None = None,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """
        Fetch documents matching every equality filter.

        Args:
            collection: Table name
            filters: Column -> value equality conditions (AND-ed)
            limit: Optional maximum number of rows

        Returns:
            List of row dicts (empty if nothing matched)
        """
        query = self.client.table(collection).select("*")

        for column, value in (filters or {}).items():
            query = query.eq(column, value)

        if limit:
            query = query.limit(limit)

        response = query.execute()
        return list(response.data or [])

    def add_document(self, collection: str, data: dict[str, Any]) -> str:
        response = self.client.table(collection).insert(data).execute()
        rows = response.data or []
        return str(rows[0].get("id", "")) if rows else ""

    def create_if_absent(
        self, collection: str, doc_id: str, data: dict[str, Any]
    ) -> bool:
        """
        Insert a document only if its id is not taken yet.

        Returns:
            True if this call created the document, False if it already existed

        Raises:
            Exception: Any store error other than a duplicate key
        """
        try:
            self.client.table(collection).insert(
                {"id": doc_id, **data}, returning="minimal"
            ).execute()
            return True
        except Exception as e:
            if is_duplicate_error(e):
                return False
            raise

    def set_document(self, collection: str, doc_id: str, data: dict[str, Any]) -> None:
        self.client.table(collection).upsert({"id": doc_id, **data}).execute()

    def delete_document(self, collection: str, doc_id: str) -> bool:
        response = self.client.table(collection).delete().eq("id", doc_id).execute()
        return bool(response.data)

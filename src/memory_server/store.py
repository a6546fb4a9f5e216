"""Record store access for memory rows.

The dispatcher only talks to the ``RecordStore`` protocol. The production
implementation wraps a Supabase client; durability, uniqueness and query
execution all live on the PostgREST side.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

import httpx
from postgrest.exceptions import APIError
from supabase import Client, create_client

from .config import MemoryServerConfig

logger = logging.getLogger(__name__)

# PostgREST code for ".single()" matching zero rows.
NO_ROWS_CODE = "PGRST116"

LIST_COLUMNS = "memory_key, content, tag, created_at, updated_at"
UNIQUE_KEY = "user_id,memory_key"


class StoreError(RuntimeError):
    """Raised for every failure reported by the record store."""


class RecordStore(Protocol):
    def upsert_memory(
        self,
        user_id: str,
        key: str,
        content: str,
        tag: Optional[str],
        metadata: Optional[Any],
    ) -> None: ...

    def fetch_memory(self, user_id: str, key: str) -> Optional[dict[str, Any]]: ...

    def list_memories(
        self,
        user_id: str,
        tag: Optional[str] = None,
        search: Optional[str] = None,
    ) -> list[dict[str, Any]]: ...

    def delete_memory(self, user_id: str, key: str) -> None: ...

    def list_tag_values(self, user_id: str) -> list[str]: ...


def _quote_filter_value(value: str) -> str:
    # Double quotes keep reserved characters (",", "(", ")") inside an or= filter literal.
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def search_filter(term: str) -> str:
    """Build the PostgREST ``or`` expression matching key or content."""
    pattern = _quote_filter_value(f"%{term}%")
    return f"memory_key.ilike.{pattern},content.ilike.{pattern}"


def _error_message(exc: Exception) -> str:
    message = getattr(exc, "message", None)
    return str(message) if message else str(exc)


class SupabaseRecordStore:
    """Supabase-backed store for the ``memories`` table."""

    def __init__(self, client: Client, *, table: str = "memories"):
        self._client = client
        self.table = table

    def _query(self):
        return self._client.table(self.table)

    def _execute(self, builder, operation: str):
        try:
            return builder.execute()
        except (APIError, httpx.HTTPError) as exc:
            logger.warning("Record store %s failed: %s", operation, _error_message(exc))
            raise StoreError(_error_message(exc)) from exc

    def upsert_memory(
        self,
        user_id: str,
        key: str,
        content: str,
        tag: Optional[str],
        metadata: Optional[Any],
    ) -> None:
        row = {
            "user_id": user_id,
            "memory_key": key,
            "content": content,
            "tag": tag,
            "metadata": metadata,
        }
        self._execute(self._query().upsert(row, on_conflict=UNIQUE_KEY), "upsert")

    def fetch_memory(self, user_id: str, key: str) -> Optional[dict[str, Any]]:
        builder = (
            self._query()
            .select("*")
            .eq("user_id", user_id)
            .eq("memory_key", key)
            .single()
        )
        try:
            response = builder.execute()
        except APIError as exc:
            if exc.code == NO_ROWS_CODE:
                return None
            logger.warning("Record store fetch failed: %s", _error_message(exc))
            raise StoreError(_error_message(exc)) from exc
        except httpx.HTTPError as exc:
            logger.warning("Record store fetch failed: %s", exc)
            raise StoreError(str(exc)) from exc
        return response.data or None

    def list_memories(
        self,
        user_id: str,
        tag: Optional[str] = None,
        search: Optional[str] = None,
    ) -> list[dict[str, Any]]:
        query = (
            self._query()
            .select(LIST_COLUMNS)
            .eq("user_id", user_id)
            .order("updated_at", desc=True)
        )
        if tag:
            query = query.eq("tag", tag)
        if search:
            query = query.or_(search_filter(search))
        response = self._execute(query, "list")
        return list(response.data or [])

    def delete_memory(self, user_id: str, key: str) -> None:
        builder = self._query().delete().eq("user_id", user_id).eq("memory_key", key)
        self._execute(builder, "delete")

    def list_tag_values(self, user_id: str) -> list[str]:
        builder = self._query().select("tag").eq("user_id", user_id).not_.is_("tag", "null")
        response = self._execute(builder, "tag listing")
        return [row["tag"] for row in (response.data or []) if row.get("tag") is not None]


def create_supabase_store(config: MemoryServerConfig) -> SupabaseRecordStore:
    client = create_client(config.supabase_url, config.supabase_key)
    return SupabaseRecordStore(client, table=config.table)

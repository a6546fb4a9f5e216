import os

os.environ["MEMORY_DISABLE_LOGFIRE"] = "1"
os.environ["LOGFIRE_TOKEN"] = ""
os.environ["LOGFIRE_IGNORE_NO_CONFIG"] = "1"

from datetime import datetime, timedelta, timezone

import logfire
import pytest

from memory_server.dispatcher import MemoryDispatcher
from memory_server.store import StoreError


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests requiring a live Supabase project")


class FakeRecordStore:
    """In-memory stand-in for the memories table.

    Mirrors the store contract: unique (user_id, memory_key), server-side
    timestamps, updated_at-descending lists, case-insensitive search.
    """

    def __init__(self):
        self.rows: dict[tuple[str, str], dict] = {}
        self.calls: list[str] = []
        self.fail_with: str | None = None
        self._clock = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def _tick(self) -> str:
        self._clock += timedelta(seconds=1)
        return self._clock.isoformat()

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if self.fail_with:
            raise StoreError(self.fail_with)

    def upsert_memory(self, user_id, key, content, tag, metadata):
        self._record("upsert_memory")
        now = self._tick()
        existing = self.rows.get((user_id, key))
        self.rows[(user_id, key)] = {
            "user_id": user_id,
            "memory_key": key,
            "content": content,
            "tag": tag,
            "metadata": metadata,
            "created_at": existing["created_at"] if existing else now,
            "updated_at": now,
        }

    def fetch_memory(self, user_id, key):
        self._record("fetch_memory")
        row = self.rows.get((user_id, key))
        return dict(row) if row else None

    def list_memories(self, user_id, tag=None, search=None):
        self._record("list_memories")
        rows = [row for (owner, _), row in self.rows.items() if owner == user_id]
        if tag:
            rows = [row for row in rows if row["tag"] == tag]
        if search:
            needle = search.lower()
            rows = [
                row
                for row in rows
                if needle in row["memory_key"].lower() or needle in row["content"].lower()
            ]
        rows.sort(key=lambda row: row["updated_at"], reverse=True)
        columns = ("memory_key", "content", "tag", "created_at", "updated_at")
        return [{col: row[col] for col in columns} for row in rows]

    def delete_memory(self, user_id, key):
        self._record("delete_memory")
        self.rows.pop((user_id, key), None)

    def list_tag_values(self, user_id):
        self._record("list_tag_values")
        return [
            row["tag"]
            for (owner, _), row in self.rows.items()
            if owner == user_id and row["tag"] is not None
        ]


@pytest.fixture(scope="session", autouse=True)
def _local_logfire():
    logfire.configure(send_to_logfire=False, console=False)


@pytest.fixture
def fake_store():
    return FakeRecordStore()


@pytest.fixture
def dispatcher(fake_store):
    return MemoryDispatcher(fake_store)

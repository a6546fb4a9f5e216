"""Routes memory tool calls to the record store and renders responses."""

from __future__ import annotations

import json
import logging
from collections import Counter
from typing import Any, Callable, Dict, Mapping, Optional

import logfire

from .arguments import (
    CreateMemoryRequest,
    ForgetMemoryRequest,
    GetMemoryRequest,
    InvalidArguments,
    ListMemoriesRequest,
    ListTagsRequest,
    parse_request,
)
from .results import Err, Ok, Result
from .store import RecordStore, StoreError

logger = logging.getLogger(__name__)

DB_ERROR_PREFIX = "Database error: "


def _text(payload: Dict[str, Any]) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=True, default=str)


def render_envelope(result: Result) -> Dict[str, Any]:
    envelope: Dict[str, Any] = {"content": [{"type": "text", "text": _text(result.payload)}]}
    if result.is_error:
        envelope["isError"] = True
    return envelope


class MemoryDispatcher:
    """Stateless router from tool name + arguments to a single store call."""

    def __init__(self, store: RecordStore):
        self._store = store
        self._handlers: Dict[str, Callable[[Any], Result]] = {
            "create_memory": self._create_memory,
            "get_memory": self._get_memory,
            "list_memories": self._list_memories,
            "forget_memory": self._forget_memory,
            "list_tags": self._list_tags,
        }

    @property
    def store(self) -> RecordStore:
        return self._store

    def handle(self, name: str, arguments: Optional[Mapping[str, Any]]) -> Result:
        handler = self._handlers.get(name)
        if handler is None:
            return Err(f"Unknown tool: {name}")
        try:
            request = parse_request(name, arguments)
        except InvalidArguments as exc:
            return Err(str(exc))
        try:
            return handler(request)
        except StoreError as exc:
            return Err(f"{DB_ERROR_PREFIX}{exc}")

    def dispatch(self, name: str, arguments: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        """Run one tool call and always return a well-formed envelope."""
        with logfire.span("memory_tool_call", tool=name):
            try:
                result = self.handle(name, arguments)
            except Exception as exc:
                logger.exception("Unhandled failure in tool %s", name)
                result = Err(str(exc) or type(exc).__name__)
        if result.is_error:
            logger.warning("Tool %s failed: %s", name, result.message)
        else:
            logger.debug("Tool %s succeeded", name)
        return render_envelope(result)

    def _create_memory(self, request: CreateMemoryRequest) -> Result:
        self._store.upsert_memory(
            user_id=request.user_id,
            key=request.key,
            content=request.content,
            tag=request.tag,
            metadata=request.metadata,
        )
        logger.info("Saved memory %r for user %s", request.key, request.user_id)
        return Ok(
            {
                "status": "success",
                "message": f"Memory '{request.key}' saved successfully",
                "key": request.key,
            }
        )

    def _get_memory(self, request: GetMemoryRequest) -> Result:
        row = self._store.fetch_memory(request.user_id, request.key)
        if row is None:
            return Ok(
                {
                    "status": "not_found",
                    "message": f"No memory found with key '{request.key}'",
                }
            )
        return Ok(
            {
                "key": row.get("memory_key"),
                "content": row.get("content"),
                "tag": row.get("tag"),
                "metadata": row.get("metadata"),
                "created_at": row.get("created_at"),
                "updated_at": row.get("updated_at"),
            }
        )

    def _list_memories(self, request: ListMemoriesRequest) -> Result:
        rows = self._store.list_memories(
            request.user_id,
            tag=request.tag,
            search=request.search,
        )
        return Ok({"count": len(rows), "memories": rows})

    def _forget_memory(self, request: ForgetMemoryRequest) -> Result:
        self._store.delete_memory(request.user_id, request.key)
        logger.info("Deleted memory %r for user %s", request.key, request.user_id)
        return Ok(
            {
                "status": "success",
                "message": f"Memory '{request.key}' deleted successfully",
                "key": request.key,
            }
        )

    def _list_tags(self, request: ListTagsRequest) -> Result:
        # Counter keeps first-occurrence order of the returned rows.
        counts = Counter(self._store.list_tag_values(request.user_id))
        return Ok({"tags": [{"tag": tag, "count": count} for tag, count in counts.items()]})

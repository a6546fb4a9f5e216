"""Static catalog of the memory tools advertised on discovery."""

from __future__ import annotations

import copy
from typing import Any

from mcp import types

_USER_ID = {
    "type": "string",
    "description": "Unique identifier for the user",
}


def _schema(properties: dict[str, Any], required: list[str]) -> dict[str, Any]:
    return {"type": "object", "properties": properties, "required": required}


TOOL_CATALOG: tuple[dict[str, Any], ...] = (
    {
        "name": "create_memory",
        "description": (
            "Create or update a memory entry. Use this when the user shares "
            "important information that should be remembered."
        ),
        "inputSchema": _schema(
            {
                "user_id": _USER_ID,
                "key": {
                    "type": "string",
                    "description": 'Unique key for this memory (e.g., "favorite_food", "home_address")',
                },
                "content": {
                    "type": "string",
                    "description": "The actual content to remember",
                },
                "tag": {
                    "type": "string",
                    "description": 'Optional category tag (e.g., "personal", "work", "medical")',
                },
                "metadata": {
                    "type": "object",
                    "description": "Optional additional structured data",
                },
            },
            ["user_id", "key", "content"],
        ),
    },
    {
        "name": "get_memory",
        "description": "Retrieve a specific memory by key",
        "inputSchema": _schema(
            {
                "user_id": _USER_ID,
                "key": {"type": "string", "description": "The key of the memory to retrieve"},
            },
            ["user_id", "key"],
        ),
    },
    {
        "name": "list_memories",
        "description": "List all memories for a user, optionally filtered by tag",
        "inputSchema": _schema(
            {
                "user_id": _USER_ID,
                "tag": {"type": "string", "description": "Optional tag to filter by"},
                "search": {"type": "string", "description": "Optional search term to filter memories"},
            },
            ["user_id"],
        ),
    },
    {
        "name": "forget_memory",
        "description": "Delete a specific memory",
        "inputSchema": _schema(
            {
                "user_id": _USER_ID,
                "key": {"type": "string", "description": "The key of the memory to delete"},
            },
            ["user_id", "key"],
        ),
    },
    {
        "name": "list_tags",
        "description": "Get all unique tags used in memories",
        "inputSchema": _schema({"user_id": _USER_ID}, ["user_id"]),
    },
)


def tool_descriptors() -> list[dict[str, Any]]:
    """Return a copy of the catalog so callers cannot mutate the shared one."""
    return copy.deepcopy(list(TOOL_CATALOG))


def tool_names() -> tuple[str, ...]:
    return tuple(entry["name"] for entry in TOOL_CATALOG)


def mcp_tools() -> list[types.Tool]:
    return [
        types.Tool(
            name=entry["name"],
            description=entry["description"],
            inputSchema=entry["inputSchema"],
        )
        for entry in tool_descriptors()
    ]

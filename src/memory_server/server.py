"""MCP stdio server exposing the memory tools."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from importlib import resources
from typing import Any, Dict, Optional, Sequence

from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from . import catalog
from .config import ConfigError, load_config, resolve_log_level
from .dispatcher import MemoryDispatcher
from .observability import configure_logfire, configure_logging
from .store import create_supabase_store

logger = logging.getLogger(__name__)

SERVER_NAME = "memory-server"
SERVER_VERSION = "1.0.0"


class ToolCallFailed(RuntimeError):
    """Carries an error envelope's JSON text back through the MCP server.

    The low-level server reports a raised exception as a ``CallToolResult``
    with ``isError`` set and ``str(exc)`` as its only text block.
    """


def envelope_to_content(envelope: Dict[str, Any]) -> list[types.TextContent]:
    blocks = [
        types.TextContent(type="text", text=block["text"])
        for block in envelope.get("content", [])
        if block.get("type") == "text"
    ]
    if envelope.get("isError"):
        raise ToolCallFailed("\n".join(block.text for block in blocks))
    return blocks


def build_server(dispatcher: MemoryDispatcher) -> Server:
    server = Server(SERVER_NAME, version=SERVER_VERSION)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return catalog.mcp_tools()

    # Argument validation happens in the dispatcher so failures keep the JSON error shape.
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: Optional[dict]) -> list[types.TextContent]:
        return envelope_to_content(dispatcher.dispatch(name, arguments or {}))

    return server


async def serve(dispatcher: MemoryDispatcher) -> None:
    server = build_server(dispatcher)
    async with stdio_server() as (read_stream, write_stream):
        logger.info("Memory MCP server running on stdio")
        await server.run(read_stream, write_stream, server.create_initialization_options())


def schema_sql() -> str:
    return resources.files("memory_server").joinpath("schema.sql").read_text(encoding="utf-8")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="memory-server",
        description="Per-user key/value memory tools over MCP, backed by Supabase.",
    )
    parser.add_argument("--env-file", help="Path to a .env file to load before reading settings.")
    parser.add_argument("--log-level", help="Override MEMORY_LOG_LEVEL (DEBUG, INFO, WARNING, ...).")
    parser.add_argument(
        "--print-schema",
        action="store_true",
        help="Print the SQL for the memories table and exit.",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.print_schema:
        sys.stdout.write(schema_sql())
        return 0

    try:
        config = load_config(args.env_file)
    except ConfigError as exc:
        sys.stderr.write(f"Error: {exc}\n")
        return 1

    configure_logging(resolve_log_level(args.log_level, default=config.log_level))
    configure_logfire(config.logfire_enabled)

    dispatcher = MemoryDispatcher(create_supabase_store(config))
    try:
        asyncio.run(serve(dispatcher))
    except KeyboardInterrupt:
        logger.info("Memory MCP server stopped")
    except Exception as exc:
        logger.critical("Fatal error: %s", exc, exc_info=True)
        return 1
    return 0

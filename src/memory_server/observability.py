"""Logging and Logfire setup.

stdout carries the MCP stdio stream, so every log line goes to stderr.
"""

from __future__ import annotations

import logging
import sys

import logfire

logger = logging.getLogger(__name__)

_CONFIGURED = False


def configure_logging(level: str = "INFO") -> None:
    global _CONFIGURED
    if _CONFIGURED:
        logging.getLogger().setLevel(level)
        return
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    _CONFIGURED = True


def configure_logfire(enabled: bool, service_name: str = "memory-server") -> bool:
    """Configure Logfire tracing when enabled. Returns True if it was set up."""
    if not enabled:
        # Spans stay local when tracing is off.
        logfire.configure(send_to_logfire=False, console=False)
        return False
    logfire.configure(
        service_name=service_name,
        send_to_logfire="if-token-present",
        console=False,
    )
    try:
        logfire.instrument_mcp()
    except Exception as exc:
        logger.warning("Logfire MCP instrumentation not available: %s", exc)
    logger.info("Logfire tracing enabled")
    return True

"""Process configuration for the memory server."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes", "on"}
_LOG_LEVELS = {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}

MISSING_CONNECTION_MESSAGE = "SUPABASE_URL and SUPABASE_SERVICE_KEY must be set"


class ConfigError(RuntimeError):
    pass


def _is_truthy(value: str | None) -> bool:
    return (value or "").strip().lower() in _TRUTHY


@dataclass(frozen=True)
class MemoryServerConfig:
    supabase_url: str
    supabase_key: str
    table: str = "memories"
    log_level: str = "INFO"
    logfire_enabled: bool = False


def resolve_log_level(raw: str | None, default: str = "INFO") -> str:
    candidate = (raw or "").strip().upper()
    if candidate in _LOG_LEVELS:
        return candidate
    return default


def logfire_enabled() -> bool:
    """Logfire stays off unless a token is present and it is not disabled."""
    if _is_truthy(os.getenv("MEMORY_DISABLE_LOGFIRE")):
        return False
    return bool((os.getenv("LOGFIRE_TOKEN") or "").strip())


def load_env_file(env_file: Optional[str] = None) -> bool:
    """Load a dotenv file without overriding variables already in the environment."""
    if env_file:
        path = Path(env_file).expanduser()
        if not path.is_file():
            raise ConfigError(f"env file not found: {path}")
        return load_dotenv(path, override=False)
    found = find_dotenv(usecwd=True)
    if not found:
        return False
    logger.debug("Loading environment from %s", found)
    return load_dotenv(found, override=False)


def load_config(env_file: Optional[str] = None) -> MemoryServerConfig:
    load_env_file(env_file)

    url = (os.getenv("SUPABASE_URL") or "").strip()
    key = (os.getenv("SUPABASE_SERVICE_KEY") or "").strip()
    if not url or not key:
        raise ConfigError(MISSING_CONNECTION_MESSAGE)

    table = (os.getenv("MEMORY_TABLE") or "").strip() or "memories"
    return MemoryServerConfig(
        supabase_url=url,
        supabase_key=key,
        table=table,
        log_level=resolve_log_level(os.getenv("MEMORY_LOG_LEVEL")),
        logfire_enabled=logfire_enabled(),
    )

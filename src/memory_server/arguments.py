"""Argument validation for the memory tools.

Every tool call is parsed into a fully populated request model before the
record store is touched. Optional fields are always present on the model
(``None`` when the caller left them out), so handlers never have to probe the
raw argument bag.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator


class InvalidArguments(ValueError):
    def __init__(self, tool: str, problems: list[str]):
        self.tool = tool
        self.problems = problems
        super().__init__(f"Invalid arguments for {tool}: " + "; ".join(problems))


def _scalar_to_text(value: Any) -> Any:
    # Numbers pass through as text; the store columns are all text.
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


def _required(value: Any) -> Any:
    if value is None:
        raise ValueError("must not be null")
    return _scalar_to_text(value)


def _blank_to_none(value: Any) -> Any:
    value = _scalar_to_text(value)
    if isinstance(value, str) and not value:
        return None
    return value


class ToolRequest(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    user_id: Any

    @field_validator("user_id", mode="before")
    @classmethod
    def _require_user_id(cls, value: Any) -> Any:
        return _required(value)


class KeyedRequest(ToolRequest):
    key: Any

    @field_validator("key", mode="before")
    @classmethod
    def _require_key(cls, value: Any) -> Any:
        return _required(value)


class CreateMemoryRequest(KeyedRequest):
    content: Any
    tag: Optional[Any] = None
    metadata: Optional[Any] = None

    @field_validator("content", mode="before")
    @classmethod
    def _require_content(cls, value: Any) -> Any:
        return _required(value)

    @field_validator("tag", mode="before")
    @classmethod
    def _normalize_tag(cls, value: Any) -> Any:
        return _blank_to_none(value)


class GetMemoryRequest(KeyedRequest):
    pass


class ForgetMemoryRequest(KeyedRequest):
    pass


class ListMemoriesRequest(ToolRequest):
    tag: Optional[Any] = None
    search: Optional[Any] = None

    @field_validator("tag", "search", mode="before")
    @classmethod
    def _normalize_filters(cls, value: Any) -> Any:
        return _blank_to_none(value)


class ListTagsRequest(ToolRequest):
    pass


REQUEST_MODELS: dict[str, type[ToolRequest]] = {
    "create_memory": CreateMemoryRequest,
    "get_memory": GetMemoryRequest,
    "list_memories": ListMemoriesRequest,
    "forget_memory": ForgetMemoryRequest,
    "list_tags": ListTagsRequest,
}


def _describe(error: Mapping[str, Any]) -> str:
    location = ".".join(str(part) for part in error.get("loc", ()) if part != "")
    message = error.get("msg", "invalid value")
    return f"{location}: {message}" if location else message


def parse_request(tool: str, arguments: Any) -> ToolRequest:
    """Validate ``arguments`` for ``tool``.

    Raises ``KeyError`` for tools outside the catalog and ``InvalidArguments``
    when a required field is missing or has the wrong shape.
    """
    model = REQUEST_MODELS[tool]
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, Mapping):
        raise InvalidArguments(tool, ["arguments must be an object"])
    try:
        return model.model_validate(dict(arguments))
    except ValidationError as exc:
        raise InvalidArguments(tool, [_describe(err) for err in exc.errors()]) from exc

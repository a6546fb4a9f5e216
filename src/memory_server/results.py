from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Union


@dataclass(frozen=True)
class Ok:
    payload: dict[str, Any] = field(default_factory=dict)

    @property
    def is_error(self) -> bool:
        return False


@dataclass(frozen=True)
class Err:
    message: str

    @property
    def is_error(self) -> bool:
        return True

    @property
    def payload(self) -> dict[str, Any]:
        return {"error": self.message, "status": "error"}


Result = Union[Ok, Err]

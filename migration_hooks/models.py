"""Core domain models for migration hooks."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict


class Direction(str, Enum):
    UP = "up"
    DOWN = "down"


class Timing(str, Enum):
    BEFORE = "before"
    AFTER = "after"


class HookEventName(str, Enum):
    ALL_STARTED = "all_started"
    ALL_ENDED = "all_ended"
    STEP_STARTED = "step_started"
    STEP_ENDED = "step_ended"


EVENT_BUS_PREFIX = "migration_hooks."


class HookOperation(str, Enum):
    """The four optional slots of a step handler."""

    BEFORE_UP = "before_up"
    AFTER_UP = "after_up"
    BEFORE_DOWN = "before_down"
    AFTER_DOWN = "after_down"

    @classmethod
    def select(cls, timing: Timing, direction: Direction) -> HookOperation:
        return cls(f"{timing.value}_{direction.value}")

    @property
    def legacy_name(self) -> str:
        timing, direction = self.value.split("_")
        return timing + direction.capitalize()


HookCallback = Callable[["HookContext"], Any]


@dataclass(frozen=True)
class HookRegistration:
    event_name: str
    callback: HookCallback
    priority: int = 10


class HookContext(BaseModel):
    """Immutable snapshot handed to every handler and callback of one dispatch.

    Supports attribute access (``context.method``) as well as the mapping
    style used by callbacks written against plain dicts
    (``context["method"]``, ``context.get("step_identifier")``).
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    method: Direction
    connection: str
    step_identifier: str | None = None
    file_path: str | None = None
    migration: Any = None

    def __getitem__(self, key: str) -> Any:
        if key not in type(self).model_fields:
            raise KeyError(key)
        value = getattr(self, key)
        return value.value if isinstance(value, Enum) else value

    def get(self, key: str, default: Any = None) -> Any:
        try:
            return self[key]
        except KeyError:
            return default

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"method": self.method.value, "connection": self.connection}
        if self.migration is not None or self.file_path is not None or self.step_identifier is not None:
            payload.update(
                {
                    "migration": self.migration,
                    "file_path": self.file_path,
                    "step_identifier": self.step_identifier,
                }
            )
        return payload


@dataclass(frozen=True)
class DispatchResult:
    """Outcome of one handler or callback invocation.

    Always carries the error for logging; whether it is raised is decided by
    the dispatcher's halt policy.
    """

    source: str
    event: str
    ok: bool = True
    error: Exception | None = None
    duration_ms: float = 0.0

    @classmethod
    def failed(cls, source: str, event: str, error: Exception, duration_ms: float = 0.0) -> DispatchResult:
        return cls(source=source, event=event, ok=False, error=error, duration_ms=duration_ms)

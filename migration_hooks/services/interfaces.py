"""Protocols for the host collaborators the dispatcher talks to."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol


class EventBus(Protocol):
    """Host event system that receives the synthetic ``migration_hooks.*`` events."""

    def dispatch(self, name: str, payload: dict[str, Any]) -> Any: ...


class MigrationStep(Protocol):
    def up(self) -> Any: ...

    def down(self) -> Any: ...


ConnectionSource = str | Callable[[], str]


class ListEventBus:
    """Event bus that records dispatches in memory. Handy for tests and dry runs."""

    def __init__(self) -> None:
        self.events: list[tuple[str, dict[str, Any]]] = []

    def dispatch(self, name: str, payload: dict[str, Any]) -> None:
        self.events.append((name, payload))

    def names(self) -> list[str]:
        return [name for name, _ in self.events]

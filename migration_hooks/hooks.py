"""Hook registry and direction/step filtering combinators."""

from __future__ import annotations

import logging
import threading
from collections import defaultdict
from collections.abc import Callable
from typing import Any

from migration_hooks.models import Direction, HookCallback, HookEventName, HookRegistration, Timing

logger = logging.getLogger(__name__)

DEFAULT_PRIORITY = 10


def _event_key(event_name: HookEventName | str) -> str:
    return event_name.value if isinstance(event_name, HookEventName) else str(event_name)


def _context_value(context: Any, key: str) -> Any:
    if isinstance(context, dict):
        return context.get(key)
    return getattr(context, key, None)


def _direction_of(context: Any) -> str:
    method = _context_value(context, "method")
    if method is None:
        return Direction.UP.value
    return method.value if isinstance(method, Direction) else str(method)


def only_if_forward(callback: HookCallback) -> HookCallback:
    """Wrap ``callback`` so it only runs for forward (``up``) dispatches."""

    def guarded(context: Any) -> None:
        if _direction_of(context) == Direction.UP.value:
            callback(context)

    return guarded


def only_if_reverse(callback: HookCallback) -> HookCallback:
    """Wrap ``callback`` so it only runs for rollback (``down``) dispatches."""

    def guarded(context: Any) -> None:
        if _direction_of(context) == Direction.DOWN.value:
            callback(context)

    return guarded


class HookRegistry:
    """In-process callback registry ordered by priority.

    Lower priorities run first; equal priorities keep registration order.
    Registration is expected during setup, before any step is dispatched.
    """

    def __init__(self) -> None:
        self._hooks: dict[str, list[HookRegistration]] = defaultdict(list)
        self._lock = threading.Lock()

    def register(
        self,
        event_name: HookEventName | str,
        callback: HookCallback,
        priority: int = DEFAULT_PRIORITY,
    ) -> None:
        key = _event_key(event_name)
        with self._lock:
            entries = self._hooks[key]
            entries.append(HookRegistration(event_name=key, callback=callback, priority=priority))
            entries.sort(key=lambda entry: entry.priority)
        logger.debug("Registered hook for %s (priority=%s)", key, priority)

    def on(self, event_name: HookEventName | str, priority: int = DEFAULT_PRIORITY) -> Callable[[HookCallback], HookCallback]:
        """Decorator form of :meth:`register`.

        Usage:
            @registry.on(HookEventName.ALL_ENDED, priority=5)
            def warm_cache(context):
                ...
        """

        def decorator(callback: HookCallback) -> HookCallback:
            self.register(event_name, callback, priority)
            return callback

        return decorator

    def get(self, event_name: HookEventName | str) -> tuple[HookRegistration, ...]:
        key = _event_key(event_name)
        with self._lock:
            return tuple(self._hooks.get(key, ()))

    def count(self) -> int:
        with self._lock:
            return sum(len(entries) for entries in self._hooks.values())

    def clear(self) -> None:
        """Remove every registration. Meant for test isolation only."""
        with self._lock:
            self._hooks.clear()
        logger.debug("Cleared all hook registrations")

    def before_all(self, callback: HookCallback, priority: int = DEFAULT_PRIORITY) -> HookCallback:
        self.register(HookEventName.ALL_STARTED, callback, priority)
        return callback

    def after_all(self, callback: HookCallback, priority: int = DEFAULT_PRIORITY) -> HookCallback:
        self.register(HookEventName.ALL_ENDED, callback, priority)
        return callback

    def before_each(self, callback: HookCallback, priority: int = DEFAULT_PRIORITY) -> HookCallback:
        self.register(HookEventName.STEP_STARTED, callback, priority)
        return callback

    def after_each(self, callback: HookCallback, priority: int = DEFAULT_PRIORITY) -> HookCallback:
        self.register(HookEventName.STEP_ENDED, callback, priority)
        return callback

    def register_for_step(
        self,
        step_identifier: str,
        callback: HookCallback,
        when: Timing | str = Timing.AFTER,
        priority: int = DEFAULT_PRIORITY,
    ) -> None:
        """Register ``callback`` for steps whose identifier contains ``step_identifier``.

        Matching is a substring test, not equality: registering ``"users"``
        also fires for ``create_users_table`` and ``delete_all_users_log``.
        Use the full timestamped step name when only one step should match.
        """
        event = HookEventName.STEP_STARTED if when == Timing.BEFORE else HookEventName.STEP_ENDED

        def matching(context: Any) -> None:
            if step_identifier in (_context_value(context, "step_identifier") or ""):
                callback(context)

        self.register(event, matching, priority)

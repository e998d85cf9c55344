"""Dispatch engine bridging migration lifecycle signals to handlers and callbacks."""

from __future__ import annotations

import logging
import time
from typing import Any

from migration_hooks.config import HooksConfig
from migration_hooks.errors import HandlerExecutionError, HandlerLoadError, MigrationHookError, RegistryCallbackError
from migration_hooks.handlers import NotAHandlerObject, load_step_handler
from migration_hooks.hooks import HookRegistry
from migration_hooks.models import (
    EVENT_BUS_PREFIX,
    Direction,
    DispatchResult,
    HookContext,
    HookEventName,
    HookOperation,
    Timing,
)
from migration_hooks.naming import handler_file_path, step_file_path, step_identifier_from_path
from migration_hooks.services.interfaces import ConnectionSource, EventBus
from migration_hooks.timeouts import CallTimedOut, call_with_timeout

logger = logging.getLogger(__name__)


class HookDispatcher:
    """Runs step handler files and registry callbacks for each lifecycle signal.

    Every handler is synchronous: a signal handler returns only once the
    handler file operation and all callbacks for that event have finished.
    Failures are always logged; they propagate to the migration driver only
    when ``halt_on_error`` is set.
    """

    def __init__(
        self,
        config: HooksConfig | None = None,
        registry: HookRegistry | None = None,
        event_bus: EventBus | None = None,
        connection: ConnectionSource | None = None,
    ) -> None:
        self.config = config or HooksConfig()
        self.registry = registry or HookRegistry()
        self.event_bus = event_bus
        self._connection = connection

    @property
    def connection(self) -> str:
        source = self._connection
        if source is None:
            return self.config.connection
        return source() if callable(source) else source

    def handle_all_started(self, direction: Direction | str = Direction.UP) -> None:
        self._dispatch_aggregate(HookEventName.ALL_STARTED, direction)

    def handle_all_ended(self, direction: Direction | str = Direction.UP) -> None:
        self._dispatch_aggregate(HookEventName.ALL_ENDED, direction)

    def handle_step_started(self, step: Any, direction: Direction | str = Direction.UP) -> None:
        self._dispatch_step(HookEventName.STEP_STARTED, Timing.BEFORE, step, direction)

    def handle_step_ended(self, step: Any, direction: Direction | str = Direction.UP) -> None:
        self._dispatch_step(HookEventName.STEP_ENDED, Timing.AFTER, step, direction)

    def build_step_context(self, step: Any, direction: Direction | str) -> HookContext:
        file_path = step_file_path(step)
        return HookContext(
            method=Direction(direction),
            connection=self.connection,
            step_identifier=step_identifier_from_path(file_path),
            file_path=file_path,
            migration=step,
        )

    def _dispatch_aggregate(self, event: HookEventName, direction: Direction | str) -> None:
        context = HookContext(method=Direction(direction), connection=self.connection)
        self._emit(event, context)

    def _dispatch_step(self, event: HookEventName, timing: Timing, step: Any, direction: Direction | str) -> None:
        context = self.build_step_context(step, direction)
        if self.config.enabled:
            result = self.run_file_handler(context.step_identifier, context.method, timing)
            if result is not None and not result.ok:
                self._enforce(result)
        self._emit(event, context)

    def run_file_handler(
        self,
        step_identifier: str | None,
        direction: Direction,
        timing: Timing,
    ) -> DispatchResult | None:
        """Load and run the handler file operation for one step, if there is one.

        Returns ``None`` when nothing ran (no identifier, no file, no matching
        operation, or a non-object handler outside strict mode).
        """
        if not step_identifier:
            return None

        path = handler_file_path(self.config.hooks_path, step_identifier, self.config.extension)
        if not path.exists():
            return None

        operation = HookOperation.select(timing, direction)
        source = f"{step_identifier}::{operation.value}"

        try:
            handler = load_step_handler(path)
        except NotAHandlerObject as exc:
            exc.method = operation.value
            if self.config.strict_mode:
                logger.error("Migration hook failed for %s: %s", source, exc)
                raise
            logger.warning("%s", exc)
            return None
        except HandlerLoadError as exc:
            exc.method = operation.value
            return self._failed(source, exc)

        call = handler.get(operation)
        if call is None:
            return None

        started = time.perf_counter()
        try:
            call_with_timeout(call, self.config.timeout)
        except CallTimedOut as exc:
            error = HandlerExecutionError(
                f"timeout: {source} exceeded {self.config.timeout}s",
                timed_out=True,
                step_identifier=step_identifier,
                method=operation.value,
            )
            error.__cause__ = exc
            return self._failed(source, error, started)
        except Exception as exc:
            error = HandlerExecutionError(
                f"{source} raised {type(exc).__name__}: {exc}",
                step_identifier=step_identifier,
                method=operation.value,
            )
            error.__cause__ = exc
            return self._failed(source, error, started)

        duration_ms = round((time.perf_counter() - started) * 1000, 2)
        if self.config.log_execution:
            logger.info("Executed hook: %s (%sms)", source, duration_ms)
        return DispatchResult(source=source, event=operation.value, duration_ms=duration_ms)

    def run_callbacks(self, event: HookEventName | str, context: HookContext) -> list[DispatchResult]:
        """Run registered callbacks for ``event`` in priority order."""
        event_key = event.value if isinstance(event, HookEventName) else event
        results: list[DispatchResult] = []
        for index, registration in enumerate(self.registry.get(event_key)):
            source = getattr(registration.callback, "__qualname__", repr(registration.callback))
            started = time.perf_counter()
            try:
                registration.callback(context)
            except Exception as exc:
                error = RegistryCallbackError(
                    f"Callback #{index} ({source}) for {event_key} raised {type(exc).__name__}: {exc}",
                    step_identifier=context.step_identifier,
                    event=event_key,
                )
                error.__cause__ = exc
                result = self._failed(source, error, started, event=event_key)
                results.append(result)
                self._enforce(result)
                continue
            results.append(
                DispatchResult(
                    source=source,
                    event=event_key,
                    duration_ms=round((time.perf_counter() - started) * 1000, 2),
                )
            )
        return results

    def _emit(self, event: HookEventName, context: HookContext) -> None:
        if self.event_bus is not None:
            self.event_bus.dispatch(f"{EVENT_BUS_PREFIX}{event.value}", context.to_payload())
        self.run_callbacks(event, context)

    def _failed(
        self,
        source: str,
        error: MigrationHookError,
        started: float | None = None,
        event: str | None = None,
    ) -> DispatchResult:
        duration_ms = round((time.perf_counter() - started) * 1000, 2) if started is not None else 0.0
        logger.error("Migration hook failed for %s: %s", source, error, exc_info=error.__cause__ or error)
        return DispatchResult.failed(source, event or error.method or "", error, duration_ms)

    def _enforce(self, result: DispatchResult) -> None:
        if self.config.halt_on_error and result.error is not None:
            raise result.error

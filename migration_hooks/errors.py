"""Exception hierarchy for migration hooks."""

from __future__ import annotations


class MigrationHookError(Exception):
    """Base exception for hook loading and dispatch failures."""

    def __init__(
        self,
        message: str,
        *,
        step_identifier: str | None = None,
        event: str | None = None,
        method: str | None = None,
    ) -> None:
        super().__init__(message)
        self.step_identifier = step_identifier
        self.event = event
        self.method = method


class HandlerLoadError(MigrationHookError):
    """Handler file exists but could not be evaluated or has the wrong shape."""


class HandlerExecutionError(MigrationHookError):
    """A handler operation raised or ran past its time budget."""

    def __init__(self, message: str, *, timed_out: bool = False, **kwargs: str | None) -> None:
        super().__init__(message, **kwargs)
        self.timed_out = timed_out


class RegistryCallbackError(MigrationHookError):
    """A registered callback raised."""

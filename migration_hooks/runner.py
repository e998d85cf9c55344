"""Minimal step driver that raises the four lifecycle signals."""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from dataclasses import dataclass, field

from migration_hooks.dispatcher import HookDispatcher
from migration_hooks.models import Direction
from migration_hooks.naming import step_file_path, step_identifier_from_path
from migration_hooks.services.interfaces import MigrationStep

logger = logging.getLogger(__name__)


@dataclass
class RunSummary:
    direction: Direction
    completed: list[str] = field(default_factory=list)
    duration_ms: float = 0.0


def run_steps(
    steps: Iterable[MigrationStep],
    dispatcher: HookDispatcher,
    direction: Direction | str = Direction.UP,
) -> RunSummary:
    """Run ``steps`` in the given order, signalling the dispatcher around each one.

    Pass the steps reversed for a rollback. A failure in a step, or in a hook
    under ``halt_on_error``, stops the run; steps already applied stay applied.
    """
    direction = Direction(direction)
    summary = RunSummary(direction=direction)
    started = time.perf_counter()

    dispatcher.handle_all_started(direction)
    for step in steps:
        name = step_identifier_from_path(step_file_path(step)) or type(step).__name__
        dispatcher.handle_step_started(step, direction)
        getattr(step, direction.value)()
        dispatcher.handle_step_ended(step, direction)
        summary.completed.append(name)
        logger.debug("Step %s %s complete", name, direction.value)
    dispatcher.handle_all_ended(direction)

    summary.duration_ms = round((time.perf_counter() - started) * 1000, 2)
    logger.info("Ran %s steps %s in %sms", len(summary.completed), direction.value, summary.duration_ms)
    return summary

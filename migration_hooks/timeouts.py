"""Bounded execution budget for handler calls.

The budget is enforced with ``SIGALRM`` interval timers, which only exist on
POSIX and only fire on the main thread. Anywhere else the call runs unbounded
and an overrun is reported after the fact.
"""

from __future__ import annotations

import logging
import signal
import threading
import time
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)


class CallTimedOut(BaseException):
    """Raised inside the running call; not an ``Exception`` so handlers cannot swallow it."""

    def __init__(self, seconds: float) -> None:
        super().__init__(f"timeout after {seconds:g}s")
        self.seconds = seconds


def alarm_supported() -> bool:
    return hasattr(signal, "SIGALRM") and hasattr(signal, "setitimer") and threading.current_thread() is threading.main_thread()


def _report_overrun(seconds: float, elapsed: float, enforced: bool) -> None:
    if elapsed <= seconds:
        return
    if enforced:
        logger.warning("Call exceeded its %ss budget (%.2fs) without being interrupted", seconds, elapsed)
    else:
        logger.warning("Call exceeded its %ss budget (%.2fs); timeout is not enforced here", seconds, elapsed)


def call_with_timeout(func: Callable[[], Any], seconds: float) -> Any:
    """Call ``func`` and abort it with :class:`CallTimedOut` past ``seconds``.

    ``seconds <= 0`` disables the budget.
    """
    if seconds <= 0:
        return func()

    if not alarm_supported():
        started = time.perf_counter()
        result = func()
        _report_overrun(seconds, time.perf_counter() - started, enforced=False)
        return result

    active = True

    def _on_alarm(signum: int, frame: Any) -> None:
        if active:
            raise CallTimedOut(seconds)

    previous_delay, previous_interval = 0.0, 0.0
    started = time.perf_counter()
    previous_handler = signal.signal(signal.SIGALRM, _on_alarm)
    try:
        previous_delay, previous_interval = signal.setitimer(signal.ITIMER_REAL, seconds)
        try:
            result = func()
        finally:
            active = False
            signal.setitimer(signal.ITIMER_REAL, 0)
        _report_overrun(seconds, time.perf_counter() - started, enforced=True)
        return result
    finally:
        # One-shot timer: once cancelled or fired, nothing can interrupt this block.
        signal.signal(signal.SIGALRM, previous_handler)
        if previous_delay > 0:
            # Re-arm an outer timer with whatever it had left.
            remaining = max(previous_delay - (time.perf_counter() - started), 0.001)
            signal.setitimer(signal.ITIMER_REAL, remaining, previous_interval)

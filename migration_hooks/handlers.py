"""Loading per-step handler files into an operation table."""

from __future__ import annotations

import importlib.machinery
import importlib.util
import inspect
import itertools
import logging
import sys
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from migration_hooks.errors import HandlerLoadError
from migration_hooks.models import HookOperation

logger = logging.getLogger(__name__)

HANDLER_ATTRIBUTE = "hook"

_NON_OBJECT_TYPES = (str, bytes, int, float, bool, list, tuple, dict, set, frozenset)

_module_ids = itertools.count()


class NotAHandlerObject(HandlerLoadError):
    """The handler file evaluated, but ``hook`` is missing or not an object."""


@dataclass(frozen=True)
class StepHandler:
    source: Path
    operations: dict[HookOperation, Callable[[], Any]] = field(default_factory=dict)

    @classmethod
    def from_object(cls, source: Path, instance: Any) -> StepHandler:
        operations: dict[HookOperation, Callable[[], Any]] = {}
        for operation in HookOperation:
            candidate = getattr(instance, operation.value, None)
            if candidate is None:
                candidate = getattr(instance, operation.legacy_name, None)
            if callable(candidate):
                operations[operation] = candidate
        return cls(source=source, operations=operations)

    def get(self, operation: HookOperation) -> Callable[[], Any] | None:
        return self.operations.get(operation)

    @property
    def available(self) -> list[HookOperation]:
        return [operation for operation in HookOperation if operation in self.operations]


def _is_handler_object(value: Any) -> bool:
    return value is not None and not isinstance(value, _NON_OBJECT_TYPES) and not inspect.ismodule(value)


class _FreshSourceLoader(importlib.machinery.SourceFileLoader):
    """Always compiles from source, ignoring and never writing ``__pycache__``."""

    def get_code(self, fullname: str) -> Any:
        return self.source_to_code(self.get_data(self.path), self.path)


def _execute_module(path: Path) -> Any:
    # Unique name per load so edits made mid-run are picked up; registered in
    # sys.modules only while the file executes.
    module_name = f"migration_hooks_handler_{path.stem}_{next(_module_ids)}"
    loader = _FreshSourceLoader(module_name, str(path))
    spec = importlib.util.spec_from_file_location(module_name, path, loader=loader)
    if spec is None:
        raise HandlerLoadError(f"Cannot import handler file {path}", step_identifier=path.stem)
    module = importlib.util.module_from_spec(spec)
    sys.modules[module_name] = module
    try:
        loader.exec_module(module)
    except Exception as exc:
        raise HandlerLoadError(
            f"Handler file {path.name} failed to load: {exc}",
            step_identifier=path.stem,
        ) from exc
    finally:
        sys.modules.pop(module_name, None)
    return module


def load_step_handler(path: str | Path) -> StepHandler:
    """Evaluate a handler file and return its operation table.

    The file must define a module-level ``hook`` holding an object; a class is
    instantiated with no arguments. Raises :class:`NotAHandlerObject` when
    ``hook`` is missing or is a plain value, and :class:`HandlerLoadError`
    when the file itself fails to execute.
    """
    path = Path(path)
    module = _execute_module(path)
    instance = getattr(module, HANDLER_ATTRIBUTE, None)

    if inspect.isclass(instance):
        try:
            instance = instance()
        except Exception as exc:
            raise HandlerLoadError(
                f"Handler class in {path.name} could not be instantiated: {exc}",
                step_identifier=path.stem,
            ) from exc

    if not _is_handler_object(instance):
        raise NotAHandlerObject(
            f"Hook file {path.name} did not return an object instance",
            step_identifier=path.stem,
        )
    handler = StepHandler.from_object(path, instance)
    logger.debug("Loaded handler %s (operations: %s)", path, [op.value for op in handler.available])
    return handler

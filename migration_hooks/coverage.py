"""Step to handler-file coverage reporting."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from migration_hooks.errors import HandlerLoadError
from migration_hooks.handlers import NotAHandlerObject, load_step_handler
from migration_hooks.naming import handler_file_path
from migration_hooks.scaffold import available_steps


@dataclass
class CoverageRow:
    step: str
    has_hook: bool
    operations: list[str] = field(default_factory=list)


@dataclass
class CoverageReport:
    rows: list[CoverageRow]
    hook_count: int

    @property
    def total_steps(self) -> int:
        return len(self.rows)

    @property
    def coverage_percent(self) -> float:
        if not self.rows:
            return 0.0
        return round(self.hook_count / self.total_steps * 100, 1)

    @property
    def missing(self) -> list[str]:
        return [row.step for row in self.rows if not row.has_hook]

    def to_dict(self) -> dict:
        return {
            "total_steps": self.total_steps,
            "steps_with_hooks": self.hook_count,
            "coverage_percent": self.coverage_percent,
            "steps": [
                {"step": row.step, "has_hook": row.has_hook, "operations": row.operations}
                for row in self.rows
            ],
        }


def describe_operations(path: Path) -> list[str]:
    if not path.exists():
        return []
    try:
        handler = load_step_handler(path)
    except NotAHandlerObject:
        return ["Invalid hook file"]
    except HandlerLoadError as exc:
        return [f"Error: {exc.__cause__ or exc}"]
    return [operation.value for operation in handler.available]


def build_coverage_report(steps_path: str | Path, hooks_path: str | Path, extension: str = ".py") -> CoverageReport:
    steps = available_steps(steps_path, extension)
    hooks = set(available_steps(hooks_path, extension))
    rows = []
    for step in steps:
        has_hook = step in hooks
        operations = describe_operations(handler_file_path(hooks_path, step, extension)) if has_hook else []
        rows.append(CoverageRow(step=step, has_hook=has_hook, operations=operations))
    return CoverageReport(rows=rows, hook_count=sum(1 for row in rows if row.has_hook))

"""Handler file template and creation."""

from __future__ import annotations

import logging
from pathlib import Path

from migration_hooks.naming import handler_file_path, strip_extension

logger = logging.getLogger(__name__)

HANDLER_TEMPLATE = '''"""Migration hook for: {step_name}

Runs automatically around the matching migration step.
Available operations: before_up, after_up, before_down, after_down
"""

import logging

logger = logging.getLogger(__name__)


class Hook:
    def before_up(self):
        """Runs BEFORE the migration is applied (check prerequisites, back up data)."""
        logger.info("Before migration up: {step_name}")

    def after_up(self):
        """Runs AFTER the migration is applied (seed data, clear caches, reindex)."""
        logger.info("After migration up: {step_name}")

    def before_down(self):
        """Runs BEFORE the rollback (save data the rollback will drop)."""
        logger.info("Before migration down: {step_name}")

    def after_down(self):
        """Runs AFTER the rollback (clean up, restore backups)."""
        logger.info("After migration down: {step_name}")


hook = Hook()
'''


class ScaffoldError(ValueError):
    pass


def render_handler(step_name: str) -> str:
    return HANDLER_TEMPLATE.format(step_name=step_name)


def available_steps(steps_path: str | Path, extension: str = ".py") -> list[str]:
    path = Path(steps_path)
    if not path.is_dir():
        return []
    return sorted(
        strip_extension(item.name, extension)
        for item in path.iterdir()
        if item.is_file() and item.name.endswith(extension) and not item.name.startswith("_")
    )


def create_handler_file(
    step_name: str,
    *,
    hooks_path: str | Path,
    steps_path: str | Path,
    extension: str = ".py",
) -> Path:
    """Write a handler file for ``step_name`` and return its path.

    ``step_name`` must be the full step file name (timestamp included); a
    trailing extension is ignored.
    """
    step_name = strip_extension(step_name, extension)
    if step_name not in available_steps(steps_path, extension):
        raise ScaffoldError(f"Migration file not found: {step_name}")

    hooks_dir = Path(hooks_path)
    if not hooks_dir.is_dir():
        hooks_dir.mkdir(parents=True, exist_ok=True)
        logger.info("Created hooks directory: %s", hooks_dir)

    target = handler_file_path(hooks_dir, step_name, extension)
    if target.exists():
        raise ScaffoldError(f"Hook file already exists: {target}")

    target.write_text(render_handler(step_name))
    return target

"""Handler file scaffolding command."""

from __future__ import annotations

import argparse
import logging

from migration_hooks.commands.common import load_config
from migration_hooks.scaffold import ScaffoldError, available_steps, create_handler_file

logger = logging.getLogger(__name__)


def _print_available(steps: list[str]) -> None:
    if not steps:
        print("No migration files found.")
        return
    print("Available migration files:")
    for step in steps:
        print(f"  - {step}")
    print("")
    print("Usage: migration-hooks make-hook <full_migration_filename>")
    print("Example: migration-hooks make-hook 2024_01_15_123456_create_users_table")


def run(args: argparse.Namespace) -> int:
    config = load_config(args)
    try:
        target = create_handler_file(
            args.migration,
            hooks_path=config.hooks_path,
            steps_path=config.steps_path,
            extension=config.extension,
        )
    except ScaffoldError as exc:
        print(str(exc))
        if str(exc).startswith("Migration file not found"):
            _print_available(available_steps(config.steps_path, config.extension))
        return 1

    print(f"Migration hook created: {target}")
    return 0

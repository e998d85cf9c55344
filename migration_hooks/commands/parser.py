"""CLI parser construction."""

from __future__ import annotations

import argparse

from migration_hooks.commands.common import add_common_config_flags
from migration_hooks.logging_utils import LOG_LEVELS, parse_log_level


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Migration lifecycle hooks")
    parser.add_argument(
        "--log-level",
        default="INFO",
        type=parse_log_level,
        help=f"Logging level ({', '.join(LOG_LEVELS)})",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    make = sub.add_parser("make-hook", aliases=["make"], help="Create a hook file for an existing migration step")
    make.add_argument("migration", help="Full migration file name, e.g. 2024_01_15_123456_create_users_table")
    add_common_config_flags(make)

    list_cmd = sub.add_parser("list", aliases=["ls"], help="List migration steps and their hook files")
    list_cmd.add_argument("--missing", action="store_true", help="Show only migrations without hooks")
    list_cmd.add_argument("--json", action="store_true", help="Emit machine-readable JSON summary")
    add_common_config_flags(list_cmd)

    return parser

"""CLI entrypoint for migration hook tooling."""

from __future__ import annotations

import logging

from migration_hooks.commands import list_hooks, make_hook
from migration_hooks.commands.common import normalize_command
from migration_hooks.commands.parser import build_parser
from migration_hooks.logging_utils import configure_logging

logger = logging.getLogger(__name__)

COMMANDS = {
    "make-hook": make_hook.run,
    "list": list_hooks.run,
}


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    args.command = normalize_command(args.command)

    handler = COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return 1
    return handler(args)


if __name__ == "__main__":
    raise SystemExit(main())

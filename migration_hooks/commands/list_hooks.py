"""Hook coverage listing command."""

from __future__ import annotations

import argparse
import json

from migration_hooks.commands.common import load_config
from migration_hooks.coverage import CoverageReport, build_coverage_report


def _print_table(report: CoverageReport) -> None:
    headers = ("Migration", "Hook Exists", "Hook Methods")
    rows = [
        (row.step, "yes" if row.has_hook else "no", ", ".join(row.operations) if row.has_hook else "-")
        for row in report.rows
    ]
    widths = [max([len(headers[i]), *(len(r[i]) for r in rows)]) for i in range(len(headers))]
    print("  ".join(h.ljust(w) for h, w in zip(headers, widths)))
    print("  ".join("-" * w for w in widths))
    for r in rows:
        print("  ".join(cell.ljust(w) for cell, w in zip(r, widths)))


def run(args: argparse.Namespace) -> int:
    config = load_config(args)
    if not config.hooks_path.is_dir():
        print(f"Hooks directory does not exist: {config.hooks_path}")
        return 1

    report = build_coverage_report(config.steps_path, config.hooks_path, config.extension)

    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
        return 0

    if args.missing:
        if not report.missing:
            print("All migrations have hook files!")
            return 0
        print("Migrations without hooks:")
        print("")
        for step in report.missing:
            print(f"  - {step}")
        print("")
        print("To create a hook file, run:")
        print("migration-hooks make-hook <migration-name>")
        return 0

    print("Migration Hooks Status:")
    print("")
    _print_table(report)
    print("")
    print(f"Total migrations: {report.total_steps}")
    print(f"Migrations with hooks: {report.hook_count}")
    print(f"Coverage: {report.coverage_percent}%")
    return 0

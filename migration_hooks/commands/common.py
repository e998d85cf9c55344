"""Shared helpers for CLI command modules."""

from __future__ import annotations

import argparse
from pathlib import Path

from migration_hooks.config import HooksConfig, load_effective_config, read_yaml_mapping

ALIAS_TO_CANONICAL = {
    "make": "make-hook",
    "ls": "list",
}


def normalize_command(name: str) -> str:
    return ALIAS_TO_CANONICAL.get(name, name)


def load_yaml_dict(path: str | None) -> dict | None:
    if not path:
        return None
    return read_yaml_mapping(Path(path), required=True) or None


def load_config(args: argparse.Namespace) -> HooksConfig:
    return load_effective_config(
        base_path=args.base_path,
        org_defaults=load_yaml_dict(args.org_config),
        system_defaults=load_yaml_dict(args.system_config),
        runtime_override=load_yaml_dict(args.runtime_override),
    )


def add_common_config_flags(cmd: argparse.ArgumentParser) -> None:
    cmd.add_argument("--base-path", default=".", help="Project root containing .migration-hooks.yaml")
    cmd.add_argument("--org-config", help="Optional org defaults YAML")
    cmd.add_argument("--system-config", help="Optional system defaults YAML")
    cmd.add_argument("--runtime-override", help="Optional runtime override YAML")

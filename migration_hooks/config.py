"""Configuration models and loading for migration hooks."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field

CONFIG_FILENAME = ".migration-hooks.yaml"

ENV_OVERRIDES = {
    "MIGRATION_HOOKS_ENABLED": "enabled",
    "MIGRATION_HOOKS_PATH": "path",
    "MIGRATION_HOOKS_HALT_ON_ERROR": "halt_on_error",
    "MIGRATION_HOOKS_STRICT_MODE": "strict_mode",
    "MIGRATION_HOOKS_LOG_EXECUTION": "log_execution",
    "MIGRATION_HOOKS_TIMEOUT": "timeout",
}


class HooksConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    enabled: bool = True
    path: str | None = None
    data_dir: str = "database"
    migrations_path: str | None = None
    extension: str = ".py"
    halt_on_error: bool = False
    strict_mode: bool = False
    log_execution: bool = True
    timeout: int = Field(default=60, ge=0)
    connection: str = "default"

    @property
    def hooks_path(self) -> Path:
        return Path(self.path) if self.path else Path(self.data_dir) / "hooks"

    @property
    def steps_path(self) -> Path:
        return Path(self.migrations_path) if self.migrations_path else Path(self.data_dir) / "migrations"


def _merge_layers(*layers: Mapping[str, Any] | None) -> dict[str, Any]:
    """Fold config layers left to right; later layers win, nested mappings merge."""
    merged: dict[str, Any] = {}
    for layer in layers:
        for key, value in (layer or {}).items():
            if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
                value = _merge_layers(merged[key], value)
            merged[key] = value
    return merged


def read_yaml_mapping(path: Path, required: bool = False) -> dict[str, Any]:
    """Parse a YAML config layer; a missing optional file or an empty one is ``{}``."""
    if not path.exists() and not required:
        return {}
    data = yaml.safe_load(path.read_text())
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"YAML at {path} must decode to a mapping")
    return data


def _env_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    # Raw strings; pydantic coerces "false", "0", "30" and friends.
    return {field: environ[name] for name, field in ENV_OVERRIDES.items() if environ.get(name, "") != ""}


def _anchor(value: str | None, base: Path) -> str | None:
    if value is None:
        return None
    path = Path(value)
    return str(path if path.is_absolute() else base / path)


def load_effective_config(
    base_path: str | Path,
    org_defaults: dict[str, Any] | None = None,
    system_defaults: dict[str, Any] | None = None,
    runtime_override: dict[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
) -> HooksConfig:
    """Load config with precedence runtime > env > project .migration-hooks.yaml > org > system."""
    base = Path(base_path)
    merged = _merge_layers(
        system_defaults,
        org_defaults,
        read_yaml_mapping(base / CONFIG_FILENAME),
        _env_overrides(os.environ if environ is None else environ),
        runtime_override,
    )
    config = HooksConfig.model_validate(merged)
    return config.model_copy(
        update={
            "data_dir": _anchor(config.data_dir, base),
            "path": _anchor(config.path, base),
            "migrations_path": _anchor(config.migrations_path, base),
        }
    )

"""Lifecycle hooks for ordered schema migration steps."""

from migration_hooks.config import HooksConfig, load_effective_config
from migration_hooks.dispatcher import HookDispatcher
from migration_hooks.errors import HandlerExecutionError, HandlerLoadError, MigrationHookError, RegistryCallbackError
from migration_hooks.hooks import HookRegistry, only_if_forward, only_if_reverse
from migration_hooks.models import Direction, DispatchResult, HookContext, HookEventName, HookOperation, Timing
from migration_hooks.runner import run_steps

__all__ = [
    "Direction",
    "DispatchResult",
    "HandlerExecutionError",
    "HandlerLoadError",
    "HookContext",
    "HookDispatcher",
    "HookEventName",
    "HookOperation",
    "HookRegistry",
    "HooksConfig",
    "MigrationHookError",
    "RegistryCallbackError",
    "Timing",
    "load_effective_config",
    "only_if_forward",
    "only_if_reverse",
    "run_steps",
]

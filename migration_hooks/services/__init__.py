"""Host-facing service interfaces."""

from .interfaces import EventBus, ListEventBus, MigrationStep

__all__ = ["EventBus", "ListEventBus", "MigrationStep"]

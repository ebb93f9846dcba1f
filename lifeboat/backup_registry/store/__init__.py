"""Key-value store implementations for registry persistence."""

from lifeboat.backup_registry.store.base import StateStore
from lifeboat.backup_registry.store.local import LocalStateStore

__all__ = ["LocalStateStore", "StateStore"]

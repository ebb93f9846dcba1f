"""Key-value store interface for registry metadata.

The backup registry persists a single JSON-compatible blob under a fixed
key.  The interface is async so that file-backed and remote stores share
the same call sites.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class StateStore(Protocol):
    """Async protocol for reading and writing JSON-compatible items by key."""

    async def get_item(self, key: str) -> Any | None:
        """Return the stored value, or ``None`` if the key is absent."""
        ...

    async def set_item(self, key: str, value: Any) -> None:
        """Store *value* under *key*, replacing any previous value."""
        ...

    async def remove_item(self, key: str) -> None:
        """Remove *key*.  No-op if absent."""
        ...

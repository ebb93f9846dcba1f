"""Local filesystem key-value store.

Keeps all items in one JSON object on disk::

    {data_root}/storage.json

Uses ``anyio.to_thread.run_sync`` for non-blocking file I/O.  The file is
read once, on first access, and cached; every ``set_item`` rewrites it in
full.

Writes are atomic: data is written to a temporary file in the same directory,
then renamed to the target path, so a crash mid-write leaves the previous
contents intact.  A file that cannot be parsed is logged and treated as
empty -- the next write replaces it.
"""

from __future__ import annotations

import contextlib
import json
import os
import tempfile
from functools import partial
from pathlib import Path
from typing import Any

from anyio import to_thread
from loguru import logger


class LocalStateStore:
    """JSON-file implementation of the StateStore protocol."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._items: dict[str, Any] | None = None

    @property
    def path(self) -> Path:
        return self._path

    # -- Read ------------------------------------------------------------------

    async def get_item(self, key: str) -> Any | None:
        items = await self._load()
        return items.get(key)

    # -- Write -----------------------------------------------------------------

    async def set_item(self, key: str, value: Any) -> None:
        items = await self._load()
        items[key] = value
        await self._save(items)

    async def remove_item(self, key: str) -> None:
        items = await self._load()
        if items.pop(key, None) is not None:
            await self._save(items)

    # -- Internals -------------------------------------------------------------

    async def _load(self) -> dict[str, Any]:
        if self._items is None:
            self._items = await to_thread.run_sync(partial(_read_items, self._path))
        return self._items

    async def _save(self, items: dict[str, Any]) -> None:
        data = json.dumps(items, indent=2)
        await to_thread.run_sync(partial(_atomic_write, self._path, data))


# -- Sync helpers (run in thread pool) -----------------------------------------


def _read_items(path: Path) -> dict[str, Any]:
    """Read the storage object.  Missing or corrupt files yield ``{}``."""
    if not path.is_file():
        return {}
    try:
        items = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        logger.error("Storage: could not read {}: {}", path, exc)
        return {}
    if not isinstance(items, dict):
        logger.error("Storage: {} does not contain a JSON object, ignoring it", path)
        return {}
    return items


def _atomic_write(path: Path, data: str) -> None:
    """Write data atomically: temp file + rename."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(data)
        os.replace(tmp_path, path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(tmp_path)
        raise

"""One-time migration of the legacy ``workspaces.json`` registry file.

Older releases kept the registry in ``{backup_home}/workspaces.json`` with
differently named arrays.  On first start without current metadata the file
is read, mapped onto the current shape, and deleted.  Migration is
best-effort: any failure is logged and startup continues with nothing
migrated.
"""

from __future__ import annotations

import json
from functools import partial
from pathlib import Path
from typing import Any

from anyio import to_thread
from loguru import logger

from lifeboat.backup_registry.models.serialized import LEGACY_FIELD_MAP


async def migrate_legacy_backup_workspaces(legacy_path: Path) -> dict[str, Any] | None:
    """Return the legacy registry in the current blob shape, or ``None``.

    ``None`` means there was nothing (usable) to migrate.
    """
    if not await to_thread.run_sync(legacy_path.is_file):
        return None

    try:
        raw = await to_thread.run_sync(partial(legacy_path.read_text, encoding="utf-8"))
        legacy = json.loads(raw)
    except (OSError, ValueError) as exc:
        logger.error("Backup: could not migrate legacy backup workspaces metadata: {}", exc)
        return None

    if not isinstance(legacy, dict):
        logger.error("Backup: could not migrate legacy backup workspaces metadata: not a JSON object")
        return None

    migrated = {
        current: value if isinstance(value := legacy.get(old), list) else []
        for old, current in LEGACY_FIELD_MAP.items()
    }

    try:
        await to_thread.run_sync(legacy_path.unlink)
    except OSError as exc:
        logger.warning("Backup: migrated legacy metadata but could not delete {}: {}", legacy_path, exc)

    logger.info(
        "Backup: migrated legacy metadata ({} workspaces, {} folders, {} empty windows)",
        len(migrated["workspaces"]),
        len(migrated["folders"]),
        len(migrated["emptyWindows"]),
    )
    return migrated

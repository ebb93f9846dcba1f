"""Orphan rescue: re-parent a backup directory onto a new empty window.

When a workspace or folder backup still holds content but its original
resource is gone, the content is kept by renaming the directory to a fresh
empty-window identity instead of deleting it.
"""

from __future__ import annotations

import random
import time
from collections.abc import Callable
from typing import TYPE_CHECKING

from loguru import logger

from lifeboat.backup_registry.disk import move_backup_folder
from lifeboat.backup_registry.models.backup import EmptyWindowBackupInfo
from lifeboat.backup_registry.paths import PathComparer

if TYPE_CHECKING:
    from pathlib import Path

    from lifeboat.backup_registry.layout import BackupLayout
    from lifeboat.backup_registry.registry import BackupRegistry


def create_empty_workspace_id() -> str:
    """Opaque id for a new empty window: epoch millis plus a random offset."""
    return str(int(time.time() * 1000) + random.randint(0, 1000))  # noqa: S311


class EmptyWindowConverter:
    """Turns orphaned backup directories into empty-window backups."""

    def __init__(
        self,
        registry: BackupRegistry,
        layout: BackupLayout,
        path_comparer: PathComparer,
        id_factory: Callable[[], str] = create_empty_workspace_id,
    ) -> None:
        self._registry = registry
        self._layout = layout
        self._path_comparer = path_comparer
        self._id_factory = id_factory

    def prepare_new_empty_window_backup(self) -> EmptyWindowBackupInfo:
        """Mint an identity that no tracked empty window already uses."""
        backup_folder = self._id_factory()
        while any(
            self._path_comparer.is_equal(window.backup_folder, backup_folder)
            for window in self._registry.empty_windows
        ):
            backup_folder = self._id_factory()
        return EmptyWindowBackupInfo(backup_folder=backup_folder)

    async def convert(self, backup_path: Path) -> EmptyWindowBackupInfo | None:
        """Move *backup_path* to a new empty-window directory and track it.

        Returns the new entry, or ``None`` if the rename failed, in which case
        the orphan stays where it is and is re-evaluated on next startup.
        The caller is responsible for flushing the registry.
        """
        info = self.prepare_new_empty_window_backup()
        target = self._layout.empty_window_path(info)
        if not await move_backup_folder(backup_path, target):
            return None

        self._registry.add_empty_window(info)
        logger.info("Backup: converted orphaned backup {} to empty window {}", backup_path, info.backup_folder)
        return info

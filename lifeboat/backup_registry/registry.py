"""In-process backup registry.

Holds the three ordered collections of tracked sessions (workspaces, folders,
empty windows) and their persisted projection.  Created once per process and
passed by reference to the registrar; there is no module-level instance.

Accessors return tuples so callers cannot mutate registry state.  Order is
insertion order and only matters for stable iteration.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from loguru import logger

from lifeboat.backup_registry.models.serialized import (
    SerializedBackupWorkspaces,
    SerializedEmptyWindowBackupInfo,
    SerializedFolderBackupInfo,
    SerializedWorkspaceBackupInfo,
)

if TYPE_CHECKING:
    from lifeboat.backup_registry.models.backup import (
        EmptyWindowBackupInfo,
        FolderBackupInfo,
        WorkspaceBackupInfo,
    )
    from lifeboat.backup_registry.store.base import StateStore

BACKUP_WORKSPACES_STORAGE_KEY = "backupWorkspaces"


class BackupRegistry:
    """Source of truth for which sessions have backups.

    Duplicate detection is the caller's job: the registrar and validators
    decide identity (which depends on path-case rules); the registry only
    stores what it is given.
    """

    def __init__(self, store: StateStore) -> None:
        self._store = store
        self._workspaces: list[WorkspaceBackupInfo] = []
        self._folders: list[FolderBackupInfo] = []
        self._empty_windows: list[EmptyWindowBackupInfo] = []

    # -- Query -----------------------------------------------------------------

    @property
    def workspaces(self) -> tuple[WorkspaceBackupInfo, ...]:
        return tuple(self._workspaces)

    @property
    def folders(self) -> tuple[FolderBackupInfo, ...]:
        return tuple(self._folders)

    @property
    def empty_windows(self) -> tuple[EmptyWindowBackupInfo, ...]:
        return tuple(self._empty_windows)

    # -- Mutation --------------------------------------------------------------

    def add_workspace(self, info: WorkspaceBackupInfo) -> None:
        logger.debug("Registry: add workspace {}", info.workspace_id)
        self._workspaces.append(info)

    def add_folder(self, info: FolderBackupInfo) -> None:
        logger.debug("Registry: add folder {}", info.folder_uri)
        self._folders.append(info)

    def add_empty_window(self, info: EmptyWindowBackupInfo) -> None:
        logger.debug("Registry: add empty window {}", info.backup_folder)
        self._empty_windows.append(info)

    def replace_workspaces(self, entries: Iterable[WorkspaceBackupInfo]) -> None:
        self._workspaces = list(entries)

    def replace_folders(self, entries: Iterable[FolderBackupInfo]) -> None:
        self._folders = list(entries)

    def replace_empty_windows(self, entries: Iterable[EmptyWindowBackupInfo]) -> None:
        self._empty_windows = list(entries)

    # -- Persistence -----------------------------------------------------------

    async def load(self) -> dict[str, Any] | None:
        """Return the raw persisted blob, or ``None`` if nothing is stored.

        The blob is returned unvalidated; each category is validated
        separately so one corrupt category does not poison the others.
        """
        raw = await self._store.get_item(BACKUP_WORKSPACES_STORAGE_KEY)
        if raw is None:
            return None
        if not isinstance(raw, dict):
            logger.warning("Registry: stored backup metadata is not an object, ignoring it")
            return {}
        return raw

    def serialize(self) -> SerializedBackupWorkspaces:
        return SerializedBackupWorkspaces(
            workspaces=[SerializedWorkspaceBackupInfo.from_info(info) for info in self._workspaces],
            folders=[SerializedFolderBackupInfo.from_info(info) for info in self._folders],
            empty_windows=[SerializedEmptyWindowBackupInfo.from_info(info) for info in self._empty_windows],
        )

    async def flush(self) -> None:
        """Persist the full registry.  Storage errors are logged, not raised."""
        data = self.serialize().to_storage()
        try:
            await self._store.set_item(BACKUP_WORKSPACES_STORAGE_KEY, data)
        except OSError as exc:
            logger.error("Registry: could not store backup metadata: {}", exc)

"""Backup registrar -- the public surface of the backup registry.

The BackupMainService is a process-level singleton created at startup.  It
coordinates:

- **Registry**: in-memory collections of tracked sessions and their
  persisted projection
- **Validator**: startup reconciliation of persisted entries with disk state
- **Converter**: rescue of orphaned backups into empty windows

Startup order (``initialize``): sweep leftover trash -> legacy migration
(only when no current metadata exists) -> validate empty windows ->
workspaces -> folders -> flush.  Empty windows go first so that windows
minted by conversions during the workspace and folder passes are visible to
later dedup checks.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

from lifeboat.backup_registry.disk import has_backups, move_backup_folder, path_exists, sweep_trash
from lifeboat.backup_registry.layout import BackupLayout
from lifeboat.backup_registry.managers.conversion import EmptyWindowConverter, create_empty_workspace_id
from lifeboat.backup_registry.managers.migration import migrate_legacy_backup_workspaces
from lifeboat.backup_registry.managers.validation import BackupValidator
from lifeboat.backup_registry.models.enums import HotExitMode
from lifeboat.backup_registry.paths import IS_CASE_SENSITIVE_FS, PathComparer, UriComparer
from lifeboat.backup_registry.registry import BackupRegistry

if TYPE_CHECKING:
    from lifeboat.backup_registry.models.backup import (
        BackupInfo,
        EmptyWindowBackupInfo,
        FolderBackupInfo,
        WorkspaceBackupInfo,
    )
    from lifeboat.backup_registry.settings import LifeboatSettings
    from lifeboat.backup_registry.store.base import StateStore


class BackupMainService:
    """Tracks which sessions have recoverable backups.

    Callers are expected to use one instance from a single event loop; the
    collections are not locked.
    """

    def __init__(
        self,
        settings: LifeboatSettings,
        store: StateStore,
        *,
        ignore_path_case: bool = not IS_CASE_SENSITIVE_FS,
        id_factory: Callable[[], str] = create_empty_workspace_id,
    ) -> None:
        self._settings = settings
        self.layout = BackupLayout(settings.resolve_backup_home(), ignore_path_case=ignore_path_case)
        self.registry = BackupRegistry(store)

        self._path_comparer = PathComparer(ignore_case=ignore_path_case)
        self._uri_comparer = UriComparer(ignore_path_case=ignore_path_case)
        self._converter = EmptyWindowConverter(self.registry, self.layout, self._path_comparer, id_factory)
        self._validator = BackupValidator(self.layout, self._converter, self._path_comparer, self._uri_comparer)

    @property
    def backup_home(self) -> Path:
        return self.layout.backup_home

    # -- Startup ---------------------------------------------------------------

    async def initialize(self) -> None:
        """Load, migrate, validate and re-persist the registry."""
        await sweep_trash(self.backup_home)

        serialized = await self.registry.load()
        if serialized is None:
            serialized = await migrate_legacy_backup_workspaces(self.layout.legacy_workspaces_file) or {}

        empty_windows = await self._validator.validate_empty_windows(serialized.get("emptyWindows"))
        self.registry.replace_empty_windows(empty_windows)
        workspaces = await self._validator.validate_workspaces(serialized.get("workspaces"))
        self.registry.replace_workspaces(workspaces)
        folders = await self._validator.validate_folders(serialized.get("folders"))
        self.registry.replace_folders(folders)

        await self.registry.flush()

        logger.info(
            "Backup: registry initialised ({} workspaces, {} folders, {} empty windows)",
            len(self.registry.workspaces),
            len(self.registry.folders),
            len(self.registry.empty_windows),
        )

    # -- Hot exit --------------------------------------------------------------

    def get_hot_exit_mode(self) -> HotExitMode:
        try:
            return HotExitMode(self._settings.hot_exit)
        except ValueError:
            return HotExitMode.ON_EXIT

    def is_hot_exit_enabled(self) -> bool:
        return self.get_hot_exit_mode() != HotExitMode.OFF

    def _is_hot_exit_on_exit_and_window_close(self) -> bool:
        return self.get_hot_exit_mode() == HotExitMode.ON_EXIT_AND_WINDOW_CLOSE

    # -- Query -----------------------------------------------------------------

    def get_workspace_backups(self) -> tuple[WorkspaceBackupInfo, ...]:
        if self._is_hot_exit_on_exit_and_window_close():
            # Only empty windows are restored on launch in this mode.
            return ()
        return self.registry.workspaces

    def get_folder_backups(self) -> tuple[FolderBackupInfo, ...]:
        if self._is_hot_exit_on_exit_and_window_close():
            return ()
        return self.registry.folders

    def get_empty_window_backups(self) -> tuple[EmptyWindowBackupInfo, ...]:
        return self.registry.empty_windows

    def get_backup_path(self, info: BackupInfo) -> Path:
        return self.layout.backup_path(info)

    async def has_backups(self, info: BackupInfo) -> bool:
        """Live check: does the entry's directory hold backup content now?"""
        return await has_backups(self.layout.backup_path(info))

    async def get_dirty_workspaces(self) -> list[WorkspaceBackupInfo | FolderBackupInfo]:
        """Workspaces and folders whose backup directories currently hold content."""
        dirty: list[WorkspaceBackupInfo | FolderBackupInfo] = []
        for workspace in self.registry.workspaces:
            if await self.has_backups(workspace):
                dirty.append(workspace)
        for folder in self.registry.folders:
            if await self.has_backups(folder):
                dirty.append(folder)
        return dirty

    # -- Register --------------------------------------------------------------

    async def register_workspace_backup(
        self,
        info: WorkspaceBackupInfo,
        migrate_from: str | Path | None = None,
    ) -> Path:
        """Track a workspace session and return its backup directory.

        With *migrate_from*, existing backups at that location are moved onto
        the canonical directory before returning, so the caller can start
        writing immediately.  Move failures are logged; the canonical path is
        returned regardless.

        Raises ``ValueError`` (nothing recorded) if ``workspace_id`` is not a
        plain directory name.
        """
        backup_path = self.layout.workspace_path(info)

        if not any(workspace.workspace_id == info.workspace_id for workspace in self.registry.workspaces):
            self.registry.add_workspace(info)
            await self.registry.flush()

        if migrate_from:
            await self._move_backup_folder(backup_path, Path(migrate_from))
        return backup_path

    async def register_folder_backup(self, info: FolderBackupInfo) -> Path:
        if not any(self._uri_comparer.is_equal(info.folder_uri, folder.folder_uri) for folder in self.registry.folders):
            self.registry.add_folder(info)
            await self.registry.flush()
        return self.layout.folder_path(info)

    async def register_empty_window_backup(self, info: EmptyWindowBackupInfo) -> Path:
        """Raises ``ValueError`` (nothing recorded) if ``backup_folder`` is not a plain directory name."""
        backup_path = self.layout.empty_window_path(info)

        if not any(
            self._path_comparer.is_equal(window.backup_folder, info.backup_folder)
            for window in self.registry.empty_windows
        ):
            self.registry.add_empty_window(info)
            await self.registry.flush()
        return backup_path

    async def _move_backup_folder(self, backup_path: Path, move_from: Path) -> None:
        # Never overwrite existing backups: rescue them as an empty window first.
        if await path_exists(backup_path) and await self._converter.convert(backup_path) is not None:
            await self.registry.flush()

        if await path_exists(move_from):
            await move_backup_folder(move_from, backup_path)

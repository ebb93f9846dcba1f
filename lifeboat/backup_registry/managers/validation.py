"""Startup validation of persisted backup entries.

Each category of the persisted blob is filtered down to entries that are
well-formed, unique, and backed by real content on disk:

1. A category that is not a list is discarded.
2. For workspaces and empty windows a single malformed entry discards the
   whole category -- a blob with bad records is not partially trusted.
   Malformed folder entries are skipped one by one.
3. The first occurrence of an identity wins.
4. An entry whose directory has no content is deleted from disk and dropped.
   An entry with content whose original resource is gone is converted to an
   empty-window backup.  Everything else is kept.

Entries are processed sequentially so that conversions happen in a
deterministic order.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable
from typing import TYPE_CHECKING, Any, TypeVar

from loguru import logger
from pydantic import TypeAdapter, ValidationError

from lifeboat.backup_registry.disk import delete_stale_backup, has_backups, resource_exists
from lifeboat.backup_registry.models.serialized import (
    SerializedEmptyWindowBackupInfo,
    SerializedFolderBackupInfo,
    SerializedWorkspaceBackupInfo,
)

if TYPE_CHECKING:
    from pathlib import Path

    from lifeboat.backup_registry.layout import BackupLayout
    from lifeboat.backup_registry.managers.conversion import EmptyWindowConverter
    from lifeboat.backup_registry.models.backup import (
        EmptyWindowBackupInfo,
        FolderBackupInfo,
        WorkspaceBackupInfo,
    )
    from lifeboat.backup_registry.paths import PathComparer, Uri, UriComparer

T = TypeVar("T")

_WORKSPACE_RECORDS = TypeAdapter(list[SerializedWorkspaceBackupInfo])
_EMPTY_WINDOW_RECORDS = TypeAdapter(list[SerializedEmptyWindowBackupInfo])


# ---------------------------------------------------------------------------
# Deserialization
# ---------------------------------------------------------------------------


def deserialize_workspaces(raw: Any) -> list[WorkspaceBackupInfo]:
    """Decode the ``workspaces`` array; any bad record discards all of them."""
    if not isinstance(raw, list):
        return []
    try:
        return [record.to_info() for record in _WORKSPACE_RECORDS.validate_python(raw)]
    except (ValidationError, ValueError) as exc:
        logger.warning("Backup: malformed workspace backup metadata, discarding all {} entries: {}", len(raw), exc)
        return []


def deserialize_empty_windows(raw: Any) -> list[EmptyWindowBackupInfo]:
    """Decode the ``emptyWindows`` array; any bad record discards all of them."""
    if not isinstance(raw, list):
        return []
    try:
        return [record.to_info() for record in _EMPTY_WINDOW_RECORDS.validate_python(raw)]
    except ValidationError as exc:
        logger.warning("Backup: malformed empty window backup metadata, discarding all {} entries: {}", len(raw), exc)
        return []


def deserialize_folders(raw: Any) -> list[FolderBackupInfo]:
    """Decode the ``folders`` array, skipping records that cannot be read."""
    if not isinstance(raw, list):
        return []
    result: list[FolderBackupInfo] = []
    for item in raw:
        try:
            result.append(SerializedFolderBackupInfo.model_validate(item).to_info())
        except (ValidationError, ValueError):
            logger.warning("Backup: skipping malformed folder backup entry {!r}", item)
    return result


# ---------------------------------------------------------------------------
# Validator
# ---------------------------------------------------------------------------


class BackupValidator:
    """Reconciles deserialized entries with the backup directories on disk."""

    def __init__(
        self,
        layout: BackupLayout,
        converter: EmptyWindowConverter,
        path_comparer: PathComparer,
        uri_comparer: UriComparer,
    ) -> None:
        self._layout = layout
        self._converter = converter
        self._path_comparer = path_comparer
        self._uri_comparer = uri_comparer

    async def validate_empty_windows(self, raw: Any) -> list[EmptyWindowBackupInfo]:
        return await self._reconcile(
            deserialize_empty_windows(raw),
            key=lambda info: self._path_comparer.key(info.backup_folder),
            backup_path=self._layout.empty_window_path,
        )

    async def validate_workspaces(self, raw: Any) -> list[WorkspaceBackupInfo]:
        return await self._reconcile(
            deserialize_workspaces(raw),
            key=lambda info: info.workspace_id,
            backup_path=self._layout.workspace_path,
            resource=lambda info: info.config_uri,
        )

    async def validate_folders(self, raw: Any) -> list[FolderBackupInfo]:
        return await self._reconcile(
            deserialize_folders(raw),
            key=lambda info: self._uri_comparer.comparison_key(info.folder_uri),
            backup_path=self._layout.folder_path,
            resource=lambda info: info.folder_uri,
        )

    async def _reconcile(
        self,
        entries: Iterable[T],
        *,
        key: Callable[[T], Hashable],
        backup_path: Callable[[T], Path],
        resource: Callable[[T], Uri] | None = None,
    ) -> list[T]:
        seen: set[Hashable] = set()
        result: list[T] = []

        for entry in entries:
            entry_key = key(entry)
            if entry_key in seen:
                continue
            seen.add(entry_key)

            path = backup_path(entry)
            if not await has_backups(path):
                await delete_stale_backup(path)
                continue

            if resource is None or await resource_exists(resource(entry)):
                result.append(entry)
            else:
                # Content without its workspace/folder: keep it as an empty window.
                await self._converter.convert(path)

        return result

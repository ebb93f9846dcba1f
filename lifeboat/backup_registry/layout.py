"""Backup directory layout.

Every tracked session owns one directory under the backup home::

    {backup_home}/{workspace_id}/{scheme}/{backup_file}
    {backup_home}/{folder_hash}/{scheme}/{backup_file}
    {backup_home}/{backup_folder}/{scheme}/{backup_file}

The folder hash is part of the on-disk contract: changing it orphans every
existing folder backup.  Non-``file:`` URIs hash their canonical string, in
which every path character other than unreserved ones and ``/`` is
percent-encoded.

Workspace ids and empty-window folder names are joined as a single path
component; anything that would resolve outside ``backup_home`` raises
``ValueError``.
"""

from __future__ import annotations

import hashlib
from pathlib import Path

from lifeboat.backup_registry.models.backup import (
    BackupInfo,
    EmptyWindowBackupInfo,
    FolderBackupInfo,
    WorkspaceBackupInfo,
)
from lifeboat.backup_registry.paths import FILE_SCHEME, IS_CASE_SENSITIVE_FS, Uri, check_backup_folder_name

LEGACY_WORKSPACES_FILE = "workspaces.json"


def get_folder_hash(folder_uri: Uri, *, ignore_path_case: bool = not IS_CASE_SENSITIVE_FS) -> str:
    """Return the MD5 hex digest naming a folder's backup directory.

    ``file:`` URIs hash their filesystem path (lowercased when path case is
    ignored) for compatibility with path-based keys; other schemes hash the
    lowercased URI string.
    """
    if folder_uri.scheme == FILE_SCHEME:
        key = folder_uri.fs_path.lower() if ignore_path_case else folder_uri.fs_path
    else:
        key = str(folder_uri).lower()
    return hashlib.md5(key.encode("utf-8"), usedforsecurity=False).hexdigest()


class BackupLayout:
    """Maps backup entries to their directories under ``backup_home``."""

    def __init__(self, backup_home: str | Path, *, ignore_path_case: bool = not IS_CASE_SENSITIVE_FS) -> None:
        self.backup_home = Path(backup_home)
        self.ignore_path_case = ignore_path_case

    @property
    def legacy_workspaces_file(self) -> Path:
        return self.backup_home / LEGACY_WORKSPACES_FILE

    def workspace_path(self, info: WorkspaceBackupInfo) -> Path:
        return self.backup_home / check_backup_folder_name(info.workspace_id)

    def folder_path(self, info: FolderBackupInfo) -> Path:
        return self.backup_home / get_folder_hash(info.folder_uri, ignore_path_case=self.ignore_path_case)

    def empty_window_path(self, info: EmptyWindowBackupInfo) -> Path:
        return self.backup_home / check_backup_folder_name(info.backup_folder)

    def backup_path(self, info: BackupInfo) -> Path:
        if isinstance(info, EmptyWindowBackupInfo):
            return self.empty_window_path(info)
        if isinstance(info, FolderBackupInfo):
            return self.folder_path(info)
        return self.workspace_path(info)

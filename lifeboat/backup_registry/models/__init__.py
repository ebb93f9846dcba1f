"""Data models for the backup registry."""

from lifeboat.backup_registry.models.api import (
    BackupPathResponse,
    DirtyBackupsResponse,
    EmptyWindowBackupRegister,
    EmptyWindowBackupResponse,
    FolderBackupRegister,
    FolderBackupResponse,
    HotExitResponse,
    WorkspaceBackupRegister,
    WorkspaceBackupResponse,
)
from lifeboat.backup_registry.models.backup import (
    BackupInfo,
    EmptyWindowBackupInfo,
    FolderBackupInfo,
    WorkspaceBackupInfo,
)
from lifeboat.backup_registry.models.enums import HotExitMode
from lifeboat.backup_registry.models.serialized import (
    SerializedBackupWorkspaces,
    SerializedEmptyWindowBackupInfo,
    SerializedFolderBackupInfo,
    SerializedWorkspaceBackupInfo,
)

__all__ = [
    # Entries
    "BackupInfo",
    # Enums
    # API schemas
    "BackupPathResponse",
    "DirtyBackupsResponse",
    "EmptyWindowBackupInfo",
    "EmptyWindowBackupRegister",
    "EmptyWindowBackupResponse",
    "FolderBackupInfo",
    "FolderBackupRegister",
    "FolderBackupResponse",
    "HotExitMode",
    "HotExitResponse",
    # Persisted blob
    "SerializedBackupWorkspaces",
    "SerializedEmptyWindowBackupInfo",
    "SerializedFolderBackupInfo",
    "SerializedWorkspaceBackupInfo",
    "WorkspaceBackupInfo",
    "WorkspaceBackupRegister",
    "WorkspaceBackupResponse",
]

"""Persisted projection of the backup registry.

The blob stored under ``backupWorkspaces``::

    {
        "workspaces":   [{"id": ..., "configURIPath": ..., "remoteAuthority"?: ...}],
        "folders":      [{"folderUri": ..., "remoteAuthority"?: ...}],
        "emptyWindows": [{"backupFolder": ..., "remoteAuthority"?: ...}]
    }

Field names are camelCase on disk (aliases) so that existing registries keep
loading.  Optional fields are omitted when absent (``exclude_none``).
"""

from __future__ import annotations

from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

from lifeboat.backup_registry.models.backup import (
    EmptyWindowBackupInfo,
    FolderBackupInfo,
    WorkspaceBackupInfo,
)
from lifeboat.backup_registry.paths import Uri, check_backup_folder_name

_RECORD_CONFIG = ConfigDict(populate_by_name=True, strict=True, extra="ignore")

BackupFolderName = Annotated[str, AfterValidator(check_backup_folder_name)]
"""A workspace id or empty-window folder: one directory name under the backup home."""


class SerializedWorkspaceBackupInfo(BaseModel):
    model_config = _RECORD_CONFIG

    id: BackupFolderName
    config_uri_path: str = Field(alias="configURIPath")
    remote_authority: str | None = Field(default=None, alias="remoteAuthority")

    @classmethod
    def from_info(cls, info: WorkspaceBackupInfo) -> SerializedWorkspaceBackupInfo:
        return cls(
            id=info.workspace_id,
            config_uri_path=str(info.config_uri),
            remote_authority=info.remote_authority or None,
        )

    def to_info(self) -> WorkspaceBackupInfo:
        """Raises ``ValueError`` if ``configURIPath`` is not a URI."""
        return WorkspaceBackupInfo(
            workspace_id=self.id,
            config_uri=Uri.parse(self.config_uri_path),
            remote_authority=self.remote_authority,
        )


class SerializedFolderBackupInfo(BaseModel):
    model_config = _RECORD_CONFIG

    folder_uri: str = Field(alias="folderUri")
    remote_authority: str | None = Field(default=None, alias="remoteAuthority")

    @classmethod
    def from_info(cls, info: FolderBackupInfo) -> SerializedFolderBackupInfo:
        return cls(folder_uri=str(info.folder_uri), remote_authority=info.remote_authority or None)

    def to_info(self) -> FolderBackupInfo:
        """Raises ``ValueError`` if ``folderUri`` is not a URI."""
        return FolderBackupInfo(folder_uri=Uri.parse(self.folder_uri), remote_authority=self.remote_authority)


class SerializedEmptyWindowBackupInfo(BaseModel):
    model_config = _RECORD_CONFIG

    backup_folder: BackupFolderName = Field(alias="backupFolder")
    remote_authority: str | None = Field(default=None, alias="remoteAuthority")

    @classmethod
    def from_info(cls, info: EmptyWindowBackupInfo) -> SerializedEmptyWindowBackupInfo:
        return cls(backup_folder=info.backup_folder, remote_authority=info.remote_authority or None)

    def to_info(self) -> EmptyWindowBackupInfo:
        return EmptyWindowBackupInfo(backup_folder=self.backup_folder, remote_authority=self.remote_authority)


class SerializedBackupWorkspaces(BaseModel):
    """Full registry blob, rebuilt on every flush."""

    model_config = ConfigDict(populate_by_name=True)

    workspaces: list[SerializedWorkspaceBackupInfo] = Field(default_factory=list)
    folders: list[SerializedFolderBackupInfo] = Field(default_factory=list)
    empty_windows: list[SerializedEmptyWindowBackupInfo] = Field(default_factory=list, alias="emptyWindows")

    def to_storage(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


# -- Legacy ------------------------------------------------------------------

LEGACY_FIELD_MAP = {
    "rootURIWorkspaces": "workspaces",
    "folderWorkspaceInfos": "folders",
    "emptyWorkspaceInfos": "emptyWindows",
}
"""``workspaces.json`` array name -> current blob array name."""

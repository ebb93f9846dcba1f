"""API request / response schemas for the backup endpoints.

These thin schemas sit between HTTP and the registrar.  URIs travel as
strings; parsing into ``Uri`` happens here so that routers only see domain
entries or a ``ValueError``.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from lifeboat.backup_registry.models.backup import (
    EmptyWindowBackupInfo,
    FolderBackupInfo,
    WorkspaceBackupInfo,
)
from lifeboat.backup_registry.models.enums import HotExitMode
from lifeboat.backup_registry.models.serialized import BackupFolderName
from lifeboat.backup_registry.paths import Uri

# ---------------------------------------------------------------------------
# Register
# ---------------------------------------------------------------------------


class WorkspaceBackupRegister(BaseModel):
    """Input for registering a workspace session."""

    workspace_id: BackupFolderName
    config_uri: str = Field(description="URI of the .code-workspace file.")
    remote_authority: str | None = None
    migrate_from: str | None = Field(
        default=None,
        description="Existing backup directory to move onto the canonical location.",
    )

    def to_info(self) -> WorkspaceBackupInfo:
        return WorkspaceBackupInfo(
            workspace_id=self.workspace_id,
            config_uri=Uri.parse(self.config_uri),
            remote_authority=self.remote_authority,
        )


class FolderBackupRegister(BaseModel):
    """Input for registering a single-folder session."""

    folder_uri: str
    remote_authority: str | None = None

    def to_info(self) -> FolderBackupInfo:
        return FolderBackupInfo(folder_uri=Uri.parse(self.folder_uri), remote_authority=self.remote_authority)


class EmptyWindowBackupRegister(BaseModel):
    """Input for registering an empty-window session."""

    backup_folder: BackupFolderName
    remote_authority: str | None = None

    def to_info(self) -> EmptyWindowBackupInfo:
        return EmptyWindowBackupInfo(backup_folder=self.backup_folder, remote_authority=self.remote_authority)


class BackupPathResponse(BaseModel):
    backup_path: str


# ---------------------------------------------------------------------------
# Listing
# ---------------------------------------------------------------------------


class WorkspaceBackupResponse(BaseModel):
    workspace_id: str
    config_uri: str
    remote_authority: str | None = None

    @classmethod
    def from_info(cls, info: WorkspaceBackupInfo) -> WorkspaceBackupResponse:
        return cls(
            workspace_id=info.workspace_id,
            config_uri=str(info.config_uri),
            remote_authority=info.remote_authority,
        )


class FolderBackupResponse(BaseModel):
    folder_uri: str
    remote_authority: str | None = None

    @classmethod
    def from_info(cls, info: FolderBackupInfo) -> FolderBackupResponse:
        return cls(folder_uri=str(info.folder_uri), remote_authority=info.remote_authority)


class EmptyWindowBackupResponse(BaseModel):
    backup_folder: str
    remote_authority: str | None = None

    @classmethod
    def from_info(cls, info: EmptyWindowBackupInfo) -> EmptyWindowBackupResponse:
        return cls(backup_folder=info.backup_folder, remote_authority=info.remote_authority)


class DirtyBackupsResponse(BaseModel):
    """Workspaces and folders whose backup directories currently hold content."""

    workspaces: list[WorkspaceBackupResponse] = Field(default_factory=list)
    folders: list[FolderBackupResponse] = Field(default_factory=list)


class HotExitResponse(BaseModel):
    mode: HotExitMode
    enabled: bool

"""Backup registry endpoints (RPC-style).

Session-lifecycle callers register a session when it opens and read the
restore set at launch.  All write operations use POST; reads use GET.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from lifeboat.backup_registry.deps import BackupService
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
from lifeboat.backup_registry.models.backup import WorkspaceBackupInfo

router = APIRouter(prefix="/backups", tags=["backups"])


def _invalid_uri(exc: ValueError) -> HTTPException:
    return HTTPException(status.HTTP_422_UNPROCESSABLE_ENTITY, detail=f"Invalid URI: {exc}")


@router.get("/hot-exit", response_model=HotExitResponse)
async def get_hot_exit(service: BackupService) -> HotExitResponse:
    """Return the configured hot-exit mode."""
    return HotExitResponse(mode=service.get_hot_exit_mode(), enabled=service.is_hot_exit_enabled())


# -- Workspaces ----------------------------------------------------------------


@router.get("/workspaces/list", response_model=list[WorkspaceBackupResponse])
async def list_workspace_backups(service: BackupService) -> list[WorkspaceBackupResponse]:
    """Workspaces to restore on launch (empty under ``onExitAndWindowClose``)."""
    return [WorkspaceBackupResponse.from_info(info) for info in service.get_workspace_backups()]


@router.post("/workspaces/register", response_model=BackupPathResponse)
async def register_workspace_backup(body: WorkspaceBackupRegister, service: BackupService) -> BackupPathResponse:
    """Track a workspace session and return its backup directory."""
    try:
        info = body.to_info()
    except ValueError as exc:
        raise _invalid_uri(exc) from None
    path = await service.register_workspace_backup(info, migrate_from=body.migrate_from)
    return BackupPathResponse(backup_path=str(path))


# -- Folders -------------------------------------------------------------------


@router.get("/folders/list", response_model=list[FolderBackupResponse])
async def list_folder_backups(service: BackupService) -> list[FolderBackupResponse]:
    """Folders to restore on launch (empty under ``onExitAndWindowClose``)."""
    return [FolderBackupResponse.from_info(info) for info in service.get_folder_backups()]


@router.post("/folders/register", response_model=BackupPathResponse)
async def register_folder_backup(body: FolderBackupRegister, service: BackupService) -> BackupPathResponse:
    """Track a single-folder session and return its backup directory."""
    try:
        info = body.to_info()
    except ValueError as exc:
        raise _invalid_uri(exc) from None
    path = await service.register_folder_backup(info)
    return BackupPathResponse(backup_path=str(path))


# -- Empty windows -------------------------------------------------------------


@router.get("/empty-windows/list", response_model=list[EmptyWindowBackupResponse])
async def list_empty_window_backups(service: BackupService) -> list[EmptyWindowBackupResponse]:
    return [EmptyWindowBackupResponse.from_info(info) for info in service.get_empty_window_backups()]


@router.post("/empty-windows/register", response_model=BackupPathResponse)
async def register_empty_window_backup(body: EmptyWindowBackupRegister, service: BackupService) -> BackupPathResponse:
    path = await service.register_empty_window_backup(body.to_info())
    return BackupPathResponse(backup_path=str(path))


# -- Dirty ---------------------------------------------------------------------


@router.get("/dirty", response_model=DirtyBackupsResponse)
async def get_dirty_backups(service: BackupService) -> DirtyBackupsResponse:
    """Re-probe disk for workspaces and folders that currently hold backups."""
    response = DirtyBackupsResponse()
    for info in await service.get_dirty_workspaces():
        if isinstance(info, WorkspaceBackupInfo):
            response.workspaces.append(WorkspaceBackupResponse.from_info(info))
        else:
            response.folders.append(FolderBackupResponse.from_info(info))
    return response

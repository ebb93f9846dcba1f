"""FastAPI dependency injection for the backup service.

Usage in route handlers::

    @router.get("/things")
    async def list_things(service: BackupService) -> list[Thing]:
        ...

The dependency raises HTTP 503 until the lifespan has initialised the
registry.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status

from lifeboat.backup_registry.managers.backups import BackupMainService


def get_backup_service(request: Request) -> BackupMainService:
    service: BackupMainService | None = getattr(request.app.state, "backup_service", None)
    if service is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Backup registry is not initialised.",
        )
    return service


BackupService = Annotated[BackupMainService, Depends(get_backup_service)]
"""Annotated dependency: the process-wide backup registrar."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.routing import APIRouter
from loguru import logger

from lifeboat.backup_registry.log import setup_logging
from lifeboat.backup_registry.managers.backups import BackupMainService
from lifeboat.backup_registry.settings import LifeboatSettings, get_settings
from lifeboat.backup_registry.store.local import LocalStateStore


async def create_backup_service(settings: LifeboatSettings) -> BackupMainService:
    """Build the registrar and run startup reconciliation."""
    store = LocalStateStore(settings.resolve_storage_file())
    service = BackupMainService(settings, store)
    await service.initialize()
    return service


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    # -- Startup ---------------------------------------------------------------
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_file)

    logger.info("Backup registry starting (host={}, port={})", settings.host, settings.port)
    logger.info(
        "Backup home: {} (storage={}, hot_exit={})",
        settings.resolve_backup_home(),
        settings.resolve_storage_file(),
        settings.hot_exit,
    )

    _app.state.backup_service = await create_backup_service(settings)

    yield

    # -- Shutdown --------------------------------------------------------------
    # Every mutation is flushed as it happens; this only records the final state.
    service: BackupMainService = _app.state.backup_service
    await service.registry.flush()
    logger.info("Backup registry shutting down")


app = FastAPI(title="Lifeboat Backup Registry", lifespan=lifespan)

# ---------------------------------------------------------------------------
# API router -- all endpoints live under /api
# ---------------------------------------------------------------------------
api = APIRouter(prefix="/api")


@api.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


from lifeboat.backup_registry.routers.backups import router as backups_router  # noqa: E402

api.include_router(backups_router)

app.include_router(api)

"""Service configuration loaded from LIFEBOAT_* environment variables."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class LifeboatSettings(BaseSettings):
    """Backup registry settings.

    All fields are read from environment variables with the ``LIFEBOAT_``
    prefix.  For example, ``LIFEBOAT_HOT_EXIT=off`` maps to ``hot_exit``.
    """

    model_config = SettingsConfigDict(
        env_prefix="LIFEBOAT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # -- Logging ---------------------------------------------------------------
    log_level: str = "INFO"
    log_file: str | None = None
    """Optional log file; rotated at 10 MB.  Stderr logging is always on."""

    # -- Data storage ----------------------------------------------------------
    data_root: str = "./data"
    """User data directory holding the backup home and the storage file."""

    backup_home: str | None = None
    """Root of all per-session backup directories.  Default: ``{data_root}/Backups``."""

    storage_file: str | None = None
    """JSON key-value store for registry metadata.  Default: ``{data_root}/storage.json``."""

    # -- Hot exit --------------------------------------------------------------
    hot_exit: str | None = "onExit"
    """One of ``off``, ``onExit``, ``onExitAndWindowClose``.

    Read on every query, so changes apply without a restart.  Unknown values
    fall back to ``onExit``.
    """

    # -- Server ----------------------------------------------------------------
    host: str = "127.0.0.1"
    port: int = 8765

    # -- Helpers ---------------------------------------------------------------

    def resolve_backup_home(self) -> Path:
        return Path(self.backup_home) if self.backup_home else Path(self.data_root) / "Backups"

    def resolve_storage_file(self) -> Path:
        return Path(self.storage_file) if self.storage_file else Path(self.data_root) / "storage.json"


@lru_cache(maxsize=1)
def get_settings() -> LifeboatSettings:
    """Return a cached settings instance.

    Reads from environment variables and ``.env`` on first call.  Call
    ``get_settings.cache_clear()`` in tests after overriding env vars.
    """
    return LifeboatSettings()

"""Shared test fixtures: temporary backup homes and registrar factories.

No network or Docker required.  Every test gets its own data root under
``tmp_path``; path-case behaviour is chosen explicitly per test instead of
depending on the host OS.
"""

from __future__ import annotations

import itertools
from collections.abc import Callable
from pathlib import Path

import pytest

from lifeboat.backup_registry.managers.backups import BackupMainService
from lifeboat.backup_registry.settings import LifeboatSettings, get_settings
from lifeboat.backup_registry.store.local import LocalStateStore


def _write_backup(backup_dir: Path, scheme: str = "file", name: str = "buf1", content: str = "dirty") -> Path:
    scheme_dir = backup_dir / scheme
    scheme_dir.mkdir(parents=True, exist_ok=True)
    path = scheme_dir / name
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def _clear_settings_cache() -> None:
    get_settings.cache_clear()


@pytest.fixture
def settings(tmp_path: Path) -> LifeboatSettings:
    return LifeboatSettings(data_root=str(tmp_path / "data"), hot_exit="onExit", _env_file=None)


@pytest.fixture
def backup_home(settings: LifeboatSettings) -> Path:
    home = settings.resolve_backup_home()
    home.mkdir(parents=True, exist_ok=True)
    return home


@pytest.fixture
def store(settings: LifeboatSettings) -> LocalStateStore:
    return LocalStateStore(settings.resolve_storage_file())


@pytest.fixture
def id_factory() -> Callable[[], str]:
    """Deterministic empty-window ids: ``empty-1``, ``empty-2``, ..."""
    counter = itertools.count(1)
    return lambda: f"empty-{next(counter)}"


@pytest.fixture
def make_service(
    settings: LifeboatSettings,
    backup_home: Path,
    id_factory: Callable[[], str],
) -> Callable[..., BackupMainService]:
    """Build a registrar over a fresh store instance (simulates a new process)."""

    def _make(*, ignore_path_case: bool = False) -> BackupMainService:
        return BackupMainService(
            settings,
            LocalStateStore(settings.resolve_storage_file()),
            ignore_path_case=ignore_path_case,
            id_factory=id_factory,
        )

    return _make


@pytest.fixture
def service(make_service: Callable[..., BackupMainService]) -> BackupMainService:
    return make_service()


@pytest.fixture
def write_backup() -> Callable[..., Path]:
    """Create ``{backup_dir}/{scheme}/{name}`` with some content."""
    return _write_backup

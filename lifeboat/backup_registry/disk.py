"""Filesystem operations on backup directories.

All helpers are async and run the blocking work via
``anyio.to_thread.run_sync``.  None of them raise on I/O failure: errors are
logged and reported through the return value, because a disk problem must
never keep the registry from initialising.
"""

from __future__ import annotations

import os
import shutil
import uuid
from functools import partial
from pathlib import Path

from anyio import to_thread
from loguru import logger

from lifeboat.backup_registry.paths import FILE_SCHEME, TRASH_SUFFIX, Uri

# -- Probe -------------------------------------------------------------------


async def has_backups(backup_path: Path) -> bool:
    """Return ``True`` if any scheme directory under *backup_path* has a child.

    A backup directory with only empty scheme folders belongs to a session
    that opened but never dirtied a buffer, and counts as empty.
    """
    return await to_thread.run_sync(partial(_has_backups, backup_path))


async def path_exists(path: Path) -> bool:
    return await to_thread.run_sync(partial(os.path.exists, path))


async def resource_exists(uri: Uri) -> bool:
    """Whether the session's original resource still resolves.

    Only ``file:`` resources are checked; anything else is assumed present.
    """
    if uri.scheme != FILE_SCHEME:
        return True
    return await path_exists(Path(uri.fs_path))


# -- Mutation ----------------------------------------------------------------


async def delete_stale_backup(backup_path: Path) -> None:
    """Remove a backup directory nobody wants to keep.  Errors are logged."""
    try:
        await to_thread.run_sync(partial(_rimraf_move, backup_path))
    except OSError as exc:
        logger.error("Backup: could not delete stale backup {}: {}", backup_path, exc)
    else:
        logger.debug("Backup: deleted stale backup {}", backup_path)


async def sweep_trash(backup_home: Path) -> None:
    """Delete ``*.trash`` directories left by interrupted stale deletions."""
    for trash in await to_thread.run_sync(partial(_list_trash, backup_home)):
        try:
            await to_thread.run_sync(partial(shutil.rmtree, trash))
        except OSError as exc:
            logger.error("Backup: could not delete leftover trash {}: {}", trash, exc)
        else:
            logger.debug("Backup: deleted leftover trash {}", trash)


async def move_backup_folder(source: Path, target: Path) -> bool:
    """Rename *source* onto *target*.  Returns ``False`` (logged) on failure."""
    try:
        await to_thread.run_sync(partial(os.rename, source, target))
    except OSError as exc:
        logger.error("Backup: could not move backup folder {} -> {}: {}", source, target, exc)
        return False
    return True


# -- Sync helpers (run in thread pool) -----------------------------------------


def _has_backups(backup_path: Path) -> bool:
    if not backup_path.is_dir():
        return False

    try:
        with os.scandir(backup_path) as entries:
            scheme_dirs = [entry.path for entry in entries if entry.is_dir()]
    except OSError as exc:
        logger.debug("Backup: cannot list {}: {}", backup_path, exc)
        return False

    for scheme_dir in scheme_dirs:
        try:
            with os.scandir(scheme_dir) as children:
                if next(children, None) is not None:
                    return True
        except OSError:
            continue  # unreadable scheme folder contributes nothing
    return False


def _rimraf_move(path: Path) -> None:
    """Move *path* to a sibling trash name, then delete it recursively.

    Readers holding the old path never see a half-deleted tree.  If the move
    itself fails the directory is deleted in place.  No-op if missing.
    """
    if not os.path.lexists(path):
        return

    if not path.is_dir() or path.is_symlink():
        path.unlink()
        return

    trash = path.with_name(f"{path.name}.{uuid.uuid4().hex[:8]}{TRASH_SUFFIX}")
    try:
        os.rename(path, trash)
    except OSError:
        shutil.rmtree(path)
        return
    try:
        shutil.rmtree(trash)
    except OSError as exc:
        logger.warning("Backup: {} moved to {} but not deleted ({}); it is swept on next start", path, trash, exc)


def _list_trash(backup_home: Path) -> list[Path]:
    if not backup_home.is_dir():
        return []
    try:
        with os.scandir(backup_home) as entries:
            return [
                Path(entry.path)
                for entry in entries
                if entry.name.endswith(TRASH_SUFFIX) and entry.is_dir(follow_symlinks=False)
            ]
    except OSError as exc:
        logger.debug("Backup: cannot list {}: {}", backup_home, exc)
        return []

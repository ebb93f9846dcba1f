"""In-memory backup entries.

One entry per tracked editing session.  Entries are immutable; the registry
replaces or appends them, never edits them in place.
"""

from __future__ import annotations

from dataclasses import dataclass

from lifeboat.backup_registry.paths import Uri


@dataclass(frozen=True)
class WorkspaceBackupInfo:
    """Multi-folder workspace session, identified by ``workspace_id``."""

    workspace_id: str
    config_uri: Uri
    remote_authority: str | None = None


@dataclass(frozen=True)
class FolderBackupInfo:
    """Single-folder session, identified by its folder URI."""

    folder_uri: Uri
    remote_authority: str | None = None


@dataclass(frozen=True)
class EmptyWindowBackupInfo:
    """Session without a project, identified by its generated backup folder name."""

    backup_folder: str
    remote_authority: str | None = None


BackupInfo = WorkspaceBackupInfo | FolderBackupInfo | EmptyWindowBackupInfo

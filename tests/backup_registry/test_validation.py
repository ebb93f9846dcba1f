"""Unit tests for deserialization and startup validation of backup entries."""

from __future__ import annotations

import itertools

import pytest

from lifeboat.backup_registry.layout import BackupLayout, get_folder_hash
from lifeboat.backup_registry.managers.conversion import EmptyWindowConverter
from lifeboat.backup_registry.managers.validation import (
    BackupValidator,
    deserialize_empty_windows,
    deserialize_folders,
    deserialize_workspaces,
)
from lifeboat.backup_registry.paths import PathComparer, Uri, UriComparer
from lifeboat.backup_registry.registry import BackupRegistry

# ---------------------------------------------------------------------------
# Deserialization
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("raw", [None, "workspaces", {"id": "w1"}, 42])
def test_non_list_categories_are_discarded(raw) -> None:
    assert deserialize_workspaces(raw) == []
    assert deserialize_folders(raw) == []
    assert deserialize_empty_windows(raw) == []


def test_deserialize_workspaces() -> None:
    infos = deserialize_workspaces([
        {"id": "w1", "configURIPath": "file:///p/w.code-workspace", "remoteAuthority": "box"},
        {"id": "w2", "configURIPath": "file:///p/x.code-workspace"},
    ])
    assert [i.workspace_id for i in infos] == ["w1", "w2"]
    assert infos[0].config_uri == Uri.parse("file:///p/w.code-workspace")
    assert infos[0].remote_authority == "box"
    assert infos[1].remote_authority is None


@pytest.mark.parametrize(
    "bad",
    [
        {"configURIPath": "file:///p/w.code-workspace"},  # missing id
        {"id": 7, "configURIPath": "file:///p/w.code-workspace"},  # wrong type
        {"id": "w2", "configURIPath": "not a uri"},  # no scheme
        {"id": "/home/u/docs", "configURIPath": "file:///p/w.code-workspace"},  # escapes backup home
        {"id": "..", "configURIPath": "file:///p/w.code-workspace"},
        {"id": "", "configURIPath": "file:///p/w.code-workspace"},
        "w2",
    ],
)
def test_one_malformed_workspace_discards_all(bad) -> None:
    raw = [{"id": "w1", "configURIPath": "file:///p/w.code-workspace"}, bad]
    assert deserialize_workspaces(raw) == []


def test_one_malformed_empty_window_discards_all() -> None:
    assert deserialize_empty_windows([{"backupFolder": "1"}, {"backupFolder": 2}]) == []
    assert deserialize_empty_windows([{"backupFolder": "1"}, {}]) == []
    assert deserialize_empty_windows([{"backupFolder": "1"}, {"backupFolder": "/home/u/notes"}]) == []
    assert deserialize_empty_windows([{"backupFolder": "1"}, {"backupFolder": "a\\b"}]) == []


def test_malformed_folders_are_skipped_individually() -> None:
    infos = deserialize_folders([
        {"folderUri": "file:///p/a"},
        {"folderUri": 3},
        {"folderUri": "no-scheme"},
        {},
        {"folderUri": "file:///p/b", "remoteAuthority": "box"},
    ])
    assert [str(i.folder_uri) for i in infos] == ["file:///p/a", "file:///p/b"]
    assert infos[1].remote_authority == "box"


# ---------------------------------------------------------------------------
# Validator
# ---------------------------------------------------------------------------


@pytest.fixture
def layout(tmp_path) -> BackupLayout:
    home = tmp_path / "Backups"
    home.mkdir()
    return BackupLayout(home, ignore_path_case=False)


@pytest.fixture
def registry(store) -> BackupRegistry:
    return BackupRegistry(store)


@pytest.fixture
def validator(layout: BackupLayout, registry: BackupRegistry) -> BackupValidator:
    counter = itertools.count(1)
    comparer = PathComparer(ignore_case=False)
    converter = EmptyWindowConverter(registry, layout, comparer, lambda: f"empty-{next(counter)}")
    return BackupValidator(layout, converter, comparer, UriComparer(ignore_path_case=False))


async def test_empty_windows_kept_by_content_alone(
    validator: BackupValidator, layout: BackupLayout, write_backup
) -> None:
    write_backup(layout.backup_home / "e1")
    (layout.backup_home / "e2" / "untitled").mkdir(parents=True)

    result = await validator.validate_empty_windows([{"backupFolder": "e1"}, {"backupFolder": "e2"}])

    assert [w.backup_folder for w in result] == ["e1"]
    assert not (layout.backup_home / "e2").exists()


async def test_duplicates_first_occurrence_wins(validator: BackupValidator, layout: BackupLayout, write_backup) -> None:
    write_backup(layout.backup_home / "e1")

    result = await validator.validate_empty_windows([
        {"backupFolder": "e1", "remoteAuthority": "first"},
        {"backupFolder": "e1", "remoteAuthority": "second"},
    ])

    assert len(result) == 1
    assert result[0].remote_authority == "first"


async def test_workspace_with_content_and_config_is_kept(
    validator: BackupValidator, layout: BackupLayout, tmp_path, write_backup
) -> None:
    config = tmp_path / "w.code-workspace"
    config.write_text("{}")
    write_backup(layout.backup_home / "w1")

    result = await validator.validate_workspaces([{"id": "w1", "configURIPath": str(Uri.file(config))}])

    assert [w.workspace_id for w in result] == ["w1"]


async def test_workspace_without_content_is_purged(validator: BackupValidator, layout: BackupLayout, tmp_path) -> None:
    config = tmp_path / "w.code-workspace"
    config.write_text("{}")
    (layout.backup_home / "w1" / "file").mkdir(parents=True)

    result = await validator.validate_workspaces([{"id": "w1", "configURIPath": str(Uri.file(config))}])

    assert result == []
    assert not (layout.backup_home / "w1").exists()


async def test_orphaned_workspace_is_converted(
    validator: BackupValidator, layout: BackupLayout, registry: BackupRegistry, tmp_path, write_backup
) -> None:
    write_backup(layout.backup_home / "w1", content="precious")
    missing_config = Uri.file(tmp_path / "gone.code-workspace")

    result = await validator.validate_workspaces([{"id": "w1", "configURIPath": str(missing_config)}])

    assert result == []
    assert [w.backup_folder for w in registry.empty_windows] == ["empty-1"]
    assert not (layout.backup_home / "w1").exists()
    assert (layout.backup_home / "empty-1" / "file" / "buf1").read_text() == "precious"


async def test_remote_workspace_is_never_probed(validator: BackupValidator, layout: BackupLayout, write_backup) -> None:
    write_backup(layout.backup_home / "w1")

    result = await validator.validate_workspaces([
        {"id": "w1", "configURIPath": "vscode-remote://box/nowhere/w.code-workspace", "remoteAuthority": "box"}
    ])

    assert [w.workspace_id for w in result] == ["w1"]


async def test_folders(
    validator: BackupValidator, layout: BackupLayout, registry: BackupRegistry, tmp_path, write_backup
) -> None:
    alive = tmp_path / "alive"
    alive.mkdir()
    gone = Uri.file(tmp_path / "gone")
    clean = Uri.file(tmp_path / "clean")

    write_backup(layout.backup_home / get_folder_hash(Uri.file(alive), ignore_path_case=False))
    write_backup(layout.backup_home / get_folder_hash(gone, ignore_path_case=False))
    (layout.backup_home / get_folder_hash(clean, ignore_path_case=False) / "file").mkdir(parents=True)

    result = await validator.validate_folders([
        {"folderUri": str(Uri.file(alive))},
        {"folderUri": str(Uri.file(alive))},
        {"folderUri": str(gone)},
        {"folderUri": str(clean)},
    ])

    assert [str(f.folder_uri) for f in result] == [str(Uri.file(alive))]
    assert len(registry.empty_windows) == 1
    assert not (layout.backup_home / get_folder_hash(clean, ignore_path_case=False)).exists()


async def test_folder_dedup_uses_uri_comparison_key(
    layout: BackupLayout, registry: BackupRegistry, write_backup
) -> None:
    comparer = PathComparer(ignore_case=True)
    converter = EmptyWindowConverter(registry, layout, comparer, lambda: "never-used")
    validator = BackupValidator(layout, converter, comparer, UriComparer(ignore_path_case=True))
    write_backup(layout.backup_home / get_folder_hash(Uri.parse("vscode-remote://box/p"), ignore_path_case=True))

    result = await validator.validate_folders([
        {"folderUri": "vscode-remote://box/p"},
        {"folderUri": "vscode-remote://BOX/p"},
    ])

    assert len(result) == 1

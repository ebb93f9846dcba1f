"""Unit tests for the legacy ``workspaces.json`` migration."""

from __future__ import annotations

import json

from lifeboat.backup_registry.managers.migration import migrate_legacy_backup_workspaces


async def test_no_legacy_file(tmp_path) -> None:
    assert await migrate_legacy_backup_workspaces(tmp_path / "workspaces.json") is None


async def test_maps_legacy_arrays_and_deletes_file(tmp_path) -> None:
    legacy = tmp_path / "workspaces.json"
    legacy.write_text(
        json.dumps({
            "rootURIWorkspaces": [{"id": "w1", "configURIPath": "file:///p/w.code-workspace"}],
            "folderWorkspaceInfos": [{"folderUri": "file:///p/folder"}],
            "emptyWorkspaceInfos": [{"backupFolder": "1234"}],
        })
    )

    migrated = await migrate_legacy_backup_workspaces(legacy)

    assert migrated == {
        "workspaces": [{"id": "w1", "configURIPath": "file:///p/w.code-workspace"}],
        "folders": [{"folderUri": "file:///p/folder"}],
        "emptyWindows": [{"backupFolder": "1234"}],
    }
    assert not legacy.exists()


async def test_missing_or_non_list_fields_become_empty(tmp_path) -> None:
    legacy = tmp_path / "workspaces.json"
    legacy.write_text(json.dumps({"rootURIWorkspaces": "oops", "emptyWorkspaceInfos": None}))

    migrated = await migrate_legacy_backup_workspaces(legacy)

    assert migrated == {"workspaces": [], "folders": [], "emptyWindows": []}


async def test_invalid_json_is_not_fatal(tmp_path) -> None:
    legacy = tmp_path / "workspaces.json"
    legacy.write_text("{ this is not json")

    assert await migrate_legacy_backup_workspaces(legacy) is None


async def test_non_object_json_is_not_fatal(tmp_path) -> None:
    legacy = tmp_path / "workspaces.json"
    legacy.write_text("[]")

    assert await migrate_legacy_backup_workspaces(legacy) is None

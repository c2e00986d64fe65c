"""Tests for JsonWorkspaceMetadataStore."""

import json
from datetime import UTC, datetime
from pathlib import Path

import pytest

from ship.core.errors import WorkspaceStoreError
from ship.core.workspace_store.real import JsonWorkspaceMetadataStore
from ship.core.workspace_store.types import WorkspaceMetadata


def test_missing_file_is_empty(tmp_path: Path) -> None:
    store = JsonWorkspaceMetadataStore()

    assert store.list_metadata(tmp_path) == []
    assert store.get(tmp_path, "alpha") is None


def test_put_get_and_replace(tmp_path: Path) -> None:
    store = JsonWorkspaceMetadataStore()
    created = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)

    store.put(tmp_path, WorkspaceMetadata(name="alpha", path="/work/alpha", created_at=created))
    store.put(tmp_path, WorkspaceMetadata(name="beta", path="/work/beta"))
    store.put(tmp_path, WorkspaceMetadata(name="alpha", path="/work/alpha", task_id="ENG-1"))

    assert [m.name for m in store.list_metadata(tmp_path)] == ["beta", "alpha"]
    alpha = store.get(tmp_path, "alpha")
    assert alpha is not None
    assert alpha.task_id == "ENG-1"
    assert alpha.created_at is None


def test_file_format_omits_unset_fields(tmp_path: Path) -> None:
    store = JsonWorkspaceMetadataStore()
    created = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)

    store.put(
        tmp_path,
        WorkspaceMetadata(name="alpha", path="/work/alpha", stack_name="alpha", created_at=created),
    )

    data = json.loads((tmp_path / ".ship" / "workspaces.json").read_text(encoding="utf-8"))
    assert data == {
        "workspaces": [
            {
                "name": "alpha",
                "path": "/work/alpha",
                "stack_name": "alpha",
                "created_at": "2024-05-01T12:00:00Z",
            }
        ]
    }
    assert not (tmp_path / ".ship" / "workspaces.json.tmp").exists()


def test_remove(tmp_path: Path) -> None:
    store = JsonWorkspaceMetadataStore()
    store.put(tmp_path, WorkspaceMetadata(name="alpha", path="/work/alpha"))

    assert store.remove(tmp_path, "alpha")
    assert store.remove(tmp_path, "alpha") is False
    assert store.list_metadata(tmp_path) == []


def test_corrupted_file_raises_store_error(tmp_path: Path) -> None:
    store = JsonWorkspaceMetadataStore()
    path = tmp_path / ".ship" / "workspaces.json"
    path.parent.mkdir()
    path.write_text('{"workspaces": [{"name": 3}]}', encoding="utf-8")

    with pytest.raises(WorkspaceStoreError) as exc_info:
        store.remove(tmp_path, "alpha")

    assert exc_info.value.path == path
    assert "validation error" in exc_info.value.message


def test_unwritable_directory_raises_store_error(tmp_path: Path) -> None:
    store = JsonWorkspaceMetadataStore()
    (tmp_path / ".ship").write_text("not a directory", encoding="utf-8")

    with pytest.raises(WorkspaceStoreError):
        store.put(tmp_path, WorkspaceMetadata(name="alpha", path="/work/alpha"))

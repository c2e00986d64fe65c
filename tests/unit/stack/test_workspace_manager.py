"""Tests for WorkspaceManager."""

from pathlib import Path

import pytest

from ship.core.context import ShipContext
from ship.core.errors import (
    DefaultWorkspaceError,
    WorkspaceExistsError,
    WorkspaceNotFoundError,
    WorkspacePathError,
)
from ship.core.repo_discovery import RepoContext
from ship.core.stack.workspaces import WorkspaceManager
from ship.core.time.fake import DEFAULT_FAKE_NOW
from ship.core.workspace_store.fake import FakeWorkspaceMetadataStore
from ship.core.workspace_store.types import WorkspaceMetadata
from tests.test_utils.jj_stacks import REPO_ROOT, stack_jj


def test_list_puts_default_first_and_merges_metadata() -> None:
    jj = stack_jj("A", workspace_roots={"alpha": Path("/work/alpha")})
    store = FakeWorkspaceMetadataStore(
        workspaces=[
            WorkspaceMetadata(
                name="alpha", path="/work/alpha", stack_name="alpha-stack", task_id="ENG-1"
            )
        ]
    )
    manager = WorkspaceManager(ShipContext.for_test(jj=jj, workspace_store=store))

    workspaces = manager.list_workspaces()

    assert [w.name for w in workspaces] == ["default", "alpha"]
    default, alpha = workspaces
    assert default.is_default
    assert default.path == REPO_ROOT
    assert alpha.is_default is False
    assert alpha.path == Path("/work/alpha")
    assert alpha.stack_name == "alpha-stack"
    assert alpha.task_id == "ENG-1"


def test_list_prunes_metadata_of_vanished_workspaces() -> None:
    store = FakeWorkspaceMetadataStore(
        workspaces=[WorkspaceMetadata(name="gone", path="/work/gone")]
    )
    manager = WorkspaceManager(ShipContext.for_test(jj=stack_jj("A"), workspace_store=store))

    workspaces = manager.list_workspaces()

    assert [w.name for w in workspaces] == ["default"]
    assert store.removed == ["gone"]


def test_workspace_without_metadata_has_no_path() -> None:
    jj = stack_jj("A", workspace_roots={"manual": Path("/work/manual")})
    manager = WorkspaceManager(ShipContext.for_test(jj=jj))

    workspace = manager.get_workspace("manual")

    assert workspace is not None
    assert workspace.path is None
    assert manager.get_workspace("missing") is None


def test_current_workspace_name_in_default_workspace() -> None:
    manager = WorkspaceManager(ShipContext.for_test(jj=stack_jj("A")))

    assert manager.get_current_workspace_name() == "default"
    assert manager.is_non_default_workspace() is False


def test_current_workspace_name_in_named_workspace() -> None:
    root = Path("/work/feature")
    jj = stack_jj("A", workspace_roots={"feature": root})
    repo = RepoContext(
        root=REPO_ROOT, workspace_root=root, repo_name="repo", ship_dir=REPO_ROOT / ".ship"
    )
    manager = WorkspaceManager(ShipContext.for_test(jj=jj, cwd=root, repo=repo))

    assert manager.get_current_workspace_name() == "feature"
    assert manager.is_non_default_workspace()


def test_create_workspace_records_metadata(tmp_path: Path) -> None:
    jj = stack_jj("A")
    store = FakeWorkspaceMetadataStore()
    manager = WorkspaceManager(ShipContext.for_test(jj=jj, workspace_store=store))
    path = tmp_path / "fix-login"

    workspace = manager.create_workspace(
        "fix-login", path, task_id="ENG-7", bookmark="eng-7-fix-login", revision="change1"
    )

    assert workspace.name == "fix-login"
    assert workspace.path == path
    assert workspace.stack_name == "fix-login"
    assert workspace.task_id == "ENG-7"
    assert workspace.bookmark == "eng-7-fix-login"
    assert workspace.is_default is False

    metadata = store.workspaces["fix-login"]
    assert metadata.path == str(path)
    assert metadata.created_at == DEFAULT_FAKE_NOW

    new_wc = jj.log(path, "@")[0]
    assert new_wc.parent_ids == (jj.log(REPO_ROOT, "change1")[0].id,)


def test_create_workspace_uses_configured_base_path() -> None:
    jj = stack_jj("A")
    manager = WorkspaceManager(ShipContext.for_test(jj=jj))

    workspace = manager.create_workspace("scratch-work", stack_name="big-refactor")

    assert workspace.path == REPO_ROOT / ".ship" / "workspaces" / "scratch-work"
    assert workspace.stack_name == "big-refactor"


def test_create_rejects_taken_and_reserved_names(tmp_path: Path) -> None:
    jj = stack_jj("A", workspace_roots={"alpha": Path("/work/alpha")})
    manager = WorkspaceManager(ShipContext.for_test(jj=jj))

    with pytest.raises(WorkspaceExistsError):
        manager.create_workspace("alpha", tmp_path / "alpha")
    with pytest.raises(WorkspaceExistsError):
        manager.create_workspace("default", tmp_path / "default")


def test_create_rejects_non_empty_directory(tmp_path: Path) -> None:
    (tmp_path / "notes.txt").write_text("keep me", encoding="utf-8")
    jj = stack_jj("A")
    manager = WorkspaceManager(ShipContext.for_test(jj=jj))

    with pytest.raises(WorkspacePathError):
        manager.create_workspace("busy", tmp_path)

    assert [w.name for w in jj.list_workspaces(REPO_ROOT)] == ["default"]


def test_forget_keeps_directory_and_drops_metadata(tmp_path: Path) -> None:
    path = tmp_path / "alpha"
    path.mkdir()
    jj = stack_jj("A", workspace_roots={"alpha": path})
    store = FakeWorkspaceMetadataStore(
        workspaces=[WorkspaceMetadata(name="alpha", path=str(path))]
    )
    manager = WorkspaceManager(ShipContext.for_test(jj=jj, workspace_store=store))

    workspace = manager.forget_workspace("alpha")

    assert workspace.path == path
    assert path.exists()
    assert jj.forgotten_workspaces == ["alpha"]
    assert store.removed == ["alpha"]


def test_forget_metadata_only_workspace() -> None:
    store = FakeWorkspaceMetadataStore(
        workspaces=[WorkspaceMetadata(name="orphan", path="/work/orphan")]
    )
    jj = stack_jj("A")
    manager = WorkspaceManager(ShipContext.for_test(jj=jj, workspace_store=store))

    workspace = manager.forget_workspace("orphan")

    assert workspace.path == Path("/work/orphan")
    assert jj.forgotten_workspaces == []
    assert store.removed == ["orphan"]


def test_forget_default_or_unknown_workspace_fails() -> None:
    manager = WorkspaceManager(ShipContext.for_test(jj=stack_jj("A")))

    with pytest.raises(DefaultWorkspaceError):
        manager.forget_workspace("default")
    with pytest.raises(WorkspaceNotFoundError):
        manager.forget_workspace("nope")


def test_delete_workspace_directory(tmp_path: Path) -> None:
    path = tmp_path / "alpha"
    path.mkdir()
    (path / "file.txt").write_text("x", encoding="utf-8")
    manager = WorkspaceManager(ShipContext.for_test(jj=stack_jj("A")))

    assert manager.delete_workspace_directory(path)
    assert not path.exists()
    assert manager.delete_workspace_directory(path) is False


def test_delete_refuses_primary_workspace_root() -> None:
    manager = WorkspaceManager(ShipContext.for_test(jj=stack_jj("A")))

    with pytest.raises(DefaultWorkspaceError):
        manager.delete_workspace_directory(REPO_ROOT)


def test_delete_in_dry_run_keeps_directory(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    path = tmp_path / "alpha"
    path.mkdir()
    manager = WorkspaceManager(ShipContext.for_test(jj=stack_jj("A"), dry_run=True))

    assert manager.delete_workspace_directory(path)

    assert path.exists()
    assert "[DRY RUN] Would delete directory" in capsys.readouterr().err

"""Tests for `ship stack sync` and `ship stack restack`."""

from ship.core.context import ShipContext
from ship.core.jj.fake import FakeCommit, FakeJj
from tests.test_utils.cli_helpers import invoke, json_stdout
from tests.test_utils.jj_stacks import REPO_ROOT, TRUNK, stack_jj


def _upstream(change_id: str, description: str, files: dict[str, str]) -> dict:
    return {"main@origin": [FakeCommit(change_id, description=description, files=files)]}


def test_sync_up_to_date() -> None:
    ctx = ShipContext.for_test(jj=stack_jj("A", at="change1"))

    result = invoke(ctx, "stack", "sync")

    assert result.exit_code == 0
    assert "Fetched from origin" in result.stderr
    assert "Already up to date with main" in result.stderr


def test_sync_rebases_onto_new_trunk() -> None:
    jj = stack_jj(
        "A",
        "B",
        at="change2",
        fetch_updates=_upstream("upstream1", "Unrelated work", {"other.txt": "x\n"}),
    )

    result = invoke(ShipContext.for_test(jj=jj), "stack", "sync")

    assert result.exit_code == 0
    assert "Rebased 2 change(s) onto main" in result.stderr


def test_sync_reports_landed_changes_and_full_merge() -> None:
    jj = stack_jj(
        "Add feature",
        at="change1",
        fetch_updates=_upstream("landed", "Add feature (#12)", {"file1.txt": "Add feature\n"}),
    )

    result = invoke(ShipContext.for_test(jj=jj), "stack", "sync")

    assert result.exit_code == 0
    assert "Landed upstream, abandoned change1 Add feature" in result.stderr
    assert "✓ Stack fully merged" in result.stderr
    assert "Rebased" not in result.stderr


def test_sync_reports_conflicts() -> None:
    commits = [
        TRUNK,
        FakeCommit("change1", parent="trunk", description="Edit shared", files={"s.txt": "mine"}),
    ]
    jj = FakeJj(
        root=REPO_ROOT,
        commits=commits,
        working_copies={"default": "change1"},
        remote_bookmarks={"main@origin": "trunk"},
        fetch_updates=_upstream("upstream1", "Edit shared too", {"s.txt": "theirs"}),
    )

    result = invoke(ShipContext.for_test(jj=jj), "stack", "sync")

    assert result.exit_code == 0
    assert "Conflicts: " in result.stderr
    assert "ship stack restack" in result.stderr


def test_sync_json() -> None:
    jj = stack_jj(
        "A",
        at="change1",
        fetch_updates=_upstream("upstream1", "Unrelated work", {"other.txt": "x\n"}),
    )

    data = json_stdout(invoke(ShipContext.for_test(jj=jj), "stack", "sync", "--json"))

    assert data["result"]["fetched"] is True
    assert data["result"]["rebased"] is True
    assert data["result"]["trunk_change_id"] == "upstream1"
    assert data["result"]["stack_size_after"] == 1
    assert data["result"]["abandoned_merged_changes"] == []


def test_sync_fetch_failure() -> None:
    jj = stack_jj("A", fetch_error="Error: failed to fetch from remote 'origin'")

    result = invoke(ShipContext.for_test(jj=jj), "stack", "sync")

    assert result.exit_code == 1
    assert "Error: " in result.stderr
    assert "failed to fetch" in result.stderr
    assert jj.rebase_calls == []


def test_restack_does_not_fetch() -> None:
    jj = stack_jj("A", at="change1")

    result = invoke(ShipContext.for_test(jj=jj), "stack", "restack")

    assert result.exit_code == 0
    assert "Fetched" not in result.stderr
    assert "Already up to date with main" in result.stderr
    assert jj.fetch_count == 0

"""Tests for create, describe, squash and abandon."""

from ship.core.context import ShipContext
from ship.core.stack.changes import ChangeRepository
from tests.test_utils.cli_helpers import invoke, json_stdout
from tests.test_utils.jj_stacks import stack_jj


def test_create_on_described_change() -> None:
    ctx = ShipContext.for_test(jj=stack_jj("A", at="change1"))

    result = invoke(ctx, "stack", "create", "-m", "Add parser")

    assert result.exit_code == 0
    assert "Created " in result.stderr
    assert "Add parser" in result.stderr
    assert [c.title for c in ChangeRepository(ctx).get_stack()] == ["A", "Add parser"]


def test_create_with_bookmark_json() -> None:
    ctx = ShipContext.for_test(jj=stack_jj("A", at="change1"))

    data = json_stdout(invoke(ctx, "stack", "create", "-m", "B", "-b", "part-b", "--json"))

    assert data["result"]["title"] == "B"
    assert data["result"]["bookmark"] == "part-b"
    assert data["result"]["warnings"] == []


def test_create_reports_bookmark_warning() -> None:
    ctx = ShipContext.for_test(jj=stack_jj("A", at="change1", bookmarks={"taken": "change1"}))

    result = invoke(ctx, "stack", "create", "-m", "B", "--bookmark", "taken")

    assert result.exit_code == 0
    assert "Warning: Change created, but bookmark 'taken' was not" in result.stderr


def test_create_requires_message() -> None:
    result = invoke(ShipContext.for_test(jj=stack_jj("A")), "stack", "create")

    assert result.exit_code == 2
    assert "Missing option '-m'" in result.stderr


def test_describe_revision() -> None:
    ctx = ShipContext.for_test(jj=stack_jj("A", "B", at="change2"))

    result = invoke(ctx, "stack", "describe", "-m", "A, reworded", "-r", "change1")

    assert result.exit_code == 0
    assert "Described change1 A, reworded" in result.stderr


def test_describe_trunk_is_refused() -> None:
    ctx = ShipContext.for_test(jj=stack_jj("A", at="change1"))

    result = invoke(ctx, "stack", "describe", "-m", "rewrite history", "-r", "trunk")

    assert result.exit_code == 1
    assert "Error: " in result.stderr
    assert "immutable" in result.stderr


def test_squash_into_parent() -> None:
    ctx = ShipContext.for_test(jj=stack_jj("A", "wip", at="change2"))

    result = invoke(ctx, "stack", "squash", "-m", "A with fixes")

    assert result.exit_code == 0
    assert "Squashed into change1 A with fixes" in result.stderr


def test_squash_into_trunk_is_an_error_json() -> None:
    ctx = ShipContext.for_test(jj=stack_jj("A", at="change1"))

    result = invoke(ctx, "stack", "squash", "-m", "nope", "--json")

    assert result.exit_code == 1
    assert json_stdout(result) == {
        "error": "Cannot squash into trunk. Create a change first.",
        "error_type": "SquashError",
        "exit_code": 1,
    }


def test_abandon_middle_change() -> None:
    ctx = ShipContext.for_test(jj=stack_jj("A", "B", "C", at="change3"))

    result = invoke(ctx, "stack", "abandon", "change2")

    assert result.exit_code == 0
    assert "Abandoned change2 B" in result.stderr
    assert "Working copy: change3 C" in result.stderr
    assert [c.title for c in ChangeRepository(ctx).get_stack()] == ["A", "C"]


def test_abandon_dry_run_changes_nothing() -> None:
    jj = stack_jj("A", "B", at="change2")
    ctx = ShipContext.for_test(jj=jj, dry_run=True)

    result = invoke(ctx, "stack", "abandon", "change1")

    assert result.exit_code == 0
    assert "[DRY RUN] Would run: jj abandon change1" in result.stderr
    assert jj.abandoned_change_ids == []

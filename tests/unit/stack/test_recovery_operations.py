"""Tests for RecoveryOperations."""

import pytest

from ship.core.context import ShipContext
from ship.core.errors import ShipError
from ship.core.stack.changes import ChangeRepository
from ship.core.stack.recovery import RecoveryOperations
from tests.test_utils.jj_stacks import REPO_ROOT, stack_jj


def test_undo_reverts_last_operation() -> None:
    jj = stack_jj("A", at="change1")
    ctx = ShipContext.for_test(jj=jj)
    jj.describe(REPO_ROOT, "A, reworded")

    result = RecoveryOperations(ctx).undo()

    assert result.undone
    assert result.operation.startswith("describe commit")
    assert jj.undone_operations == [result.operation]
    assert ChangeRepository(ctx).get_current_change().title == "A"


def test_undo_without_operations_fails() -> None:
    ctx = ShipContext.for_test(jj=stack_jj("A"))

    with pytest.raises(ShipError):
        RecoveryOperations(ctx).undo()


def test_update_stale_working_copy() -> None:
    jj = stack_jj("A", at="change1", stale_workspaces={"default"})
    ctx = ShipContext.for_test(jj=jj)

    result = RecoveryOperations(ctx).update_stale()

    assert result.updated
    assert result.change_id == "change1"
    assert result.message.startswith("Working copy (@) now at")


def test_update_stale_is_a_noop_when_fresh() -> None:
    ctx = ShipContext.for_test(jj=stack_jj("A", at="change1"))

    result = RecoveryOperations(ctx).update_stale()

    assert result.updated is False
    assert result.change_id == "change1"

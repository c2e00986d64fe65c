"""Recovery commands: undo and update-stale."""

import click

from ship.cli.ensure import Ensure
from ship.cli.json_output import emit_json, json_error_boundary, json_option
from ship.cli.output import user_output
from ship.core.context import ShipContext
from ship.core.stack.recovery import RecoveryOperations


@click.command("undo")
@json_option
@json_error_boundary
@click.pass_obj
def undo_cmd(ctx: ShipContext, json_output: bool) -> None:
    """Undo the last jj operation."""
    Ensure.in_repo(ctx)
    result = RecoveryOperations(ctx).undo()

    if json_output:
        emit_json({"result": result})
        return

    user_output(f"Undid: {result.operation or '(unknown operation)'}")


@click.command("update-stale")
@json_option
@json_error_boundary
@click.pass_obj
def update_stale_cmd(ctx: ShipContext, json_output: bool) -> None:
    """Update a working copy left stale by a change made in another workspace."""
    Ensure.in_repo(ctx)
    result = RecoveryOperations(ctx).update_stale()

    if json_output:
        emit_json({"result": result})
        return

    if result.updated:
        user_output(f"Working copy updated to {result.change_id[:8]}")
    else:
        user_output("Working copy is not stale")

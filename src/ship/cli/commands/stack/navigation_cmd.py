"""Stack navigation commands."""

import click

from ship.cli.ensure import Ensure
from ship.cli.json_output import emit_json, json_error_boundary, json_option
from ship.cli.output import format_change_line, user_output
from ship.core.context import ShipContext
from ship.core.stack.navigator import StackNavigator
from ship.core.stack.types import NavigateResult


def _render(result: NavigateResult, json_output: bool) -> None:
    if json_output:
        emit_json({"result": result})
        return
    if result.to_change is None:
        user_output(result.message)
        return
    user_output(format_change_line(result.to_change.change_id, result.to_change.title))


@click.command("up")
@json_option
@json_error_boundary
@click.pass_obj
def up_cmd(ctx: ShipContext, json_output: bool) -> None:
    """Move the working copy to the child change."""
    Ensure.in_repo(ctx)
    _render(StackNavigator(ctx).stack_up(), json_output)


@click.command("down")
@json_option
@json_error_boundary
@click.pass_obj
def down_cmd(ctx: ShipContext, json_output: bool) -> None:
    """Move the working copy to the parent change."""
    Ensure.in_repo(ctx)
    _render(StackNavigator(ctx).stack_down(), json_output)

import click

from ship.cli.ensure import Ensure
from ship.cli.json_output import emit_json, json_error_boundary, json_option
from ship.cli.output import format_change_line, user_output
from ship.core.context import ShipContext
from ship.core.stack.authoring import ChangeAuthoring


@click.command("squash")
@click.option("-m", "--message", required=True, help="Description for the combined change.")
@json_option
@json_error_boundary
@click.pass_obj
def squash_cmd(ctx: ShipContext, message: str, json_output: bool) -> None:
    """Fold the working copy into its parent change."""
    Ensure.in_repo(ctx)
    change = ChangeAuthoring(ctx).squash(message)

    if json_output:
        emit_json({"change": change})
        return

    user_output("Squashed into " + format_change_line(change.change_id, change.title))

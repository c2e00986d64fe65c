import click

from ship.cli.ensure import Ensure
from ship.cli.json_output import emit_json, json_error_boundary, json_option
from ship.cli.output import format_change_line, user_output
from ship.core.context import ShipContext
from ship.core.stack.authoring import ChangeAuthoring


@click.command("describe")
@click.option("-m", "--message", required=True, help="New description.")
@click.option("-r", "--revision", default="@", show_default=True, help="Change to describe.")
@json_option
@json_error_boundary
@click.pass_obj
def describe_cmd(ctx: ShipContext, message: str, revision: str, json_output: bool) -> None:
    """Set the description of a change."""
    Ensure.in_repo(ctx)
    change = ChangeAuthoring(ctx).describe(message, revision)

    if json_output:
        emit_json({"change": change})
        return

    user_output("Described " + format_change_line(change.change_id, change.title))

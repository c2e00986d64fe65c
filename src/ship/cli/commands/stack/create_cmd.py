import click

from ship.cli.ensure import Ensure
from ship.cli.json_output import emit_json, json_error_boundary, json_option
from ship.cli.output import format_change_line, user_output
from ship.core.context import ShipContext
from ship.core.stack.authoring import ChangeAuthoring


@click.command("create")
@click.option("-m", "--message", required=True, help="Description of the new change.")
@click.option("-b", "--bookmark", help="Bookmark to create on the new change.")
@json_option
@json_error_boundary
@click.pass_obj
def create_cmd(ctx: ShipContext, message: str, bookmark: str | None, json_output: bool) -> None:
    """Start a new change on top of the stack.

    An empty, undescribed working copy is described in place instead of
    stacking another change on it.
    """
    Ensure.in_repo(ctx)
    result = ChangeAuthoring(ctx).create(message, bookmark)

    if json_output:
        emit_json({"result": result})
        return

    user_output("Created " + format_change_line(result.change_id, result.title))
    if result.bookmark is not None:
        user_output(f"  bookmark: {result.bookmark}")
    for warning in result.warnings:
        user_output(click.style("Warning: ", fg="yellow") + warning)

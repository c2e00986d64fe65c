import click

from ship.cli.ensure import Ensure
from ship.cli.json_output import emit_json, json_error_boundary, json_option
from ship.cli.output import format_change_line, user_output
from ship.core.context import ShipContext
from ship.core.stack.authoring import ChangeAuthoring


@click.command("abandon")
@click.argument("change", required=False)
@json_option
@json_error_boundary
@click.pass_obj
def abandon_cmd(ctx: ShipContext, change: str | None, json_output: bool) -> None:
    """Abandon CHANGE (default: the working copy).

    Children of the abandoned change are rebased onto its parent by jj.
    """
    Ensure.in_repo(ctx)
    result = ChangeAuthoring(ctx).abandon(change)

    if json_output:
        emit_json({"result": result})
        return

    user_output(
        "Abandoned " + format_change_line(result.abandoned.change_id, result.abandoned.title)
    )
    user_output(
        "Working copy: "
        + format_change_line(result.working_copy.change_id, result.working_copy.title)
    )

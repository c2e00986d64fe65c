import click
from rich.table import Table

from ship.cli.ensure import Ensure
from ship.cli.json_output import emit_json, json_error_boundary, json_option
from ship.cli.output import rich_output, user_output
from ship.core.context import ShipContext
from ship.core.jj.types import Change
from ship.core.stack.changes import ChangeRepository
from ship.core.stack.types import ChangeSummary


def _flags(change: Change) -> str:
    flags = []
    if change.is_working_copy:
        flags.append("@")
    if change.has_conflict:
        flags.append("conflict")
    if change.is_empty:
        flags.append("empty")
    return " ".join(flags)


@click.command("log")
@json_option
@json_error_boundary
@click.pass_obj
def log_cmd(ctx: ShipContext, json_output: bool) -> None:
    """Show the stack from trunk to the working copy, newest first."""
    Ensure.in_repo(ctx)
    changes = ChangeRepository(ctx)
    trunk = changes.resolve_trunk()
    stack = changes.get_stack(trunk)

    if json_output:
        emit_json({"trunk": ChangeSummary.of(trunk), "changes": stack})
        return

    if not stack:
        user_output(f"No changes on top of {ctx.config.trunk_branch}")
        return

    table = Table(box=None, show_header=False, pad_edge=False)
    table.add_column("change", style="magenta", no_wrap=True)
    table.add_column("bookmarks", style="cyan")
    table.add_column("title")
    table.add_column("flags", style="yellow")
    for change in reversed(stack):
        table.add_row(
            change.short_change_id,
            ", ".join(change.bookmarks),
            change.title or "(no description)",
            _flags(change),
        )
    table.add_row(trunk.short_change_id, ctx.config.trunk_branch, trunk.title, "", style="dim")
    rich_output(table)

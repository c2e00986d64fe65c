import click

from ship.cli.ensure import Ensure
from ship.cli.json_output import emit_json, json_error_boundary, json_option
from ship.cli.output import format_change_line, user_output
from ship.core.context import ShipContext
from ship.core.stack.changes import ChangeRepository
from ship.core.stack.types import ChangeSummary
from ship.core.stack.workspaces import WorkspaceManager


@click.command("status")
@json_option
@json_error_boundary
@click.pass_obj
def status_cmd(ctx: ShipContext, json_output: bool) -> None:
    """Show the working-copy change and its place in the stack."""
    Ensure.in_repo(ctx)
    changes = ChangeRepository(ctx)
    current = changes.get_current_change()
    trunk = changes.resolve_trunk()
    stack = changes.get_stack(trunk)
    workspace = WorkspaceManager(ctx).get_current_workspace_name()

    if json_output:
        emit_json(
            {
                "change": current,
                "trunk": ChangeSummary.of(trunk),
                "stack_size": len(stack),
                "workspace": workspace,
            }
        )
        return

    user_output(format_change_line(current.change_id, current.title))
    if current.bookmarks:
        user_output(f"  bookmarks: {', '.join(current.bookmarks)}")
    if current.has_conflict:
        user_output(click.style("  has conflicts", fg="red"))
    elif current.is_empty:
        user_output(click.style("  (empty)", dim=True))
    user_output(f"  workspace: {workspace}")
    user_output(f"  stack: {len(stack)} change(s) on {ctx.config.trunk_branch}")

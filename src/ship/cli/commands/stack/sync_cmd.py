"""Sync and restack commands."""

import click

from ship.cli.ensure import Ensure
from ship.cli.json_output import emit_json, json_error_boundary, json_option
from ship.cli.output import format_change_line, user_output
from ship.core.context import ShipContext
from ship.core.stack.sync import SyncEngine
from ship.core.stack.types import SyncResult


def _render(ctx: ShipContext, result: SyncResult, json_output: bool) -> None:
    if json_output:
        emit_json({"result": result})
        return

    if result.fetched:
        user_output(f"Fetched from {ctx.config.trunk_remote}")

    if result.conflicted:
        user_output(
            click.style("Conflicts: ", fg="red")
            + "the stack has conflicted changes. Resolve them, then run 'ship stack restack'."
        )
        return

    for change in result.abandoned_merged_changes:
        line = format_change_line(change.change_id, change.title)
        user_output(f"Landed upstream, abandoned {line}")

    if result.stack_fully_merged:
        user_output(click.style("✓", fg="green") + " Stack fully merged")
        if result.cleaned_up_workspace is not None:
            user_output(f"Removed workspace '{result.cleaned_up_workspace}'")
        return

    if result.rebased:
        user_output(
            f"Rebased {result.stack_size_after} change(s) onto {ctx.config.trunk_branch}"
        )
    else:
        user_output(f"Already up to date with {ctx.config.trunk_branch}")


@click.command("sync")
@json_option
@json_error_boundary
@click.pass_obj
def sync_cmd(ctx: ShipContext, json_output: bool) -> None:
    """Fetch trunk and rebase the stack onto it.

    Changes that landed upstream are abandoned. When the whole stack has
    landed, the workspace holding it is forgotten (its directory stays).
    """
    Ensure.in_repo(ctx)
    _render(ctx, SyncEngine(ctx).sync(), json_output)


@click.command("restack")
@json_option
@json_error_boundary
@click.pass_obj
def restack_cmd(ctx: ShipContext, json_output: bool) -> None:
    """Rebase the stack onto the local trunk without fetching."""
    Ensure.in_repo(ctx)
    _render(ctx, SyncEngine(ctx).restack(), json_output)

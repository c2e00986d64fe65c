"""Workspace commands: list, create and remove."""

from pathlib import Path

import click
from rich.table import Table

from ship.cli.ensure import Ensure
from ship.cli.json_output import emit_json, json_error_boundary, json_option
from ship.cli.output import rich_output, user_output
from ship.core.context import ShipContext
from ship.core.naming import sanitize_workspace_name
from ship.core.stack.workspaces import WorkspaceManager


@click.command("workspaces")
@json_option
@json_error_boundary
@click.pass_obj
def workspaces_cmd(ctx: ShipContext, json_output: bool) -> None:
    """List workspaces with the stack and task they were created for."""
    Ensure.in_repo(ctx)
    manager = WorkspaceManager(ctx)
    workspaces = manager.list_workspaces()
    current = manager.get_current_workspace_name()

    if json_output:
        emit_json({"current": current, "workspaces": workspaces})
        return

    table = Table(box=None, pad_edge=False)
    table.add_column("", no_wrap=True)
    table.add_column("name", style="cyan", no_wrap=True)
    table.add_column("change", style="magenta", no_wrap=True)
    table.add_column("stack")
    table.add_column("path", overflow="fold")
    for workspace in workspaces:
        table.add_row(
            "*" if workspace.name == current else "",
            workspace.name,
            workspace.change_id[:8],
            workspace.stack_name or "",
            str(workspace.path) if workspace.path is not None else "",
        )
    rich_output(table)


@click.command("create-workspace")
@click.argument("name")
@click.option(
    "--path",
    type=click.Path(path_type=Path, file_okay=False),
    help="Directory for the workspace. Defaults to the workspace.base_path config value.",
)
@click.option("--stack", "stack_name", help="Stack the workspace holds. Defaults to NAME.")
@click.option("--task", "task_id", help="Issue-tracker task the workspace is for.")
@click.option("-r", "--revision", help="Revision the new working copy starts on.")
@json_option
@json_error_boundary
@click.pass_obj
def create_workspace_cmd(
    ctx: ShipContext,
    name: str,
    path: Path | None,
    stack_name: str | None,
    task_id: str | None,
    revision: str | None,
    json_output: bool,
) -> None:
    """Create workspace NAME so a second stack can be worked on in parallel."""
    Ensure.in_repo(ctx)
    workspace_name = sanitize_workspace_name(name)
    if path is not None and not path.is_absolute():
        path = ctx.cwd / path

    bookmark = None
    if task_id is not None:
        bookmark = ctx.issues.get_branch_name(task_id)

    workspace = WorkspaceManager(ctx).create_workspace(
        workspace_name,
        path,
        stack_name=stack_name,
        task_id=task_id,
        bookmark=bookmark,
        revision=revision,
    )

    if json_output:
        emit_json({"workspace": workspace})
        return

    user_output(
        click.style("✓", fg="green")
        + f" Created workspace {click.style(workspace.name, fg='cyan')} at {workspace.path}"
    )
    user_output(f"  cd {workspace.path}")


@click.command("remove-workspace")
@click.argument("name")
@click.option("--delete", is_flag=True, help="Also delete the workspace directory.")
@json_option
@json_error_boundary
@click.pass_obj
def remove_workspace_cmd(ctx: ShipContext, name: str, delete: bool, json_output: bool) -> None:
    """Forget workspace NAME.

    The directory is kept unless --delete is given.
    """
    Ensure.in_repo(ctx)
    manager = WorkspaceManager(ctx)
    workspace = manager.forget_workspace(name)

    deleted = False
    if delete and workspace.path is not None:
        deleted = manager.delete_workspace_directory(workspace.path)

    if json_output:
        emit_json({"workspace": workspace, "directory_deleted": deleted})
        return

    user_output(f"Forgot workspace {click.style(name, fg='cyan')}")
    if deleted:
        user_output(f"Deleted {workspace.path}")
    elif workspace.path is not None and not delete:
        user_output(f"Directory kept at {workspace.path}")

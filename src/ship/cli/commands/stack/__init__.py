"""Stack commands for managing jj change stacks."""

import click

from ship.cli.commands.stack.abandon_cmd import abandon_cmd
from ship.cli.commands.stack.bookmark_cmd import bookmark_cmd
from ship.cli.commands.stack.create_cmd import create_cmd
from ship.cli.commands.stack.describe_cmd import describe_cmd
from ship.cli.commands.stack.log_cmd import log_cmd
from ship.cli.commands.stack.navigation_cmd import down_cmd, up_cmd
from ship.cli.commands.stack.recovery_cmd import undo_cmd, update_stale_cmd
from ship.cli.commands.stack.squash_cmd import squash_cmd
from ship.cli.commands.stack.status_cmd import status_cmd
from ship.cli.commands.stack.submit_cmd import submit_cmd
from ship.cli.commands.stack.sync_cmd import restack_cmd, sync_cmd
from ship.cli.commands.stack.workspace_cmd import (
    create_workspace_cmd,
    remove_workspace_cmd,
    workspaces_cmd,
)


@click.group("stack")
def stack_group() -> None:
    """Navigate, sync and submit the stack of changes under the working copy."""
    pass


# Register subcommands
stack_group.add_command(status_cmd)
stack_group.add_command(log_cmd)
stack_group.add_command(create_cmd)
stack_group.add_command(describe_cmd)
stack_group.add_command(squash_cmd)
stack_group.add_command(abandon_cmd)
stack_group.add_command(up_cmd)
stack_group.add_command(down_cmd)
stack_group.add_command(sync_cmd)
stack_group.add_command(restack_cmd)
stack_group.add_command(submit_cmd)
stack_group.add_command(bookmark_cmd)
stack_group.add_command(workspaces_cmd)
stack_group.add_command(create_workspace_cmd)
stack_group.add_command(remove_workspace_cmd)
stack_group.add_command(undo_cmd)
stack_group.add_command(update_stale_cmd)

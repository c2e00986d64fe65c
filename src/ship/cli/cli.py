import logging
import os

import click

from ship.cli.commands.config import config_group
from ship.cli.commands.stack import stack_group
from ship.core.context import create_context

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="ship-cli")
@click.option(
    "--dry-run",
    is_flag=True,
    help="Print mutating jj, gh and daemon calls instead of running them.",
)
@click.pass_context
def cli(ctx: click.Context, dry_run: bool) -> None:
    """Stacked changes for jj: navigate, sync and submit a stack of changes."""
    # Enable debug logging if SHIP_DEBUG environment variable is set
    if os.getenv("SHIP_DEBUG"):
        logging.basicConfig(level=logging.DEBUG, format="[DEBUG %(name)s:%(lineno)d] %(message)s")

    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        ctx.obj = create_context(dry_run=dry_run)


cli.add_command(config_group)
cli.add_command(stack_group)


def main() -> None:
    """CLI entry point used by the `ship` console script."""
    cli()

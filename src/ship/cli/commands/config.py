import click

from ship.cli.ensure import Ensure
from ship.cli.json_output import emit_json, json_error_boundary, json_option
from ship.cli.output import machine_output, user_output
from ship.core.config import (
    CONFIG_KEYS,
    get_config_value,
    load_config,
    parse_config_value,
    set_config_value,
)
from ship.core.context import ShipContext


def _format_value(value: str | bool) -> str:
    if isinstance(value, bool):
        return str(value).lower()
    return value


@click.group("config")
def config_group() -> None:
    """Manage repository configuration in .ship/config.toml."""


@config_group.command("list")
@json_option
@json_error_boundary
@click.pass_obj
def config_list(ctx: ShipContext, json_output: bool) -> None:
    """Print a list of configuration keys and values."""
    values = {key: get_config_value(ctx.config, key) for key in CONFIG_KEYS}

    if json_output:
        emit_json(values)
        return

    user_output(click.style("Repository configuration:", bold=True))
    for key, value in values.items():
        user_output(f"  {key}={_format_value(value)}")


@config_group.command("get")
@click.argument("key", metavar="KEY")
@json_error_boundary
@click.pass_obj
def config_get(ctx: ShipContext, key: str) -> None:
    """Print the value of a given configuration key."""
    machine_output(_format_value(get_config_value(ctx.config, key)))


@config_group.command("set")
@click.argument("key", metavar="KEY")
@click.argument("value", metavar="VALUE")
@json_error_boundary
@click.pass_obj
def config_set(ctx: ShipContext, key: str, value: str) -> None:
    """Set the value of a configuration key."""
    repo = Ensure.in_repo(ctx)
    parse_config_value(key, value)
    if ctx.dry_run:
        user_output(f"[DRY RUN] Would set {key}={value} in {repo.ship_dir / 'config.toml'}")
        return
    set_config_value(repo.root, key, value)
    user_output(f"Set {key}={_format_value(get_config_value(load_config(repo.root), key))}")

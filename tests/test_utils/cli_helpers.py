"""Helpers for CLI testing with CliRunner.

Commands are invoked with a prepared ShipContext passed as `obj`, so the CLI
group skips create_context() and every integration is a fake.
"""

import json
from typing import Any

from click.testing import CliRunner, Result

from ship.cli.cli import cli
from ship.core.context import ShipContext


def invoke(ctx: ShipContext, *args: str) -> Result:
    """Run `ship <args>` against ctx.

    result.stdout holds machine output only; human messages are in result.stderr.
    """
    runner = CliRunner()
    return runner.invoke(cli, list(args), obj=ctx, catch_exceptions=False)


def json_stdout(result: Result) -> Any:
    """Parse the JSON document a `--json` command printed on stdout."""
    if result.exit_code != 0 and not result.stdout.strip():
        raise AssertionError(f"exit {result.exit_code}, stderr: {result.stderr}")
    return json.loads(result.stdout)

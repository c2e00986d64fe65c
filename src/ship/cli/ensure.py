"""CLI error handling utilities with styled output.

This module provides the Ensure class for asserting invariants in CLI commands
with consistent, user-friendly error messages. All errors use red "Error:" prefix
for visual consistency.
"""

import click

from ship.cli.output import user_output
from ship.core.context import ShipContext
from ship.core.errors import NotARepoError
from ship.core.repo_discovery import NoRepoSentinel, RepoContext


class Ensure:
    """Helper class for asserting invariants with consistent error handling."""

    @staticmethod
    def invariant(condition: bool, error_message: str) -> None:
        """Ensure condition is true, otherwise output styled error and exit.

        Args:
            condition: Boolean condition to check
            error_message: Error message to display if condition is false.
                          "Error: " prefix will be added automatically in red.

        Raises:
            SystemExit: If condition is false (with exit code 1)
        """
        if not condition:
            user_output(click.style("Error: ", fg="red") + error_message)
            raise SystemExit(1)

    @staticmethod
    def in_repo(ctx: ShipContext) -> RepoContext:
        """Return the discovered repository or fail with NotARepoError.

        Raises rather than exiting so json_error_boundary can render the failure
        in whichever format the command was asked for.
        """
        if isinstance(ctx.repo, NoRepoSentinel):
            raise NotARepoError(ctx.repo.message)
        return ctx.repo

import click

from ship.cli.ensure import Ensure
from ship.cli.json_output import emit_json, json_error_boundary, json_option
from ship.cli.output import user_output
from ship.core.context import ShipContext
from ship.core.stack.submit import SubmitCoordinator
from ship.core.stack.types import SubmitInput

_STATUS_VERBS = {"created": "Created", "updated": "Updated", "exists": "Existing"}


@click.command("submit")
@click.option("-b", "--bookmark", help="Bookmark to publish under.")
@click.option(
    "--draft/--ready",
    default=None,
    help="Open the PR as a draft. Defaults to the pr.draft config value.",
)
@click.option("--title", help="PR title. Defaults to the change title.")
@click.option("--body", help="PR body. Defaults to the description after its first line.")
@click.option(
    "--subscribe",
    "subscriber_id",
    metavar="SESSION",
    help="Register SESSION with the webhook daemon for events on the stack's PRs.",
)
@json_option
@json_error_boundary
@click.pass_obj
def submit_cmd(
    ctx: ShipContext,
    bookmark: str | None,
    draft: bool | None,
    title: str | None,
    body: str | None,
    subscriber_id: str | None,
    json_output: bool,
) -> None:
    """Push the current change and create or update its pull request.

    \b
    Parent changes with bookmarks are pushed first. The PR targets the nearest
    bookmarked parent, or trunk when there is none.
    """
    Ensure.in_repo(ctx)
    result = SubmitCoordinator(ctx).submit(
        SubmitInput(
            bookmark=bookmark,
            draft=draft,
            title=title,
            body=body,
            subscriber_id=subscriber_id,
        )
    )

    if json_output:
        emit_json({"result": result})
        return

    for change_id in result.abandoned_empty_changes:
        user_output(f"Abandoned empty change {change_id[:8]}")
    if result.bookmark_created:
        user_output(f"Created bookmark {click.style(result.bookmark, fg='cyan')}")
    user_output(f"Pushed {click.style(result.bookmark, fg='cyan')} (base: {result.base})")
    if result.status is not None and result.pr is not None:
        verb = _STATUS_VERBS[result.status]
        user_output(f"{verb} PR #{result.pr.number}: {result.pr.url}")
    if result.subscribed_pr_numbers:
        numbers = ", ".join(f"#{n}" for n in result.subscribed_pr_numbers)
        user_output(f"Subscribed to events for {numbers}")
    for warning in result.warnings:
        user_output(click.style("Warning: ", fg="yellow") + warning)

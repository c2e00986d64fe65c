import click

from ship.cli.ensure import Ensure
from ship.cli.json_output import emit_json, json_error_boundary, json_option
from ship.cli.output import user_output
from ship.core.context import ShipContext
from ship.core.stack.bookmarks import BookmarkManager


@click.command("bookmark")
@click.argument("name")
@click.option("--move", is_flag=True, help="Move an existing bookmark instead of creating one.")
@click.option("--delete", is_flag=True, help="Delete the bookmark.")
@click.option("-r", "--revision", default="@", show_default=True, help="Change to point at.")
@json_option
@json_error_boundary
@click.pass_obj
def bookmark_cmd(
    ctx: ShipContext,
    name: str,
    move: bool,
    delete: bool,
    revision: str,
    json_output: bool,
) -> None:
    """Create, move or delete bookmark NAME.

    Creating fails if NAME exists and --move fails if it does not.
    """
    Ensure.invariant(not (move and delete), "--move and --delete are mutually exclusive")
    Ensure.in_repo(ctx)
    bookmarks = BookmarkManager(ctx)

    if delete:
        bookmarks.delete_bookmark(name)
        action = "deleted"
    elif move:
        bookmarks.move_bookmark(name, revision)
        action = "moved"
    else:
        bookmarks.create_bookmark(name, revision)
        action = "created"

    if json_output:
        emit_json({"bookmark": name, "action": action, "revision": revision})
        return

    if delete:
        user_output(f"Deleted bookmark {name}")
    else:
        user_output(f"Bookmark {click.style(name, fg='cyan')} {action} at {revision}")

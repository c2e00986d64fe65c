"""Create, describe, squash and abandon changes."""

import logging

from ship.core.context import ShipContext
from ship.core.errors import ShipError, SquashError
from ship.core.jj.types import Change
from ship.core.stack.bookmarks import BookmarkManager
from ship.core.stack.changes import ChangeRepository
from ship.core.stack.types import AbandonResult, ChangeSummary, CreateResult

logger = logging.getLogger(__name__)


class ChangeAuthoring:
    def __init__(
        self,
        ctx: ShipContext,
        changes: ChangeRepository | None = None,
        bookmarks: BookmarkManager | None = None,
    ) -> None:
        self._ctx = ctx
        self._changes = changes if changes is not None else ChangeRepository(ctx)
        self._bookmarks = bookmarks if bookmarks is not None else BookmarkManager(ctx)

    def create(self, message: str, bookmark: str | None = None) -> CreateResult:
        """Start a new change described by message on top of the stack.

        A scratch working copy is described in place rather than stacked on.
        A bookmark that cannot be created is reported as a warning; the change
        itself is kept.
        """
        current = self._changes.get_current_change()
        if current.is_placeholder:
            logger.debug("Describing scratch change %s", current.short_change_id)
            self._ctx.jj.describe(self._ctx.cwd, message)
        else:
            self._ctx.jj.new(self._ctx.cwd, message)

        created = self._changes.get_current_change()
        warnings: list[str] = []
        bookmark_name: str | None = None
        if bookmark is not None:
            try:
                self._bookmarks.create_bookmark(bookmark)
                bookmark_name = bookmark
            except ShipError as e:
                warnings.append(f"Change created, but bookmark '{bookmark}' was not: {e.message}")

        return CreateResult(
            change_id=created.change_id,
            title=created.title,
            bookmark=bookmark_name,
            warnings=warnings,
        )

    def describe(self, message: str, revision: str = "@") -> Change:
        self._ctx.jj.describe(self._ctx.cwd, message, revision)
        return self._changes.get_log(revision)[0]

    def squash(self, message: str) -> Change:
        """Fold the working copy into its parent and describe the result.

        Raises:
            SquashError: If the parent is trunk or below it
        """
        parent = self._changes.get_parent_change()
        stack_ids = {c.change_id for c in self._changes.get_raw_stack()}
        if parent is None or parent.change_id not in stack_ids:
            raise SquashError("Cannot squash into trunk. Create a change first.")
        self._ctx.jj.squash(self._ctx.cwd, message)
        return self._changes.get_log(parent.change_id)[0]

    def abandon(self, revision: str | None = None) -> AbandonResult:
        """Abandon revision (default @) and report where the working copy ended up."""
        target = self._changes.get_log(revision or "@")[0]
        self._ctx.jj.abandon(self._ctx.cwd, target.change_id)
        working_copy = self._changes.get_current_change()
        return AbandonResult(
            abandoned=ChangeSummary.of(target),
            working_copy=ChangeSummary.of(working_copy),
        )

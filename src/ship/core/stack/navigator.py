"""Move the working copy up and down a linear stack."""

import logging

from ship.core.context import ShipContext
from ship.core.stack.changes import ChangeRepository
from ship.core.stack.types import ChangeSummary, NavigateResult

logger = logging.getLogger(__name__)


class StackNavigator:
    """Moves @ to the child or parent change with `jj edit`.

    Reaching either end of the stack is a normal terminal state reported with
    moved=False. Only a fork above @ (several children) is an error.
    """

    def __init__(self, ctx: ShipContext, changes: ChangeRepository | None = None) -> None:
        self._ctx = ctx
        self._changes = changes if changes is not None else ChangeRepository(ctx)

    def stack_up(self) -> NavigateResult:
        """Move to the unique child of @.

        Raises:
            AmbiguousStackError: If @ has several children
        """
        current = self._changes.get_current_change()
        child = self._changes.get_child_change()
        if child is None:
            return NavigateResult(
                moved=False,
                from_change=ChangeSummary.of(current),
                to_change=None,
                message="Already at the top of the stack",
            )

        logger.debug("Moving up from %s to %s", current.short_change_id, child.short_change_id)
        self._ctx.jj.edit(self._ctx.cwd, child.change_id)
        return NavigateResult(
            moved=True,
            from_change=ChangeSummary.of(current),
            to_change=ChangeSummary.of(child),
            message=f"Moved up to {child.short_change_id}",
        )

    def stack_down(self) -> NavigateResult:
        """Move to the parent of @ when the parent is part of the stack.

        Trunk and everything below it are immutable, so @ sitting directly on trunk
        is the bottom of the stack.
        """
        current = self._changes.get_current_change()
        parent = self._changes.get_parent_change()
        stack_ids = {change.change_id for change in self._changes.get_raw_stack()}
        if parent is None or parent.change_id not in stack_ids:
            return NavigateResult(
                moved=False,
                from_change=ChangeSummary.of(current),
                to_change=None,
                message="Already at the bottom of the stack",
            )

        logger.debug("Moving down from %s to %s", current.short_change_id, parent.short_change_id)
        self._ctx.jj.edit(self._ctx.cwd, parent.change_id)
        return NavigateResult(
            moved=True,
            from_change=ChangeSummary.of(current),
            to_change=ChangeSummary.of(parent),
            message=f"Moved down to {parent.short_change_id}",
        )

"""Recovery from mistakes and from stale working copies."""

import logging

from ship.core.context import ShipContext
from ship.core.stack.changes import ChangeRepository
from ship.core.stack.types import UndoResult, UpdateStaleResult

logger = logging.getLogger(__name__)


class RecoveryOperations:
    """Undo and stale-working-copy repair.

    Both delegate to jj's own operation log; nothing here rolls back state by hand.
    """

    def __init__(self, ctx: ShipContext, changes: ChangeRepository | None = None) -> None:
        self._ctx = ctx
        self._changes = changes if changes is not None else ChangeRepository(ctx)

    def undo(self) -> UndoResult:
        """Reverse the most recent jj operation and report what it was."""
        operation = self._ctx.jj.get_last_operation(self._ctx.cwd)
        description = operation.description if operation is not None else ""
        logger.debug("Undoing operation: %s", description)
        self._ctx.jj.undo(self._ctx.cwd)
        return UndoResult(undone=True, operation=description)

    def update_stale(self) -> UpdateStaleResult:
        """Bring a stale working copy up to date. A no-op when it is not stale."""
        update = self._ctx.jj.update_stale(self._ctx.cwd)
        current = self._changes.get_current_change()
        message = update.message if update.message else "Working copy updated"
        return UpdateStaleResult(
            updated=update.updated, change_id=current.change_id, message=message
        )

"""Read operations over the change graph."""

import logging

from ship.core.context import ShipContext
from ship.core.errors import AmbiguousStackError, BackendError, RevisionError
from ship.core.jj.types import Change

logger = logging.getLogger(__name__)


class ChangeRepository:
    """Current, parent and child changes, arbitrary logs, and the stack.

    Nothing here mutates the repository. The stack is derived from the history
    graph on every call; it is never cached.
    """

    def __init__(self, ctx: ShipContext) -> None:
        self._ctx = ctx

    def _log(self, revset: str) -> list[Change]:
        return self._ctx.jj.log(self._ctx.cwd, revset)

    def get_current_change(self) -> Change:
        changes = self._log("@")
        if not changes:
            raise BackendError("No working-copy change found", command="log -r @")
        return changes[0]

    def get_parent_change(self) -> Change | None:
        """Return the parent of @, or None when @ sits directly on the root commit."""
        parents = self._log("@-")
        if not parents or parents[0].is_root:
            return None
        return parents[0]

    def get_children(self, revision: str = "@") -> list[Change]:
        return self._log(f"{revision}+")

    def get_child_change(self) -> Change | None:
        """Return the unique child of @.

        Returns None when @ has no children.

        Raises:
            AmbiguousStackError: If @ has more than one child
        """
        children = self.get_children()
        if not children:
            return None
        if len(children) > 1:
            current = self.get_current_change()
            raise AmbiguousStackError(current.change_id, len(children))
        return children[0]

    def get_log(self, revset: str) -> list[Change]:
        return self._log(revset)

    def resolve_trunk(self) -> Change:
        """Resolve trunk: `branch@remote`, then local `branch`, then the root commit."""
        branch = self._ctx.config.trunk_branch
        remote = self._ctx.config.trunk_remote
        for revset in (f"{branch}@{remote}", branch):
            try:
                changes = self._log(revset)
            except RevisionError:
                logger.debug("Trunk candidate %s does not exist", revset)
                continue
            if changes:
                return changes[0]
        return self._log("root()")[0]

    def get_raw_stack(self, trunk: Change | None = None) -> list[Change]:
        """Every change in trunk..@, parent first, including scratch changes."""
        if trunk is None:
            trunk = self.resolve_trunk()
        return list(reversed(self._log(f"{trunk.id}..@")))

    def get_stack(self, trunk: Change | None = None) -> list[Change]:
        """The stack from trunk (exclusive) to @ (inclusive), parent first.

        Placeholder changes (empty, undescribed, unbookmarked) are left out, so a
        fresh working copy on trunk yields an empty stack.
        """
        return [change for change in self.get_raw_stack(trunk) if not change.is_placeholder]

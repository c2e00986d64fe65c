"""Sync and restack: rebase the stack onto trunk and clean up what has landed.

One attempt runs these steps strictly in order:

    fetch -> rebase -> {clean | conflicted}
          -> merge detection (clean only)
          -> {fully merged | partially merged | unchanged}
          -> workspace cleanup (fully merged, non-default workspace only)

restack() is the same pipeline without the fetch.

Merge detection is a heuristic: a change whose diff became empty after the
rebase, and whose title matches a commit that landed on trunk since the stack
forked, is treated as merged upstream and abandoned. A change that becomes
empty for an unrelated reason (for example a revert on trunk that happens to
share its title) would be misclassified the same way.
"""

import logging

from ship.core.context import ShipContext
from ship.core.errors import ConflictError, ShipError
from ship.core.jj.types import Change
from ship.core.naming import normalize_title
from ship.core.stack.changes import ChangeRepository
from ship.core.stack.types import DEFAULT_WORKSPACE, AbandonedChange, SyncResult
from ship.core.stack.workspaces import WorkspaceManager

logger = logging.getLogger(__name__)


class SyncEngine:
    def __init__(
        self,
        ctx: ShipContext,
        changes: ChangeRepository | None = None,
        workspaces: WorkspaceManager | None = None,
    ) -> None:
        self._ctx = ctx
        self._changes = changes if changes is not None else ChangeRepository(ctx)
        self._workspaces = workspaces if workspaces is not None else WorkspaceManager(ctx)

    def sync(self) -> SyncResult:
        """Fetch trunk from the remote, then restack.

        Raises:
            FetchError: If the fetch fails. Nothing has been rebased at that point.
        """
        return self._run(fetch=True)

    def restack(self) -> SyncResult:
        """Rebase the stack onto the current trunk without touching the remote."""
        return self._run(fetch=False)

    def _run(self, *, fetch: bool) -> SyncResult:
        jj = self._ctx.jj
        cwd = self._ctx.cwd

        # Snapshot before anything moves: the fork point bounds merge detection,
        # and the workspace name must be read while @ is still the stack's tip.
        trunk_before = self._changes.resolve_trunk()
        raw_before = self._changes.get_raw_stack(trunk_before)
        stack_before = [c for c in raw_before if not c.is_placeholder]
        workspace_name = self._workspaces.get_current_workspace_name()

        if fetch:
            logger.debug("Fetching from %s", self._ctx.config.trunk_remote)
            jj.git_fetch(cwd, self._ctx.config.trunk_remote)

        trunk = self._changes.resolve_trunk()

        if not raw_before:
            logger.debug("Working copy is on trunk; nothing to rebase")
            return SyncResult(
                fetched=fetch,
                rebased=False,
                trunk_change_id=trunk.change_id,
                stack_size_after=0,
                conflicted=False,
            )

        base = raw_before[0]
        fork_point = base.parent_ids[0] if base.parent_ids else trunk_before.id
        if fork_point == trunk.id:
            logger.debug("Stack already sits on trunk %s", trunk.short_change_id)
            return SyncResult(
                fetched=fetch,
                rebased=False,
                trunk_change_id=trunk.change_id,
                stack_size_after=len(stack_before),
                conflicted=any(c.has_conflict for c in raw_before),
            )

        logger.debug("Rebasing %s onto %s", base.short_change_id, trunk.short_change_id)
        rebase_error: ConflictError | None = None
        try:
            jj.rebase(cwd, base.change_id, trunk.id)
        except ConflictError as e:
            rebase_error = e

        raw_after = self._changes.get_raw_stack(trunk)
        if any(c.has_conflict for c in raw_after):
            logger.debug("Conflicts after rebase; skipping merge detection")
            return SyncResult(
                fetched=fetch,
                rebased=True,
                trunk_change_id=trunk.change_id,
                stack_size_after=len([c for c in raw_after if not c.is_placeholder]),
                conflicted=True,
            )
        if rebase_error is not None:
            raise rebase_error

        abandoned = self._abandon_merged(stack_before, raw_after, fork_point, trunk)

        stack_after = self._changes.get_stack(trunk)
        fully_merged = bool(stack_before) and not stack_after
        cleaned_up = None
        if fully_merged:
            cleaned_up = self._cleanup_workspace(workspace_name)

        return SyncResult(
            fetched=fetch,
            rebased=True,
            trunk_change_id=trunk.change_id,
            stack_size_after=len(stack_after),
            conflicted=False,
            abandoned_merged_changes=abandoned,
            stack_fully_merged=fully_merged,
            cleaned_up_workspace=cleaned_up,
        )

    def _landed_titles(self, fork_point: str, trunk: Change) -> set[str]:
        landed = self._changes.get_log(f"{fork_point}..{trunk.id}")
        return {normalize_title(c.title) for c in landed if c.title}

    def _abandon_merged(
        self,
        stack_before: list[Change],
        raw_after: list[Change],
        fork_point: str,
        trunk: Change,
    ) -> list[AbandonedChange]:
        landed = self._landed_titles(fork_point, trunk)
        if not landed:
            return []

        rebased_by_id = {c.change_id: c for c in raw_after}
        abandoned: list[AbandonedChange] = []
        for before in stack_before:
            after = rebased_by_id.get(before.change_id)
            if after is None or not after.is_empty or not after.description.strip():
                continue
            if normalize_title(after.title) not in landed:
                continue
            logger.debug("Abandoning %s: already landed on trunk", after.short_change_id)
            self._ctx.jj.abandon(self._ctx.cwd, after.change_id)
            abandoned.append(AbandonedChange(change_id=after.change_id, title=after.title))
        return abandoned

    def _cleanup_workspace(self, workspace_name: str) -> str | None:
        """Forget the workspace that held a fully merged stack.

        The default workspace is never removed. Failures are logged and ignored:
        the sync itself has already succeeded.
        """
        if workspace_name == DEFAULT_WORKSPACE:
            return None
        if not self._ctx.config.auto_cleanup:
            logger.debug("Workspace cleanup disabled by workspace.auto_cleanup")
            return None
        try:
            self._workspaces.forget_workspace(workspace_name)
        except (ShipError, OSError) as e:
            logger.warning("Failed to clean up workspace %s: %s", workspace_name, e)
            return None
        return workspace_name

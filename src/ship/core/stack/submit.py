"""Publish a change: bookmark it, push it, and create or update its pull request.

Submit is deliberately not all-or-nothing. Once the bookmark is on the remote
the code is published, so a PR-service failure after the push yields a result
with pushed=True, status=None and a warning rather than an exception.
"""

import concurrent.futures
import logging

from ship.core.context import ShipContext
from ship.core.errors import (
    PrError,
    ShipError,
    SubmitError,
    SubscriptionError,
    TransientPrError,
)
from ship.core.github.types import CreatePrInput, PullRequest, UpdatePrInput
from ship.core.jj.types import Change
from ship.core.naming import sanitize_bookmark_name
from ship.core.retry import retry_with_backoff
from ship.core.stack.bookmarks import BookmarkManager
from ship.core.stack.changes import ChangeRepository
from ship.core.stack.types import SubmitInput, SubmitResult, SubmitStatus
from ship.core.stack.workspaces import WorkspaceManager

logger = logging.getLogger(__name__)

PR_LOOKUP_CONCURRENCY = 5


class SubmitCoordinator:
    def __init__(
        self,
        ctx: ShipContext,
        changes: ChangeRepository | None = None,
        bookmarks: BookmarkManager | None = None,
        workspaces: WorkspaceManager | None = None,
    ) -> None:
        self._ctx = ctx
        self._changes = changes if changes is not None else ChangeRepository(ctx)
        self._bookmarks = bookmarks if bookmarks is not None else BookmarkManager(ctx)
        self._workspaces = workspaces if workspaces is not None else WorkspaceManager(ctx)

    def submit(self, submit_input: SubmitInput) -> SubmitResult:
        """Submit the current change (or the change below a scratch working copy).

        Raises:
            SubmitError: If the change is conflicted, undescribed or empty
            BookmarkExistsError: If an explicitly requested bookmark points elsewhere
            PushError: If pushing the change's own bookmark fails
        """
        trunk = self._changes.resolve_trunk()
        raw_stack = self._changes.get_raw_stack(trunk)
        target = self._select_target(raw_stack)
        self._validate(target, raw_stack)

        abandoned = self._abandon_empty_changes(target, raw_stack)
        if abandoned:
            raw_stack = self._changes.get_raw_stack(trunk)
        below = self._changes_below(target, raw_stack)

        bookmark, created = self._ensure_bookmark(target, submit_input.bookmark)
        base = self._base_for(below)

        warnings: list[str] = []
        self._push_stack(below, warnings)
        logger.debug("Pushing %s", bookmark)
        self._ctx.jj.git_push(self._ctx.cwd, bookmark, self._ctx.config.trunk_remote)

        status, pr = self._create_or_update_pr(target, bookmark, base, submit_input, warnings)

        subscribed: list[int] = []
        if submit_input.subscriber_id is not None:
            subscribed = self._subscribe(submit_input.subscriber_id, below, pr, warnings)

        return SubmitResult(
            change_id=target.change_id,
            bookmark=bookmark,
            bookmark_created=created,
            base=base,
            pushed=True,
            status=status,
            pr=pr,
            warnings=warnings,
            abandoned_empty_changes=abandoned,
            subscribed_pr_numbers=subscribed,
        )

    # Target selection and validation

    def _select_target(self, raw_stack: list[Change]) -> Change:
        """@ itself, unless @ is a scratch change sitting on top of real work."""
        current = self._changes.get_current_change()
        if not current.is_placeholder:
            return current
        parent = self._changes.get_parent_change()
        stack_ids = {c.change_id for c in raw_stack}
        if parent is not None and parent.change_id in stack_ids:
            logger.debug("Working copy is a scratch change; submitting %s", parent.change_id)
            return parent
        return current

    def _validate(self, target: Change, raw_stack: list[Change]) -> None:
        if target.has_conflict:
            raise SubmitError(
                f"Change {target.short_change_id} has conflicts. Resolve them before submitting."
            )
        conflicted = [c for c in self._changes_below(target, raw_stack) if c.has_conflict]
        if conflicted:
            ids = ", ".join(c.short_change_id for c in conflicted)
            raise SubmitError(f"Stack has conflicted changes ({ids}). Resolve them first.")
        if not target.description.strip():
            raise SubmitError(
                f"Change {target.short_change_id} has no description. "
                "Use 'ship stack describe' to add one."
            )
        if target.is_empty:
            raise SubmitError(f"Change {target.short_change_id} has no changes to submit.")

    def _changes_below(self, target: Change, raw_stack: list[Change]) -> list[Change]:
        """Stack changes strictly below target, parent first."""
        ids = [c.change_id for c in raw_stack]
        if target.change_id not in ids:
            return []
        return raw_stack[: ids.index(target.change_id)]

    def _abandon_empty_changes(self, target: Change, raw_stack: list[Change]) -> list[str]:
        abandoned: list[str] = []
        for change in self._changes_below(target, raw_stack):
            if change.is_placeholder and not change.is_working_copy:
                logger.debug("Abandoning empty change %s", change.short_change_id)
                self._ctx.jj.abandon(self._ctx.cwd, change.change_id)
                abandoned.append(change.change_id)
        return abandoned

    # Bookmarks

    def _default_bookmark_name(self, target: Change) -> str:
        workspace_name = self._workspaces.get_current_workspace_name()
        metadata = self._workspaces.get_workspace_metadata(workspace_name)
        if metadata is not None and metadata.task_id is not None:
            branch_name = self._ctx.issues.get_branch_name(metadata.task_id)
            if branch_name:
                return sanitize_bookmark_name(branch_name)
        return sanitize_bookmark_name(target.title)

    def _ensure_bookmark(self, target: Change, requested: str | None) -> tuple[str, bool]:
        """Return (bookmark name, whether it was created now)."""
        if requested is not None:
            if requested in target.bookmarks:
                return requested, False
            self._bookmarks.create_bookmark(requested, target.change_id)
            return requested, True

        if target.bookmarks:
            return target.bookmarks[0], False

        name = self._default_bookmark_name(target)
        if self._bookmarks.exists(name):
            name = f"{name}-{target.short_change_id}"
        self._bookmarks.create_bookmark(name, target.change_id)
        return name, True

    def _base_for(self, below: list[Change]) -> str:
        """Nearest bookmarked ancestor within the stack, else the trunk branch."""
        for change in reversed(below):
            if change.bookmarks:
                return change.bookmarks[0]
        return self._ctx.config.trunk_branch

    # Remote

    def _push_stack(self, below: list[Change], warnings: list[str]) -> None:
        for change in below:
            for bookmark in change.bookmarks:
                try:
                    self._ctx.jj.git_push(self._ctx.cwd, bookmark, self._ctx.config.trunk_remote)
                except ShipError as e:
                    logger.warning("Failed to push %s: %s", bookmark, e.message)
                    warnings.append(f"Failed to push parent bookmark {bookmark}: {e.message}")

    def _lookup_pr(self, branch: str) -> PullRequest | None:
        @retry_with_backoff(self._ctx.time, retry_on=(TransientPrError,))
        def lookup() -> PullRequest | None:
            return self._ctx.github.get_pr_by_branch(self._ctx.repo_root, branch)

        return lookup()

    def _create_or_update_pr(
        self,
        target: Change,
        bookmark: str,
        base: str,
        submit_input: SubmitInput,
        warnings: list[str],
    ) -> tuple[SubmitStatus | None, PullRequest | None]:
        github = self._ctx.github
        repo_root = self._ctx.repo_root

        try:
            existing = self._lookup_pr(bookmark)
        except PrError as e:
            warnings.append(f"Pushed {bookmark}, but looking up its PR failed: {e.message}")
            return None, None

        if existing is not None and existing.state == "open":
            if submit_input.title is None and submit_input.body is None:
                return "exists", existing
            try:
                updated = github.update_pr(
                    repo_root,
                    existing.number,
                    UpdatePrInput(title=submit_input.title, body=submit_input.body),
                )
            except PrError as e:
                warnings.append(f"Failed to update PR #{existing.number}: {e.message}")
                return "exists", existing
            return "updated", updated

        draft = submit_input.draft if submit_input.draft is not None else self._ctx.config.pr_draft
        pr_input = CreatePrInput(
            title=submit_input.title or target.title,
            body=submit_input.body if submit_input.body is not None else _body_of(target),
            head=bookmark,
            base=base,
            draft=draft,
        )
        try:
            created = github.create_pr(repo_root, pr_input)
        except PrError as e:
            warnings.append(f"Pushed {bookmark}, but creating the PR failed: {e.message}")
            return None, None
        return "created", created

    def _subscribe(
        self,
        subscriber_id: str,
        below: list[Change],
        pr: PullRequest | None,
        warnings: list[str],
    ) -> list[int]:
        """Register subscriber_id for every PR in the stack. Never fails the submit."""
        subscriptions = self._ctx.subscriptions
        if not subscriptions.is_running():
            warnings.append("Webhook daemon is not running; skipped event subscription.")
            return []

        branches = [bookmark for change in below for bookmark in change.bookmarks]
        numbers = self._pr_numbers(branches)
        if pr is not None and pr.number not in numbers:
            numbers.append(pr.number)
        if not numbers:
            return []

        try:
            subscriptions.subscribe(subscriber_id, numbers)
        except SubscriptionError as e:
            logger.warning("Subscription failed: %s", e.message)
            warnings.append(f"Failed to subscribe to PR events: {e.message}")
            return []
        return numbers

    def _pr_numbers(self, branches: list[str]) -> list[int]:
        if not branches:
            return []
        github = self._ctx.github
        repo_root = self._ctx.repo_root
        with concurrent.futures.ThreadPoolExecutor(max_workers=PR_LOOKUP_CONCURRENCY) as executor:
            futures = [
                executor.submit(github.get_pr_by_branch, repo_root, branch) for branch in branches
            ]
            numbers: list[int] = []
            for branch, future in zip(branches, futures, strict=True):
                try:
                    found = future.result()
                except PrError as e:
                    logger.warning("PR lookup for %s failed: %s", branch, e.message)
                    continue
                if found is not None and found.state == "open":
                    numbers.append(found.number)
        return numbers


def _body_of(change: Change) -> str:
    """Description without its title line."""
    lines = change.description.strip().splitlines()
    return "\n".join(lines[1:]).strip()

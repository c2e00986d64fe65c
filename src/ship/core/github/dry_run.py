"""No-op wrapper for pull-request operations."""

from pathlib import Path

from ship.cli.output import user_output
from ship.core.github.abc import GitHub
from ship.core.github.types import CreatePrInput, PullRequest, UpdatePrInput


class DryRunGitHub(GitHub):
    """No-op wrapper for pull-request operations.

    Read operations are delegated to the wrapped implementation.
    Write operations print what would have run and return a synthetic result.
    """

    def __init__(self, wrapped: GitHub) -> None:
        self._wrapped = wrapped

    def create_pr(self, repo_root: Path, pr_input: CreatePrInput) -> PullRequest:
        draft = " --draft" if pr_input.draft else ""
        user_output(
            f"[DRY RUN] Would run: gh pr create --head {pr_input.head} "
            f"--base {pr_input.base}{draft}"
        )
        return PullRequest(
            number=0,
            title=pr_input.title,
            url="",
            state="open",
            head=pr_input.head,
            base=pr_input.base,
            is_draft=pr_input.draft,
        )

    def update_pr(self, repo_root: Path, number: int, pr_input: UpdatePrInput) -> PullRequest:
        user_output(f"[DRY RUN] Would run: gh pr edit {number}")
        return PullRequest(
            number=number,
            title=pr_input.title or "",
            url="",
            state="open",
            head="",
            base="",
        )

    def get_pr_by_branch(self, repo_root: Path, branch: str) -> PullRequest | None:
        return self._wrapped.get_pr_by_branch(repo_root, branch)

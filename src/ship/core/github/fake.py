"""Fake pull-request operations for testing.

FakeGitHub is an in-memory implementation that accepts pre-configured state
in its constructor. Construct instances directly with keyword arguments.
"""

from dataclasses import replace
from pathlib import Path

from ship.core.errors import PrError, TransientPrError
from ship.core.github.abc import GitHub
from ship.core.github.types import CreatePrInput, PullRequest, UpdatePrInput


class FakeGitHub(GitHub):
    """In-memory fake implementation of pull-request operations.

    This class has NO public setup methods. All state is provided via constructor
    using keyword arguments with sensible defaults (empty dicts).
    """

    def __init__(
        self,
        *,
        prs: dict[str, PullRequest] | None = None,
        create_failures: int = 0,
        update_failures: int = 0,
        lookup_failures: int = 0,
        lookup_error: PrError | None = None,
        next_pr_number: int = 100,
    ) -> None:
        """Create FakeGitHub with pre-configured state.

        Args:
            prs: Mapping of head branch name -> PullRequest
            create_failures: Number of create_pr() calls that fail before succeeding
            update_failures: Number of update_pr() calls that fail before succeeding
            lookup_failures: Number of get_pr_by_branch() calls that fail with a
                transient error before succeeding
            lookup_error: Raised by every get_pr_by_branch() call once any
                lookup_failures are used up
            next_pr_number: Number assigned to the next created PR
        """
        self._prs = dict(prs) if prs is not None else {}
        self._create_failures = create_failures
        self._update_failures = update_failures
        self._lookup_failures = lookup_failures
        self._lookup_error = lookup_error
        self._next_pr_number = next_pr_number
        self._created_prs: list[CreatePrInput] = []
        self._updated_prs: list[tuple[int, UpdatePrInput]] = []
        self._lookup_calls: list[str] = []

    @property
    def prs(self) -> dict[str, PullRequest]:
        """Current PRs keyed by head branch, for test assertions only."""
        return self._prs

    @property
    def created_prs(self) -> list[CreatePrInput]:
        """Inputs passed to successful create_pr() calls."""
        return self._created_prs

    @property
    def updated_prs(self) -> list[tuple[int, UpdatePrInput]]:
        """(number, input) pairs passed to successful update_pr() calls."""
        return self._updated_prs

    @property
    def lookup_calls(self) -> list[str]:
        """Branches passed to get_pr_by_branch(), including failed attempts."""
        return self._lookup_calls

    def create_pr(self, repo_root: Path, pr_input: CreatePrInput) -> PullRequest:
        if self._create_failures > 0:
            self._create_failures -= 1
            raise PrError(f"gh pr create failed: could not create PR for {pr_input.head}")

        number = self._next_pr_number
        self._next_pr_number += 1
        pr = PullRequest(
            number=number,
            title=pr_input.title,
            url=f"https://github.com/owner/repo/pull/{number}",
            state="open",
            head=pr_input.head,
            base=pr_input.base,
            is_draft=pr_input.draft,
        )
        self._prs[pr_input.head] = pr
        self._created_prs.append(pr_input)
        return pr

    def update_pr(self, repo_root: Path, number: int, pr_input: UpdatePrInput) -> PullRequest:
        if self._update_failures > 0:
            self._update_failures -= 1
            raise PrError(f"gh pr edit failed: could not update PR #{number}")

        for head, pr in self._prs.items():
            if pr.number == number:
                updated = pr
                if pr_input.title is not None:
                    updated = replace(updated, title=pr_input.title)
                self._prs[head] = updated
                self._updated_prs.append((number, pr_input))
                return updated

        raise PrError(f"gh pr edit failed: Could not resolve to a PullRequest #{number}")

    def get_pr_by_branch(self, repo_root: Path, branch: str) -> PullRequest | None:
        self._lookup_calls.append(branch)
        if self._lookup_failures > 0:
            self._lookup_failures -= 1
            raise TransientPrError("gh pr view failed: HTTP 502 Bad Gateway")
        if self._lookup_error is not None:
            raise self._lookup_error
        return self._prs.get(branch)

"""Pull-request service interface.

Only the three operations the submit flow consumes are modelled; review
threads, checks and merging are out of scope.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from ship.core.github.types import CreatePrInput, PullRequest, UpdatePrInput


class GitHub(ABC):
    """Abstract interface for pull-request operations.

    All implementations (real and fake) must implement this interface.
    """

    @abstractmethod
    def create_pr(self, repo_root: Path, pr_input: CreatePrInput) -> PullRequest:
        """Open a pull request for pr_input.head against pr_input.base."""
        ...

    @abstractmethod
    def update_pr(self, repo_root: Path, number: int, pr_input: UpdatePrInput) -> PullRequest:
        """Edit the title and/or body of an existing pull request."""
        ...

    @abstractmethod
    def get_pr_by_branch(self, repo_root: Path, branch: str) -> PullRequest | None:
        """Return the pull request whose head is branch, or None if there is none.

        Idempotent read; callers may retry it on PrError.
        """
        ...

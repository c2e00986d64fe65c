"""Result records returned by stack operations.

All records are frozen and carry enough identifiers (change id, bookmark,
workspace name and path) for a caller to render status without re-querying jj.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from ship.core.github.types import PullRequest
from ship.core.jj.types import Change

SubmitStatus = Literal["created", "updated", "exists"]

DEFAULT_WORKSPACE = "default"


@dataclass(frozen=True)
class ChangeSummary:
    change_id: str
    title: str

    @staticmethod
    def of(change: Change) -> "ChangeSummary":
        return ChangeSummary(change_id=change.change_id, title=change.title)


@dataclass(frozen=True)
class Workspace:
    """A jj workspace merged with ship's association metadata."""

    name: str
    path: Path | None
    change_id: str
    description: str
    is_default: bool
    stack_name: str | None = None
    task_id: str | None = None
    bookmark: str | None = None


@dataclass(frozen=True)
class NavigateResult:
    moved: bool
    from_change: ChangeSummary
    to_change: ChangeSummary | None
    message: str


@dataclass(frozen=True)
class AbandonedChange:
    change_id: str
    title: str


@dataclass(frozen=True)
class SyncResult:
    """Outcome of one sync or restack attempt. Returned once, never persisted."""

    fetched: bool
    rebased: bool
    trunk_change_id: str
    stack_size_after: int
    conflicted: bool
    abandoned_merged_changes: list[AbandonedChange] = field(default_factory=list)
    stack_fully_merged: bool = False
    cleaned_up_workspace: str | None = None


@dataclass(frozen=True)
class SubmitInput:
    """Options for a submit.

    Attributes:
        bookmark: Bookmark name to use; defaults to the change's existing bookmark
            or a name derived from its task or title
        draft: Open the PR as a draft; None uses the `pr.draft` config value
        title: PR title; defaults to the change title
        body: PR body; defaults to the description after its first line
        subscriber_id: Session to register for webhook events on the stack's PRs
    """

    bookmark: str | None = None
    draft: bool | None = None
    title: str | None = None
    body: str | None = None
    subscriber_id: str | None = None


@dataclass(frozen=True)
class SubmitResult:
    """Outcome of a submit.

    `pushed` can be True while `status` is None: the bookmark reached the remote
    but the PR step failed. The failure is described in `warnings`.
    """

    change_id: str
    bookmark: str
    bookmark_created: bool
    base: str
    pushed: bool
    status: SubmitStatus | None
    pr: PullRequest | None
    warnings: list[str] = field(default_factory=list)
    abandoned_empty_changes: list[str] = field(default_factory=list)
    subscribed_pr_numbers: list[int] = field(default_factory=list)


@dataclass(frozen=True)
class UndoResult:
    undone: bool
    operation: str


@dataclass(frozen=True)
class UpdateStaleResult:
    updated: bool
    change_id: str
    message: str


@dataclass(frozen=True)
class CreateResult:
    change_id: str
    title: str
    bookmark: str | None
    warnings: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class AbandonResult:
    abandoned: ChangeSummary
    working_copy: ChangeSummary

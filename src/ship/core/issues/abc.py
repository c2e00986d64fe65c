"""Issue tracker interface.

The stack engine consumes only two lookups from the tracker: the task a
workspace was created for, and the branch name the tracker suggests for it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class Task:
    """A tracked task (issue) as seen by the stack engine."""

    id: str
    identifier: str
    title: str
    url: str | None = None
    branch_name: str | None = None


class IssueTracker(ABC):
    """Abstract interface for issue tracker lookups."""

    @abstractmethod
    def get_task(self, task_id: str) -> Task | None:
        """Return the task, or None if the tracker does not know it."""
        ...

    @abstractmethod
    def get_branch_name(self, task_id: str) -> str | None:
        """Return the tracker's suggested branch name for the task."""
        ...

"""Fake issue tracker for testing."""

from ship.core.issues.abc import IssueTracker, Task


class FakeIssueTracker(IssueTracker):
    """In-memory issue tracker.

    This class has NO public setup methods. All state is provided via constructor.
    """

    def __init__(self, *, tasks: dict[str, Task] | None = None) -> None:
        self._tasks = dict(tasks) if tasks is not None else {}
        self._lookups: list[str] = []

    @property
    def lookups(self) -> list[str]:
        """Task ids passed to get_task() and get_branch_name()."""
        return self._lookups

    def get_task(self, task_id: str) -> Task | None:
        self._lookups.append(task_id)
        return self._tasks.get(task_id)

    def get_branch_name(self, task_id: str) -> str | None:
        self._lookups.append(task_id)
        task = self._tasks.get(task_id)
        if task is None:
            return None
        return task.branch_name

"""Issue tracker used when no tracker is configured."""

from ship.core.issues.abc import IssueTracker, Task


class NoopIssueTracker(IssueTracker):
    """Knows no tasks; bookmark names fall back to change titles."""

    def get_task(self, task_id: str) -> Task | None:
        return None

    def get_branch_name(self, task_id: str) -> str | None:
        return None

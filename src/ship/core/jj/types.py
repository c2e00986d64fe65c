"""Type definitions for jj operations."""

from dataclasses import dataclass
from datetime import datetime

from ship.core.naming import first_line

ROOT_COMMIT_ID = "0" * 40
ROOT_CHANGE_ID = "z" * 32


@dataclass(frozen=True)
class Change:
    """A jj change as seen through `jj log`.

    `id` is the commit id and changes whenever the change is rewritten;
    `change_id` is stable across rebases and amends.
    """

    id: str
    change_id: str
    description: str
    author: str
    timestamp: datetime | None
    bookmarks: tuple[str, ...]
    is_working_copy: bool
    is_empty: bool
    has_conflict: bool
    parent_ids: tuple[str, ...]

    @property
    def title(self) -> str:
        return first_line(self.description)

    @property
    def short_change_id(self) -> str:
        return self.change_id[:8]

    @property
    def is_root(self) -> bool:
        return self.id == ROOT_COMMIT_ID

    @property
    def is_placeholder(self) -> bool:
        """Empty, undescribed and unbookmarked: jj's scratch working-copy change."""
        return self.is_empty and not self.description.strip() and not self.bookmarks


@dataclass(frozen=True)
class WorkspaceInfo:
    """A workspace as reported by `jj workspace list`."""

    name: str
    change_id: str
    commit_id: str
    description: str


@dataclass(frozen=True)
class OperationInfo:
    """An entry of the jj operation log."""

    id: str
    description: str


@dataclass(frozen=True)
class StaleUpdate:
    """Outcome of `jj workspace update-stale`."""

    updated: bool
    message: str

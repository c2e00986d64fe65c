"""High-level jj operations interface.

Architecture:
- Jj: Abstract base class defining the interface
- RealJj: Production implementation running the jj binary
- FakeJj: In-memory change graph for tests
- DryRunJj: Wrapper that delegates reads and skips mutations

Every method takes the directory to run in, because the active workspace (and
therefore `@`) is determined by the working directory.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from ship.core.jj.types import Change, OperationInfo, StaleUpdate, WorkspaceInfo


class Jj(ABC):
    """Abstract interface for jj operations.

    All implementations (real and fake) must implement this interface.
    This interface contains ONLY runtime operations - no test setup methods.
    """

    # Repository

    @abstractmethod
    def get_repo_root(self, cwd: Path) -> Path | None:
        """Return the workspace root containing cwd, or None outside a jj repo."""
        ...

    # History reads

    @abstractmethod
    def log(self, cwd: Path, revset: str) -> list[Change]:
        """Return the changes matching revset, children before parents."""
        ...

    @abstractmethod
    def list_bookmarks(self, cwd: Path) -> list[str]:
        """Return the names of all local bookmarks."""
        ...

    @abstractmethod
    def get_last_operation(self, cwd: Path) -> OperationInfo | None:
        """Return the most recent entry of the operation log."""
        ...

    # Change mutations

    @abstractmethod
    def new(self, cwd: Path, message: str | None, revision: str = "@") -> None:
        """Create a new change on top of revision and make it the working copy."""
        ...

    @abstractmethod
    def describe(self, cwd: Path, message: str, revision: str = "@") -> None:
        """Set the description of revision."""
        ...

    @abstractmethod
    def edit(self, cwd: Path, revision: str) -> None:
        """Make revision the working-copy change."""
        ...

    @abstractmethod
    def abandon(self, cwd: Path, revision: str) -> None:
        """Abandon revision, rebasing its descendants onto its parent."""
        ...

    @abstractmethod
    def squash(self, cwd: Path, message: str) -> None:
        """Move the working-copy change's content into its parent."""
        ...

    @abstractmethod
    def rebase(self, cwd: Path, source: str, destination: str) -> None:
        """Rebase source and its descendants onto destination."""
        ...

    # Remote

    @abstractmethod
    def git_fetch(self, cwd: Path, remote: str) -> None:
        """Fetch from the git remote."""
        ...

    @abstractmethod
    def git_push(self, cwd: Path, bookmark: str, remote: str) -> None:
        """Push a single bookmark to the git remote, creating it if new."""
        ...

    # Bookmarks

    @abstractmethod
    def create_bookmark(self, cwd: Path, name: str, revision: str) -> None:
        """Create a bookmark at revision."""
        ...

    @abstractmethod
    def move_bookmark(self, cwd: Path, name: str, revision: str) -> None:
        """Point an existing bookmark at revision."""
        ...

    @abstractmethod
    def delete_bookmark(self, cwd: Path, name: str) -> None:
        """Delete a local bookmark."""
        ...

    # Workspaces

    @abstractmethod
    def list_workspaces(self, cwd: Path) -> list[WorkspaceInfo]:
        """Return all workspaces known to the repository."""
        ...

    @abstractmethod
    def add_workspace(self, cwd: Path, name: str, path: Path, revision: str | None) -> None:
        """Create a workspace named name at path."""
        ...

    @abstractmethod
    def forget_workspace(self, cwd: Path, name: str) -> None:
        """Stop tracking a workspace. The directory is left in place."""
        ...

    # Recovery

    @abstractmethod
    def update_stale(self, cwd: Path) -> StaleUpdate:
        """Refresh a stale working copy; reports whether anything changed."""
        ...

    @abstractmethod
    def undo(self, cwd: Path) -> None:
        """Undo the most recent operation."""
        ...

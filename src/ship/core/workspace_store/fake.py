"""In-memory workspace metadata storage for tests."""

from pathlib import Path

from ship.core.workspace_store.abc import WorkspaceMetadataStore
from ship.core.workspace_store.types import WorkspaceMetadata


class FakeWorkspaceMetadataStore(WorkspaceMetadataStore):
    """Keeps associations in a dict keyed by workspace name.

    The repo_root argument is ignored: one fake serves one repository.
    This class has NO public setup methods. All state is provided via constructor.
    """

    def __init__(
        self,
        *,
        workspaces: list[WorkspaceMetadata] | None = None,
        remove_error: Exception | None = None,
    ) -> None:
        """remove_error, when set, is raised by every remove() call."""
        self._workspaces = {m.name: m for m in workspaces or []}
        self._remove_error = remove_error
        self._removed: list[str] = []

    @property
    def workspaces(self) -> dict[str, WorkspaceMetadata]:
        return dict(self._workspaces)

    @property
    def removed(self) -> list[str]:
        """Names passed to successful remove() calls."""
        return list(self._removed)

    def list_metadata(self, repo_root: Path) -> list[WorkspaceMetadata]:
        return list(self._workspaces.values())

    def get(self, repo_root: Path, name: str) -> WorkspaceMetadata | None:
        return self._workspaces.get(name)

    def put(self, repo_root: Path, metadata: WorkspaceMetadata) -> None:
        self._workspaces[metadata.name] = metadata

    def remove(self, repo_root: Path, name: str) -> bool:
        if self._remove_error is not None:
            raise self._remove_error
        if name not in self._workspaces:
            return False
        del self._workspaces[name]
        self._removed.append(name)
        return True

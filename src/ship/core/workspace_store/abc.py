"""Workspace association metadata storage.

jj itself only knows a workspace's name and working copy. Which stack or task
a workspace was created for is kept by ship, per repository.
"""

from abc import ABC, abstractmethod
from pathlib import Path

from ship.core.workspace_store.types import WorkspaceMetadata


class WorkspaceMetadataStore(ABC):
    """Abstract interface for workspace metadata persistence."""

    @abstractmethod
    def list_metadata(self, repo_root: Path) -> list[WorkspaceMetadata]:
        """Return every stored association for the repository."""
        ...

    @abstractmethod
    def get(self, repo_root: Path, name: str) -> WorkspaceMetadata | None:
        ...

    @abstractmethod
    def put(self, repo_root: Path, metadata: WorkspaceMetadata) -> None:
        """Insert or replace the association for metadata.name."""
        ...

    @abstractmethod
    def remove(self, repo_root: Path, name: str) -> bool:
        """Drop the association for name. Returns True if one existed."""
        ...

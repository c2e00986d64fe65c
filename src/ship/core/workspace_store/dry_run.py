"""No-op wrapper for workspace metadata storage."""

from pathlib import Path

from ship.cli.output import user_output
from ship.core.workspace_store.abc import WorkspaceMetadataStore
from ship.core.workspace_store.types import WorkspaceMetadata


class DryRunWorkspaceMetadataStore(WorkspaceMetadataStore):
    """Reads delegate to the wrapped store; writes print and return."""

    def __init__(self, wrapped: WorkspaceMetadataStore) -> None:
        self._wrapped = wrapped

    def list_metadata(self, repo_root: Path) -> list[WorkspaceMetadata]:
        return self._wrapped.list_metadata(repo_root)

    def get(self, repo_root: Path, name: str) -> WorkspaceMetadata | None:
        return self._wrapped.get(repo_root, name)

    def put(self, repo_root: Path, metadata: WorkspaceMetadata) -> None:
        user_output(f"[DRY RUN] Would record workspace '{metadata.name}' in .ship/workspaces.json")

    def remove(self, repo_root: Path, name: str) -> bool:
        user_output(f"[DRY RUN] Would remove workspace '{name}' from .ship/workspaces.json")
        return self._wrapped.get(repo_root, name) is not None

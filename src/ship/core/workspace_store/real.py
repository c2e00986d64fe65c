"""JSON file implementation of workspace metadata storage."""

import json
from pathlib import Path

from pydantic import ValidationError

from ship.core.errors import WorkspaceStoreError
from ship.core.workspace_store.abc import WorkspaceMetadataStore
from ship.core.workspace_store.types import WorkspaceMetadata, WorkspacesFile

WORKSPACES_FILE = Path(".ship") / "workspaces.json"


class JsonWorkspaceMetadataStore(WorkspaceMetadataStore):
    """Stores associations in `<repo_root>/.ship/workspaces.json`.

    Filesystem and schema failures surface as WorkspaceStoreError.
    """

    def _path(self, repo_root: Path) -> Path:
        return repo_root / WORKSPACES_FILE

    def _load(self, repo_root: Path) -> WorkspacesFile:
        path = self._path(repo_root)
        if not path.exists():
            return WorkspacesFile()
        try:
            return WorkspacesFile.model_validate_json(path.read_text(encoding="utf-8"))
        except OSError as e:
            raise WorkspaceStoreError(path, e.strerror or str(e)) from e
        except ValidationError as e:
            raise WorkspaceStoreError(path, f"{e.error_count()} validation error(s)") from e

    def _save(self, repo_root: Path, data: WorkspacesFile) -> None:
        """Write atomically: temp file first, then rename over the target."""
        path = self._path(repo_root)
        temp_path = path.with_suffix(".json.tmp")
        payload = data.model_dump(mode="json", exclude_none=True)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with temp_path.open("w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, sort_keys=True)
                f.write("\n")
            temp_path.replace(path)
        except OSError as e:
            raise WorkspaceStoreError(path, e.strerror or str(e)) from e

    def list_metadata(self, repo_root: Path) -> list[WorkspaceMetadata]:
        return list(self._load(repo_root).workspaces)

    def get(self, repo_root: Path, name: str) -> WorkspaceMetadata | None:
        for metadata in self._load(repo_root).workspaces:
            if metadata.name == name:
                return metadata
        return None

    def put(self, repo_root: Path, metadata: WorkspaceMetadata) -> None:
        existing = [m for m in self._load(repo_root).workspaces if m.name != metadata.name]
        self._save(repo_root, WorkspacesFile(workspaces=[*existing, metadata]))

    def remove(self, repo_root: Path, name: str) -> bool:
        current = self._load(repo_root).workspaces
        remaining = [m for m in current if m.name != name]
        if len(remaining) == len(current):
            return False
        self._save(repo_root, WorkspacesFile(workspaces=remaining))
        return True

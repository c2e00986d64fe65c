"""Workspace lifecycle: create, list, forget, and the explicit directory delete."""

import logging
import os
import shutil
from pathlib import Path

from ship.cli.output import user_output
from ship.core.config import resolve_workspace_path
from ship.core.context import ShipContext
from ship.core.errors import (
    DefaultWorkspaceError,
    WorkspaceExistsError,
    WorkspaceNotFoundError,
    WorkspacePathError,
)
from ship.core.jj.types import WorkspaceInfo
from ship.core.repo_discovery import NoRepoSentinel
from ship.core.stack.types import DEFAULT_WORKSPACE, Workspace
from ship.core.workspace_store.types import WorkspaceMetadata

logger = logging.getLogger(__name__)


class WorkspaceManager:
    """Creates and forgets jj workspaces and keeps their association metadata.

    Forgetting a workspace never deletes its directory; delete_workspace_directory()
    is the separate, explicit step.
    """

    def __init__(self, ctx: ShipContext) -> None:
        self._ctx = ctx

    @property
    def _repo_root(self) -> Path:
        return self._ctx.repo_root

    def _to_workspace(self, info: WorkspaceInfo, metadata: WorkspaceMetadata | None) -> Workspace:
        is_default = info.name == DEFAULT_WORKSPACE
        path: Path | None
        if is_default:
            path = self._repo_root
        elif metadata is not None:
            path = Path(metadata.path)
        else:
            path = None
        return Workspace(
            name=info.name,
            path=path,
            change_id=info.change_id,
            description=info.description,
            is_default=is_default,
            stack_name=metadata.stack_name if metadata else None,
            task_id=metadata.task_id if metadata else None,
            bookmark=metadata.bookmark if metadata else None,
        )

    def list_workspaces(self) -> list[Workspace]:
        """Backend workspaces merged with stored metadata, default first.

        Metadata for workspaces jj no longer knows about is pruned.
        """
        infos = self._ctx.jj.list_workspaces(self._ctx.cwd)
        known = {info.name for info in infos}
        metadata_by_name: dict[str, WorkspaceMetadata] = {}
        for metadata in self._ctx.workspace_store.list_metadata(self._repo_root):
            if metadata.name in known:
                metadata_by_name[metadata.name] = metadata
            else:
                logger.debug("Pruning metadata for vanished workspace %s", metadata.name)
                self._ctx.workspace_store.remove(self._repo_root, metadata.name)

        workspaces = [self._to_workspace(info, metadata_by_name.get(info.name)) for info in infos]
        if DEFAULT_WORKSPACE not in known:
            workspaces.append(
                Workspace(
                    name=DEFAULT_WORKSPACE,
                    path=self._repo_root,
                    change_id="",
                    description="",
                    is_default=True,
                )
            )
        return sorted(workspaces, key=lambda w: (not w.is_default, w.name))

    def get_workspace(self, name: str) -> Workspace | None:
        for workspace in self.list_workspaces():
            if workspace.name == name:
                return workspace
        return None

    def get_workspace_metadata(self, name: str) -> WorkspaceMetadata | None:
        return self._ctx.workspace_store.get(self._repo_root, name)

    def get_current_workspace_name(self) -> str:
        """Name of the workspace containing the current directory.

        jj does not report this directly; it is matched through the working-copy
        change, then the stored workspace path.
        """
        current_change_id = self._ctx.jj.log(self._ctx.cwd, "@")[0].change_id
        infos = self._ctx.jj.list_workspaces(self._ctx.cwd)
        matches = [info.name for info in infos if info.change_id == current_change_id]
        if len(matches) == 1:
            return matches[0]

        repo = self._ctx.repo
        if not isinstance(repo, NoRepoSentinel):
            if repo.workspace_root == repo.root:
                return DEFAULT_WORKSPACE
            for metadata in self._ctx.workspace_store.list_metadata(self._repo_root):
                if Path(metadata.path) == repo.workspace_root:
                    return metadata.name

        if matches:
            return matches[0]
        return DEFAULT_WORKSPACE

    def is_non_default_workspace(self) -> bool:
        return self.get_current_workspace_name() != DEFAULT_WORKSPACE

    def create_workspace(
        self,
        name: str,
        path: Path | None = None,
        *,
        stack_name: str | None = None,
        task_id: str | None = None,
        bookmark: str | None = None,
        revision: str | None = None,
    ) -> Workspace:
        """Create a workspace and record what it was created for.

        Args:
            name: Workspace name; "default" is reserved
            path: Target directory; defaults to the configured `workspace.base_path`
            stack_name: Stack this workspace holds; defaults to name
            task_id: Issue-tracker task the workspace was created for
            bookmark: Bookmark the stack is expected to be published under
            revision: Revision the new working copy starts on; defaults to jj's
                choice (the parent of the current working copy)

        Raises:
            WorkspaceExistsError: If the name is taken
            WorkspacePathError: If path exists and is not an empty directory
        """
        if name == DEFAULT_WORKSPACE:
            raise WorkspaceExistsError(name)
        infos = self._ctx.jj.list_workspaces(self._ctx.cwd)
        if any(info.name == name for info in infos):
            raise WorkspaceExistsError(name)

        if path is None:
            user = os.environ.get("USER", "user")
            path = resolve_workspace_path(self._ctx.config, self._repo_root, name, user)
        if path.exists() and (not path.is_dir() or any(path.iterdir())):
            raise WorkspacePathError(path)

        logger.debug("Creating workspace %s at %s", name, path)
        self._ctx.jj.add_workspace(self._ctx.cwd, name, path, revision)

        metadata = WorkspaceMetadata(
            name=name,
            path=str(path),
            stack_name=stack_name or name,
            bookmark=bookmark,
            task_id=task_id,
            created_at=self._ctx.time.now(),
        )
        self._ctx.workspace_store.put(self._repo_root, metadata)

        for info in self._ctx.jj.list_workspaces(self._ctx.cwd):
            if info.name == name:
                return self._to_workspace(info, metadata)
        # Only reachable in dry-run mode, where jj was not asked to create anything
        return Workspace(
            name=name,
            path=path,
            change_id="",
            description="",
            is_default=False,
            stack_name=metadata.stack_name,
            task_id=task_id,
            bookmark=bookmark,
        )

    def forget_workspace(self, name: str) -> Workspace:
        """Stop tracking a workspace and drop its metadata.

        The directory is left in place and returned in the result so the caller
        can delete it explicitly.

        Raises:
            DefaultWorkspaceError: If name is "default"
            WorkspaceNotFoundError: If neither jj nor the metadata store knows name
        """
        if name == DEFAULT_WORKSPACE:
            raise DefaultWorkspaceError()

        info = next(
            (i for i in self._ctx.jj.list_workspaces(self._ctx.cwd) if i.name == name), None
        )
        metadata = self._ctx.workspace_store.get(self._repo_root, name)
        if info is None and metadata is None:
            raise WorkspaceNotFoundError(name)

        if info is not None:
            self._ctx.jj.forget_workspace(self._ctx.cwd, name)
            workspace = self._to_workspace(info, metadata)
        else:
            logger.debug("Workspace %s only exists in metadata", name)
            workspace = Workspace(
                name=name,
                path=Path(metadata.path) if metadata else None,
                change_id="",
                description="",
                is_default=False,
                stack_name=metadata.stack_name if metadata else None,
                task_id=metadata.task_id if metadata else None,
                bookmark=metadata.bookmark if metadata else None,
            )
        self._ctx.workspace_store.remove(self._repo_root, name)
        return workspace

    def delete_workspace_directory(self, path: Path) -> bool:
        """Delete a forgotten workspace's directory. Returns False if it was already gone.

        Raises:
            DefaultWorkspaceError: If path is the primary workspace root
        """
        if path.resolve() == self._repo_root.resolve():
            raise DefaultWorkspaceError()
        if not path.exists():
            return False
        if self._ctx.dry_run:
            user_output(f"[DRY RUN] Would delete directory: {path}")
            return True
        shutil.rmtree(path)
        return True

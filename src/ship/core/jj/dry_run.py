"""No-op jj wrapper for dry-run mode.

Read-only operations are delegated to the wrapped implementation so commands
can still validate state; mutating operations print what would have run.
"""

from pathlib import Path

from ship.cli.output import user_output
from ship.core.jj.abc import Jj
from ship.core.jj.types import Change, OperationInfo, StaleUpdate, WorkspaceInfo


class DryRunJj(Jj):
    """No-op wrapper that prevents execution of mutating jj operations.

    Usage:
        real_ops = RealJj()
        noop_ops = DryRunJj(real_ops)

        # Prints "[DRY RUN] Would run: jj rebase ..." instead of rebasing
        noop_ops.rebase(cwd, "abc", "main@origin")
    """

    def __init__(self, wrapped: Jj) -> None:
        self._wrapped = wrapped

    def _would_run(self, *args: str) -> None:
        user_output(f"[DRY RUN] Would run: jj {' '.join(args)}")

    # Read-only operations: delegate to wrapped implementation

    def get_repo_root(self, cwd: Path) -> Path | None:
        return self._wrapped.get_repo_root(cwd)

    def log(self, cwd: Path, revset: str) -> list[Change]:
        return self._wrapped.log(cwd, revset)

    def list_bookmarks(self, cwd: Path) -> list[str]:
        return self._wrapped.list_bookmarks(cwd)

    def get_last_operation(self, cwd: Path) -> OperationInfo | None:
        return self._wrapped.get_last_operation(cwd)

    def list_workspaces(self, cwd: Path) -> list[WorkspaceInfo]:
        return self._wrapped.list_workspaces(cwd)

    # Mutating operations: print dry-run message instead of executing

    def new(self, cwd: Path, message: str | None, revision: str = "@") -> None:
        if message is None:
            self._would_run("new", revision)
        else:
            self._would_run("new", revision, "-m", repr(message))

    def describe(self, cwd: Path, message: str, revision: str = "@") -> None:
        self._would_run("describe", revision, "-m", repr(message))

    def edit(self, cwd: Path, revision: str) -> None:
        self._would_run("edit", revision)

    def abandon(self, cwd: Path, revision: str) -> None:
        self._would_run("abandon", revision)

    def squash(self, cwd: Path, message: str) -> None:
        self._would_run("squash", "-m", repr(message))

    def rebase(self, cwd: Path, source: str, destination: str) -> None:
        self._would_run("rebase", "-s", source, "-d", destination)

    def git_fetch(self, cwd: Path, remote: str) -> None:
        self._would_run("git", "fetch", "--remote", remote)

    def git_push(self, cwd: Path, bookmark: str, remote: str) -> None:
        self._would_run("git", "push", "--remote", remote, "--bookmark", bookmark, "--allow-new")

    def create_bookmark(self, cwd: Path, name: str, revision: str) -> None:
        self._would_run("bookmark", "create", name, "-r", revision)

    def move_bookmark(self, cwd: Path, name: str, revision: str) -> None:
        self._would_run("bookmark", "move", name, "--to", revision)

    def delete_bookmark(self, cwd: Path, name: str) -> None:
        self._would_run("bookmark", "delete", name)

    def add_workspace(self, cwd: Path, name: str, path: Path, revision: str | None) -> None:
        self._would_run("workspace", "add", "--name", name, str(path))

    def forget_workspace(self, cwd: Path, name: str) -> None:
        self._would_run("workspace", "forget", name)

    def update_stale(self, cwd: Path) -> StaleUpdate:
        self._would_run("workspace", "update-stale")
        return StaleUpdate(updated=False, message="Nothing to do (dry run).")

    def undo(self, cwd: Path) -> None:
        self._would_run("undo")

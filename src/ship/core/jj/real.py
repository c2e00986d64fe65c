"""Production implementation of jj operations."""

import subprocess
from collections.abc import Sequence
from pathlib import Path

from ship.core.errors import JjNotInstalledError, NotARepoError, looks_like_error, map_jj_error
from ship.core.jj.abc import Jj
from ship.core.jj.parsing import (
    BOOKMARK_TEMPLATE,
    LOG_TEMPLATE,
    OPERATION_TEMPLATE,
    WORKSPACE_TEMPLATE,
    parse_bookmark_list,
    parse_log_output,
    parse_operation,
    parse_update_stale,
    parse_workspace_list,
)
from ship.core.jj.types import Change, OperationInfo, StaleUpdate, WorkspaceInfo
from ship.core.subprocess import run_subprocess_with_context


class RealJj(Jj):
    """Production implementation running the jj binary.

    Only stdout is parsed. jj reports status and warnings on stderr even when it
    succeeds, so stderr is consulted only for commands whose outcome is reported
    there (push, fetch, update-stale).
    """

    def run(self, args: Sequence[str], cwd: Path) -> str:
        """Run `jj <args>` in cwd and return stdout.

        Raises:
            BackendError: (or a subclass) on non-zero exit, with stderr attached
            JjNotInstalledError: If jj is not on PATH
        """
        return self._run(args, cwd).stdout

    def _run(self, args: Sequence[str], cwd: Path) -> subprocess.CompletedProcess[str]:
        command = " ".join(args)
        return run_subprocess_with_context(
            ["jj", "--color=never", *args],
            operation_context=f"run jj {command}",
            cwd=cwd,
            error_mapper=lambda stdout, stderr, code: map_jj_error(
                stderr or stdout, command, code
            ),
            not_found_error=lambda: JjNotInstalledError(command),
        )

    def _run_checked(self, args: Sequence[str], cwd: Path) -> str:
        """Run a command whose failures can surface with exit code 0."""
        result = self._run(args, cwd)
        combined = f"{result.stdout}{result.stderr}"
        if looks_like_error(combined):
            raise map_jj_error(combined, " ".join(args), result.returncode)
        return combined

    def get_repo_root(self, cwd: Path) -> Path | None:
        try:
            stdout = self.run(["root"], cwd)
        except NotARepoError:
            return None
        return Path(stdout.strip())

    def log(self, cwd: Path, revset: str) -> list[Change]:
        stdout = self.run(["log", "-r", revset, "--no-graph", "-T", LOG_TEMPLATE], cwd)
        return parse_log_output(stdout)

    def list_bookmarks(self, cwd: Path) -> list[str]:
        stdout = self.run(["bookmark", "list", "-T", BOOKMARK_TEMPLATE], cwd)
        return parse_bookmark_list(stdout)

    def get_last_operation(self, cwd: Path) -> OperationInfo | None:
        stdout = self.run(["op", "log", "-n", "1", "--no-graph", "-T", OPERATION_TEMPLATE], cwd)
        return parse_operation(stdout)

    def new(self, cwd: Path, message: str | None, revision: str = "@") -> None:
        args = ["new", revision]
        if message is not None:
            args.extend(["-m", message])
        self.run(args, cwd)

    def describe(self, cwd: Path, message: str, revision: str = "@") -> None:
        self.run(["describe", revision, "-m", message], cwd)

    def edit(self, cwd: Path, revision: str) -> None:
        self.run(["edit", revision], cwd)

    def abandon(self, cwd: Path, revision: str) -> None:
        self.run(["abandon", revision], cwd)

    def squash(self, cwd: Path, message: str) -> None:
        self.run(["squash", "-m", message], cwd)

    def rebase(self, cwd: Path, source: str, destination: str) -> None:
        self.run(["rebase", "-s", source, "-d", destination], cwd)

    def git_fetch(self, cwd: Path, remote: str) -> None:
        self._run_checked(["git", "fetch", "--remote", remote], cwd)

    def git_push(self, cwd: Path, bookmark: str, remote: str) -> None:
        self._run_checked(
            ["git", "push", "--remote", remote, "--bookmark", bookmark, "--allow-new"], cwd
        )

    def create_bookmark(self, cwd: Path, name: str, revision: str) -> None:
        self.run(["bookmark", "create", name, "-r", revision], cwd)

    def move_bookmark(self, cwd: Path, name: str, revision: str) -> None:
        self.run(["bookmark", "move", name, "--to", revision, "--allow-backwards"], cwd)

    def delete_bookmark(self, cwd: Path, name: str) -> None:
        self.run(["bookmark", "delete", name], cwd)

    def list_workspaces(self, cwd: Path) -> list[WorkspaceInfo]:
        stdout = self.run(["workspace", "list", "-T", WORKSPACE_TEMPLATE], cwd)
        return parse_workspace_list(stdout)

    def add_workspace(self, cwd: Path, name: str, path: Path, revision: str | None) -> None:
        args = ["workspace", "add", "--name", name, str(path)]
        if revision is not None:
            args.extend(["-r", revision])
        self.run(args, cwd)

    def forget_workspace(self, cwd: Path, name: str) -> None:
        self.run(["workspace", "forget", name], cwd)

    def update_stale(self, cwd: Path) -> StaleUpdate:
        result = self._run(["workspace", "update-stale"], cwd)
        return parse_update_stale(f"{result.stdout}{result.stderr}")

    def undo(self, cwd: Path) -> None:
        self.run(["undo"], cwd)

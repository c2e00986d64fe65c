"""Repository discovery functionality.

Discovers jj repository information from a given path without requiring the
full ShipContext (enables config loading before context creation).
"""

from dataclasses import dataclass
from pathlib import Path

from ship.core.jj.abc import Jj

SHIP_DIR_NAME = ".ship"


@dataclass(frozen=True)
class RepoContext:
    """A jj repository as seen from the current workspace.

    `root` is the primary (default) workspace, where `.ship/` lives;
    `workspace_root` is the workspace containing the current directory.
    """

    root: Path
    workspace_root: Path
    repo_name: str
    ship_dir: Path  # <root>/.ship


@dataclass(frozen=True)
class NoRepoSentinel:
    """Sentinel value indicating execution outside a jj repository.

    Commands that require repo context check for this sentinel and fail fast.
    """

    message: str = "Not inside a jj repository"


def _primary_root(workspace_root: Path) -> Path:
    """Follow a secondary workspace's `.jj/repo` pointer back to the primary workspace.

    Secondary workspaces store the path of the shared `.jj/repo` directory in a
    file; the primary workspace has the directory itself.
    """
    repo_pointer = workspace_root / ".jj" / "repo"
    if not repo_pointer.is_file():
        return workspace_root
    target = Path(repo_pointer.read_text(encoding="utf-8").strip())
    if not target.is_absolute():
        target = (repo_pointer.parent / target).resolve()
    return target.parent.parent


def discover_repo_or_sentinel(cwd: Path, jj: Jj) -> RepoContext | NoRepoSentinel:
    """Ask jj for the workspace root containing cwd.

    Returns a RepoContext, or NoRepoSentinel if cwd is not inside a jj repo.
    """
    workspace_root = jj.get_repo_root(cwd)
    if workspace_root is None:
        return NoRepoSentinel(message=f"Not inside a jj repository: {cwd}")

    root = _primary_root(workspace_root)
    return RepoContext(
        root=root,
        workspace_root=workspace_root,
        repo_name=root.name,
        ship_dir=root / SHIP_DIR_NAME,
    )

"""Application context with dependency injection."""

from dataclasses import dataclass
from pathlib import Path

import click

from ship.cli.output import user_output
from ship.core.config import ShipConfig, load_config
from ship.core.errors import JjNotInstalledError
from ship.core.github.abc import GitHub
from ship.core.github.dry_run import DryRunGitHub
from ship.core.github.real import RealGitHub
from ship.core.issues.abc import IssueTracker
from ship.core.issues.noop import NoopIssueTracker
from ship.core.jj.abc import Jj
from ship.core.jj.dry_run import DryRunJj
from ship.core.jj.real import RealJj
from ship.core.repo_discovery import NoRepoSentinel, RepoContext, discover_repo_or_sentinel
from ship.core.subscriptions.abc import EventSubscriptions
from ship.core.subscriptions.dry_run import DryRunEventSubscriptions
from ship.core.subscriptions.real import SocketEventSubscriptions
from ship.core.time.abc import Time
from ship.core.time.real import RealTime
from ship.core.workspace_store.abc import WorkspaceMetadataStore
from ship.core.workspace_store.dry_run import DryRunWorkspaceMetadataStore
from ship.core.workspace_store.real import JsonWorkspaceMetadataStore


@dataclass(frozen=True)
class ShipContext:
    """Immutable context holding all dependencies for ship operations.

    Created at CLI entry point and threaded through the application.
    Frozen to prevent accidental modification at runtime.
    """

    jj: Jj
    github: GitHub
    issues: IssueTracker
    subscriptions: EventSubscriptions
    workspace_store: WorkspaceMetadataStore
    time: Time
    cwd: Path  # Current working directory at CLI invocation
    config: ShipConfig
    repo: RepoContext | NoRepoSentinel
    dry_run: bool

    @property
    def repo_root(self) -> Path:
        """Primary workspace root, or cwd when outside a repository."""
        if isinstance(self.repo, NoRepoSentinel):
            return self.cwd
        return self.repo.root

    @staticmethod
    def for_test(
        jj: Jj | None = None,
        github: GitHub | None = None,
        issues: IssueTracker | None = None,
        subscriptions: EventSubscriptions | None = None,
        workspace_store: WorkspaceMetadataStore | None = None,
        time: Time | None = None,
        cwd: Path | None = None,
        config: ShipConfig | None = None,
        repo: RepoContext | NoRepoSentinel | None = None,
        dry_run: bool = False,
    ) -> "ShipContext":
        """Create test context with optional pre-configured integration classes.

        Unspecified integrations default to empty fakes. When repo is None it is
        discovered from cwd through the given jj, so a FakeJj rooted at cwd yields
        a RepoContext without further setup.

        Args:
            jj: Optional Jj implementation. If None, creates FakeJj rooted at cwd.
            github: Optional GitHub implementation. If None, creates empty FakeGitHub.
            issues: Optional IssueTracker. If None, creates empty FakeIssueTracker.
            subscriptions: Optional EventSubscriptions. If None, creates a running
                FakeEventSubscriptions.
            workspace_store: Optional metadata store. If None, creates an empty fake.
            time: Optional Time implementation. If None, creates FakeTime.
            cwd: Optional current working directory. If None, uses Path("/repo").
            config: Optional ShipConfig. If None, uses defaults.
            repo: Optional RepoContext or NoRepoSentinel.
            dry_run: Whether to enable dry-run mode (default False).
        """
        from ship.core.github.fake import FakeGitHub
        from ship.core.issues.fake import FakeIssueTracker
        from ship.core.jj.fake import FakeJj
        from ship.core.subscriptions.fake import FakeEventSubscriptions
        from ship.core.time.fake import FakeTime
        from ship.core.workspace_store.fake import FakeWorkspaceMetadataStore

        if cwd is None:
            cwd = Path("/repo")

        if jj is None:
            jj = FakeJj(root=cwd)

        if github is None:
            github = FakeGitHub()

        if issues is None:
            issues = FakeIssueTracker()

        if subscriptions is None:
            subscriptions = FakeEventSubscriptions()

        if workspace_store is None:
            workspace_store = FakeWorkspaceMetadataStore()

        if time is None:
            time = FakeTime()

        if config is None:
            config = ShipConfig()

        if repo is None:
            repo = discover_repo_or_sentinel(cwd, jj)

        # Apply dry-run wrappers if needed (matching production behavior)
        if dry_run:
            jj = DryRunJj(jj)
            github = DryRunGitHub(github)
            subscriptions = DryRunEventSubscriptions(subscriptions)
            workspace_store = DryRunWorkspaceMetadataStore(workspace_store)

        return ShipContext(
            jj=jj,
            github=github,
            issues=issues,
            subscriptions=subscriptions,
            workspace_store=workspace_store,
            time=time,
            cwd=cwd,
            config=config,
            repo=repo,
            dry_run=dry_run,
        )


def safe_cwd() -> tuple[Path | None, str | None]:
    """Get current working directory, detecting if it no longer exists.

    Returns:
        tuple[Path | None, str | None]: (path, error_message)
        - If successful: (Path, None)
        - If directory deleted: (None, error_message)

    Note:
        Path.cwd() provides no way to check the condition first, so this wraps
        it in try/except.
    """
    try:
        return (Path.cwd(), None)
    except (FileNotFoundError, OSError):
        return (None, "Current working directory no longer exists")


def create_context(*, dry_run: bool) -> ShipContext:
    """Create production context with real implementations.

    Called at CLI entry point to create the context for the entire
    command execution.

    Args:
        dry_run: If True, wrap mutating integrations with dry-run wrappers that
                 print intended actions without executing them
    """
    # 1. Capture cwd (no deps)
    cwd, error_msg = safe_cwd()
    if cwd is None:
        user_output(click.style("Error: ", fg="red") + str(error_msg))
        user_output("\nThe directory you're running from has been deleted.")
        user_output("Please change to a valid directory and try again.")
        raise SystemExit(1)

    # 2. Create integration classes
    jj: Jj = RealJj()
    github: GitHub = RealGitHub()
    subscriptions: EventSubscriptions = SocketEventSubscriptions()
    workspace_store: WorkspaceMetadataStore = JsonWorkspaceMetadataStore()

    # 3. Discover repo (a missing jj binary is reported by the first command needing it)
    repo: RepoContext | NoRepoSentinel
    try:
        repo = discover_repo_or_sentinel(cwd, jj)
    except JjNotInstalledError as e:
        repo = NoRepoSentinel(message=e.message)

    # 4. Load repo config (or defaults if no repo)
    if isinstance(repo, NoRepoSentinel):
        config = ShipConfig()
    else:
        config = load_config(repo.root)

    # 5. Apply dry-run wrappers if needed
    if dry_run:
        jj = DryRunJj(jj)
        github = DryRunGitHub(github)
        subscriptions = DryRunEventSubscriptions(subscriptions)
        workspace_store = DryRunWorkspaceMetadataStore(workspace_store)

    return ShipContext(
        jj=jj,
        github=github,
        issues=NoopIssueTracker(),
        subscriptions=subscriptions,
        workspace_store=workspace_store,
        time=RealTime(),
        cwd=cwd,
        config=config,
        repo=repo,
        dry_run=dry_run,
    )

"""Error taxonomy for stack orchestration.

Every failure the engine can surface is one of the classes below. Each class
carries exactly the fields needed to render its message, so callers can match
on the type and present status without re-querying the backend.

Backend failures are converted exactly once, at the subprocess boundary, by
map_jj_error(). Nothing above that boundary inspects raw jj output.
"""

import re
from collections.abc import Callable
from pathlib import Path


class ShipError(Exception):
    """Base class for all errors raised by ship."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


# ============================================================================
# Backend (jj) errors
# ============================================================================


class BackendError(ShipError):
    """A jj invocation exited non-zero or produced unusable output."""

    def __init__(
        self,
        message: str,
        *,
        command: str = "",
        stderr: str = "",
        exit_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.command = command
        self.stderr = stderr
        self.exit_code = exit_code


class JjNotInstalledError(BackendError):
    """The jj binary could not be found on PATH."""

    def __init__(self, command: str = "") -> None:
        super().__init__(
            "jj is not installed. See https://jj-vcs.github.io/jj/ for installation.",
            command=command,
        )


class NotARepoError(BackendError):
    """The directory is not inside a jj repository."""


class ConflictError(BackendError):
    """The working copy or a rebased change has unresolved conflicts."""

    def __init__(self, message: str, *, conflicted_paths: list[str] | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.conflicted_paths = conflicted_paths or []


class PushError(BackendError):
    """Pushing a bookmark to the remote failed."""

    def __init__(self, message: str, *, bookmark: str | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.bookmark = bookmark


class FetchError(BackendError):
    """Fetching from the remote failed."""


class RevisionError(BackendError):
    """A revision or revset did not resolve."""

    def __init__(self, message: str, *, revision: str | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.revision = revision


class ImmutableChangeError(BackendError):
    """The target change is immutable (e.g. already on trunk)."""

    def __init__(self, message: str, *, commit_id: str | None = None, **kwargs):
        super().__init__(message, **kwargs)
        self.commit_id = commit_id


class SquashError(BackendError):
    """jj refused to squash."""


class StaleWorkingCopyError(BackendError):
    """The working copy is stale and needs `ship stack update-stale`."""


class WorkspaceError(BackendError):
    """Generic jj workspace failure."""


# ============================================================================
# Domain errors
# ============================================================================


class BookmarkExistsError(ShipError):
    """Creating a bookmark that already exists."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Bookmark '{name}' already exists. Use --move to update it.")
        self.name = name


class BookmarkNotFoundError(ShipError):
    """Moving or deleting a bookmark that does not exist."""

    def __init__(self, name: str | None) -> None:
        if name is None:
            super().__init__("Bookmark not found.")
        else:
            super().__init__(f"Bookmark '{name}' not found.")
        self.name = name


class AmbiguousStackError(ShipError):
    """The current change has several children so "up" is undefined."""

    def __init__(self, change_id: str, candidate_count: int) -> None:
        super().__init__(
            f"Change {change_id[:8]} has {candidate_count} children; "
            "cannot choose which one to move to."
        )
        self.change_id = change_id
        self.candidate_count = candidate_count


class WorkspaceExistsError(ShipError):
    """Creating a workspace whose name is already taken."""

    def __init__(self, name: str, path: str | None = None) -> None:
        if path is not None:
            super().__init__(f"Workspace '{name}' already exists at {path}")
        else:
            super().__init__(f"Workspace '{name}' already exists")
        self.name = name
        self.path = path


class WorkspaceNotFoundError(ShipError):
    """Forgetting or looking up an unknown workspace."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Workspace '{name}' not found")
        self.name = name


class DefaultWorkspaceError(ShipError):
    """The default workspace cannot be forgotten."""

    def __init__(self) -> None:
        super().__init__("Cannot remove the default workspace")


class WorkspacePathError(ShipError):
    """Target directory for a new workspace exists and is not empty."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"Workspace path '{path}' exists and is not empty")
        self.path = path


class WorkspaceStoreError(ShipError):
    """.ship/workspaces.json could not be read, parsed, or written."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Workspace metadata at '{path}' is unusable: {reason}")
        self.path = path
        self.reason = reason


class SubmitError(ShipError):
    """The change cannot be submitted in its current state."""


class PrError(ShipError):
    """The pull-request service failed."""


class TransientPrError(PrError):
    """gh timed out or the service answered with a server or network error.

    Only this subclass is retried, and only for idempotent lookups.
    """


class GhNotInstalledError(PrError):
    def __init__(self) -> None:
        super().__init__("gh is not installed. See https://cli.github.com/ for installation.")


class SubscriptionError(ShipError):
    """Registering with the webhook daemon failed."""


class DaemonNotRunningError(SubscriptionError):
    def __init__(self) -> None:
        super().__init__("Webhook daemon is not running. Start it with 'ship webhook start'.")


# ============================================================================
# jj output -> error mapping
# ============================================================================

_NOT_A_REPO_MESSAGE = "Not a jj repository. Run 'jj git init' to initialize."
_CONFLICTED_PATH = re.compile(r'Conflicting changes in "([^"]+)"')

ErrorFactory = Callable[[str, re.Match[str]], ShipError]


def _conflict(output: str, _match: re.Match[str]) -> ShipError:
    paths = _CONFLICTED_PATH.findall(output)
    return ConflictError(
        "Working copy has conflicts that need to be resolved.", conflicted_paths=paths
    )


def _refusing_new_bookmark(output: str, _match: re.Match[str]) -> ShipError:
    bookmark_match = re.search(r"bookmark (\S+)", output)
    return PushError(
        "Push failed: new bookmark requires --allow-new flag or manual tracking.",
        bookmark=bookmark_match.group(1) if bookmark_match else None,
    )


def _revision(_output: str, match: re.Match[str]) -> ShipError:
    return RevisionError(f"Revision '{match.group(1)}' not found.", revision=match.group(1))


_ERROR_PATTERNS: list[tuple[re.Pattern[str], ErrorFactory]] = [
    # Not a repository
    (re.compile(r"There is no jj repo in", re.I), lambda o, m: NotARepoError(_NOT_A_REPO_MESSAGE)),
    (
        re.compile(r"The current directory is not part of a repository", re.I),
        lambda o, m: NotARepoError(_NOT_A_REPO_MESSAGE),
    ),
    # Conflicts
    (re.compile(r"Conflicting changes in", re.I), _conflict),
    (
        re.compile(r"conflict", re.I),
        lambda o, m: ConflictError(o.strip() or "Working copy has conflicts."),
    ),
    # Push
    (
        re.compile(r"Won't push commit .* since it has no description", re.I),
        lambda o, m: PushError(
            "Cannot push: commit has no description. Use 'ship stack describe' to add one."
        ),
    ),
    (re.compile(r"Refusing to create new remote bookmark", re.I), _refusing_new_bookmark),
    (
        re.compile(r"failed to push some refs", re.I),
        lambda o, m: PushError("Push rejected. Try syncing first."),
    ),
    (re.compile(r"failed to push", re.I), lambda o, m: PushError(o.strip() or "Push failed.")),
    # Fetch
    (re.compile(r"failed to fetch", re.I), lambda o, m: FetchError(o.strip() or "Fetch failed.")),
    (
        re.compile(r"Could not find remote", re.I),
        lambda o, m: FetchError("Remote not found. Check your git remote configuration."),
    ),
    # Bookmarks
    (
        re.compile(r"Bookmark already exists: (\S+)", re.I),
        lambda o, m: BookmarkExistsError(m.group(1)),
    ),
    (
        re.compile(r'Bookmark "([^"]+)" doesn\'t exist', re.I),
        lambda o, m: BookmarkNotFoundError(m.group(1)),
    ),
    (re.compile(r"No such bookmark", re.I), lambda o, m: BookmarkNotFoundError(None)),
    # Immutable commits
    (
        re.compile(r"Commit (\S+) is immutable", re.I),
        lambda o, m: ImmutableChangeError(
            "Cannot modify immutable commit. This is typically a protected commit like main.",
            commit_id=m.group(1),
        ),
    ),
    # Squash
    (
        re.compile(r"Cannot squash into the root commit", re.I),
        lambda o, m: SquashError("Cannot squash: target is the root commit."),
    ),
    (
        re.compile(r"Cannot squash commits that have children", re.I),
        lambda o, m: SquashError("Cannot squash: commit has children. Squash the children first."),
    ),
    (
        re.compile(r"Cannot squash .* into itself", re.I),
        lambda o, m: SquashError("Cannot squash a commit into itself."),
    ),
    # Revisions
    (re.compile(r"Revset [\"`]([^\"`]+)[\"`] didn't resolve to any revisions", re.I), _revision),
    (re.compile(r"Revision [\"`]([^\"`]+)[\"`] doesn't exist", re.I), _revision),
    (
        re.compile(r"No such revision", re.I),
        lambda o, m: RevisionError(o.strip() or "Revision not found."),
    ),
    # Stale working copy
    (
        re.compile(r"working copy is stale", re.I),
        lambda o, m: StaleWorkingCopyError(
            "The working copy is stale. Run 'ship stack update-stale' to recover."
        ),
    ),
    # Workspaces
    (
        re.compile(r"Workspace '([^']+)' already exists", re.I),
        lambda o, m: WorkspaceExistsError(m.group(1)),
    ),
    (
        re.compile(r"already exists at: (.+)", re.I),
        lambda o, m: WorkspaceExistsError("unknown", m.group(1).strip()),
    ),
    (
        re.compile(r"No workspace named '([^']+)'", re.I),
        lambda o, m: WorkspaceNotFoundError(m.group(1)),
    ),
    (
        re.compile(r"Workspace '([^']+)' doesn't exist", re.I),
        lambda o, m: WorkspaceNotFoundError(m.group(1)),
    ),
    (
        re.compile(r"workspace", re.I),
        lambda o, m: WorkspaceError(o.strip() or "Workspace operation failed"),
    ),
]


def map_jj_error(output: str, command: str, exit_code: int | None = None) -> ShipError:
    """Convert jj error output into the most specific error kind.

    Patterns are tried in order; the first match wins. Backend errors get the
    command, raw output and exit code attached so callers can show the precise
    stderr for recovery decisions.
    """
    for pattern, factory in _ERROR_PATTERNS:
        match = pattern.search(output)
        if match is None:
            continue
        error = factory(output, match)
        if isinstance(error, BackendError):
            error.command = command
            error.stderr = output
            error.exit_code = exit_code
        return error

    return BackendError(
        output.strip() or f"jj {command} failed",
        command=command,
        stderr=output,
        exit_code=exit_code,
    )


_ERROR_INDICATORS = [
    re.compile(r"^Error:", re.M),
    re.compile(r"^error:", re.M),
    re.compile(r"^fatal:", re.M),
    re.compile(r"failed to", re.I),
    re.compile(r"cannot ", re.I),
    re.compile(r"won't ", re.I),
    re.compile(r"refusing to", re.I),
    re.compile(r"Conflicting changes in", re.I),
    re.compile(r"has conflicts?$", re.I | re.M),
]


def looks_like_error(output: str) -> bool:
    """Check whether output from a zero-exit jj command still reports a failure."""
    return any(pattern.search(output) for pattern in _ERROR_INDICATORS)

"""Production implementation of pull-request operations using the gh CLI."""

import re
import subprocess
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ship.core.errors import GhNotInstalledError, PrError, TransientPrError
from ship.core.github.abc import GitHub
from ship.core.github.types import CreatePrInput, PrState, PullRequest, UpdatePrInput
from ship.core.subprocess import run_subprocess_with_context

GH_TIMEOUT_SECONDS = 30.0

_PR_JSON_FIELDS = "number,title,url,state,headRefName,baseRefName,isDraft"
_NO_PR_MARKERS = ("no pull requests found", "Could not resolve")
_TRANSIENT_PATTERN = re.compile(
    r"HTTP 5\d\d|connection reset|connection refused|i/o timeout|TLS handshake timeout",
    re.IGNORECASE,
)


class GhPullRequest(BaseModel):
    """Shape of `gh pr view --json <_PR_JSON_FIELDS>` output."""

    model_config = ConfigDict(populate_by_name=True)

    number: int
    title: str
    url: str
    state: str
    head_ref_name: str = Field(alias="headRefName")
    base_ref_name: str = Field(alias="baseRefName")
    is_draft: bool = Field(default=False, alias="isDraft")

    def to_pull_request(self) -> PullRequest:
        return PullRequest(
            number=self.number,
            title=self.title,
            url=self.url,
            state=_normalize_state(self.state),
            head=self.head_ref_name,
            base=self.base_ref_name,
            is_draft=self.is_draft,
        )


def _normalize_state(gh_state: str) -> PrState:
    match gh_state.upper():
        case "OPEN":
            return "open"
        case "MERGED":
            return "merged"
        case _:
            return "closed"


def parse_gh_pr_json(output: str) -> PullRequest:
    """Parse `gh pr view --json` output into a PullRequest."""
    try:
        return GhPullRequest.model_validate_json(output).to_pull_request()
    except ValidationError as e:
        raise PrError(f"Invalid gh response format: {e}") from e


class RealGitHub(GitHub):
    """Production implementation using gh CLI.

    All operations execute gh commands via subprocess with a fixed timeout.
    """

    def _run_gh(self, args: list[str], repo_root: Path) -> str:
        def to_error(stdout: str, stderr: str, exit_code: int | None) -> Exception:
            detail = (stderr or stdout).strip()
            msg = f"gh {args[0]} {args[1]} failed: {detail}"
            if _TRANSIENT_PATTERN.search(detail):
                return TransientPrError(msg)
            return PrError(msg)

        try:
            result = run_subprocess_with_context(
                ["gh", *args],
                operation_context=f"run gh {' '.join(args[:2])}",
                cwd=repo_root,
                error_mapper=to_error,
                not_found_error=GhNotInstalledError,
                timeout=GH_TIMEOUT_SECONDS,
            )
        except subprocess.TimeoutExpired as e:
            msg = f"gh {' '.join(args[:2])} timed out after {GH_TIMEOUT_SECONDS:.0f}s"
            raise TransientPrError(msg) from e
        return result.stdout

    def _view(self, repo_root: Path, selector: str) -> PullRequest:
        output = self._run_gh(["pr", "view", selector, "--json", _PR_JSON_FIELDS], repo_root)
        return parse_gh_pr_json(output)

    def create_pr(self, repo_root: Path, pr_input: CreatePrInput) -> PullRequest:
        args = [
            "pr",
            "create",
            "--title",
            pr_input.title,
            "--body",
            pr_input.body,
            "--head",
            pr_input.head,
            "--base",
            pr_input.base,
        ]
        if pr_input.draft:
            args.append("--draft")

        # gh pr create only prints the URL; fetch the details separately
        self._run_gh(args, repo_root)
        return self._view(repo_root, pr_input.head)

    def update_pr(self, repo_root: Path, number: int, pr_input: UpdatePrInput) -> PullRequest:
        args = ["pr", "edit", str(number)]
        if pr_input.title is not None:
            args.extend(["--title", pr_input.title])
        if pr_input.body is not None:
            args.extend(["--body", pr_input.body])

        self._run_gh(args, repo_root)
        return self._view(repo_root, str(number))

    def get_pr_by_branch(self, repo_root: Path, branch: str) -> PullRequest | None:
        try:
            return self._view(repo_root, branch)
        except GhNotInstalledError:
            raise
        except PrError as e:
            if any(marker in e.message for marker in _NO_PR_MARKERS):
                return None
            raise

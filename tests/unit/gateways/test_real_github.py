"""Tests for RealGitHub with subprocess.run patched."""

import json
import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from ship.core.errors import GhNotInstalledError, PrError, TransientPrError
from ship.core.github.real import RealGitHub, parse_gh_pr_json
from ship.core.github.types import CreatePrInput, UpdatePrInput

REPO = Path("/repo")


def _pr_json(number: int = 12, state: str = "OPEN", head: str = "feature") -> str:
    return json.dumps(
        {
            "number": number,
            "title": "Add feature",
            "url": f"https://github.com/owner/repo/pull/{number}",
            "state": state,
            "headRefName": head,
            "baseRefName": "main",
            "isDraft": False,
        }
    )


def _completed(stdout: str) -> subprocess.CompletedProcess[str]:
    return subprocess.CompletedProcess(args=[], returncode=0, stdout=stdout, stderr="")


@pytest.mark.parametrize(
    ("gh_state", "expected"),
    [("OPEN", "open"), ("MERGED", "merged"), ("CLOSED", "closed")],
)
def test_parse_gh_pr_json_normalizes_state(gh_state: str, expected: str) -> None:
    pr = parse_gh_pr_json(_pr_json(state=gh_state))

    assert pr.state == expected
    assert pr.head == "feature"
    assert pr.base == "main"


def test_parse_gh_pr_json_rejects_unexpected_shape() -> None:
    with pytest.raises(PrError, match="Invalid gh response"):
        parse_gh_pr_json('{"number": "twelve"}')


def test_create_pr_runs_create_then_view() -> None:
    with patch("ship.core.subprocess.subprocess.run") as mock_run:
        mock_run.side_effect = [
            _completed("https://github.com/owner/repo/pull/12\n"),
            _completed(_pr_json()),
        ]

        pr = RealGitHub().create_pr(
            REPO,
            CreatePrInput(title="Add feature", body="", head="feature", base="main", draft=True),
        )

    assert pr.number == 12
    create_args = mock_run.call_args_list[0].args[0]
    assert create_args[:3] == ["gh", "pr", "create"]
    assert "--draft" in create_args
    view_args = mock_run.call_args_list[1].args[0]
    assert view_args[:4] == ["gh", "pr", "view", "feature"]
    assert mock_run.call_args_list[0].kwargs["timeout"] == 30.0


def test_update_pr_only_passes_given_fields() -> None:
    with patch("ship.core.subprocess.subprocess.run") as mock_run:
        mock_run.side_effect = [_completed(""), _completed(_pr_json())]

        RealGitHub().update_pr(REPO, 12, UpdatePrInput(title="Better title"))

    edit_args = mock_run.call_args_list[0].args[0]
    assert edit_args == ["gh", "pr", "edit", "12", "--title", "Better title"]


def test_get_pr_by_branch_without_pr_is_none() -> None:
    with patch("ship.core.subprocess.subprocess.run") as mock_run:
        mock_run.side_effect = subprocess.CalledProcessError(
            1, ["gh"], output="", stderr='no pull requests found for branch "feature"'
        )

        assert RealGitHub().get_pr_by_branch(REPO, "feature") is None


def test_get_pr_by_branch_propagates_other_failures() -> None:
    with patch("ship.core.subprocess.subprocess.run") as mock_run:
        mock_run.side_effect = subprocess.CalledProcessError(
            1, ["gh"], output="", stderr="HTTP 502: Bad Gateway"
        )

        with pytest.raises(TransientPrError, match="HTTP 502"):
            RealGitHub().get_pr_by_branch(REPO, "feature")


def test_auth_failure_is_not_transient() -> None:
    with patch("ship.core.subprocess.subprocess.run") as mock_run:
        mock_run.side_effect = subprocess.CalledProcessError(
            1, ["gh"], output="", stderr="HTTP 401: Bad credentials"
        )

        with pytest.raises(PrError, match="HTTP 401") as exc_info:
            RealGitHub().get_pr_by_branch(REPO, "feature")

    assert not isinstance(exc_info.value, TransientPrError)


def test_timeout_is_a_pr_error() -> None:
    with patch("ship.core.subprocess.subprocess.run") as mock_run:
        mock_run.side_effect = subprocess.TimeoutExpired(["gh"], 30.0)

        with pytest.raises(TransientPrError, match="timed out"):
            RealGitHub().get_pr_by_branch(REPO, "feature")


def test_missing_gh_binary() -> None:
    with patch("ship.core.subprocess.subprocess.run") as mock_run:
        mock_run.side_effect = FileNotFoundError("gh")

        with pytest.raises(GhNotInstalledError):
            RealGitHub().get_pr_by_branch(REPO, "feature")

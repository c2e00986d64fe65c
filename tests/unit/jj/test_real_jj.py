"""Tests for RealJj command construction and error mapping.

subprocess.run is patched; no jj binary is required.
"""

import subprocess
from pathlib import Path
from unittest.mock import patch

import pytest

from ship.core.errors import JjNotInstalledError, PushError, RevisionError
from ship.core.jj.parsing import LOG_TEMPLATE
from ship.core.jj.real import RealJj
from ship.core.jj.types import StaleUpdate

REPO = Path("/repo")


def _completed(stdout: str = "", stderr: str = "") -> subprocess.CompletedProcess[str]:
    return subprocess.CompletedProcess(args=[], returncode=0, stdout=stdout, stderr=stderr)


def _failed(stderr: str, returncode: int = 1) -> subprocess.CalledProcessError:
    return subprocess.CalledProcessError(returncode, ["jj"], output="", stderr=stderr)


def test_log_runs_template_and_parses_stdout() -> None:
    stdout = "\t".join(
        ["a" * 40, "qpvuntsm", "b" * 40, "", "dev@example.com", "", "1", "0", "0", '"Title"']
    )
    with patch("ship.core.subprocess.subprocess.run") as mock_run:
        mock_run.return_value = _completed(stdout=stdout + "\n")

        changes = RealJj().log(REPO, "trunk()..@")

    assert [c.change_id for c in changes] == ["qpvuntsm"]
    mock_run.assert_called_once_with(
        ["jj", "--color=never", "log", "-r", "trunk()..@", "--no-graph", "-T", LOG_TEMPLATE],
        cwd=REPO,
        capture_output=True,
        text=True,
        encoding="utf-8",
        check=True,
        timeout=None,
    )


def test_new_with_message() -> None:
    with patch("ship.core.subprocess.subprocess.run") as mock_run:
        mock_run.return_value = _completed()

        RealJj().new(REPO, "Add feature")

    args = mock_run.call_args.args[0]
    assert args == ["jj", "--color=never", "new", "@", "-m", "Add feature"]


def test_add_workspace_with_revision() -> None:
    with patch("ship.core.subprocess.subprocess.run") as mock_run:
        mock_run.return_value = _completed()

        RealJj().add_workspace(REPO, "feature", Path("/work/feature"), "main@origin")

    args = mock_run.call_args.args[0]
    assert args[2:] == [
        "workspace",
        "add",
        "--name",
        "feature",
        "/work/feature",
        "-r",
        "main@origin",
    ]


def test_nonzero_exit_is_mapped_from_stderr() -> None:
    with patch("ship.core.subprocess.subprocess.run") as mock_run:
        mock_run.side_effect = _failed('Error: Revision "nope" doesn\'t exist')

        with pytest.raises(RevisionError) as exc_info:
            RealJj().edit(REPO, "nope")

    assert exc_info.value.command == "edit nope"
    assert exc_info.value.exit_code == 1
    assert "nope" in exc_info.value.stderr


def test_missing_binary() -> None:
    with patch("ship.core.subprocess.subprocess.run") as mock_run:
        mock_run.side_effect = FileNotFoundError("jj")

        with pytest.raises(JjNotInstalledError):
            RealJj().log(REPO, "@")


def test_get_repo_root_outside_repo_is_none() -> None:
    with patch("ship.core.subprocess.subprocess.run") as mock_run:
        mock_run.side_effect = _failed('Error: There is no jj repo in "."')

        assert RealJj().get_repo_root(Path("/tmp")) is None


def test_get_repo_root_strips_output() -> None:
    with patch("ship.core.subprocess.subprocess.run") as mock_run:
        mock_run.return_value = _completed(stdout="/repo\n")

        assert RealJj().get_repo_root(REPO) == REPO


def test_push_failure_reported_with_zero_exit() -> None:
    with patch("ship.core.subprocess.subprocess.run") as mock_run:
        mock_run.return_value = _completed(stderr="error: failed to push some refs to 'origin'\n")

        with pytest.raises(PushError):
            RealJj().git_push(REPO, "feature", "origin")

    args = mock_run.call_args.args[0]
    assert args[2:] == [
        "git",
        "push",
        "--remote",
        "origin",
        "--bookmark",
        "feature",
        "--allow-new",
    ]


def test_successful_push_with_status_on_stderr() -> None:
    with patch("ship.core.subprocess.subprocess.run") as mock_run:
        mock_run.return_value = _completed(
            stderr="Changes to push to origin:\n  Add bookmark feature to 1a2b3c4d\n"
        )

        RealJj().git_push(REPO, "feature", "origin")


def test_update_stale_reports_refreshed_working_copy() -> None:
    with patch("ship.core.subprocess.subprocess.run") as mock_run:
        mock_run.return_value = _completed(stderr="Working copy (@) now at: qpvuntsm 1a2b\n")

        update = RealJj().update_stale(REPO)

    assert update == StaleUpdate(updated=True, message="Working copy (@) now at: qpvuntsm 1a2b")


def test_update_stale_when_already_fresh() -> None:
    with patch("ship.core.subprocess.subprocess.run") as mock_run:
        mock_run.return_value = _completed(stderr="Nothing to do.\n")

        assert RealJj().update_stale(REPO).updated is False

"""Tests for JSON output helpers.

These tests verify the JSON serialization, output routing, and error handling
for machine-parseable CLI output.
"""

import json
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from ship.cli.json_output import emit_json, emit_json_error, json_error_boundary
from ship.core.config import ConfigKeyError
from ship.core.errors import PushError


@dataclass(frozen=True)
class _Summary:
    change_id: str
    bookmarks: tuple[str, ...]
    path: Path


def _emitted(mock_machine_output: MagicMock) -> dict:
    mock_machine_output.assert_called_once()
    return json.loads(mock_machine_output.call_args[0][0])


@patch("ship.cli.json_output.machine_output")
def test_emit_json_serializes_path_and_datetime(mock_machine_output: MagicMock) -> None:
    emit_json({"path": Path("/test"), "at": datetime(2025, 11, 17, 10, 30, 45, tzinfo=UTC)})

    parsed = _emitted(mock_machine_output)
    assert parsed == {"path": "/test", "at": "2025-11-17T10:30:45+00:00"}


@patch("ship.cli.json_output.machine_output")
def test_emit_json_serializes_nested_dataclasses(mock_machine_output: MagicMock) -> None:
    """Dataclasses become dicts, tuples become lists, at any depth."""
    summary = _Summary(change_id="qpvuntsm", bookmarks=("a", "b"), path=Path("/work/a"))

    emit_json({"result": {"changes": [summary]}})

    parsed = _emitted(mock_machine_output)
    assert parsed == {
        "result": {
            "changes": [{"change_id": "qpvuntsm", "bookmarks": ["a", "b"], "path": "/work/a"}]
        }
    }


@patch("ship.cli.json_output.machine_output")
def test_emit_json_formats_with_indent(mock_machine_output: MagicMock) -> None:
    emit_json({"key": "value", "nested": {"inner": "data"}})

    call_args = mock_machine_output.call_args[0][0]
    assert "\n" in call_args
    assert '  "key"' in call_args


@patch("ship.cli.json_output.machine_output")
def test_emit_json_error_outputs_structured_error(mock_machine_output: MagicMock) -> None:
    with pytest.raises(SystemExit) as exc_info:
        emit_json_error("Push rejected.", "PushError")

    assert exc_info.value.code == 1
    assert _emitted(mock_machine_output) == {
        "error": "Push rejected.",
        "error_type": "PushError",
        "exit_code": 1,
    }


@patch("ship.cli.json_output.machine_output")
def test_emit_json_error_custom_exit_code(mock_machine_output: MagicMock) -> None:
    with pytest.raises(SystemExit) as exc_info:
        emit_json_error("Test error", "CustomError", exit_code=42)

    assert exc_info.value.code == 42


# json_error_boundary


def test_boundary_text_mode_reraises_unexpected_errors() -> None:
    @json_error_boundary
    def failing_command(json_output: bool) -> None:
        raise ValueError("Test error")

    with pytest.raises(ValueError, match="Test error"):
        failing_command(json_output=False)


def test_boundary_text_mode_prints_ship_errors(capsys: pytest.CaptureFixture[str]) -> None:
    @json_error_boundary
    def failing_command(json_output: bool) -> None:
        raise PushError("Push rejected. Try syncing first.")

    with pytest.raises(SystemExit) as exc_info:
        failing_command(json_output=False)

    assert exc_info.value.code == 1
    assert "Error: Push rejected. Try syncing first." in capsys.readouterr().err


def test_boundary_text_mode_prints_config_errors(capsys: pytest.CaptureFixture[str]) -> None:
    @json_error_boundary
    def failing_command() -> None:
        raise ConfigKeyError("Unknown config key: nope")

    with pytest.raises(SystemExit):
        failing_command()

    assert "Unknown config key: nope" in capsys.readouterr().err


@patch("ship.cli.json_output.machine_output")
def test_boundary_json_mode_emits_any_error(mock_machine_output: MagicMock) -> None:
    @json_error_boundary
    def failing_command(json_output: bool) -> None:
        raise RuntimeError("unexpected")

    with pytest.raises(SystemExit) as exc_info:
        failing_command(json_output=True)

    assert exc_info.value.code == 1
    assert _emitted(mock_machine_output) == {
        "error": "unexpected",
        "error_type": "RuntimeError",
        "exit_code": 1,
    }


def test_boundary_passes_system_exit_through() -> None:
    @json_error_boundary
    def exiting_command(json_output: bool) -> None:
        raise SystemExit(3)

    with pytest.raises(SystemExit) as exc_info:
        exiting_command(json_output=True)

    assert exc_info.value.code == 3


def test_boundary_returns_result_on_success() -> None:
    @json_error_boundary
    def ok_command(json_output: bool) -> str:
        return "done"

    assert ok_command(json_output=True) == "done"

"""Subprocess execution with enriched error reporting.

Integration classes (jj, gh) run external programs through this module so that
every failure carries the command line, exit code and captured output.
"""

import logging
import subprocess
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

ErrorMapper = Callable[[str, str, int | None], Exception]


def _decode(stream: str | bytes | None) -> str:
    if stream is None:
        return ""
    if isinstance(stream, bytes):
        return stream.decode("utf-8", errors="replace")
    return stream


def _default_error(operation_context: str, cmd_str: str) -> ErrorMapper:
    def build(stdout: str, stderr: str, exit_code: int | None) -> Exception:
        error_msg = f"Failed to {operation_context}"
        error_msg += f"\nCommand: {cmd_str}"
        error_msg += f"\nExit code: {exit_code}"
        if stdout.strip():
            error_msg += f"\nstdout: {stdout.strip()}"
        if stderr.strip():
            error_msg += f"\nstderr: {stderr.strip()}"
        return RuntimeError(error_msg)

    return build


def run_subprocess_with_context(
    cmd: Sequence[str],
    operation_context: str,
    cwd: Path | None = None,
    *,
    error_mapper: ErrorMapper | None = None,
    not_found_error: Callable[[], Exception] | None = None,
    timeout: float | None = None,
    **kwargs: Any,
) -> subprocess.CompletedProcess[str]:
    """Execute subprocess and convert failures into typed errors.

    Args:
        cmd: Command and arguments to execute
        operation_context: Human-readable description of operation
        cwd: Working directory for command execution
        error_mapper: Builds the exception for a non-zero exit from
            (stdout, stderr, exit_code). Defaults to a RuntimeError with context.
        not_found_error: Builds the exception raised when the binary is missing
        timeout: Seconds before the process is killed
        **kwargs: Additional arguments passed to subprocess.run()

    Returns:
        CompletedProcess instance from subprocess.run()

    Raises:
        Exception: Whatever error_mapper / not_found_error produce
        subprocess.TimeoutExpired: If the command exceeds timeout
    """
    cmd_str = " ".join(str(arg) for arg in cmd)
    logger.debug("$ %s (cwd=%s)", cmd_str, cwd)

    try:
        result = subprocess.run(
            list(cmd),
            cwd=cwd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            check=True,
            timeout=timeout,
            **kwargs,
        )
        return result

    except subprocess.CalledProcessError as e:
        stdout = _decode(e.stdout)
        stderr = _decode(e.stderr)
        logger.debug("Command failed with exit code %s: %s", e.returncode, stderr.strip())
        mapper = error_mapper if error_mapper is not None else _default_error(
            operation_context, cmd_str
        )
        raise mapper(stdout, stderr, e.returncode) from e

    except FileNotFoundError as e:
        if not_found_error is not None:
            raise not_found_error() from e
        error_msg = f"Command not found while trying to {operation_context}: {cmd[0]}"
        error_msg += f"\nFull command: {cmd_str}"
        raise RuntimeError(error_msg) from e

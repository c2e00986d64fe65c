"""JSON output utilities for CLI commands with machine-parseable output."""

import json
from collections.abc import Callable
from dataclasses import asdict, is_dataclass
from datetime import datetime
from functools import wraps
from pathlib import Path
from typing import Any

import click
from pydantic import BaseModel, ConfigDict, Field

from ship.cli.output import machine_output, user_output
from ship.core.config import ConfigKeyError
from ship.core.errors import ShipError

# Errors that describe a problem the user can fix. Everything else is a bug and
# keeps its traceback in text mode.
USER_ERRORS: tuple[type[Exception], ...] = (ShipError, ConfigKeyError)


class ErrorResponse(BaseModel):
    """Pydantic model for error JSON responses.

    Attributes:
        error: Error message
        error_type: Error class name (e.g., "ConflictError")
        exit_code: Exit code for the process
    """

    model_config = ConfigDict(strict=True)

    error: str
    error_type: str
    exit_code: int = Field(default=1, ge=0, le=255)


def _serialize_for_json(obj: Any) -> Any:
    """Recursively serialize special types for JSON.

    Handles Path, datetime, and dataclass instances that appear in
    plain dict structures (not Pydantic models).

    Args:
        obj: Object to serialize

    Returns:
        JSON-serializable version of the object
    """
    if isinstance(obj, Path):
        return str(obj)
    if isinstance(obj, datetime):
        return obj.isoformat()
    if is_dataclass(obj) and not isinstance(obj, type):
        return _serialize_for_json(asdict(obj))
    if isinstance(obj, dict):
        return {key: _serialize_for_json(value) for key, value in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_serialize_for_json(item) for item in obj]
    return obj


def emit_json(data: dict[str, Any]) -> None:
    """Output JSON data to stdout for machine consumption.

    Routes JSON through machine_output() so data lands on stdout while
    human messages stay on stderr.

    Uses _serialize_for_json() to recursively handle special types:
    - Path objects → string representation
    - datetime objects → ISO format string
    - dataclass instances → dictionaries
    - tuples → lists

    Args:
        data: Dictionary to serialize as JSON
    """
    serialized = _serialize_for_json(data)
    json_str = json.dumps(serialized, indent=2)
    machine_output(json_str)


def emit_json_error(error: str, error_type: str, exit_code: int = 1) -> None:
    """Output error as JSON and exit.

    Args:
        error: Error message
        error_type: Error class name (e.g., "PushError")
        exit_code: Exit code for the process (default: 1, must be 0-255)

    Raises:
        SystemExit: Always raises to terminate with specified exit code
    """
    error_response = ErrorResponse(
        error=error,
        error_type=error_type,
        exit_code=exit_code,
    )
    emit_json(error_response.model_dump(mode="json"))
    raise SystemExit(exit_code)


def json_error_boundary(func: Callable) -> Callable:
    """Decorator that turns errors into CLI output and exit code 1.

    Inspects the command kwargs for `json_output`. In JSON mode every exception
    becomes an ErrorResponse on stdout. In text mode ship's own errors print a
    red "Error: " line on stderr; anything else is re-raised untouched.

    Example:
        @click.command()
        @click.option("--json", "json_output", is_flag=True)
        @json_error_boundary
        @click.pass_obj
        def my_command(ctx: ShipContext, json_output: bool) -> None:
            ...
    """

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except SystemExit:
            raise
        except Exception as e:
            if kwargs.get("json_output", False):
                emit_json_error(str(e), type(e).__name__, exit_code=1)
            if isinstance(e, USER_ERRORS):
                user_output(click.style("Error: ", fg="red") + str(e))
                raise SystemExit(1) from e
            raise

    return wrapper


json_option = click.option(
    "--json",
    "json_output",
    is_flag=True,
    help="Print the result as JSON on stdout.",
)

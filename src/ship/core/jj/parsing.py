"""Templates and parsers for jj command output.

This is the single boundary where jj's templated text is turned into typed
records. Fields are tab-separated and records newline-separated; free text
(descriptions) is JSON-escaped by jj so it can never contain either separator.
Everything sensitive to the jj version lives in this module.
"""

import json
from datetime import datetime

from ship.core.errors import BackendError
from ship.core.jj.types import Change, OperationInfo, StaleUpdate, WorkspaceInfo

LOG_TEMPLATE = (
    'commit_id ++ "\\t" ++ change_id ++ "\\t"'
    ' ++ parents.map(|c| c.commit_id()).join(",") ++ "\\t"'
    ' ++ local_bookmarks.map(|b| b.name()).join(",") ++ "\\t"'
    ' ++ author.email() ++ "\\t"'
    ' ++ author.timestamp().format("%Y-%m-%dT%H:%M:%S%z") ++ "\\t"'
    ' ++ if(current_working_copy, "1", "0") ++ "\\t"'
    ' ++ if(empty, "1", "0") ++ "\\t"'
    ' ++ if(conflict, "1", "0") ++ "\\t"'
    ' ++ description.escape_json() ++ "\\n"'
)

WORKSPACE_TEMPLATE = (
    'name ++ "\\t" ++ target.change_id() ++ "\\t" ++ target.commit_id() ++ "\\t"'
    ' ++ target.description().escape_json() ++ "\\n"'
)

OPERATION_TEMPLATE = 'id.short() ++ "\\t" ++ description.escape_json() ++ "\\n"'

BOOKMARK_TEMPLATE = 'if(!remote, name ++ "\\n")'

_LOG_FIELD_COUNT = 10
_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S%z"
_NOT_STALE_MARKER = "Nothing to do"


def _split_ids(field: str) -> tuple[str, ...]:
    return tuple(part for part in field.split(",") if part)


def _parse_flag(value: str, line: str) -> bool:
    if value not in ("0", "1"):
        raise BackendError(f"Unexpected flag value {value!r} in jj log output: {line!r}")
    return value == "1"


def _parse_timestamp(value: str) -> datetime | None:
    try:
        return datetime.strptime(value, _TIMESTAMP_FORMAT)
    except ValueError:
        return None


def _parse_json_text(value: str, line: str) -> str:
    try:
        text = json.loads(value)
    except json.JSONDecodeError as e:
        raise BackendError(f"Malformed escaped text in jj output: {line!r}") from e
    if not isinstance(text, str):
        raise BackendError(f"Expected a string in jj output: {line!r}")
    return text.rstrip("\n")


def parse_log_output(output: str) -> list[Change]:
    """Parse `jj log -T LOG_TEMPLATE --no-graph` output.

    Records are returned in the order jj printed them (children before parents).
    """
    changes: list[Change] = []
    for line in output.splitlines():
        if not line.strip():
            continue
        fields = line.split("\t", _LOG_FIELD_COUNT - 1)
        if len(fields) != _LOG_FIELD_COUNT:
            raise BackendError(f"Unexpected jj log record: {line!r}")

        (
            commit_id,
            change_id,
            parents,
            bookmarks,
            author,
            timestamp,
            working_copy,
            empty,
            conflict,
            description,
        ) = fields

        changes.append(
            Change(
                id=commit_id,
                change_id=change_id,
                description=_parse_json_text(description, line),
                author=author,
                timestamp=_parse_timestamp(timestamp),
                bookmarks=_split_ids(bookmarks),
                is_working_copy=_parse_flag(working_copy, line),
                is_empty=_parse_flag(empty, line),
                has_conflict=_parse_flag(conflict, line),
                parent_ids=_split_ids(parents),
            )
        )
    return changes


def parse_workspace_list(output: str) -> list[WorkspaceInfo]:
    """Parse `jj workspace list -T WORKSPACE_TEMPLATE` output."""
    workspaces: list[WorkspaceInfo] = []
    for line in output.splitlines():
        if not line.strip():
            continue
        fields = line.split("\t", 3)
        if len(fields) != 4:
            raise BackendError(f"Unexpected jj workspace record: {line!r}")
        name, change_id, commit_id, description = fields
        workspaces.append(
            WorkspaceInfo(
                name=name,
                change_id=change_id,
                commit_id=commit_id,
                description=_parse_json_text(description, line),
            )
        )
    return workspaces


def parse_operation(output: str) -> OperationInfo | None:
    """Parse the first record of `jj op log -T OPERATION_TEMPLATE` output."""
    for line in output.splitlines():
        if not line.strip():
            continue
        fields = line.split("\t", 1)
        if len(fields) != 2:
            raise BackendError(f"Unexpected jj operation record: {line!r}")
        return OperationInfo(id=fields[0], description=_parse_json_text(fields[1], line))
    return None


def parse_bookmark_list(output: str) -> list[str]:
    """Parse `jj bookmark list -T BOOKMARK_TEMPLATE` output into local names."""
    names: list[str] = []
    for line in output.splitlines():
        name = line.strip()
        if name and name not in names:
            names.append(name)
    return names


def parse_update_stale(output: str) -> StaleUpdate:
    """Interpret the combined stdout and stderr of `jj workspace update-stale`.

    jj exits zero either way and says "Nothing to do" when the working copy
    was already fresh.
    """
    message = output.strip()
    return StaleUpdate(updated=_NOT_STALE_MARKER not in message, message=message)

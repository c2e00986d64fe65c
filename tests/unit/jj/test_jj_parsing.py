"""Tests for parsing templated jj output."""

from datetime import datetime, timedelta, timezone

import pytest

from ship.core.errors import BackendError
from ship.core.jj.parsing import (
    parse_bookmark_list,
    parse_log_output,
    parse_operation,
    parse_update_stale,
    parse_workspace_list,
)

COMMIT_A = "a" * 40
COMMIT_B = "b" * 40


def _log_line(
    *,
    commit_id: str = COMMIT_A,
    change_id: str = "qpvuntsm",
    parents: str = COMMIT_B,
    bookmarks: str = "",
    timestamp: str = "2024-05-01T12:30:00+0200",
    flags: str = "0\t0\t0",
    description: str = '"Add feature\\n"',
) -> str:
    return "\t".join(
        [commit_id, change_id, parents, bookmarks, "dev@example.com", timestamp, flags, description]
    )


def test_parse_log_record() -> None:
    output = _log_line(bookmarks="feature,backup", flags="1\t0\t1") + "\n"

    [change] = parse_log_output(output)

    assert change.id == COMMIT_A
    assert change.change_id == "qpvuntsm"
    assert change.parent_ids == (COMMIT_B,)
    assert change.bookmarks == ("feature", "backup")
    assert change.author == "dev@example.com"
    assert change.timestamp == datetime(2024, 5, 1, 12, 30, tzinfo=timezone(timedelta(hours=2)))
    assert change.is_working_copy
    assert change.is_empty is False
    assert change.has_conflict
    assert change.description == "Add feature"
    assert change.title == "Add feature"


def test_multiline_description_with_tabs_survives() -> None:
    output = _log_line(description='"Title\\n\\nBody\\twith tab\\n"')

    [change] = parse_log_output(output)

    assert change.description == "Title\n\nBody\twith tab"
    assert change.title == "Title"


def test_merge_and_root_parents() -> None:
    merge = _log_line(parents=f"{COMMIT_A},{COMMIT_B}")
    root = _log_line(parents="", description='""')

    changes = parse_log_output(f"{merge}\n\n{root}\n")

    assert changes[0].parent_ids == (COMMIT_A, COMMIT_B)
    assert changes[1].parent_ids == ()
    assert changes[1].description == ""


def test_unparseable_timestamp_is_none() -> None:
    [change] = parse_log_output(_log_line(timestamp="yesterday"))

    assert change.timestamp is None


@pytest.mark.parametrize(
    "line",
    [
        "only\tthree\tfields",
        _log_line(flags="0\t2\t0"),
        _log_line(description="not-json"),
        _log_line(description="42"),
    ],
)
def test_malformed_log_records_raise(line: str) -> None:
    with pytest.raises(BackendError):
        parse_log_output(line)


def test_parse_workspace_list() -> None:
    output = (
        f'default\tqpvuntsm\t{COMMIT_A}\t""\n'
        f'feature\tkkmpptxz\t{COMMIT_B}\t"Add feature\\n"\n'
    )

    workspaces = parse_workspace_list(output)

    assert [w.name for w in workspaces] == ["default", "feature"]
    assert workspaces[1].change_id == "kkmpptxz"
    assert workspaces[1].commit_id == COMMIT_B
    assert workspaces[1].description == "Add feature"


def test_parse_workspace_list_rejects_short_records() -> None:
    with pytest.raises(BackendError):
        parse_workspace_list("default\tqpvuntsm\n")


def test_parse_operation() -> None:
    operation = parse_operation('d3b0c5a7e1f2\t"rebase commit abc"\n')

    assert operation is not None
    assert operation.id == "d3b0c5a7e1f2"
    assert operation.description == "rebase commit abc"


def test_parse_operation_empty_output() -> None:
    assert parse_operation("") is None


def test_parse_bookmark_list_deduplicates() -> None:
    assert parse_bookmark_list("feature\nmain\n\nfeature\n") == ["feature", "main"]


def test_parse_update_stale() -> None:
    update = parse_update_stale("Working copy (@) now at: qpvuntsm 1a2b\nAdded 1 files\n")

    assert update.updated
    assert update.message == "Working copy (@) now at: qpvuntsm 1a2b\nAdded 1 files"


def test_parse_update_stale_when_fresh() -> None:
    assert parse_update_stale("Nothing to do (the working copy is not stale).\n").updated is False

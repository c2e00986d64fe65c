"""Naming utilities for bookmarks and workspaces.

Pure functions (no I/O) turning change titles and task identifiers into
names that are safe as git refs and directory names.
"""

import re

_PR_SUFFIX = re.compile(r"\s*\(#\d+\)\s*$")


def sanitize_bookmark_name(name: str) -> str:
    """Sanitize a change title into a bookmark name.

    - Lowercases input
    - Replaces underscores and whitespace with hyphens
    - Replaces characters outside `[a-z0-9./-]` with `-`
    - Collapses consecutive `-`
    - Strips leading/trailing `-`, `.` and `/`
    - Truncates to 50 characters maximum
    Returns `"change"` if the result is empty.

    Examples:
        >>> sanitize_bookmark_name("Add X")
        'add-x'
        >>> sanitize_bookmark_name("fix: handle `None` in parser!")
        'fix-handle-none-in-parser'
    """
    lowered = name.strip().lower()
    replaced_underscores = lowered.replace("_", "-")
    replaced = re.sub(r"[^a-z0-9./-]+", "-", replaced_underscores)
    collapsed = re.sub(r"-+", "-", replaced)
    trimmed = collapsed.strip("-./")
    result = trimmed or "change"

    if len(result) > 50:
        result = result[:50].rstrip("-./")

    return result


def sanitize_workspace_name(name: str) -> str:
    """Sanitize a name for use as a jj workspace and directory name.

    Same rules as bookmark names, but without `/` and limited to 30 characters.
    Returns `"work"` if the result is empty.
    """
    lowered = name.strip().lower()
    replaced_underscores = lowered.replace("_", "-")
    replaced = re.sub(r"[^a-z0-9.-]+", "-", replaced_underscores)
    collapsed = re.sub(r"-+", "-", replaced)
    trimmed = collapsed.strip("-.")
    result = trimmed or "work"

    if len(result) > 30:
        result = result[:30].rstrip("-.")

    return result


def first_line(description: str) -> str:
    """Return the title (first line) of a change description."""
    stripped = description.strip()
    if not stripped:
        return ""
    return stripped.splitlines()[0].strip()


def normalize_title(title: str) -> str:
    """Normalize a title for comparing local changes against landed commits.

    Squash-merges on GitHub append ` (#123)` to the title; that suffix and case
    differences are ignored.

    Examples:
        >>> normalize_title("Add X (#42)")
        'add x'
    """
    return _PR_SUFFIX.sub("", first_line(title)).strip().casefold()

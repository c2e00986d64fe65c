"""Fake jj operations for testing.

FakeJj is an in-memory change graph that accepts pre-configured state in its
constructor. It models the parts of jj the engine depends on:

- single-parent history with stable change ids and rewritten commit ids
- per-file content, so emptiness and rebase conflicts follow from content
  (a change whose writes already exist in its new base becomes empty; a path
  changed differently on both sides becomes a conflict)
- local bookmarks, remote-tracking bookmarks and fetch/push
- multiple workspaces, each with its own working-copy change and root path
- an operation log for undo, and stale working copies
- a small revset language: @, root(), trunk(), ids and id prefixes,
  bookmark names, name@remote, postfix - and +, x..y and ::x
"""

import copy
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import NoReturn

from ship.core.errors import map_jj_error
from ship.core.jj.abc import Jj
from ship.core.jj.types import (
    ROOT_CHANGE_ID,
    ROOT_COMMIT_ID,
    Change,
    OperationInfo,
    StaleUpdate,
    WorkspaceInfo,
)

_FAKE_TIMESTAMP = datetime(2025, 1, 1, tzinfo=UTC)


@dataclass(frozen=True)
class FakeCommit:
    """Seed state for a change in FakeJj.

    Attributes:
        change_id: Stable change id
        parent: Change id of the parent; None means the root commit (or, for
            commits in fetch_updates, the current target of the remote bookmark)
        description: Full description
        files: Paths written by this change and their new content
        author: Author email
        conflict: Whether the change starts out conflicted
    """

    change_id: str
    parent: str | None = None
    description: str = ""
    files: dict[str, str] = field(default_factory=dict)
    author: str = "dev@example.com"
    conflict: bool = False


@dataclass
class _Node:
    change_id: str
    commit_id: str
    parent: str | None
    description: str
    files: dict[str, str]
    author: str
    conflict: bool


@dataclass
class _State:
    nodes: dict[str, _Node]
    bookmarks: dict[str, str]
    remote_bookmarks: dict[str, str]
    working_copies: dict[str, str]
    workspace_roots: dict[str, Path]


class FakeJj(Jj):
    """In-memory fake implementation of jj operations.

    This class has NO public setup methods. All state is provided via constructor
    using keyword arguments, and mutations are observable through read-only
    properties.
    """

    def __init__(
        self,
        *,
        root: Path = Path("/repo"),
        commits: list[FakeCommit] | None = None,
        working_copies: dict[str, str] | None = None,
        workspace_roots: dict[str, Path] | None = None,
        bookmarks: dict[str, str] | None = None,
        remote_bookmarks: dict[str, str] | None = None,
        fetch_updates: dict[str, list[FakeCommit]] | None = None,
        stale_workspaces: set[str] | None = None,
        push_failures: set[str] | None = None,
        fetch_error: str | None = None,
    ) -> None:
        """Create FakeJj with pre-configured state.

        Args:
            root: Root directory of the "default" workspace
            commits: Changes in parent-before-child order
            working_copies: Mapping of workspace name -> working-copy change id.
                Workspaces without an entry get a fresh empty change on top of the
                last seeded commit, the way jj leaves a scratch change on checkout.
            workspace_roots: Mapping of extra workspace name -> root directory
            bookmarks: Mapping of local bookmark name -> change id
            remote_bookmarks: Mapping of "name@remote" -> change id
            fetch_updates: Mapping of "name@remote" -> commits that appear on the
                remote and are applied by the next git_fetch()
            stale_workspaces: Workspaces whose working copy starts out stale
            push_failures: Bookmarks whose push is rejected by the remote
            fetch_error: If set, git_fetch() fails with this output
        """
        self._commit_counter = 0
        self._change_counter = 0

        nodes: dict[str, _Node] = {
            ROOT_CHANGE_ID: _Node(
                change_id=ROOT_CHANGE_ID,
                commit_id=ROOT_COMMIT_ID,
                parent=None,
                description="",
                files={},
                author="",
                conflict=False,
            )
        }
        last_change_id = ROOT_CHANGE_ID
        for commit in commits or []:
            nodes[commit.change_id] = self._node_from_seed(commit, commit.parent or ROOT_CHANGE_ID)
            last_change_id = commit.change_id

        roots: dict[str, Path] = {"default": root}
        roots.update(workspace_roots or {})

        self._state = _State(
            nodes=nodes,
            bookmarks=dict(bookmarks or {}),
            remote_bookmarks=dict(remote_bookmarks or {}),
            working_copies=dict(working_copies or {}),
            workspace_roots=roots,
        )
        for name in roots:
            if name not in self._state.working_copies:
                self._state.working_copies[name] = self._create_node(last_change_id, "")

        self._fetch_updates = {ref: list(seeds) for ref, seeds in (fetch_updates or {}).items()}
        self._stale_workspaces = set(stale_workspaces or set())
        self._push_failures = set(push_failures or set())
        self._fetch_error = fetch_error

        self._operations: list[tuple[str, _State]] = []
        self._pushed_bookmarks: list[str] = []
        self._fetch_count = 0
        self._rebase_calls: list[tuple[str, str]] = []
        self._abandoned_change_ids: list[str] = []
        self._forgotten_workspaces: list[str] = []
        self._undone_operations: list[str] = []

    # ------------------------------------------------------------------
    # Mutation tracking (test assertions only)
    # ------------------------------------------------------------------

    @property
    def pushed_bookmarks(self) -> list[str]:
        return list(self._pushed_bookmarks)

    @property
    def fetch_count(self) -> int:
        return self._fetch_count

    @property
    def rebase_calls(self) -> list[tuple[str, str]]:
        """(source, destination) pairs passed to rebase()."""
        return list(self._rebase_calls)

    @property
    def abandoned_change_ids(self) -> list[str]:
        return list(self._abandoned_change_ids)

    @property
    def forgotten_workspaces(self) -> list[str]:
        return list(self._forgotten_workspaces)

    @property
    def undone_operations(self) -> list[str]:
        return list(self._undone_operations)

    @property
    def remote_bookmarks(self) -> dict[str, str]:
        return dict(self._state.remote_bookmarks)

    # ------------------------------------------------------------------
    # Internal graph helpers
    # ------------------------------------------------------------------

    def _next_commit_id(self) -> str:
        self._commit_counter += 1
        return f"{self._commit_counter:040x}"

    def _next_change_id(self) -> str:
        self._change_counter += 1
        return f"k{self._change_counter:031d}"

    def _node_from_seed(self, seed: FakeCommit, parent: str) -> _Node:
        return _Node(
            change_id=seed.change_id,
            commit_id=self._next_commit_id(),
            parent=parent,
            description=seed.description,
            files=dict(seed.files),
            author=seed.author,
            conflict=seed.conflict,
        )

    def _create_node(self, parent: str, description: str) -> str:
        change_id = self._next_change_id()
        self._state.nodes[change_id] = _Node(
            change_id=change_id,
            commit_id=self._next_commit_id(),
            parent=parent,
            description=description,
            files={},
            author="dev@example.com",
            conflict=False,
        )
        return change_id

    def _fail(self, output: str, command: str) -> NoReturn:
        raise map_jj_error(output, command, 1)

    def _workspace_for(self, cwd: Path) -> str:
        best: tuple[int, str] | None = None
        resolved = Path(cwd)
        for name, root in self._state.workspace_roots.items():
            if resolved == root or root in resolved.parents:
                depth = len(root.parts)
                if best is None or depth > best[0]:
                    best = (depth, name)
        if best is None:
            self._fail(f"Error: There is no jj repo in \"{cwd}\"", "")
        return best[1]

    def _check_stale(self, cwd: Path, command: str) -> str:
        workspace = self._workspace_for(cwd)
        if workspace in self._stale_workspaces:
            self._fail(
                "Error: The working copy is stale (not updated since operation abc123).",
                command,
            )
        return workspace

    def _children(self, change_id: str) -> list[str]:
        return sorted(n.change_id for n in self._state.nodes.values() if n.parent == change_id)

    def _ancestors(self, change_id: str) -> set[str]:
        result: set[str] = set()
        current: str | None = change_id
        while current is not None:
            result.add(current)
            current = self._state.nodes[current].parent
        return result

    def _descendants(self, change_id: str) -> list[str]:
        """Descendants of change_id (exclusive) in parent-before-child order."""
        ordered: list[str] = []
        queue = self._children(change_id)
        while queue:
            current = queue.pop(0)
            ordered.append(current)
            queue.extend(self._children(current))
        return ordered

    def _depth(self, change_id: str) -> int:
        return len(self._ancestors(change_id))

    def _tree(self, change_id: str | None) -> dict[str, str]:
        if change_id is None:
            return {}
        chain: list[_Node] = []
        current: str | None = change_id
        while current is not None:
            node = self._state.nodes[current]
            chain.append(node)
            current = node.parent
        tree: dict[str, str] = {}
        for node in reversed(chain):
            tree.update(node.files)
        return tree

    def _is_empty(self, node: _Node) -> bool:
        if node.parent is None:
            return True
        base = self._tree(node.parent)
        return all(base.get(path) == content for path, content in node.files.items())

    def _trunk(self) -> str:
        for ref in ("main@origin", "master@origin", "trunk@origin"):
            target = self._state.remote_bookmarks.get(ref)
            if target is not None and target in self._state.nodes:
                return target
        return ROOT_CHANGE_ID

    def _is_immutable(self, change_id: str) -> bool:
        """Ancestors of trunk() are immutable, as with jj's default immutable_heads()."""
        return change_id in self._ancestors(self._trunk())

    def _check_mutable(self, change_id: str, command: str) -> None:
        if self._is_immutable(change_id):
            commit_id = self._state.nodes[change_id].commit_id
            self._fail(f"Error: Commit {commit_id[:12]} is immutable", command)

    def _rewrite(self, change_ids: list[str]) -> None:
        for change_id in change_ids:
            self._state.nodes[change_id].commit_id = self._next_commit_id()

    def _move_onto(self, change_id: str, new_parent: str) -> None:
        """Reparent change_id and carry its descendants along, three-way merging files."""
        affected = [change_id, *self._descendants(change_id)]
        old_bases = {c: self._tree(self._state.nodes[c].parent) for c in affected}
        self._state.nodes[change_id].parent = new_parent

        for current in affected:
            node = self._state.nodes[current]
            old_base = old_bases[current]
            new_base = self._tree(node.parent)
            for path, content in node.files.items():
                before = old_base.get(path)
                after = new_base.get(path)
                if after != before and after != content:
                    node.conflict = True
            parent = node.parent
            if parent is not None and self._state.nodes[parent].conflict and parent in affected:
                node.conflict = True
        self._rewrite(affected)

    def _remove_node(self, change_id: str, *, track: bool = True) -> None:
        """Abandon change_id: descendants move to its parent, bookmarks are deleted."""
        node = self._state.nodes[change_id]
        parent = node.parent or ROOT_CHANGE_ID
        for child in self._children(change_id):
            self._move_onto(child, parent)
        del self._state.nodes[change_id]
        for name in [b for b, target in self._state.bookmarks.items() if target == change_id]:
            del self._state.bookmarks[name]
        for workspace, target in list(self._state.working_copies.items()):
            if target == change_id:
                self._state.working_copies[workspace] = self._create_node(parent, "")
        if track:
            self._abandoned_change_ids.append(change_id)

    def _leave_working_copy(self, workspace: str, previous: str) -> None:
        """Drop the previous working copy if jj would consider it discardable."""
        node = self._state.nodes.get(previous)
        if node is None or previous == ROOT_CHANGE_ID:
            return
        still_checked_out = previous in self._state.working_copies.values()
        has_bookmarks = previous in self._state.bookmarks.values()
        if (
            not still_checked_out
            and not has_bookmarks
            and not node.description.strip()
            and not self._children(previous)
            and self._is_empty(node)
        ):
            del self._state.nodes[previous]

    def _record(self, description: str) -> None:
        self._operations.append((description, copy.deepcopy(self._state)))

    # ------------------------------------------------------------------
    # Revset evaluation
    # ------------------------------------------------------------------

    def _resolve_atom(self, cwd: Path, atom: str, command: str) -> set[str]:
        nodes = self._state.nodes
        if atom == "@":
            workspace = self._workspace_for(cwd)
            return {self._state.working_copies[workspace]}
        if atom == "root()":
            return {ROOT_CHANGE_ID}
        if atom == "trunk()":
            return {self._trunk()}
        if atom in self._state.remote_bookmarks:
            return {self._state.remote_bookmarks[atom]}
        if atom in self._state.bookmarks:
            return {self._state.bookmarks[atom]}
        if atom in nodes:
            return {atom}

        matches = {
            n.change_id
            for n in nodes.values()
            if n.change_id.startswith(atom) or n.commit_id.startswith(atom)
        }
        if len(matches) == 1:
            return matches
        self._fail(f'Error: Revision "{atom}" doesn\'t exist', command)

    def _resolve_term(self, cwd: Path, term: str, command: str) -> set[str]:
        term = term.strip()
        if term.startswith("::"):
            result: set[str] = set()
            for change_id in self._resolve_term(cwd, term[2:], command):
                result |= self._ancestors(change_id)
            return result

        suffix_start = len(term)
        while suffix_start > 0 and term[suffix_start - 1] in "+-":
            suffix_start -= 1
        current = self._resolve_atom(cwd, term[:suffix_start], command)
        for op in term[suffix_start:]:
            stepped: set[str] = set()
            for change_id in current:
                if op == "-":
                    parent = self._state.nodes[change_id].parent
                    if parent is not None:
                        stepped.add(parent)
                else:
                    stepped.update(self._children(change_id))
            current = stepped
        return current

    def _evaluate(self, cwd: Path, revset: str, command: str) -> list[str]:
        revset = revset.strip()
        if ".." in revset:
            lower, upper = revset.split("..", 1)
            upper_set: set[str] = set()
            for change_id in self._resolve_term(cwd, upper, command):
                upper_set |= self._ancestors(change_id)
            lower_set: set[str] = {ROOT_CHANGE_ID}
            if lower.strip():
                for change_id in self._resolve_term(cwd, lower, command):
                    lower_set |= self._ancestors(change_id)
            selected = upper_set - lower_set
        else:
            selected = self._resolve_term(cwd, revset, command)
        return sorted(selected, key=lambda c: (-self._depth(c), c))

    def _single(self, cwd: Path, revision: str, command: str) -> str:
        resolved = self._evaluate(cwd, revision, command)
        if len(resolved) != 1:
            self._fail(f'Error: Revset "{revision}" didn\'t resolve to any revisions', command)
        return resolved[0]

    def _to_change(self, change_id: str, workspace: str) -> Change:
        node = self._state.nodes[change_id]
        parent_ids: tuple[str, ...] = ()
        if node.parent is not None:
            parent_ids = (self._state.nodes[node.parent].commit_id,)
        return Change(
            id=node.commit_id,
            change_id=node.change_id,
            description=node.description,
            author=node.author,
            timestamp=_FAKE_TIMESTAMP,
            bookmarks=tuple(
                sorted(
                    name for name, target in self._state.bookmarks.items() if target == change_id
                )
            ),
            is_working_copy=self._state.working_copies.get(workspace) == change_id,
            is_empty=self._is_empty(node),
            has_conflict=node.conflict,
            parent_ids=parent_ids,
        )

    # ------------------------------------------------------------------
    # Jj interface
    # ------------------------------------------------------------------

    def get_repo_root(self, cwd: Path) -> Path | None:
        resolved = Path(cwd)
        best: Path | None = None
        for root in self._state.workspace_roots.values():
            if resolved == root or root in resolved.parents:
                if best is None or len(root.parts) > len(best.parts):
                    best = root
        return best

    def log(self, cwd: Path, revset: str) -> list[Change]:
        workspace = self._check_stale(cwd, "log")
        return [self._to_change(c, workspace) for c in self._evaluate(cwd, revset, "log")]

    def list_bookmarks(self, cwd: Path) -> list[str]:
        self._workspace_for(cwd)
        return sorted(self._state.bookmarks)

    def get_last_operation(self, cwd: Path) -> OperationInfo | None:
        self._workspace_for(cwd)
        if not self._operations:
            return OperationInfo(id="000000000000", description="")
        return OperationInfo(
            id=f"{len(self._operations):012x}", description=self._operations[-1][0]
        )

    def new(self, cwd: Path, message: str | None, revision: str = "@") -> None:
        workspace = self._check_stale(cwd, "new")
        parent = self._single(cwd, revision, "new")
        self._record("new empty commit")
        previous = self._state.working_copies[workspace]
        self._state.working_copies[workspace] = self._create_node(parent, message or "")
        self._leave_working_copy(workspace, previous)

    def describe(self, cwd: Path, message: str, revision: str = "@") -> None:
        self._check_stale(cwd, "describe")
        target = self._single(cwd, revision, "describe")
        self._check_mutable(target, "describe")
        self._record(f"describe commit {self._state.nodes[target].commit_id[:12]}")
        self._state.nodes[target].description = message
        self._rewrite([target, *self._descendants(target)])

    def edit(self, cwd: Path, revision: str) -> None:
        workspace = self._check_stale(cwd, "edit")
        target = self._single(cwd, revision, "edit")
        self._check_mutable(target, "edit")
        self._record(f"edit commit {self._state.nodes[target].commit_id[:12]}")
        previous = self._state.working_copies[workspace]
        self._state.working_copies[workspace] = target
        self._leave_working_copy(workspace, previous)

    def abandon(self, cwd: Path, revision: str) -> None:
        self._check_stale(cwd, "abandon")
        target = self._single(cwd, revision, "abandon")
        self._check_mutable(target, "abandon")
        self._record(f"abandon commit {self._state.nodes[target].commit_id[:12]}")
        self._remove_node(target)

    def squash(self, cwd: Path, message: str) -> None:
        workspace = self._check_stale(cwd, "squash")
        source = self._state.working_copies[workspace]
        parent = self._state.nodes[source].parent
        if parent is None or parent == ROOT_CHANGE_ID:
            self._fail("Error: Cannot squash into the root commit", "squash")
        self._check_mutable(parent, "squash")
        self._record(f"squash commits into {self._state.nodes[parent].commit_id[:12]}")

        parent_node = self._state.nodes[parent]
        parent_node.files.update(self._state.nodes[source].files)
        parent_node.description = message
        self._state.nodes[source].files = {}
        self._rewrite([parent])
        self._remove_node(source, track=False)

    def rebase(self, cwd: Path, source: str, destination: str) -> None:
        self._check_stale(cwd, "rebase")
        source_id = self._single(cwd, source, "rebase")
        destination_id = self._single(cwd, destination, "rebase")
        self._check_mutable(source_id, "rebase")
        if destination_id == source_id or destination_id in self._descendants(source_id):
            self._fail(
                f"Error: Cannot rebase {source_id[:12]} onto descendant {destination_id[:12]}",
                "rebase",
            )
        self._rebase_calls.append((source, destination))
        self._record(f"rebase commit {self._state.nodes[source_id].commit_id[:12]}")
        self._move_onto(source_id, destination_id)

    def git_fetch(self, cwd: Path, remote: str) -> None:
        self._workspace_for(cwd)
        if self._fetch_error is not None:
            self._fail(self._fetch_error, "git fetch")
        self._fetch_count += 1
        self._record(f"fetch from git remote(s) {remote}")

        for ref, seeds in self._fetch_updates.items():
            if not ref.endswith(f"@{remote}"):
                continue
            previous_target = self._state.remote_bookmarks.get(ref, ROOT_CHANGE_ID)
            tip = previous_target
            for seed in seeds:
                self._state.nodes[seed.change_id] = self._node_from_seed(seed, seed.parent or tip)
                tip = seed.change_id
            self._state.remote_bookmarks[ref] = tip
            local_name = ref.rsplit("@", 1)[0]
            if self._state.bookmarks.get(local_name) == previous_target:
                self._state.bookmarks[local_name] = tip
        self._fetch_updates = {
            ref: seeds
            for ref, seeds in self._fetch_updates.items()
            if not ref.endswith(f"@{remote}")
        }

    def git_push(self, cwd: Path, bookmark: str, remote: str) -> None:
        self._check_stale(cwd, "git push")
        if bookmark not in self._state.bookmarks:
            self._fail(f'Error: Bookmark "{bookmark}" doesn\'t exist', "git push")
        target = self._state.bookmarks[bookmark]
        node = self._state.nodes[target]
        if not node.description.strip():
            self._fail(
                f"Error: Won't push commit {node.commit_id[:12]} since it has no description",
                "git push",
            )
        if bookmark in self._push_failures:
            self._fail("error: failed to push some refs to 'origin'", "git push")
        self._record(f"push bookmark {bookmark} to git remote {remote}")
        self._state.remote_bookmarks[f"{bookmark}@{remote}"] = target
        self._pushed_bookmarks.append(bookmark)

    def create_bookmark(self, cwd: Path, name: str, revision: str) -> None:
        self._check_stale(cwd, "bookmark create")
        if name in self._state.bookmarks:
            self._fail(f"Error: Bookmark already exists: {name}", "bookmark create")
        target = self._single(cwd, revision, "bookmark create")
        self._record(f"create bookmark {name} pointing to commit")
        self._state.bookmarks[name] = target

    def move_bookmark(self, cwd: Path, name: str, revision: str) -> None:
        self._check_stale(cwd, "bookmark move")
        if name not in self._state.bookmarks:
            self._fail(f'Error: Bookmark "{name}" doesn\'t exist', "bookmark move")
        target = self._single(cwd, revision, "bookmark move")
        self._record(f"point bookmark {name} to commit")
        self._state.bookmarks[name] = target

    def delete_bookmark(self, cwd: Path, name: str) -> None:
        self._check_stale(cwd, "bookmark delete")
        if name not in self._state.bookmarks:
            self._fail(f'Error: Bookmark "{name}" doesn\'t exist', "bookmark delete")
        self._record(f"delete bookmark {name}")
        del self._state.bookmarks[name]

    def list_workspaces(self, cwd: Path) -> list[WorkspaceInfo]:
        self._workspace_for(cwd)
        workspaces: list[WorkspaceInfo] = []
        for name in sorted(self._state.working_copies):
            node = self._state.nodes[self._state.working_copies[name]]
            workspaces.append(
                WorkspaceInfo(
                    name=name,
                    change_id=node.change_id,
                    commit_id=node.commit_id,
                    description=node.description,
                )
            )
        return workspaces

    def add_workspace(self, cwd: Path, name: str, path: Path, revision: str | None) -> None:
        workspace = self._workspace_for(cwd)
        if name in self._state.working_copies:
            self._fail(f"Error: Workspace '{name}' already exists", "workspace add")
        if revision is not None:
            parent = self._single(cwd, revision, "workspace add")
        else:
            current = self._state.nodes[self._state.working_copies[workspace]]
            parent = current.parent or ROOT_CHANGE_ID
        self._record(f"create initial working-copy commit in workspace {name}")
        self._state.working_copies[name] = self._create_node(parent, "")
        self._state.workspace_roots[name] = path

    def forget_workspace(self, cwd: Path, name: str) -> None:
        self._workspace_for(cwd)
        if name not in self._state.working_copies:
            self._fail(f"Error: No workspace named '{name}'", "workspace forget")
        self._record(f"forget workspace {name}")
        del self._state.working_copies[name]
        self._state.workspace_roots.pop(name, None)
        self._forgotten_workspaces.append(name)

    def update_stale(self, cwd: Path) -> StaleUpdate:
        workspace = self._workspace_for(cwd)
        if workspace not in self._stale_workspaces:
            return StaleUpdate(
                updated=False, message="Nothing to do (the working copy is not stale)."
            )
        self._stale_workspaces.discard(workspace)
        node = self._state.nodes[self._state.working_copies[workspace]]
        return StaleUpdate(
            updated=True,
            message=f"Working copy (@) now at: {node.change_id[:8]} {node.commit_id[:8]}",
        )

    def undo(self, cwd: Path) -> None:
        self._workspace_for(cwd)
        if not self._operations:
            self._fail("Error: Cannot undo root operation", "undo")
        description, snapshot = self._operations.pop()
        self._state = snapshot
        self._undone_operations.append(description)

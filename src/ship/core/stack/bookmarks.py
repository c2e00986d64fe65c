"""Bookmark management with strict create/move semantics.

jj's own `bookmark set` creates a bookmark when it is absent. Here creating an
existing bookmark and moving a missing one are both errors, and neither call
falls back to the other.
"""

from ship.core.context import ShipContext
from ship.core.errors import BookmarkExistsError, BookmarkNotFoundError


class BookmarkManager:
    def __init__(self, ctx: ShipContext) -> None:
        self._ctx = ctx

    def list_bookmarks(self) -> list[str]:
        return self._ctx.jj.list_bookmarks(self._ctx.cwd)

    def exists(self, name: str) -> bool:
        return name in self.list_bookmarks()

    def create_bookmark(self, name: str, revision: str = "@") -> None:
        """Point a new bookmark at revision.

        Raises:
            BookmarkExistsError: If name is already a local bookmark
        """
        if self.exists(name):
            raise BookmarkExistsError(name)
        self._ctx.jj.create_bookmark(self._ctx.cwd, name, revision)

    def move_bookmark(self, name: str, revision: str = "@") -> None:
        """Repoint an existing bookmark at revision.

        Raises:
            BookmarkNotFoundError: If name is not a local bookmark
        """
        if not self.exists(name):
            raise BookmarkNotFoundError(name)
        self._ctx.jj.move_bookmark(self._ctx.cwd, name, revision)

    def delete_bookmark(self, name: str) -> None:
        """Remove the bookmark. The change it pointed at is untouched.

        Raises:
            BookmarkNotFoundError: If name is not a local bookmark
        """
        if not self.exists(name):
            raise BookmarkNotFoundError(name)
        self._ctx.jj.delete_bookmark(self._ctx.cwd, name)

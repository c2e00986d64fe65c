"""Type definitions for pull-request operations."""

from dataclasses import dataclass
from typing import Literal

PrState = Literal["open", "closed", "merged"]


@dataclass(frozen=True)
class PullRequest:
    """A pull request as reported by the hosting service."""

    number: int
    title: str
    url: str
    state: PrState
    head: str
    base: str
    is_draft: bool = False


@dataclass(frozen=True)
class CreatePrInput:
    title: str
    body: str
    head: str
    base: str = "main"
    draft: bool = False


@dataclass(frozen=True)
class UpdatePrInput:
    """Fields to change on an existing PR. None leaves the field untouched."""

    title: str | None = None
    body: str | None = None

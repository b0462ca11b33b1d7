"""Selection of follower accounts that may contribute edges to the graph."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Literal, Union


@dataclass(frozen=True)
class Unrestricted:
    """Every follower edge is considered (global ranking)."""

    @property
    def is_global(self) -> bool:
        return True

    def allows(self, follower: str) -> bool:
        return True

    def describe(self) -> Literal["all"]:
        return "all"


@dataclass(frozen=True)
class RestrictedTo:
    """Only edges whose follower is in ``followers`` are considered."""

    followers: frozenset[str]
    requested_count: int = 0

    def __post_init__(self) -> None:
        if not self.followers:
            raise ValueError("RestrictedTo requires at least one follower")

    @property
    def is_global(self) -> bool:
        return False

    def allows(self, follower: str) -> bool:
        return follower in self.followers

    def describe(self) -> int:
        return self.requested_count or len(self.followers)


Selection = Union[Unrestricted, RestrictedTo]

UNRESTRICTED = Unrestricted()


def selection_from_followers(followers: Iterable[str] | None) -> Selection:
    """Turn an optional list of selected follower handles into a Selection.

    ``None`` and empty inputs both mean the global computation. The
    requested count keeps duplicates, as the caller sent them.
    """
    if followers is None:
        return UNRESTRICTED
    requested = list(followers)
    if not requested:
        return UNRESTRICTED
    return RestrictedTo(frozenset(requested), requested_count=len(requested))

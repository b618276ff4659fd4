"""Materialization of the in-scope file set."""

from __future__ import annotations

from typing import AbstractSet, Iterable, Iterator, List, Optional

from .logging import get_logger
from .models import ScopeConfig
from .scope.matcher import ScopeMatcher

logger = get_logger("target_set")


class TargetSet(AbstractSet[str]):
    """Immutable set of tracked, in-scope repository paths.

    Built once per command and shared read-only across analyzers; lookups are
    hash based, patterns are never re-evaluated.
    """

    __slots__ = ("_paths", "scope")

    def __init__(self, paths: Iterable[str] = (), scope: Optional[ScopeConfig] = None) -> None:
        self._paths = frozenset(paths)
        self.scope = scope

    def __contains__(self, path: object) -> bool:
        return path in self._paths

    def __iter__(self) -> Iterator[str]:
        return iter(self._paths)

    def __len__(self) -> int:
        return len(self._paths)

    def __repr__(self) -> str:
        return f"TargetSet({len(self._paths)} paths)"

    def sorted_paths(self) -> List[str]:
        return sorted(self._paths)

    def intersection(self, paths: Iterable[str]) -> "TargetSet":
        return TargetSet(self._paths.intersection(paths), scope=self.scope)


def build_target_set(tracked_files: Iterable[str], scope: Optional[ScopeConfig]) -> TargetSet:
    """Return the tracked paths admitted by ``scope``."""
    tracked = list(tracked_files)
    target = TargetSet(ScopeMatcher(scope).filter(tracked), scope=scope)
    logger.debug("Target set prepared: %d tracked, %d in scope", len(set(tracked)), len(target))
    return target


__all__ = ["TargetSet", "build_target_set"]

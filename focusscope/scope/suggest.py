"""Typo correction for scope patterns that match nothing."""

from __future__ import annotations

from typing import Iterable, List, Set

from rapidfuzz.distance import Levenshtein

_MAX_DISTANCE = 2
_MAX_SUGGESTIONS = 3
_GLOB_CHARS = set("*?[]{}\\")


def top_level_directories(paths: Iterable[str]) -> Set[str]:
    """Return the first directory segment of every nested path."""
    directories: Set[str] = set()
    for path in paths:
        head, sep, _ = path.partition("/")
        if sep and head:
            directories.add(head)
    return directories


def suggest_patterns(
    pattern: str,
    tracked_files: Iterable[str],
    max_suggestions: int = _MAX_SUGGESTIONS,
) -> List[str]:
    """Return corrected variants of ``pattern`` whose first segment is a near-miss.

    Exact directory matches are never suggested, only directories within an
    edit distance of 1 or 2.
    """
    token = pattern.split("/", 1)[0]
    if not token or _GLOB_CHARS.intersection(token):
        return []

    candidates = []
    for directory in top_level_directories(tracked_files):
        distance = Levenshtein.distance(token, directory)
        if 0 < distance <= _MAX_DISTANCE:
            candidates.append((distance, directory))
    candidates.sort()

    return [
        pattern.replace(token, directory, 1)
        for _, directory in candidates[: max(max_suggestions, 0)]
    ]


def format_suggestion(pattern: str) -> str:
    return f"Did you mean: '{pattern}'"


__all__ = ["format_suggestion", "suggest_patterns", "top_level_directories"]

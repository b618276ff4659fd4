"""Checks a scope against the repository's tracked files."""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from ..models import ScopeConfig, ScopeValidationResult, ValidationWarning
from .matcher import ScopeMatcher, compile_glob, is_valid_glob
from .suggest import format_suggestion, suggest_patterns


def validate_scope_structure(scope: Optional[ScopeConfig], source: str) -> List[str]:
    """Return structural problems in a declared scope (empty or invalid patterns)."""
    return [message for _, message in _structure_problems(scope, source)]


def empty_pattern_errors(scope: Optional[ScopeConfig], source: str) -> List[str]:
    """Return only the empty-pattern problems, which make a declaration unusable.

    Invalid glob syntax is not included: such a pattern simply never matches.
    """
    return [message for empty, message in _structure_problems(scope, source) if empty]


def _structure_problems(scope: Optional[ScopeConfig], source: str) -> List[Tuple[bool, str]]:
    if scope is None:
        return []
    problems: List[Tuple[bool, str]] = []
    for kind, patterns in (("include", scope.include), ("exclude", scope.exclude)):
        for pattern in patterns:
            if not pattern.strip():
                problems.append((True, f"{source} contains empty {kind} pattern"))
            elif not is_valid_glob(pattern):
                problems.append((False, f"{source} contains invalid {kind} pattern '{pattern}'"))
    return problems


def validate_scope(
    scope: Optional[ScopeConfig], tracked_files: Sequence[str]
) -> ScopeValidationResult:
    """Count in-scope and excluded files and flag patterns that match nothing.

    Zero-match patterns become warnings with typo suggestions attached; they
    never block the caller.
    """
    tracked = list(dict.fromkeys(tracked_files))
    result = ScopeValidationResult(total_tracked_files=len(tracked), scope=scope)
    result.errors.extend(validate_scope_structure(scope, "scope"))

    matcher = ScopeMatcher(scope)
    result.in_scope_files = sum(1 for path in tracked if matcher.matches(path))
    if scope is None:
        return result

    result.excluded_files = sum(1 for path in tracked if matcher.exclude_matches(path))

    for kind, patterns in (("include", scope.include), ("exclude", scope.exclude)):
        for pattern in patterns:
            if not pattern.strip():
                continue
            regex = compile_glob(pattern)
            if regex is not None and any(regex.fullmatch(path) for path in tracked):
                continue
            suggestions = tuple(
                format_suggestion(candidate) for candidate in suggest_patterns(pattern, tracked)
            )
            result.warnings.append(
                ValidationWarning(
                    pattern=pattern,
                    kind=kind,
                    message=f"{kind.capitalize()} pattern '{pattern}' matched 0 files.",
                    suggestions=suggestions,
                )
            )
            result.suggestions.extend(suggestions)

    return result


__all__ = ["empty_pattern_errors", "validate_scope", "validate_scope_structure"]

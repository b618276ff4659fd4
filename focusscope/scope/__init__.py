"""Focus Scope parsing, matching, resolution and validation."""

from .matcher import FormatError, ScopeMatcher, match_glob, match_scope, parse_scope_override
from .resolver import ScopeResolver, resolve_scope
from .suggest import format_suggestion, suggest_patterns
from .validation import validate_scope, validate_scope_structure

__all__ = [
    "FormatError",
    "ScopeMatcher",
    "ScopeResolver",
    "format_suggestion",
    "match_glob",
    "match_scope",
    "parse_scope_override",
    "resolve_scope",
    "suggest_patterns",
    "validate_scope",
    "validate_scope_structure",
]

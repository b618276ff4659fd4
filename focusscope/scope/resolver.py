"""Precedence chain selecting the effective Focus Scope."""

from __future__ import annotations

from typing import List, Optional

from ..logging import get_logger
from ..models import ScopeConfig, ScopeResolution
from .matcher import parse_scope_override
from .validation import empty_pattern_errors, validate_scope_structure

SOURCE_OVERRIDE = "override"
SOURCE_PROFILE = "profile"
SOURCE_PROJECT = "project"
SOURCE_DEFAULT = "default"


class ScopeResolver:
    """Resolves a scope from override, profile, project declaration, then default.

    The first tier that yields a scope wins. A malformed override raises
    ``FormatError``. A project declaration with an empty pattern falls
    through; one with bad glob syntax is still applied, and that pattern
    matches nothing.
    """

    def __init__(self) -> None:
        self.logger = get_logger("scope.resolver")

    def resolve(
        self,
        override: Optional[str] = None,
        profile_scope: Optional[ScopeConfig] = None,
        project_scope: Optional[ScopeConfig] = None,
        *,
        profile_name: Optional[str] = None,
    ) -> ScopeResolution:
        warnings: List[str] = []

        if override is not None and override.strip():
            scope = parse_scope_override(override)
            self.logger.debug("Using command-line scope override")
            return ScopeResolution(scope=scope, source=SOURCE_OVERRIDE)

        if profile_scope is not None:
            self.logger.debug("Using scope from active profile '%s'", profile_name or "?")
            return ScopeResolution(scope=profile_scope, source=SOURCE_PROFILE)

        if project_scope is not None:
            errors = empty_pattern_errors(project_scope, "project scope")
            if errors:
                for error in errors:
                    self.logger.warning("Ignoring project scope: %s", error)
                warnings.extend(errors)
            else:
                for problem in validate_scope_structure(project_scope, "project scope"):
                    self.logger.warning("%s; it will match no files", problem)
                self.logger.debug("Using team-wide project scope")
                return ScopeResolution(scope=project_scope, source=SOURCE_PROJECT)

        self.logger.debug("Using default scope (all tracked files)")
        return ScopeResolution(scope=None, source=SOURCE_DEFAULT, warnings=tuple(warnings))


def resolve_scope(
    profile_scope: Optional[ScopeConfig],
    override: Optional[str],
    project_scope: Optional[ScopeConfig] = None,
) -> Optional[ScopeConfig]:
    """Functional form of :meth:`ScopeResolver.resolve` returning only the scope."""
    return ScopeResolver().resolve(override, profile_scope, project_scope).scope


__all__ = [
    "SOURCE_DEFAULT",
    "SOURCE_OVERRIDE",
    "SOURCE_PROFILE",
    "SOURCE_PROJECT",
    "ScopeResolver",
    "resolve_scope",
]

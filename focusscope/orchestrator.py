"""Pipeline orchestration for coverage, insights, value lookups and scope validation."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from .analytics.coverage import CoverageAnalyzer
from .analytics.insights import DEFAULT_LIMIT, InsightsAggregator
from .analytics.query import MetadataQuery
from .config import (
    PROFILE_ENV_VAR,
    ConfigError,
    ProfileConfig,
    ProjectConfig,
    load_config,
    load_profiles,
    resolve_profile,
)
from .git.tracked import TrackedFileSource
from .logging import get_logger
from .models import (
    CoverageReport,
    FieldListing,
    InsightsReport,
    QueryResult,
    ScopeResolution,
    ScopeValidationResult,
    ValuesReport,
)
from .scope.resolver import SOURCE_PROFILE, SOURCE_PROJECT, ScopeResolver
from .scope.validation import validate_scope, validate_scope_structure
from .stores.metadata_index import AnalyzedIndex, MetadataIndex, discover_manifests, load_manifests
from .target_set import TargetSet, build_target_set


@dataclass
class ScopeContext:
    """Everything resolved once per invocation and shared by the analyzers."""

    repo_path: Path
    config: ProjectConfig
    resolution: ScopeResolution
    tracked_files: List[str]
    target_set: TargetSet
    profile: Optional[ProfileConfig] = None
    notes: List[str] = field(default_factory=list)


class Orchestrator:
    """Coordinates scope resolution and the analytics that consume it."""

    def __init__(
        self,
        tracked_source: TrackedFileSource | None = None,
        resolver: ScopeResolver | None = None,
        coverage_analyzer: CoverageAnalyzer | None = None,
        insights_aggregator: InsightsAggregator | None = None,
        metadata_query: MetadataQuery | None = None,
    ) -> None:
        self.tracked_source = tracked_source or TrackedFileSource()
        self.resolver = resolver or ScopeResolver()
        self.coverage_analyzer = coverage_analyzer or CoverageAnalyzer()
        self.insights_aggregator = insights_aggregator or InsightsAggregator()
        self.metadata_query = metadata_query or MetadataQuery(self.insights_aggregator)
        self.logger = get_logger("orchestrator")

    def run_coverage(
        self,
        path: str,
        *,
        scope_override: Optional[str] = None,
        profile: Optional[str] = None,
        manifests: Optional[Sequence[Path]] = None,
    ) -> CoverageReport:
        """Report how much of the active Focus Scope has analysis metadata."""
        context = self.prepare(path, scope_override=scope_override, profile=profile)
        analyzed_index, _ = self._load_indexes(context, manifests)

        report = self.coverage_analyzer.analyze(
            context.tracked_files, context.target_set, analyzed_index
        )
        report.scope_source = context.resolution.source
        report.active_profile = context.profile.name if context.profile else None
        report.generated_at = datetime.now(UTC)
        return report

    def run_insights(
        self,
        path: str,
        fields: Sequence[str] = (),
        *,
        limit: Optional[int] = None,
        scope_override: Optional[str] = None,
        profile: Optional[str] = None,
        manifests: Optional[Sequence[Path]] = None,
    ) -> InsightsReport:
        """Report value distributions for metadata fields within the Focus Scope."""
        context = self.prepare(path, scope_override=scope_override, profile=profile)
        _, metadata_index = self._load_indexes(context, manifests)

        requested = list(fields) or list(context.config.insights.fields)
        if not requested:
            requested = sorted(metadata_index.fields)
            self.logger.debug("No fields requested; using all %d declared fields", len(requested))

        effective_limit = limit if limit is not None else context.config.insights.limit
        if effective_limit is None:
            effective_limit = DEFAULT_LIMIT

        report = self.insights_aggregator.analyze(
            context.target_set, requested, effective_limit, metadata_index
        )
        report.scope_source = context.resolution.source
        report.generated_at = datetime.now(UTC)
        return report

    def run_query(
        self,
        path: str,
        field_name: str,
        values: Sequence[str],
        *,
        scope_override: Optional[str] = None,
        profile: Optional[str] = None,
        manifests: Optional[Sequence[Path]] = None,
    ) -> QueryResult:
        """Find in-scope files whose field equals any of ``values``."""
        context = self.prepare(path, scope_override=scope_override, profile=profile)
        _, metadata_index = self._load_indexes(context, manifests)

        result = self.metadata_query.find(context.target_set, field_name, values, metadata_index)
        result.scope_source = context.resolution.source
        result.generated_at = datetime.now(UTC)
        return result

    def run_values(
        self,
        path: str,
        field_name: Optional[str] = None,
        *,
        scope_override: Optional[str] = None,
        profile: Optional[str] = None,
        manifests: Optional[Sequence[Path]] = None,
    ) -> FieldListing | ValuesReport:
        """List declared fields, or every value of ``field_name``, within the Focus Scope."""
        context = self.prepare(path, scope_override=scope_override, profile=profile)
        _, metadata_index = self._load_indexes(context, manifests)

        report: FieldListing | ValuesReport
        if field_name:
            report = self.metadata_query.list_values(context.target_set, field_name, metadata_index)
        else:
            report = self.metadata_query.list_fields(context.target_set, metadata_index)
        report.scope_source = context.resolution.source
        report.generated_at = datetime.now(UTC)
        return report

    def run_validate(
        self,
        path: str,
        *,
        scope_override: Optional[str] = None,
        profile: Optional[str] = None,
    ) -> ScopeValidationResult:
        """Check the effective scope and the team-wide declaration against tracked files."""
        context = self.prepare(path, scope_override=scope_override, profile=profile)
        result = validate_scope(context.resolution.scope, context.tracked_files)
        result.scope_source = context.resolution.source

        # The team-wide declaration is reported even when another tier won.
        if context.resolution.source != SOURCE_PROJECT:
            for error in validate_scope_structure(context.config.scope, "project scope"):
                if error not in result.errors:
                    result.errors.append(error)
        for note in (*context.resolution.warnings, *context.notes):
            if note not in result.errors:
                result.errors.append(note)
        return result

    def prepare(
        self,
        path: str,
        *,
        scope_override: Optional[str] = None,
        profile: Optional[str] = None,
    ) -> ScopeContext:
        """Resolve the scope and build the target set for one invocation."""
        repo_path = self.tracked_source.find_root(Path(path).expanduser().resolve())
        notes: List[str] = []

        config = self._load_config(repo_path, notes)
        active_profile = self._select_profile(repo_path, profile, notes)

        resolution = self.resolver.resolve(
            scope_override,
            active_profile.scope if active_profile else None,
            config.scope,
            profile_name=active_profile.name if active_profile else None,
        )
        self.logger.debug("Scope resolved from %s tier", resolution.source)

        tracked_files = self.tracked_source.list_files(repo_path)
        target_set = build_target_set(tracked_files, resolution.scope)

        return ScopeContext(
            repo_path=repo_path,
            config=config,
            resolution=resolution,
            tracked_files=tracked_files,
            target_set=target_set,
            profile=active_profile if resolution.source == SOURCE_PROFILE else None,
            notes=notes,
        )

    # ------------------------------------------------------------------
    # Internals

    def _load_config(self, repo_path: Path, notes: List[str]) -> ProjectConfig:
        try:
            return load_config(repo_path)
        except ConfigError as exc:
            self.logger.warning("Ignoring project configuration: %s", exc)
            notes.append(str(exc))
            return ProjectConfig(root=repo_path)

    def _select_profile(
        self, repo_path: Path, requested: Optional[str], notes: List[str]
    ) -> Optional[ProfileConfig]:
        try:
            store = load_profiles(repo_path)
        except ConfigError as exc:
            self.logger.warning("Failed to load profiles for scope resolution: %s", exc)
            notes.append(str(exc))
            return None

        name = requested or os.environ.get(PROFILE_ENV_VAR) or store.active
        if not name:
            return None
        selected = resolve_profile(store, name)
        if selected is None:
            message = f"Profile '{name}' not found; falling back to project scope"
            self.logger.warning(message)
            notes.append(message)
        return selected

    def _load_indexes(
        self, context: ScopeContext, manifests: Optional[Sequence[Path]]
    ) -> Tuple[AnalyzedIndex, MetadataIndex]:
        paths = list(manifests) if manifests else discover_manifests(context.config.manifest_directory)
        if not paths:
            self.logger.info("No analysis manifests found; reporting against an empty index")
            return AnalyzedIndex(), MetadataIndex()
        return load_manifests(paths)


__all__ = ["Orchestrator", "ScopeContext"]

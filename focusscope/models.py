"""Core data models shared across focusscope components."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class ScopeConfig:
    """Include/exclude glob patterns defining a Focus Scope.

    An empty ``include`` admits every candidate and an empty ``exclude``
    rejects nothing. Exclude always has the final say.
    """

    include: Tuple[str, ...] = ()
    exclude: Tuple[str, ...] = ()

    @classmethod
    def from_lists(
        cls, include: Optional[List[str]] = None, exclude: Optional[List[str]] = None
    ) -> "ScopeConfig":
        return cls(include=tuple(include or ()), exclude=tuple(exclude or ()))

    def is_default(self) -> bool:
        return not self.include and not self.exclude


@dataclass(frozen=True)
class ScopeResolution:
    """The effective scope together with the tier that produced it."""

    scope: Optional[ScopeConfig]
    source: str
    warnings: Tuple[str, ...] = ()


@dataclass(frozen=True)
class AnalyzedFileRecord:
    """A file known to the analysis store."""

    path: str
    language: Optional[str] = None
    analyzed: bool = True


class FieldKind(str, Enum):
    SCALAR = "scalar"
    ARRAY = "array"

    @classmethod
    def from_declared(cls, declared: Optional[str]) -> "FieldKind":
        if declared and declared.strip().lower() in {"array", "list"}:
            return cls.ARRAY
        return cls.SCALAR


@dataclass(frozen=True)
class MetadataField:
    """Schema entry for a metadata field."""

    name: str
    kind: FieldKind = FieldKind.SCALAR
    display_name: Optional[str] = None
    description: Optional[str] = None


@dataclass
class CoverageTotals:
    tracked: int = 0
    in_scope: int = 0
    analyzed: int = 0
    out_of_scope: int = 0


@dataclass
class CoveragePercentages:
    focus_coverage: float = 0.0
    total_coverage: float = 0.0


@dataclass
class LanguageCoverage:
    total: int = 0
    analyzed: int = 0
    percent: float = 0.0


@dataclass
class DirectoryBlindSpot:
    """A cluster of in-scope files with no analysis metadata."""

    path: str
    total_files: int = 0


@dataclass
class CoverageReport:
    """Coverage of the active Focus Scope by analysis metadata."""

    totals: CoverageTotals = field(default_factory=CoverageTotals)
    percentages: CoveragePercentages = field(default_factory=CoveragePercentages)
    by_language: Dict[str, LanguageCoverage] = field(default_factory=dict)
    blind_spots: List[DirectoryBlindSpot] = field(default_factory=list)
    status: str = ""
    recommendations: List[str] = field(default_factory=list)
    scope: Optional[ScopeConfig] = None
    scope_source: str = "default"
    active_profile: Optional[str] = None
    generated_at: Optional[datetime] = None


@dataclass
class ValueCount:
    value: str
    count: int
    percent: float


@dataclass
class FieldInsights:
    """Ranked value distribution for one metadata field."""

    name: str
    kind: FieldKind
    values: List[ValueCount] = field(default_factory=list)
    distinct_values: int = 0
    files_with_value: int = 0
    null_count: int = 0


@dataclass
class Completeness:
    files_with_metadata: int = 0
    files_without_requested_metadata: int = 0
    null_value_counts: Dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class UnknownFieldWarning:
    """A requested field that the metadata schema does not declare."""

    field: str
    message: str


@dataclass
class InsightsReport:
    """Metadata value distributions over the active Focus Scope."""

    in_scope_files: int = 0
    fields: List[FieldInsights] = field(default_factory=list)
    completeness: Completeness = field(default_factory=Completeness)
    warnings: List[UnknownFieldWarning] = field(default_factory=list)
    limit: int = 0
    scope: Optional[ScopeConfig] = None
    scope_source: str = "default"
    generated_at: Optional[datetime] = None


@dataclass(frozen=True)
class ValidationWarning:
    """A scope pattern that matched no tracked files."""

    pattern: str
    kind: str
    message: str
    suggestions: Tuple[str, ...] = ()


@dataclass
class ScopeValidationResult:
    total_tracked_files: int = 0
    in_scope_files: int = 0
    excluded_files: int = 0
    warnings: List[ValidationWarning] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    scope: Optional[ScopeConfig] = None
    scope_source: str = "default"


@dataclass
class QueryMatch:
    """An in-scope file whose field value matched a query."""

    path: str
    value: object = None


@dataclass
class QueryResult:
    """Files in the Focus Scope whose field equals any of the requested values."""

    field_name: str
    kind: FieldKind
    values: List[str] = field(default_factory=list)
    matches: List[QueryMatch] = field(default_factory=list)
    in_scope_files: int = 0
    scope: Optional[ScopeConfig] = None
    scope_source: str = "default"
    generated_at: Optional[datetime] = None


@dataclass
class FieldSummary:
    name: str
    kind: FieldKind
    display_name: Optional[str] = None
    description: Optional[str] = None
    files_with_entry: int = 0


@dataclass
class FieldListing:
    """Declared metadata fields with how many in-scope files carry each."""

    fields: List[FieldSummary] = field(default_factory=list)
    in_scope_files: int = 0
    scope: Optional[ScopeConfig] = None
    scope_source: str = "default"
    generated_at: Optional[datetime] = None


@dataclass
class ValuesReport:
    """Every distinct value of one field within the Focus Scope."""

    field_insights: FieldInsights
    in_scope_files: int = 0
    scope: Optional[ScopeConfig] = None
    scope_source: str = "default"
    generated_at: Optional[datetime] = None

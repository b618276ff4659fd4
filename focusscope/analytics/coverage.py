"""Coverage of the Focus Scope by analysis metadata."""

from __future__ import annotations

from collections import Counter
from typing import Dict, Iterable, List, Sequence

from ..logging import get_logger
from ..models import (
    CoveragePercentages,
    CoverageReport,
    CoverageTotals,
    DirectoryBlindSpot,
    LanguageCoverage,
)
from ..stores.metadata_index import AnalyzedIndex
from ..target_set import TargetSet

UNKNOWN_LANGUAGE = "Unknown"
STATUS_HIGH = "High Confidence"
STATUS_PARTIAL = "Partial"
STATUS_NONE = "No Coverage"

_HIGH_CONFIDENCE_THRESHOLD = 90.0
_BLIND_SPOT_DEPTH = 2
_MAX_BLIND_SPOTS = 5


def percent(part: int, whole: int) -> float:
    """Return ``part / whole`` as a percentage, or 0 when ``whole`` is 0."""
    if whole <= 0:
        return 0.0
    return part / whole * 100


def blind_spot_key(path: str, depth: int = _BLIND_SPOT_DEPTH) -> str:
    """Group a path by its first ``depth`` segments; root-level files group by name.

    ``src/api/handler.go`` groups as ``src/api/`` and ``src/main.go`` as
    ``src/main.go/``.
    """
    segments = path.split("/")
    if len(segments) < 2:
        return path
    return "/".join(segments[:depth]) + "/"


class CoverageAnalyzer:
    """Computes totals, language breakdown and blind spots for a target set."""

    def __init__(self, blind_spot_limit: int = _MAX_BLIND_SPOTS) -> None:
        self.blind_spot_limit = blind_spot_limit
        self.logger = get_logger("analytics.coverage")

    def analyze(
        self,
        tracked_files: Sequence[str],
        target_set: TargetSet,
        analyzed_index: AnalyzedIndex,
    ) -> CoverageReport:
        analyzed_paths = {path for path in target_set if analyzed_index.is_analyzed(path)}

        tracked = len(set(tracked_files))
        totals = CoverageTotals(
            tracked=tracked,
            in_scope=len(target_set),
            analyzed=len(analyzed_paths),
            out_of_scope=max(tracked - len(target_set), 0),
        )
        percentages = CoveragePercentages(
            focus_coverage=percent(totals.analyzed, totals.in_scope),
            total_coverage=percent(totals.analyzed, totals.tracked),
        )
        status, recommendation = self._classify(percentages.focus_coverage)

        report = CoverageReport(
            totals=totals,
            percentages=percentages,
            by_language=self._language_breakdown(target_set, analyzed_index, analyzed_paths),
            blind_spots=self._blind_spots(
                path for path in target_set if path not in analyzed_paths
            ),
            status=status,
            recommendations=[recommendation],
            scope=target_set.scope,
        )
        self.logger.debug(
            "Coverage: %d/%d in-scope files analyzed (%.1f%%)",
            totals.analyzed,
            totals.in_scope,
            percentages.focus_coverage,
        )
        return report

    def _language_breakdown(
        self,
        target_set: TargetSet,
        analyzed_index: AnalyzedIndex,
        analyzed_paths: set[str],
    ) -> Dict[str, LanguageCoverage]:
        stats: Dict[str, LanguageCoverage] = {}
        for path in target_set:
            language = analyzed_index.language_of(path) or UNKNOWN_LANGUAGE
            entry = stats.setdefault(language, LanguageCoverage())
            entry.total += 1
            if path in analyzed_paths:
                entry.analyzed += 1

        for entry in stats.values():
            entry.percent = percent(entry.analyzed, entry.total)

        ordered = sorted(stats.items(), key=lambda item: (-item[1].total, item[0]))
        return dict(ordered)

    def _blind_spots(self, unanalyzed: Iterable[str]) -> List[DirectoryBlindSpot]:
        counts = Counter(blind_spot_key(path) for path in unanalyzed)
        ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
        return [
            DirectoryBlindSpot(path=path, total_files=count)
            for path, count in ranked[: self.blind_spot_limit]
        ]

    @staticmethod
    def _classify(focus_coverage: float) -> tuple[str, str]:
        if focus_coverage >= _HIGH_CONFIDENCE_THRESHOLD:
            return (
                STATUS_HIGH,
                f"{focus_coverage:.1f}% of in-scope files analyzed. "
                "High confidence for scoped queries.",
            )
        if focus_coverage > 0:
            return (
                STATUS_PARTIAL,
                "Coverage is partial. Consider importing more manifests to fill blind spots.",
            )
        return (
            STATUS_NONE,
            "No files in scope have been analyzed. Import an analysis manifest to add intelligence.",
        )


__all__ = [
    "CoverageAnalyzer",
    "STATUS_HIGH",
    "STATUS_NONE",
    "STATUS_PARTIAL",
    "UNKNOWN_LANGUAGE",
    "blind_spot_key",
    "percent",
]

"""Metadata value distributions and completeness over the Focus Scope."""

from __future__ import annotations

import json
from collections import Counter
from typing import Any, Iterable, List, Optional, Set

from ..logging import get_logger
from ..models import (
    Completeness,
    FieldInsights,
    FieldKind,
    InsightsReport,
    UnknownFieldWarning,
    ValueCount,
)
from ..stores.metadata_index import MetadataIndex
from ..target_set import TargetSet
from .coverage import percent

DEFAULT_LIMIT = 10


def scalar_token(value: Any) -> Optional[str]:
    """Normalise a scalar metadata value; None or blank means "no value"."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, dict)):
        if not value:
            return None
        return json.dumps(value, sort_keys=True)
    text = str(value).strip()
    return text or None


def array_tokens(value: Any) -> Set[str]:
    """Return the distinct tokens of an array value.

    JSON arrays stored as strings are decoded; any other string is a single
    token.
    """
    if value is None:
        return set()
    if isinstance(value, str):
        stripped = value.strip()
        if stripped.startswith("["):
            try:
                decoded = json.loads(stripped)
            except ValueError:
                decoded = None
            if isinstance(decoded, list):
                return array_tokens(decoded)
        return {stripped} if stripped else set()
    if isinstance(value, (list, tuple, set)):
        tokens: Set[str] = set()
        for item in value:
            token = scalar_token(item)
            if token is not None:
                tokens.add(token)
        return tokens
    token = scalar_token(value)
    return {token} if token is not None else set()


class InsightsAggregator:
    """Ranks metadata values per field for files in the target set."""

    def __init__(self) -> None:
        self.logger = get_logger("analytics.insights")

    def analyze(
        self,
        target_set: TargetSet,
        fields: Iterable[str],
        limit: int,
        metadata_index: MetadataIndex,
    ) -> InsightsReport:
        in_scope = len(target_set)
        report = InsightsReport(in_scope_files=in_scope, limit=limit, scope=target_set.scope)
        files_with_metadata: Set[str] = set()

        for name in dict.fromkeys(fields):
            kind = metadata_index.kind_of(name)
            if kind is None:
                message = f"Field '{name}' is not defined in the metadata schema; skipping."
                self.logger.warning(message)
                report.warnings.append(UnknownFieldWarning(field=name, message=message))
                continue

            insights, with_value = self._analyze_field(name, kind, target_set, limit, metadata_index)
            files_with_metadata.update(with_value)
            report.fields.append(insights)
            report.completeness.null_value_counts[name] = insights.null_count

        report.completeness.files_with_metadata = len(files_with_metadata)
        report.completeness.files_without_requested_metadata = in_scope - len(files_with_metadata)
        return report

    def _analyze_field(
        self,
        name: str,
        kind: FieldKind,
        target_set: TargetSet,
        limit: int,
        metadata_index: MetadataIndex,
    ) -> tuple[FieldInsights, Set[str]]:
        counts: Counter[str] = Counter()
        with_value: Set[str] = set()
        entries = 0

        for path, raw in metadata_index.values_for(name).items():
            if path not in target_set:
                continue
            entries += 1
            if kind is FieldKind.ARRAY:
                tokens = array_tokens(raw)
            else:
                token = scalar_token(raw)
                tokens = {token} if token is not None else set()
            if not tokens:
                continue
            with_value.add(path)
            # tokens is a set, so each file counts at most once per value
            counts.update(tokens)

        ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
        if limit > 0:
            ranked = ranked[:limit]

        in_scope = len(target_set)
        insights = FieldInsights(
            name=name,
            kind=kind,
            values=[
                ValueCount(value=value, count=count, percent=percent(count, in_scope))
                for value, count in ranked
            ],
            distinct_values=len(counts),
            files_with_value=len(with_value),
            null_count=in_scope - entries,
        )
        return insights, with_value


def summarize_completeness(report: InsightsReport) -> List[str]:
    """Human-readable completeness lines for renderers."""
    completeness: Completeness = report.completeness
    lines = [
        f"{completeness.files_with_metadata} of {report.in_scope_files} in-scope files "
        "have metadata for the requested fields",
    ]
    for name, count in completeness.null_value_counts.items():
        if count:
            lines.append(f"{count} in-scope files have no '{name}' entry")
    return lines


__all__ = [
    "DEFAULT_LIMIT",
    "InsightsAggregator",
    "array_tokens",
    "scalar_token",
    "summarize_completeness",
]

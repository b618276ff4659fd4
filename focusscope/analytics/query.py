"""Read-only lookups of metadata values within the Focus Scope."""

from __future__ import annotations

from typing import List, Sequence

from ..logging import get_logger
from ..models import (
    FieldKind,
    FieldListing,
    FieldSummary,
    QueryMatch,
    QueryResult,
    ValuesReport,
)
from ..stores.metadata_index import MetadataIndex
from ..target_set import TargetSet
from .insights import InsightsAggregator, array_tokens, scalar_token


class QueryError(ValueError):
    """Raised when a query names an unknown field or no values."""


def split_values(raw: str) -> List[str]:
    """Split ``a,b`` into values matched with OR semantics."""
    return [part.strip() for part in raw.split(",") if part.strip()]


class MetadataQuery:
    """Finds in-scope files by field value and lists fields and their values."""

    def __init__(self, aggregator: InsightsAggregator | None = None) -> None:
        self.aggregator = aggregator or InsightsAggregator()
        self.logger = get_logger("analytics.query")

    def find(
        self,
        target_set: TargetSet,
        field_name: str,
        values: Sequence[str],
        metadata_index: MetadataIndex,
    ) -> QueryResult:
        """Return in-scope files whose ``field_name`` equals any of ``values``.

        Array fields match when any element equals a requested value.
        """
        kind = self._require_field(field_name, metadata_index)
        wanted = list(dict.fromkeys(value.strip() for value in values if value.strip()))
        if not wanted:
            raise QueryError(f"no values given for field '{field_name}'")

        entries = metadata_index.values_for(field_name)
        matches: List[QueryMatch] = []
        for path in target_set.intersection(entries).sorted_paths():
            raw = metadata_index.get(path, field_name)
            if kind is FieldKind.ARRAY:
                tokens = array_tokens(raw)
            else:
                token = scalar_token(raw)
                tokens = {token} if token is not None else set()
            if tokens.intersection(wanted):
                matches.append(QueryMatch(path=path, value=raw))

        self.logger.debug(
            "Query %s in %s matched %d in-scope files", field_name, wanted, len(matches)
        )
        return QueryResult(
            field_name=field_name,
            kind=kind,
            values=wanted,
            matches=matches,
            in_scope_files=len(target_set),
            scope=target_set.scope,
        )

    def list_fields(self, target_set: TargetSet, metadata_index: MetadataIndex) -> FieldListing:
        summaries = [
            FieldSummary(
                name=name,
                kind=declared.kind,
                display_name=declared.display_name,
                description=declared.description,
                files_with_entry=len(target_set.intersection(metadata_index.values_for(name))),
            )
            for name, declared in sorted(metadata_index.fields.items())
        ]
        return FieldListing(
            fields=summaries, in_scope_files=len(target_set), scope=target_set.scope
        )

    def list_values(
        self, target_set: TargetSet, field_name: str, metadata_index: MetadataIndex
    ) -> ValuesReport:
        """Every distinct value of ``field_name`` among in-scope files, most common first."""
        self._require_field(field_name, metadata_index)
        report = self.aggregator.analyze(target_set, [field_name], 0, metadata_index)
        return ValuesReport(
            field_insights=report.fields[0],
            in_scope_files=len(target_set),
            scope=target_set.scope,
        )

    @staticmethod
    def _require_field(field_name: str, metadata_index: MetadataIndex) -> FieldKind:
        kind = metadata_index.kind_of(field_name)
        if kind is None:
            raise QueryError(f"field '{field_name}' is not defined in the metadata schema")
        return kind


__all__ = ["MetadataQuery", "QueryError", "split_values"]

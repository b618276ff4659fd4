"""Coverage, insights and value lookups over a target set."""

from .coverage import CoverageAnalyzer
from .insights import InsightsAggregator
from .query import MetadataQuery, QueryError

__all__ = ["CoverageAnalyzer", "InsightsAggregator", "MetadataQuery", "QueryError"]

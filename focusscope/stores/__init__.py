"""Read-only stores backing coverage and insights analysis."""

from .metadata_index import AnalyzedIndex, ManifestError, MetadataIndex, load_manifests

__all__ = ["AnalyzedIndex", "ManifestError", "MetadataIndex", "load_manifests"]

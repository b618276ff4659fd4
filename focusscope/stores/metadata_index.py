"""Read-only indexes over analysis manifests."""

from __future__ import annotations

import json
from pathlib import Path, PurePosixPath
from typing import Any, Dict, Iterable, Iterator, Mapping, Optional, Sequence, Tuple

from ..logging import get_logger
from ..models import AnalyzedFileRecord, FieldKind, MetadataField

logger = get_logger("stores.metadata_index")

_LANGUAGE_BY_SUFFIX = {
    ".py": "Python",
    ".pyi": "Python",
    ".js": "JavaScript",
    ".jsx": "JavaScript",
    ".ts": "TypeScript",
    ".tsx": "TypeScript",
    ".java": "Java",
    ".kt": "Kotlin",
    ".kts": "Kotlin",
    ".go": "Go",
    ".rs": "Rust",
    ".rb": "Ruby",
    ".php": "PHP",
    ".cs": "C#",
    ".c": "C",
    ".h": "C",
    ".cpp": "C++",
    ".hpp": "C++",
    ".cc": "C++",
    ".swift": "Swift",
    ".scala": "Scala",
    ".sh": "Shell",
    ".sql": "SQL",
    ".md": "Markdown",
    ".yaml": "YAML",
    ".yml": "YAML",
    ".json": "JSON",
    ".toml": "TOML",
}


class ManifestError(RuntimeError):
    """Raised when an analysis manifest cannot be read."""


def detect_language(path: str) -> Optional[str]:
    return _LANGUAGE_BY_SUFFIX.get(PurePosixPath(path).suffix.lower())


class AnalyzedIndex(Mapping[str, AnalyzedFileRecord]):
    """Files known to the analysis store, keyed by repository-relative path."""

    def __init__(self, records: Iterable[AnalyzedFileRecord] = ()) -> None:
        self._records: Dict[str, AnalyzedFileRecord] = {record.path: record for record in records}

    def __getitem__(self, path: str) -> AnalyzedFileRecord:
        return self._records[path]

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def is_analyzed(self, path: str) -> bool:
        record = self._records.get(path)
        return bool(record and record.analyzed)

    def language_of(self, path: str) -> Optional[str]:
        record = self._records.get(path)
        return record.language if record else None


class MetadataIndex:
    """Field schema plus per-file metadata values, keyed by (field, path)."""

    def __init__(
        self,
        fields: Iterable[MetadataField] = (),
        values: Optional[Mapping[str, Mapping[str, Any]]] = None,
    ) -> None:
        self._fields: Dict[str, MetadataField] = {item.name: item for item in fields}
        self._values: Dict[str, Dict[str, Any]] = {
            name: dict(entries) for name, entries in (values or {}).items()
        }

    @property
    def fields(self) -> Dict[str, MetadataField]:
        return dict(self._fields)

    def kind_of(self, name: str) -> Optional[FieldKind]:
        declared = self._fields.get(name)
        return declared.kind if declared else None

    def values_for(self, name: str) -> Mapping[str, Any]:
        """Return ``path -> raw value`` for every file with an entry for ``name``."""
        return self._values.get(name, {})

    def get(self, path: str, name: str, default: Any = None) -> Any:
        return self._values.get(name, {}).get(path, default)


def load_manifests(paths: Sequence[Path]) -> Tuple[AnalyzedIndex, MetadataIndex]:
    """Build both indexes from analysis manifest JSON files.

    Later manifests override earlier ones for the same file or field.
    """
    records: Dict[str, AnalyzedFileRecord] = {}
    fields: Dict[str, MetadataField] = {}
    values: Dict[str, Dict[str, Any]] = {}

    for path in paths:
        document = _read_manifest(path)
        ref_to_name: Dict[str, str] = {}
        for raw_field in _as_list(document.get("fields")):
            parsed = _field_from_dict(raw_field)
            if parsed is None:
                continue
            ref, metadata_field = parsed
            ref_to_name[ref] = metadata_field.name
            fields[metadata_field.name] = metadata_field

        loaded = 0
        for entry in _as_list(document.get("data")):
            if not isinstance(entry, dict):
                continue
            file_path = entry.get("file_path")
            if not isinstance(file_path, str) or not file_path:
                logger.debug("Skipping manifest entry without file_path in %s", path)
                continue
            file_path = file_path.replace("\\", "/")
            field_values = entry.get("fields") if isinstance(entry.get("fields"), dict) else {}
            for key, value in field_values.items():
                name = ref_to_name.get(key, key)
                if name not in fields:
                    fields[name] = MetadataField(name=name)
                values.setdefault(name, {})[file_path] = value

            language = entry.get("language") if isinstance(entry.get("language"), str) else None
            records[file_path] = AnalyzedFileRecord(
                path=file_path,
                language=language or detect_language(file_path),
                analyzed=_is_analyzed(entry.get("chat_id"), field_values),
            )
            loaded += 1
        logger.debug("Loaded %d manifest entries from %s", loaded, path)

    return AnalyzedIndex(records.values()), MetadataIndex(fields.values(), values)


def discover_manifests(directory: Path) -> list[Path]:
    if not directory.is_dir():
        return []
    return sorted(directory.glob("*.json"))


def _read_manifest(path: Path) -> Dict[str, Any]:
    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ManifestError(f"Manifest not found: {path}") from exc
    except (OSError, ValueError) as exc:
        raise ManifestError(f"Failed to read manifest {path}: {exc}") from exc
    if not isinstance(document, dict):
        raise ManifestError(f"Manifest {path} must contain a JSON object at the root")
    if "data" in document and not isinstance(document["data"], list):
        raise ManifestError(f"Manifest {path} has a non-list 'data' section")
    return document


def _field_from_dict(payload: object) -> Optional[Tuple[str, MetadataField]]:
    if not isinstance(payload, dict):
        return None
    name = payload.get("name")
    if not isinstance(name, str) or not name:
        return None
    ref = payload.get("ref") if isinstance(payload.get("ref"), str) else name
    declared = payload.get("type") if isinstance(payload.get("type"), str) else None
    return ref, MetadataField(
        name=name,
        kind=FieldKind.from_declared(declared),
        display_name=payload.get("display_name") or None,
        description=payload.get("description") or None,
    )


def _is_analyzed(chat_id: object, field_values: Mapping[str, Any]) -> bool:
    # A missing or zero chat_id falls back to whether any values were recorded.
    if isinstance(chat_id, (int, float, str)) and chat_id:
        return True
    return bool(field_values)


def _as_list(value: Any) -> list:
    return value if isinstance(value, list) else []


__all__ = [
    "AnalyzedIndex",
    "ManifestError",
    "MetadataIndex",
    "detect_language",
    "discover_manifests",
    "load_manifests",
]

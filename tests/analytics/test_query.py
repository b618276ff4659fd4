"""Tests for metadata value lookups within the Focus Scope."""

from __future__ import annotations

import pytest

from focusscope.analytics.query import MetadataQuery, QueryError, split_values
from focusscope.models import FieldKind, MetadataField, ScopeConfig
from focusscope.stores.metadata_index import MetadataIndex
from focusscope.target_set import TargetSet

SCOPE = ScopeConfig(include=("src/**",))


def _index() -> MetadataIndex:
    return MetadataIndex(
        [
            MetadataField(name="layer", description="Architectural layer"),
            MetadataField(name="tags", kind=FieldKind.ARRAY),
            MetadataField(name="owner"),
        ],
        {
            "layer": {
                "src/a.go": "api",
                "src/b.go": "db",
                "src/c.go": "service",
                "vendor/x.go": "api",
            },
            "tags": {
                "src/a.go": ["sec", "perf"],
                "src/b.go": '["perf"]',
                "src/c.go": "security",
            },
        },
    )


def _target() -> TargetSet:
    return TargetSet(["src/a.go", "src/b.go", "src/c.go", "src/d.go"], scope=SCOPE)


def test_split_values_trims_and_drops_blanks() -> None:
    assert split_values(" api, db,,") == ["api", "db"]
    assert split_values("") == []


def test_scalar_query_matches_any_requested_value() -> None:
    result = MetadataQuery().find(_target(), "layer", ["db", "api"], _index())

    assert [match.path for match in result.matches] == ["src/a.go", "src/b.go"]
    assert result.values == ["db", "api"]
    assert result.kind is FieldKind.SCALAR
    assert result.in_scope_files == 4
    assert result.scope is SCOPE


def test_out_of_scope_files_never_match() -> None:
    result = MetadataQuery().find(TargetSet(["src/c.go"]), "layer", ["api"], _index())

    assert result.matches == []


def test_array_query_matches_whole_elements_only() -> None:
    result = MetadataQuery().find(_target(), "tags", ["sec"], _index())

    assert [match.path for match in result.matches] == ["src/a.go"]
    assert result.matches[0].value == ["sec", "perf"]


def test_array_query_reads_json_encoded_arrays() -> None:
    result = MetadataQuery().find(_target(), "tags", ["perf"], _index())

    assert [match.path for match in result.matches] == ["src/a.go", "src/b.go"]


def test_unknown_field_is_rejected() -> None:
    with pytest.raises(QueryError, match="field 'risk' is not defined"):
        MetadataQuery().find(_target(), "risk", ["high"], _index())


def test_query_without_values_is_rejected() -> None:
    with pytest.raises(QueryError, match="no values given for field 'layer'"):
        MetadataQuery().find(_target(), "layer", [" ", ""], _index())


def test_list_fields_counts_in_scope_entries() -> None:
    listing = MetadataQuery().list_fields(_target(), _index())

    assert [(item.name, item.kind, item.files_with_entry) for item in listing.fields] == [
        ("layer", FieldKind.SCALAR, 3),
        ("owner", FieldKind.SCALAR, 0),
        ("tags", FieldKind.ARRAY, 3),
    ]
    assert listing.fields[0].description == "Architectural layer"
    assert listing.in_scope_files == 4


def test_list_values_ranks_every_value_without_limit() -> None:
    index = MetadataIndex(
        [MetadataField(name="layer")],
        {"layer": {f"src/{i}.go": ("api" if i < 3 else f"v{i}") for i in range(15)}},
    )
    target = TargetSet(f"src/{i}.go" for i in range(15))

    report = MetadataQuery().list_values(target, "layer", index)

    values = report.field_insights.values
    assert len(values) == 13
    assert (values[0].value, values[0].count) == ("api", 3)
    assert [item.value for item in values[1:3]] == ["v10", "v11"]
    assert report.in_scope_files == 15


def test_list_values_rejects_unknown_field() -> None:
    with pytest.raises(QueryError):
        MetadataQuery().list_values(_target(), "risk", _index())

"""CLI parser and entrypoint tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from focusscope import cli
from focusscope.cli import _build_parser, _split_fields
from focusscope.orchestrator import Orchestrator
from tests._fixtures.repo_builder import RepoBuilder


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "coverage"])
    assert args.verbose is True
    assert args.command == "coverage"
    assert args.path == "."


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["validate", "--verbose"])
    assert args.verbose is True
    assert args.command == "validate"


def test_cli_parses_scope_and_profile_options() -> None:
    parser = _build_parser()
    args = parser.parse_args(
        ["coverage", "repo", "--scope", "include=src/**", "--profile", "sec", "--format", "json"]
    )
    assert args.path == "repo"
    assert args.scope_override == "include=src/**"
    assert args.profile == "sec"
    assert args.format == "json"
    assert args.manifests is None


def test_cli_parses_insights_options() -> None:
    parser = _build_parser()
    args = parser.parse_args(
        ["insights", "--fields", "tags, layer", "--limit", "3", "--manifest", "a.json", "--manifest", "b.json"]
    )
    assert _split_fields(args.fields) == ["tags", "layer"]
    assert args.limit == 3
    assert args.manifests == [Path("a.json"), Path("b.json")]


def test_cli_parses_query_and_values_options() -> None:
    parser = _build_parser()
    query = parser.parse_args(["query", "repo", "-f", "layer", "--value", "api,db"])
    values = parser.parse_args(["values", "--field", "tags"])
    fields = parser.parse_args(["values"])

    assert (query.path, query.field, query.value) == ("repo", "layer", "api,db")
    assert (values.path, values.field) == (".", "tags")
    assert fields.field is None


def test_cli_query_requires_field_and_value() -> None:
    parser = _build_parser()
    with pytest.raises(SystemExit):
        parser.parse_args(["query", "--field", "layer"])


def test_cli_rejects_unknown_format() -> None:
    parser = _build_parser()
    with pytest.raises(SystemExit):
        parser.parse_args(["coverage", "--format", "xml"])


@pytest.fixture
def seeded_cli(repo_builder: RepoBuilder, monkeypatch: pytest.MonkeyPatch) -> RepoBuilder:
    repo_builder.track(["a/1.go", "a/2.go", "b/1.go"])
    repo_builder.write_manifest(
        "analysis",
        [
            {"file_path": "a/1.go", "chat_id": 1, "fields": {"layer": "api"}},
            {"file_path": "b/1.go", "chat_id": 2, "fields": {"layer": "api"}},
        ],
        fields=[{"name": "layer", "type": "string"}],
    )
    monkeypatch.setattr(
        cli, "Orchestrator", lambda: Orchestrator(tracked_source=repo_builder.tracked_source())
    )
    return repo_builder


def test_main_prints_coverage_json(seeded_cli: RepoBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    cli.main(["coverage", str(seeded_cli.path()), "--scope", "include=a/**", "--format", "json"])

    payload = json.loads(capsys.readouterr().out)
    assert payload["totals"]["in_scope"] == 2
    assert payload["percentages"]["focus_coverage"] == 50.0
    assert payload["scope_source"] == "override"


def test_main_exits_on_malformed_scope(seeded_cli: RepoBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["coverage", str(seeded_cli.path()), "--scope", "bogus"])

    assert excinfo.value.code == 1
    assert "invalid --scope" in capsys.readouterr().err


def test_main_validate_exits_nonzero_on_errors(
    seeded_cli: RepoBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    seeded_cli.write({".focusscope.yml": "scope:\n  include: ['']\n"})

    with pytest.raises(SystemExit) as excinfo:
        cli.main(["validate", str(seeded_cli.path())])

    assert excinfo.value.code == 1
    assert "project scope contains empty include pattern" in capsys.readouterr().out


def test_main_validate_succeeds_for_clean_scope(
    seeded_cli: RepoBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    cli.main(["validate", str(seeded_cli.path()), "--scope", "include=a/**"])

    assert "All patterns matched at least one tracked file." in capsys.readouterr().out


def test_main_reports_missing_repository(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["coverage", str(tmp_path / "absent")])

    assert excinfo.value.code == 1
    assert "focusscope coverage failed" in capsys.readouterr().err


def test_main_prints_query_matches(seeded_cli: RepoBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    cli.main(
        ["query", str(seeded_cli.path()), "--scope", "include=a/**", "-f", "layer", "--value", "api,db"]
    )

    out = capsys.readouterr().out
    assert "  a/1.go\n" in out
    assert "b/1.go" not in out
    assert "1 of 2 in-scope files matched." in out


def test_main_prints_values_json(seeded_cli: RepoBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    cli.main(["values", str(seeded_cli.path()), "--field", "layer", "--format", "json"])

    payload = json.loads(capsys.readouterr().out)
    (top,) = payload["field_insights"]["values"]
    assert (top["value"], top["count"]) == ("api", 2)
    assert top["percent"] == pytest.approx(66.67, abs=0.01)
    assert payload["scope_source"] == "default"


def test_main_query_unknown_field_exits(seeded_cli: RepoBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["query", str(seeded_cli.path()), "--field", "risk", "--value", "high"])

    assert excinfo.value.code == 1
    assert "focusscope query failed: field 'risk' is not defined" in capsys.readouterr().err

"""Text and JSON rendering of analysis reports."""

from __future__ import annotations

import json
from dataclasses import asdict
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from .analytics.insights import summarize_completeness
from .models import (
    CoverageReport,
    FieldListing,
    InsightsReport,
    QueryResult,
    ScopeConfig,
    ScopeValidationResult,
    ValuesReport,
)

FORMATS = ("text", "json")

_TEMPLATES_DIR = Path(__file__).with_name("templates")


class ReportRenderer:
    """Renders report objects with the bundled Jinja templates."""

    def __init__(self, templates_dir: Path | None = None) -> None:
        self._env = Environment(
            loader=FileSystemLoader([str(templates_dir or _TEMPLATES_DIR)]),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )
        self._env.filters["pct"] = lambda value: f"{value:.1f}%"
        self._env.filters["scope"] = describe_scope

    def render(self, template_name: str, **context: Any) -> str:
        return self._env.get_template(template_name).render(**context)


def describe_scope(scope: ScopeConfig | None) -> str:
    if scope is None or scope.is_default():
        return "all tracked files"
    parts = []
    if scope.include:
        parts.append("include=" + ",".join(scope.include))
    if scope.exclude:
        parts.append("exclude=" + ",".join(scope.exclude))
    return "; ".join(parts)


def render_coverage(report: CoverageReport, fmt: str = "text") -> str:
    if fmt == "json":
        return to_json(report)
    return ReportRenderer().render("coverage.txt.j2", report=report)


def render_insights(report: InsightsReport, fmt: str = "text") -> str:
    if fmt == "json":
        return to_json(report)
    return ReportRenderer().render(
        "insights.txt.j2", report=report, completeness_lines=summarize_completeness(report)
    )


def render_validation(result: ScopeValidationResult, fmt: str = "text") -> str:
    if fmt == "json":
        return to_json(result)
    return ReportRenderer().render("validation.txt.j2", result=result)


def render_query(result: QueryResult, fmt: str = "text") -> str:
    if fmt == "json":
        return to_json(result)
    return ReportRenderer().render("query.txt.j2", result=result)


def render_values(report: FieldListing | ValuesReport, fmt: str = "text") -> str:
    """Render a field listing or the values of one field."""
    if fmt == "json":
        return to_json(report)
    if isinstance(report, FieldListing):
        return ReportRenderer().render("fields.txt.j2", listing=report)
    return ReportRenderer().render("values.txt.j2", report=report)


def to_json(report: Any) -> str:
    return json.dumps(asdict(report), indent=2, sort_keys=True, default=_json_default)


def _json_default(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat().replace("+00:00", "Z")
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


__all__ = [
    "FORMATS",
    "ReportRenderer",
    "describe_scope",
    "render_coverage",
    "render_insights",
    "render_query",
    "render_validation",
    "render_values",
    "to_json",
]

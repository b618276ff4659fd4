"""CLI entrypoints for focusscope commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List

from .analytics.query import QueryError, split_values
from .git.tracked import MissingPrerequisiteError
from .logging import configure_logging
from .orchestrator import Orchestrator
from .render import (
    FORMATS,
    render_coverage,
    render_insights,
    render_query,
    render_validation,
    render_values,
)
from .scope.matcher import FormatError
from .stores.metadata_index import ManifestError


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_scope_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the repository root (defaults to current directory).",
    )
    parser.add_argument(
        "--scope",
        dest="scope_override",
        default=None,
        help="Scope override, e.g. 'include=src/**,lib/**;exclude=vendor/**'.",
    )
    parser.add_argument(
        "--profile",
        default=None,
        help="Profile whose scope should apply (name or alias).",
    )
    parser.add_argument(
        "--format",
        choices=FORMATS,
        default="text",
        help="Output format.",
    )


def _add_manifest_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--manifest",
        dest="manifests",
        action="append",
        type=Path,
        default=None,
        help="Analysis manifest JSON to read (repeatable). Defaults to .focusscope/manifests/*.json.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="focusscope",
        description="Measure analysis coverage and query metadata within a Focus Scope.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    coverage_parser = subparsers.add_parser(
        "coverage",
        help="Report how many in-scope files have analysis metadata.",
    )
    _add_verbose_option(coverage_parser, suppress_default=True)
    _add_scope_options(coverage_parser)
    _add_manifest_option(coverage_parser)

    insights_parser = subparsers.add_parser(
        "insights",
        help="Show metadata value distributions for in-scope files.",
    )
    _add_verbose_option(insights_parser, suppress_default=True)
    _add_scope_options(insights_parser)
    _add_manifest_option(insights_parser)
    insights_parser.add_argument(
        "--fields",
        default="",
        help="Comma-separated metadata fields to aggregate (defaults to configured or all fields).",
    )
    insights_parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Maximum values listed per field (0 for no limit).",
    )

    query_parser = subparsers.add_parser(
        "query",
        help="Find in-scope files by metadata value.",
    )
    _add_verbose_option(query_parser, suppress_default=True)
    _add_scope_options(query_parser)
    _add_manifest_option(query_parser)
    query_parser.add_argument(
        "-f",
        "--field",
        required=True,
        help="Metadata field to match.",
    )
    query_parser.add_argument(
        "--value",
        required=True,
        help="Value to match; comma-separated values match any of them.",
    )

    values_parser = subparsers.add_parser(
        "values",
        help="List metadata fields, or the values of one field, within the scope.",
    )
    _add_verbose_option(values_parser, suppress_default=True)
    _add_scope_options(values_parser)
    _add_manifest_option(values_parser)
    values_parser.add_argument(
        "-f",
        "--field",
        default=None,
        help="Field whose distinct values should be listed (omit to list fields).",
    )

    validate_parser = subparsers.add_parser(
        "validate",
        help="Check scope patterns against tracked files and suggest fixes.",
    )
    _add_verbose_option(validate_parser, suppress_default=True)
    _add_scope_options(validate_parser)

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for focusscope commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))

    orchestrator = Orchestrator()

    try:
        if args.command == "coverage":
            report = orchestrator.run_coverage(
                args.path,
                scope_override=args.scope_override,
                profile=args.profile,
                manifests=args.manifests,
            )
            print(render_coverage(report, args.format), end="")
        elif args.command == "insights":
            report = orchestrator.run_insights(
                args.path,
                _split_fields(args.fields),
                limit=args.limit,
                scope_override=args.scope_override,
                profile=args.profile,
                manifests=args.manifests,
            )
            print(render_insights(report, args.format), end="")
        elif args.command == "query":
            result = orchestrator.run_query(
                args.path,
                args.field,
                split_values(args.value),
                scope_override=args.scope_override,
                profile=args.profile,
                manifests=args.manifests,
            )
            print(render_query(result, args.format), end="")
        elif args.command == "values":
            listing = orchestrator.run_values(
                args.path,
                args.field,
                scope_override=args.scope_override,
                profile=args.profile,
                manifests=args.manifests,
            )
            print(render_values(listing, args.format), end="")
        elif args.command == "validate":
            result = orchestrator.run_validate(
                args.path,
                scope_override=args.scope_override,
                profile=args.profile,
            )
            print(render_validation(result, args.format), end="")
            if result.errors:
                parser.exit(1)
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown command\n")
    except FormatError as exc:
        parser.exit(1, f"invalid --scope: {exc}\n")
    except (MissingPrerequisiteError, ManifestError, QueryError) as exc:
        parser.exit(1, f"focusscope {args.command} failed: {exc}\n")


def _split_fields(raw: str) -> List[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]


if __name__ == "__main__":
    main(sys.argv[1:])

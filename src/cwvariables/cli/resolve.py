"""
CLI commands for resolving and migrating variable queries.

Commands:
    cwvariables resolve <query>   - Resolve a query to variable options
    cwvariables migrate <query>   - Show the structured form of a query

<query> is either a JSON object in the dashboard wire format, e.g.
'{"queryType": "metrics", "namespace": "AWS/EC2"}', or a legacy string
such as 'metrics(AWS/EC2, us-east-1)'.
"""

from __future__ import annotations

import argparse
import asyncio
import dataclasses
import json
from typing import Any

from cwvariables.cli.ux import console, error, header, print_table, success, warning
from cwvariables.config import get_settings
from cwvariables.core.errors import (
    ConfigurationError,
    ExitCode,
    QueryMigrationError,
    format_error_message,
    main_with_error_handling,
)
from cwvariables.providers import FixtureMetricsProvider, create_demo_provider
from cwvariables.variables import (
    ResolutionResult,
    VariableQuery,
    VariableQueryResolver,
    migrate_variable_query,
)


def parse_query_argument(raw: str) -> VariableQuery:
    """Parse a command-line query: JSON wire object or legacy string."""
    text = raw.strip()
    if text.startswith("{"):
        try:
            data: Any = json.loads(text)
        except json.JSONDecodeError as exc:
            raise QueryMigrationError(
                f"Query is not valid JSON: {exc.msg}",
                details={"position": exc.pos},
            ) from exc
        return migrate_variable_query(data)
    return migrate_variable_query(text)


def build_provider(fixtures: str | None = None, demo: bool = False) -> FixtureMetricsProvider:
    """Select the provider for a CLI run."""
    if demo:
        return create_demo_provider()
    path = fixtures or get_settings().fixtures_path
    if path:
        return FixtureMetricsProvider.from_yaml(path)
    # No data source configured: every lookup comes back empty
    return FixtureMetricsProvider()


@main_with_error_handling()
def resolve_command(
    query: str,
    fixtures: str | None = None,
    demo: bool = False,
    output_format: str = "table",
) -> int:
    """
    Resolve a variable query and print the resulting options.

    Exit codes:
        0 - At least one option resolved
        1 - No options
        10 - Fixture file missing or invalid
        11 - Provider failed
        12 - Query could not be parsed

    Args:
        query: JSON wire object or legacy query string
        fixtures: Path to a YAML fixture file
        demo: If True, use built-in demo data
        output_format: Output format ("table" or "json")

    Returns:
        Exit code
    """
    try:
        variable_query = parse_query_argument(query)
    except QueryMigrationError as exc:
        error(format_error_message(exc))
        return exc.exit_code

    if not variable_query.region:
        variable_query = dataclasses.replace(
            variable_query, region=get_settings().default_region
        )

    try:
        provider = build_provider(fixtures, demo)
    except ConfigurationError as exc:
        error(format_error_message(exc))
        return exc.exit_code

    resolver = VariableQueryResolver(provider)
    result = asyncio.run(resolver.execute(variable_query))

    if output_format == "json":
        console.print_json(data=_result_to_dict(variable_query, result))
    else:
        _print_resolve_output(variable_query, result)

    if result.status == "provider_error":
        return ExitCode.PROVIDER_ERROR
    return ExitCode.SUCCESS if result.options else ExitCode.WARNING


def _result_to_dict(query: VariableQuery, result: ResolutionResult) -> dict[str, Any]:
    return {
        "query": query.to_dict(),
        "status": result.status,
        "reason": result.reason,
        "data": [option.to_dict() for option in result.options],
    }


def _print_resolve_output(query: VariableQuery, result: ResolutionResult) -> None:
    header(f"Variable Query: {query.query_type.value}")

    if not result.ok:
        warning(f"No options ({result.status}: {result.reason})")
        return
    if not result.options:
        warning("No options")
        return

    print_table(
        title=f"{len(result.options)} option(s)",
        columns=["Text", "Value"],
        rows=[[option.text, option.value] for option in result.options],
    )
    success(f"Resolved {len(result.options)} option(s)")


@main_with_error_handling()
def migrate_command(query: str) -> int:
    """Print the structured wire form of a query."""
    try:
        variable_query = parse_query_argument(query)
    except QueryMigrationError as exc:
        error(format_error_message(exc))
        return exc.exit_code

    console.print_json(data=variable_query.to_dict())
    return ExitCode.SUCCESS


# --- Parser registration ---


def register_resolve_parsers(subparsers: argparse._SubParsersAction) -> None:
    """Register resolve and migrate subcommand parsers."""
    resolve_parser = subparsers.add_parser(
        "resolve",
        help="Resolve a variable query to selectable options",
    )
    resolve_parser.add_argument("query", help="JSON query object or legacy query string")
    source = resolve_parser.add_mutually_exclusive_group()
    source.add_argument(
        "--fixtures",
        help="YAML fixture file backing the provider (default: CWVARIABLES_FIXTURES_PATH)",
    )
    source.add_argument(
        "--demo",
        action="store_true",
        help="Use demo data",
    )
    resolve_parser.add_argument(
        "--format",
        "-f",
        dest="output_format",
        choices=["table", "json"],
        default="table",
        help="Output format (default: table)",
    )

    migrate_parser = subparsers.add_parser(
        "migrate",
        help="Show the structured form of a legacy or JSON query",
    )
    migrate_parser.add_argument("query", help="JSON query object or legacy query string")


def handle_resolve_command(args: argparse.Namespace) -> int:
    """Handle resolve/migrate commands from CLI args."""
    if args.command == "resolve":
        return resolve_command(
            query=args.query,
            fixtures=getattr(args, "fixtures", None),
            demo=getattr(args, "demo", False),
            output_format=getattr(args, "output_format", "table"),
        )
    elif args.command == "migrate":
        return migrate_command(query=args.query)
    else:
        error("No command specified. Use --help for usage.")
        return 2

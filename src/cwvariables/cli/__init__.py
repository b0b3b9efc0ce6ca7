"""
Command line interface for cwvariables.

Usage:
    cwvariables <command> [args]
"""

from __future__ import annotations

import argparse
from typing import Sequence

from cwvariables.cli.resolve import handle_resolve_command, register_resolve_parsers
from cwvariables.config import get_settings
from cwvariables.logging import configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cwvariables",
        description="Resolve CloudWatch templating variable queries",
    )
    subparsers = parser.add_subparsers(dest="command")
    register_resolve_parsers(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 2

    settings = get_settings()
    configure_logging(settings.log_level, json_output=settings.log_json)
    return int(handle_resolve_command(args))


__all__ = ["build_parser", "main"]

"""
Error types and CLI error handling for cwvariables.

The resolver itself never lets these escape to its host: they are caught
at the dispatch boundary and collapsed into an empty option list. They
still matter for the structured resolution result, for the CLI, and for
the legacy migration path.

Exit Codes:
- 0: Success
- 1: Warning (query resolved to no options)
- 10: Configuration error
- 11: Provider error (metrics provider failure)
- 12: Validation error (bad query, filter or legacy string)
- 127: Unknown/internal error
"""

from __future__ import annotations

import functools
import sys
import traceback
from enum import IntEnum
from typing import Any, Callable, TypeVar

import structlog

logger = structlog.get_logger()


class ExitCode(IntEnum):
    """Standardized exit codes for CLI commands."""

    SUCCESS = 0
    WARNING = 1
    CONFIG_ERROR = 10
    PROVIDER_ERROR = 11
    VALIDATION_ERROR = 12
    UNKNOWN_ERROR = 127


class CwVariablesError(Exception):
    """Base exception for cwvariables errors with exit code support."""

    exit_code: ExitCode = ExitCode.UNKNOWN_ERROR
    show_traceback: bool = False

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(CwVariablesError):
    """Raised for configuration-related errors (settings, fixtures, wiring)."""

    exit_code = ExitCode.CONFIG_ERROR


class ProviderError(CwVariablesError):
    """Raised when the metrics provider fails."""

    exit_code = ExitCode.PROVIDER_ERROR


class QueryValidationError(CwVariablesError):
    """Raised when a variable query descriptor is malformed."""

    exit_code = ExitCode.VALIDATION_ERROR


class FilterParseError(QueryValidationError):
    """Raised when an ec2Filters or tags expression cannot be parsed."""


class QueryMigrationError(QueryValidationError):
    """Raised when a raw query cannot be migrated to a VariableQuery."""


F = TypeVar("F", bound=Callable[..., int])


def main_with_error_handling(
    *,
    show_traceback: bool = False,
    log_errors: bool = True,
) -> Callable[[F], F]:
    """
    Decorator for CLI command functions that provides unified error handling.

    Args:
        show_traceback: If True, show full traceback for unexpected errors
        log_errors: If True, log errors to structlog

    Exit codes:
        - CwVariablesError subclasses: Uses the error's exit_code
        - KeyboardInterrupt: Returns 130
        - Other exceptions: Returns 127
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> int:
            try:
                return func(*args, **kwargs)
            except CwVariablesError as e:
                if log_errors:
                    logger.error(
                        "command_error",
                        error_type=type(e).__name__,
                        message=e.message,
                        exit_code=e.exit_code,
                        **e.details,
                    )
                if e.show_traceback or show_traceback:
                    traceback.print_exc(file=sys.stderr)
                return e.exit_code
            except KeyboardInterrupt:
                if log_errors:
                    logger.info("command_interrupted")
                return 130
            except Exception as e:
                if log_errors:
                    logger.error(
                        "unexpected_error",
                        error_type=type(e).__name__,
                        message=str(e),
                        exit_code=ExitCode.UNKNOWN_ERROR,
                    )
                if show_traceback:
                    traceback.print_exc(file=sys.stderr)
                return ExitCode.UNKNOWN_ERROR

        return wrapper  # type: ignore[return-value]

    return decorator


def format_error_message(error: CwVariablesError) -> str:
    """Format an error message for display to users."""
    msg = error.message
    if error.details:
        detail_str = ", ".join(f"{k}={v}" for k, v in error.details.items())
        msg = f"{msg} ({detail_str})"
    return msg

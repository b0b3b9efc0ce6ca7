"""Core modules for cwvariables - error definitions and exit codes."""

from cwvariables.core.errors import (
    ConfigurationError,
    CwVariablesError,
    ExitCode,
    FilterParseError,
    ProviderError,
    QueryMigrationError,
    QueryValidationError,
    format_error_message,
    main_with_error_handling,
)

__all__ = [
    "ConfigurationError",
    "CwVariablesError",
    "ExitCode",
    "FilterParseError",
    "ProviderError",
    "QueryMigrationError",
    "QueryValidationError",
    "format_error_message",
    "main_with_error_handling",
]

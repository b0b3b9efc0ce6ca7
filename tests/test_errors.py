"""Tests for error types and CLI error handling."""

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


class TestErrorHierarchy:
    def test_exit_codes(self):
        assert ConfigurationError("x").exit_code == ExitCode.CONFIG_ERROR
        assert ProviderError("x").exit_code == ExitCode.PROVIDER_ERROR
        assert QueryValidationError("x").exit_code == ExitCode.VALIDATION_ERROR
        assert CwVariablesError("x").exit_code == ExitCode.UNKNOWN_ERROR

    def test_parse_and_migration_errors_are_validation_errors(self):
        assert issubclass(FilterParseError, QueryValidationError)
        assert issubclass(QueryMigrationError, QueryValidationError)
        assert FilterParseError("x").exit_code == ExitCode.VALIDATION_ERROR

    def test_details_default_empty(self):
        assert ProviderError("boom").details == {}


class TestFormatErrorMessage:
    def test_without_details(self):
        assert format_error_message(ProviderError("throttled")) == "throttled"

    def test_with_details(self):
        error = FilterParseError("bad filter", details={"field": "tags", "key": "env"})

        assert format_error_message(error) == "bad filter (field=tags, key=env)"


class TestMainWithErrorHandling:
    def test_success_passthrough(self):
        @main_with_error_handling()
        def command() -> int:
            return 0

        assert command() == 0

    def test_known_error_maps_to_exit_code(self):
        @main_with_error_handling()
        def command() -> int:
            raise ProviderError("unreachable", details={"region": "us-east-1"})

        assert command() == ExitCode.PROVIDER_ERROR

    def test_keyboard_interrupt(self):
        @main_with_error_handling()
        def command() -> int:
            raise KeyboardInterrupt

        assert command() == 130

    def test_unexpected_error(self):
        @main_with_error_handling(log_errors=False)
        def command() -> int:
            raise RuntimeError("oops")

        assert command() == ExitCode.UNKNOWN_ERROR

"""Templating variable queries: models, migration and resolution."""

from cwvariables.variables.filters import parse_filter_expression
from cwvariables.variables.migrations import migrate_legacy_query, migrate_variable_query
from cwvariables.variables.resolver import VariableQueryResolver, to_options
from cwvariables.variables.results import ResolutionResult
from cwvariables.variables.types import (
    MetricFindValue,
    VariableQuery,
    VariableQueryRequest,
    VariableQueryType,
)

__all__ = [
    "MetricFindValue",
    "ResolutionResult",
    "VariableQuery",
    "VariableQueryRequest",
    "VariableQueryResolver",
    "VariableQueryType",
    "migrate_legacy_query",
    "migrate_variable_query",
    "parse_filter_expression",
    "to_options",
]

"""Templating variable query resolution for CloudWatch data sources."""

from cwvariables.providers import MetricsProvider, STANDARD_STATISTICS
from cwvariables.variables import (
    MetricFindValue,
    ResolutionResult,
    VariableQuery,
    VariableQueryRequest,
    VariableQueryResolver,
    VariableQueryType,
    migrate_variable_query,
)

__version__ = "0.1.0"

__all__ = [
    "MetricFindValue",
    "MetricsProvider",
    "ResolutionResult",
    "STANDARD_STATISTICS",
    "VariableQuery",
    "VariableQueryRequest",
    "VariableQueryResolver",
    "VariableQueryType",
    "migrate_variable_query",
]

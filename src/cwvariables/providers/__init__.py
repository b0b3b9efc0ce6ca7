"""Metrics provider contract and built-in providers."""

from cwvariables.providers.base import (
    STANDARD_STATISTICS,
    FilterMap,
    MetricsProvider,
    SelectableValue,
)
from cwvariables.providers.fixture import FixtureMetricsProvider, create_demo_provider

__all__ = [
    "STANDARD_STATISTICS",
    "FilterMap",
    "FixtureMetricsProvider",
    "MetricsProvider",
    "SelectableValue",
    "create_demo_provider",
]

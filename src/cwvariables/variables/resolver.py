"""
Variable query resolver.

Dispatches a VariableQuery to the lookup selected by its query type,
calls the metrics provider and normalises the result into a list of
selectable options. Failures never reach the host: they are logged with
the offending query and resolve to an empty option list.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Mapping, Sequence

import structlog

from cwvariables.core.errors import ConfigurationError, FilterParseError, QueryMigrationError
from cwvariables.logging import bind_context
from cwvariables.providers.base import MetricsProvider, SelectableValue
from cwvariables.variables.filters import parse_filter_expression
from cwvariables.variables.migrations import migrate_variable_query
from cwvariables.variables.results import ResolutionResult
from cwvariables.variables.types import (
    MetricFindValue,
    VariableQuery,
    VariableQueryRequest,
    VariableQueryType,
)

logger = structlog.get_logger()

# None means the query lacks a field its type requires
Handler = Callable[[VariableQuery], Awaitable[list[MetricFindValue] | None]]


def to_options(values: Sequence[SelectableValue]) -> list[MetricFindValue]:
    """Map provider label/value pairs to options, preserving order."""
    return [MetricFindValue(text=v["label"], value=v["value"], expandable=True) for v in values]


def _payload(query: Any) -> Any:
    """Loggable form of a query; never raises."""
    if isinstance(query, VariableQuery):
        try:
            return query.to_dict()
        except (AttributeError, TypeError, ValueError):
            pass
    return repr(query)


class VariableQueryResolver:
    """Resolves templating variable queries against a metrics provider."""

    def __init__(self, provider: MetricsProvider) -> None:
        self._provider = provider
        self._handlers = self._build_handlers()
        missing = [t.value for t in VariableQueryType if t not in self._handlers]
        if missing:
            raise ConfigurationError(
                "Variable query types without a handler",
                details={"missing": missing},
            )

    def _build_handlers(self) -> dict[VariableQueryType, Handler]:
        return {
            VariableQueryType.REGIONS: self._handle_regions,
            VariableQueryType.NAMESPACES: self._handle_namespaces,
            VariableQueryType.METRICS: self._handle_metrics,
            VariableQueryType.DIMENSION_KEYS: self._handle_dimension_keys,
            VariableQueryType.DIMENSION_VALUES: self._handle_dimension_values,
            VariableQueryType.EBS_VOLUME_IDS: self._handle_ebs_volume_ids,
            VariableQueryType.EC2_INSTANCE_ATTRIBUTES: self._handle_ec2_instance_attribute,
            VariableQueryType.RESOURCE_ARNS: self._handle_resource_arns,
            VariableQueryType.STATISTICS: self._handle_statistics,
        }

    @property
    def handled_types(self) -> frozenset[VariableQueryType]:
        return frozenset(self._handlers)

    async def query(
        self, request: VariableQueryRequest | Mapping[str, Any]
    ) -> dict[str, list[dict[str, Any]]]:
        """
        Host entry point: resolve the first target of a batch request.

        Args:
            request: A VariableQueryRequest, or a mapping with ``targets``
                and an optional ``requestId``

        Returns:
            ``{"data": [option dicts]}``
        """
        if isinstance(request, Mapping):
            request = VariableQueryRequest(
                targets=tuple(request.get("targets") or ()),
                request_id=request.get("requestId"),
            )

        log = bind_context(request_id=request.request_id)
        target = request.first_target
        if target is None:
            log.warning("variable_query_request_empty")
            return {"data": []}

        try:
            query = migrate_variable_query(target)
        except QueryMigrationError as exc:
            log.error(
                "variable_query_migration_failed",
                query=repr(target),
                error=exc.message,
                **exc.details,
            )
            return {"data": []}

        options = await self.resolve(query)
        return {"data": [option.to_dict() for option in options]}

    async def resolve(self, query: VariableQuery) -> list[MetricFindValue]:
        """Resolve a query to options; any failure yields an empty list."""
        result = await self.execute(query)
        return result.options

    async def execute(self, query: VariableQuery) -> ResolutionResult:
        """Resolve a query, reporting why it produced no options."""
        log = logger.bind(
            query_type=getattr(getattr(query, "query_type", None), "value", None),
            ref_id=getattr(query, "ref_id", None),
        )

        try:
            handler = self._handlers.get(query.query_type)
            if handler is None:
                log.warning("variable_query_unhandled", query=_payload(query))
                return ResolutionResult.failure("unhandled", "No handler for query type")
            options = await handler(query)
        except FilterParseError as exc:
            log.error(
                "variable_query_failed",
                reason="invalid_filter",
                query=_payload(query),
                error=exc.message,
                **exc.details,
            )
            return ResolutionResult.failure("invalid_filter", exc.message)
        except Exception as exc:
            log.error(
                "variable_query_failed",
                reason="provider_error",
                query=_payload(query),
                error=str(exc),
                error_type=type(exc).__name__,
                exc_info=True,
            )
            return ResolutionResult.failure("provider_error", str(exc) or type(exc).__name__)

        if options is None:
            log.debug("variable_query_precondition_missing", query=_payload(query))
            return ResolutionResult.failure(
                "missing_precondition", "Query is missing a field its type requires"
            )

        log.debug("variable_query_resolved", option_count=len(options))
        return ResolutionResult.success(options)

    # --- Handlers ---

    async def _handle_regions(self, query: VariableQuery) -> list[MetricFindValue] | None:
        return to_options(await self._provider.list_regions())

    async def _handle_namespaces(self, query: VariableQuery) -> list[MetricFindValue] | None:
        return to_options(await self._provider.list_namespaces())

    async def _handle_metrics(self, query: VariableQuery) -> list[MetricFindValue] | None:
        return to_options(await self._provider.list_metrics(query.namespace, query.region))

    async def _handle_dimension_keys(self, query: VariableQuery) -> list[MetricFindValue] | None:
        return to_options(
            await self._provider.list_dimension_keys(query.namespace, query.region)
        )

    async def _handle_dimension_values(
        self, query: VariableQuery
    ) -> list[MetricFindValue] | None:
        if not query.dimension_key or not query.metric_name:
            return None
        values = await self._provider.list_dimension_values(
            query.region,
            query.namespace,
            query.metric_name,
            query.dimension_key,
            dict(query.dimension_filters or {}),
        )
        return to_options(values)

    async def _handle_ebs_volume_ids(self, query: VariableQuery) -> list[MetricFindValue] | None:
        if not query.instance_id:
            return None
        return to_options(
            await self._provider.list_ebs_volume_ids(query.region, query.instance_id)
        )

    async def _handle_ec2_instance_attribute(
        self, query: VariableQuery
    ) -> list[MetricFindValue] | None:
        if not query.attribute_name:
            return None
        filters = parse_filter_expression(query.ec2_filters, field="ec2Filters")
        values = await self._provider.list_ec2_instance_attribute(
            query.region, query.attribute_name, filters
        )
        return to_options(values)

    async def _handle_resource_arns(self, query: VariableQuery) -> list[MetricFindValue] | None:
        if not query.resource_type:
            return None
        tags = parse_filter_expression(query.tags, field="tags")
        values = await self._provider.list_resource_arns(
            query.region, query.resource_type, tags
        )
        return to_options(values)

    async def _handle_statistics(self, query: VariableQuery) -> list[MetricFindValue] | None:
        return [
            MetricFindValue(text=stat, value=stat, expandable=True)
            for stat in self._provider.standard_statistics
        ]

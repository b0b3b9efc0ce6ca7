"""
Migration of older variable query shapes.

Dashboards saved before structured variable queries existed store the
query as a function-call string such as
``dimension_values(us-east-1, AWS/EC2, CPUUtilization, InstanceId)``.
Those strings, and wire dicts, are migrated into a VariableQuery before
they reach the resolver.
"""

from __future__ import annotations

import json
import re
from typing import Any, Callable, Mapping

from cwvariables.core.errors import QueryMigrationError, QueryValidationError
from cwvariables.variables.types import VariableQuery, VariableQueryType

DEFAULT_REF_ID = "CloudWatchVariableQueryEditor-VariableQuery"

REGIONS_PATTERN = re.compile(r"^regions\(\)")
NAMESPACES_PATTERN = re.compile(r"^namespaces\(\)")
METRICS_PATTERN = re.compile(r"^metrics\(([^)]+?)(,\s?([^,]+?))?\)")
DIMENSION_KEYS_PATTERN = re.compile(r"^dimension_keys\(([^)]+?)(,\s?([^,]+?))?\)")
DIMENSION_VALUES_PATTERN = re.compile(
    r"^dimension_values\(([^,]+?),\s?([^,]+?),\s?([^,]+?),\s?([^,)]+?)(,\s?(.+))?\)\s*$"
)
EBS_VOLUME_IDS_PATTERN = re.compile(r"^ebs_volume_ids\(([^,]+?),\s?([^,]+?)\)")
EC2_INSTANCE_ATTRIBUTE_PATTERN = re.compile(
    r"^ec2_instance_attribute\(([^,]+?),\s?([^,]+?),\s?(.+)\)\s*$"
)
RESOURCE_ARNS_PATTERN = re.compile(r"^resource_arns\(([^,]+?),\s?([^,]+?),\s?(.+)\)\s*$")
STATISTICS_PATTERN = re.compile(r"^statistics\(\)")


def _arg(match: re.Match[str], group: int) -> str | None:
    value = match.group(group)
    return value.strip() if value is not None else None


def _regions(match: re.Match[str]) -> dict[str, Any]:
    return {"query_type": VariableQueryType.REGIONS}


def _namespaces(match: re.Match[str]) -> dict[str, Any]:
    return {"query_type": VariableQueryType.NAMESPACES}


def _metrics(match: re.Match[str]) -> dict[str, Any]:
    return {
        "query_type": VariableQueryType.METRICS,
        "namespace": _arg(match, 1),
        "region": _arg(match, 3) or "",
    }


def _dimension_keys(match: re.Match[str]) -> dict[str, Any]:
    return {
        "query_type": VariableQueryType.DIMENSION_KEYS,
        "namespace": _arg(match, 1),
        "region": _arg(match, 3) or "",
    }


def _dimension_values(match: re.Match[str]) -> dict[str, Any]:
    raw_filters = _arg(match, 6)
    filters: Any = {}
    if raw_filters:
        try:
            filters = json.loads(raw_filters)
        except json.JSONDecodeError as exc:
            raise QueryMigrationError(
                f"Invalid dimension filters in legacy query: {exc.msg}",
                details={"filters": raw_filters},
            ) from exc
        if not isinstance(filters, dict):
            raise QueryMigrationError(
                "Legacy dimension filters must be a JSON object",
                details={"filters": raw_filters},
            )
    return {
        "query_type": VariableQueryType.DIMENSION_VALUES,
        "region": _arg(match, 1),
        "namespace": _arg(match, 2),
        "metric_name": _arg(match, 3),
        "dimension_key": _arg(match, 4),
        "dimension_filters": filters,
    }


def _ebs_volume_ids(match: re.Match[str]) -> dict[str, Any]:
    return {
        "query_type": VariableQueryType.EBS_VOLUME_IDS,
        "region": _arg(match, 1),
        "instance_id": _arg(match, 2),
    }


def _ec2_instance_attribute(match: re.Match[str]) -> dict[str, Any]:
    return {
        "query_type": VariableQueryType.EC2_INSTANCE_ATTRIBUTES,
        "region": _arg(match, 1),
        "attribute_name": _arg(match, 2),
        "ec2_filters": _arg(match, 3),
    }


def _resource_arns(match: re.Match[str]) -> dict[str, Any]:
    return {
        "query_type": VariableQueryType.RESOURCE_ARNS,
        "region": _arg(match, 1),
        "resource_type": _arg(match, 2),
        "tags": _arg(match, 3),
    }


def _statistics(match: re.Match[str]) -> dict[str, Any]:
    return {"query_type": VariableQueryType.STATISTICS}


LEGACY_QUERY_PATTERNS: list[tuple[re.Pattern[str], Callable[[re.Match[str]], dict[str, Any]]]] = [
    (REGIONS_PATTERN, _regions),
    (NAMESPACES_PATTERN, _namespaces),
    (METRICS_PATTERN, _metrics),
    (DIMENSION_KEYS_PATTERN, _dimension_keys),
    (DIMENSION_VALUES_PATTERN, _dimension_values),
    (EBS_VOLUME_IDS_PATTERN, _ebs_volume_ids),
    (EC2_INSTANCE_ATTRIBUTE_PATTERN, _ec2_instance_attribute),
    (RESOURCE_ARNS_PATTERN, _resource_arns),
    (STATISTICS_PATTERN, _statistics),
]


def migrate_legacy_query(raw_query: str) -> VariableQuery:
    """
    Migrate a legacy function-call query string.

    Strings that match no known function fall back to a regions query
    with empty region and namespace.
    """
    text = raw_query.strip()
    for pattern, build in LEGACY_QUERY_PATTERNS:
        match = pattern.match(text)
        if match:
            return VariableQuery(ref_id=DEFAULT_REF_ID, **build(match))

    return VariableQuery(
        query_type=VariableQueryType.REGIONS,
        region="",
        namespace="",
        ref_id=DEFAULT_REF_ID,
    )


def migrate_variable_query(raw_query: Any) -> VariableQuery:
    """
    Migrate any supported query shape into a VariableQuery.

    Args:
        raw_query: A VariableQuery, a wire dict, or a legacy query string

    Returns:
        The equivalent VariableQuery. VariableQuery input is returned as is.

    Raises:
        QueryMigrationError: If the input has an unsupported type or
            cannot be interpreted
    """
    if isinstance(raw_query, VariableQuery):
        return raw_query
    if isinstance(raw_query, str):
        return migrate_legacy_query(raw_query)
    if isinstance(raw_query, Mapping):
        if "queryType" not in raw_query and isinstance(raw_query.get("query"), str):
            # Stored legacy target: {"refId": ..., "query": "regions()"}
            return migrate_legacy_query(raw_query["query"])
        try:
            return VariableQuery.from_dict(raw_query)
        except QueryValidationError as exc:
            raise QueryMigrationError(
                f"Cannot migrate variable query: {exc.message}",
                details=exc.details,
            ) from exc

    raise QueryMigrationError(
        f"Unsupported variable query type: {type(raw_query).__name__}",
        details={"type": type(raw_query).__name__},
    )

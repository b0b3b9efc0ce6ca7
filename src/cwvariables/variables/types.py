"""
Variable query models.

A VariableQuery is the declarative descriptor a dashboard builds for a
templating variable. Only the fields relevant to its query type are read.
The wire form uses the camelCase keys the dashboard stores.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Sequence

from cwvariables.core.errors import QueryValidationError


class VariableQueryType(str, Enum):
    """Discriminant selecting which lookup a variable query runs."""

    REGIONS = "regions"
    NAMESPACES = "namespaces"
    METRICS = "metrics"
    DIMENSION_KEYS = "dimensionKeys"
    DIMENSION_VALUES = "dimensionValues"
    EBS_VOLUME_IDS = "ebsVolumeIDs"
    EC2_INSTANCE_ATTRIBUTES = "ec2InstanceAttributes"
    RESOURCE_ARNS = "resourceARNs"
    STATISTICS = "statistics"


# attribute name -> wire key
_WIRE_KEYS: dict[str, str] = {
    "region": "region",
    "namespace": "namespace",
    "metric_name": "metricName",
    "dimension_key": "dimensionKey",
    "dimension_filters": "dimensionFilters",
    "instance_id": "instanceID",
    "attribute_name": "attributeName",
    "ec2_filters": "ec2Filters",
    "resource_type": "resourceType",
    "tags": "tags",
    "ref_id": "refId",
}


def _is_filter_value(value: Any) -> bool:
    if isinstance(value, str):
        return True
    return isinstance(value, (list, tuple)) and all(isinstance(v, str) for v in value)


@dataclass(frozen=True)
class VariableQuery:
    """Immutable variable query descriptor."""

    query_type: VariableQueryType
    region: str | None = None
    namespace: str | None = None
    metric_name: str | None = None
    dimension_key: str | None = None
    dimension_filters: Mapping[str, str | Sequence[str]] | None = None
    instance_id: str | None = None
    attribute_name: str | None = None
    ec2_filters: str | None = None  # serialized JSON object
    resource_type: str | None = None
    tags: str | None = None  # serialized JSON object
    ref_id: str | None = None

    def __post_init__(self) -> None:
        # Freeze the filter mapping so handlers cannot mutate the caller's dict
        if self.dimension_filters is not None and not isinstance(
            self.dimension_filters, MappingProxyType
        ):
            object.__setattr__(
                self, "dimension_filters", MappingProxyType(dict(self.dimension_filters))
            )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> VariableQuery:
        """Build a query from its wire (camelCase) representation."""
        raw_type = data.get("queryType")
        try:
            query_type = VariableQueryType(raw_type)
        except ValueError as exc:
            raise QueryValidationError(
                f"Unknown variable query type: {raw_type!r}",
                details={"query_type": raw_type},
            ) from exc

        dimension_filters = data.get("dimensionFilters")
        if dimension_filters is not None and not isinstance(dimension_filters, Mapping):
            raise QueryValidationError(
                "dimensionFilters must be an object",
                details={"dimension_filters": dimension_filters},
            )
        for name, value in (dimension_filters or {}).items():
            if not _is_filter_value(value):
                raise QueryValidationError(
                    "dimensionFilters values must be strings or lists of strings",
                    details={"dimension": name},
                )

        values = {attr: data.get(key) for attr, key in _WIRE_KEYS.items()}
        return cls(query_type=query_type, **values)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the wire representation, omitting unset fields."""
        result: dict[str, Any] = {"queryType": self.query_type.value}
        for attr, key in _WIRE_KEYS.items():
            value = getattr(self, attr)
            if value is None:
                continue
            if attr == "dimension_filters":
                value = {k: v if isinstance(v, str) else list(v) for k, v in value.items()}
            result[key] = value
        return result


@dataclass(frozen=True)
class MetricFindValue:
    """A selectable option for a templating variable."""

    text: str
    value: str
    expandable: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {"text": self.text, "value": self.value, "expandable": self.expandable}


@dataclass(frozen=True)
class VariableQueryRequest:
    """Batch-style request from the host; only the first target is used."""

    targets: Sequence[Any] = field(default_factory=tuple)
    request_id: str | None = None

    @property
    def first_target(self) -> Any | None:
        return self.targets[0] if self.targets else None

from __future__ import annotations

from typing import Mapping, Protocol, Sequence, TypedDict

# Statistics every CloudWatch metric supports
STANDARD_STATISTICS: tuple[str, ...] = (
    "Average",
    "Maximum",
    "Minimum",
    "Sum",
    "SampleCount",
)

# Filter and tag mappings: name -> allowed values
FilterMap = Mapping[str, Sequence[str]]


class SelectableValue(TypedDict):
    """A single lookup result as returned by a metrics provider."""

    label: str
    value: str


class MetricsProvider(Protocol):
    """Lookups the variable resolver needs from a metrics data source."""

    standard_statistics: Sequence[str]

    async def list_regions(self) -> Sequence[SelectableValue]:
        ...

    async def list_namespaces(self) -> Sequence[SelectableValue]:
        ...

    async def list_metrics(
        self, namespace: str | None, region: str | None
    ) -> Sequence[SelectableValue]:
        ...

    async def list_dimension_keys(
        self, namespace: str | None, region: str | None
    ) -> Sequence[SelectableValue]:
        ...

    async def list_dimension_values(
        self,
        region: str | None,
        namespace: str | None,
        metric_name: str,
        dimension_key: str,
        filters: Mapping[str, str | Sequence[str]],
    ) -> Sequence[SelectableValue]:
        ...

    async def list_ebs_volume_ids(
        self, region: str | None, instance_id: str
    ) -> Sequence[SelectableValue]:
        ...

    async def list_ec2_instance_attribute(
        self, region: str | None, attribute_name: str, filters: FilterMap
    ) -> Sequence[SelectableValue]:
        ...

    async def list_resource_arns(
        self, region: str | None, resource_type: str, tags: FilterMap
    ) -> Sequence[SelectableValue]:
        ...

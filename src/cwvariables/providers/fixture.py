"""
Fixture-backed metrics provider.

Serves variable lookups from in-memory data, loaded from a mapping or a
YAML file. Used by the CLI for offline and demo runs.

Fixture layout::

    regions: [us-east-1, eu-west-1]
    namespaces: [AWS/EC2, AWS/EBS]
    metrics:
      AWS/EC2: [CPUUtilization, NetworkIn]
    dimension_keys:
      AWS/EC2: [InstanceId, InstanceType]
    dimension_values:
      AWS/EC2:
        CPUUtilization:
          InstanceId: [i-0abc, i-0def]
    ebs_volumes:
      i-0abc: [vol-01, vol-02]
    instances:
      - InstanceId: i-0abc
        InstanceType: t3.micro
        region: us-east-1          # optional
        tags: {Environment: prod}
    resources:
      - arn: arn:aws:ec2:us-east-1:123456789012:instance/i-0abc
        type: ec2:instance
        tags: {Environment: prod}
    statistics: [Average, p99]     # optional, defaults to the standard set
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Sequence

import structlog
import yaml

from cwvariables.core.errors import ConfigurationError, ProviderError
from cwvariables.providers.base import STANDARD_STATISTICS, FilterMap, SelectableValue

logger = structlog.get_logger()

TAG_FILTER_PREFIX = "tag:"
TAG_ATTRIBUTE_PREFIX = "Tags."


def _selectable(values: Sequence[Any]) -> list[SelectableValue]:
    return [{"label": str(v), "value": str(v)} for v in values]


def _unique(values: list[str]) -> list[str]:
    seen: set[str] = set()
    unique = []
    for value in values:
        if value not in seen:
            seen.add(value)
            unique.append(value)
    return unique


def _tags_match(actual_tags: Mapping[str, Any], filters: FilterMap) -> bool:
    for key, allowed in filters.items():
        actual = actual_tags.get(key)
        if actual is None or str(actual) not in allowed:
            return False
    return True


def _in_region(record: Mapping[str, Any], region: str | None) -> bool:
    record_region = record.get("region")
    return not region or record_region is None or record_region == region


class FixtureMetricsProvider:
    """Metrics provider answering lookups from fixture data."""

    name = "fixture"

    def __init__(self, data: Mapping[str, Any] | None = None) -> None:
        data = data or {}
        self._regions: list[str] = list(data.get("regions") or [])
        self._namespaces: list[str] = list(data.get("namespaces") or [])
        self._metrics: dict[str, list[str]] = dict(data.get("metrics") or {})
        self._dimension_keys: dict[str, list[str]] = dict(data.get("dimension_keys") or {})
        self._dimension_values: dict[str, Any] = dict(data.get("dimension_values") or {})
        self._ebs_volumes: dict[str, list[str]] = dict(data.get("ebs_volumes") or {})
        self._instances: list[dict[str, Any]] = list(data.get("instances") or [])
        self._resources: list[dict[str, Any]] = list(data.get("resources") or [])
        self.standard_statistics: Sequence[str] = tuple(
            data.get("statistics") or STANDARD_STATISTICS
        )

    @classmethod
    def from_yaml(cls, path: str | Path) -> FixtureMetricsProvider:
        """Load fixture data from a YAML file."""
        fixture_path = Path(path)
        try:
            with open(fixture_path) as f:
                data = yaml.safe_load(f)
        except FileNotFoundError as exc:
            raise ConfigurationError(
                f"Fixture file not found: {fixture_path}",
                details={"path": str(fixture_path)},
            ) from exc
        except yaml.YAMLError as exc:
            raise ConfigurationError(
                f"Invalid YAML in fixture file: {exc}",
                details={"path": str(fixture_path)},
            ) from exc

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                "Fixture file must contain a mapping",
                details={"path": str(fixture_path)},
            )

        logger.debug("fixture_provider_loaded", path=str(fixture_path))
        return cls(data)

    async def list_regions(self) -> list[SelectableValue]:
        return _selectable(self._regions)

    async def list_namespaces(self) -> list[SelectableValue]:
        return _selectable(self._namespaces)

    async def list_metrics(
        self, namespace: str | None, region: str | None
    ) -> list[SelectableValue]:
        return _selectable(self._metrics.get(namespace or "", []))

    async def list_dimension_keys(
        self, namespace: str | None, region: str | None
    ) -> list[SelectableValue]:
        return _selectable(self._dimension_keys.get(namespace or "", []))

    async def list_dimension_values(
        self,
        region: str | None,
        namespace: str | None,
        metric_name: str,
        dimension_key: str,
        filters: Mapping[str, str | Sequence[str]],
    ) -> list[SelectableValue]:
        by_metric = self._dimension_values.get(namespace or "") or {}
        by_key = by_metric.get(metric_name) or {}
        return _selectable(by_key.get(dimension_key) or [])

    async def list_ebs_volume_ids(
        self, region: str | None, instance_id: str
    ) -> list[SelectableValue]:
        return _selectable(self._ebs_volumes.get(instance_id, []))

    async def list_ec2_instance_attribute(
        self, region: str | None, attribute_name: str, filters: FilterMap
    ) -> list[SelectableValue]:
        values = []
        for instance in self._instances:
            if not _in_region(instance, region) or not self._instance_matches(instance, filters):
                continue
            value = self._instance_attribute(instance, attribute_name)
            if value is not None:
                values.append(str(value))
        return _selectable(_unique(values))

    async def list_resource_arns(
        self, region: str | None, resource_type: str, tags: FilterMap
    ) -> list[SelectableValue]:
        arns = []
        for resource in self._resources:
            if resource.get("type") != resource_type or not _in_region(resource, region):
                continue
            if not _tags_match(resource.get("tags") or {}, tags):
                continue
            if not resource.get("arn"):
                raise ProviderError(
                    "Fixture resource has no arn",
                    details={"resource_type": resource_type},
                )
            arns.append(str(resource["arn"]))
        return _selectable(arns)

    def _instance_attribute(self, instance: Mapping[str, Any], attribute_name: str) -> Any:
        if attribute_name.startswith(TAG_ATTRIBUTE_PREFIX):
            tag_key = attribute_name[len(TAG_ATTRIBUTE_PREFIX):]
            return (instance.get("tags") or {}).get(tag_key)
        return instance.get(attribute_name)

    def _instance_matches(self, instance: Mapping[str, Any], filters: FilterMap) -> bool:
        for name, allowed in filters.items():
            if name.startswith(TAG_FILTER_PREFIX):
                actual = (instance.get("tags") or {}).get(name[len(TAG_FILTER_PREFIX):])
            else:
                actual = instance.get(name)
            if actual is None or str(actual) not in allowed:
                return False
        return True


DEMO_FIXTURE: dict[str, Any] = {
    "regions": ["us-east-1", "us-west-2", "eu-west-1"],
    "namespaces": ["AWS/EC2", "AWS/EBS", "AWS/Lambda"],
    "metrics": {
        "AWS/EC2": ["CPUUtilization", "NetworkIn", "NetworkOut"],
        "AWS/EBS": ["VolumeReadOps", "VolumeWriteOps"],
        "AWS/Lambda": ["Invocations", "Errors", "Duration"],
    },
    "dimension_keys": {
        "AWS/EC2": ["InstanceId", "InstanceType", "AutoScalingGroupName"],
        "AWS/EBS": ["VolumeId"],
        "AWS/Lambda": ["FunctionName"],
    },
    "dimension_values": {
        "AWS/EC2": {
            "CPUUtilization": {
                "InstanceId": ["i-0a1b2c3d", "i-0e4f5a6b"],
                "InstanceType": ["t3.micro", "m5.large"],
            },
        },
        "AWS/Lambda": {
            "Invocations": {"FunctionName": ["checkout-handler", "email-sender"]},
        },
    },
    "ebs_volumes": {
        "i-0a1b2c3d": ["vol-0123abcd", "vol-0456efab"],
        "i-0e4f5a6b": ["vol-0789cdef"],
    },
    "instances": [
        {
            "InstanceId": "i-0a1b2c3d",
            "InstanceType": "t3.micro",
            "region": "us-east-1",
            "tags": {"Name": "web-1", "Environment": "prod"},
        },
        {
            "InstanceId": "i-0e4f5a6b",
            "InstanceType": "m5.large",
            "region": "us-east-1",
            "tags": {"Name": "batch-1", "Environment": "staging"},
        },
    ],
    "resources": [
        {
            "arn": "arn:aws:ec2:us-east-1:123456789012:instance/i-0a1b2c3d",
            "type": "ec2:instance",
            "region": "us-east-1",
            "tags": {"Environment": "prod"},
        },
        {
            "arn": "arn:aws:ec2:us-east-1:123456789012:instance/i-0e4f5a6b",
            "type": "ec2:instance",
            "region": "us-east-1",
            "tags": {"Environment": "staging"},
        },
        {
            "arn": "arn:aws:lambda:us-east-1:123456789012:function:checkout-handler",
            "type": "lambda:function",
            "region": "us-east-1",
            "tags": {"Environment": "prod"},
        },
    ],
}


def create_demo_provider() -> FixtureMetricsProvider:
    """Create a provider over built-in demo data."""
    return FixtureMetricsProvider(DEMO_FIXTURE)

"""Tests for the fixture-backed metrics provider."""

from pathlib import Path

import pytest

from cwvariables.core.errors import ConfigurationError, ExitCode, ProviderError
from cwvariables.providers import STANDARD_STATISTICS
from cwvariables.providers.fixture import FixtureMetricsProvider, create_demo_provider
from cwvariables.variables import VariableQuery, VariableQueryResolver, VariableQueryType

FIXTURES = Path(__file__).parent / "fixtures" / "metrics.yaml"


@pytest.fixture
def provider():
    return FixtureMetricsProvider.from_yaml(FIXTURES)


def values(items):
    return [item["value"] for item in items]


class TestLoading:
    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc_info:
            FixtureMetricsProvider.from_yaml(tmp_path / "missing.yaml")

        assert "not found" in exc_info.value.message

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("regions: [us-east-1\n")

        with pytest.raises(ConfigurationError):
            FixtureMetricsProvider.from_yaml(path)

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- us-east-1\n")

        with pytest.raises(ConfigurationError):
            FixtureMetricsProvider.from_yaml(path)

    @pytest.mark.asyncio
    async def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        provider = FixtureMetricsProvider.from_yaml(path)

        assert await provider.list_regions() == []
        assert tuple(provider.standard_statistics) == STANDARD_STATISTICS

    def test_statistics_override(self, provider):
        assert list(provider.standard_statistics) == ["Average", "p99"]


class TestLookups:
    @pytest.mark.asyncio
    async def test_regions(self, provider):
        assert await provider.list_regions() == [
            {"label": "us-east-1", "value": "us-east-1"},
            {"label": "eu-west-1", "value": "eu-west-1"},
        ]

    @pytest.mark.asyncio
    async def test_metrics_by_namespace(self, provider):
        assert values(await provider.list_metrics("AWS/RDS", "us-east-1")) == [
            "DatabaseConnections"
        ]
        assert await provider.list_metrics("AWS/Lambda", None) == []

    @pytest.mark.asyncio
    async def test_dimension_values(self, provider):
        result = await provider.list_dimension_values(
            "us-east-1", "AWS/EC2", "CPUUtilization", "InstanceId", {}
        )

        assert values(result) == ["i-0aaa", "i-0bbb"]

    @pytest.mark.asyncio
    async def test_ebs_volume_ids(self, provider):
        assert values(await provider.list_ebs_volume_ids("us-east-1", "i-0aaa")) == ["vol-0001"]

    @pytest.mark.asyncio
    async def test_ec2_attribute_filtered_by_tag(self, provider):
        result = await provider.list_ec2_instance_attribute(
            None, "InstanceId", {"tag:Team": ["web"]}
        )

        assert values(result) == ["i-0bbb"]

    @pytest.mark.asyncio
    async def test_ec2_attribute_filtered_by_region(self, provider):
        result = await provider.list_ec2_instance_attribute("us-east-1", "InstanceId", {})

        assert values(result) == ["i-0aaa"]

    @pytest.mark.asyncio
    async def test_ec2_attribute_values_deduplicated(self, provider):
        result = await provider.list_ec2_instance_attribute(None, "InstanceType", {})

        assert values(result) == ["t3.micro"]

    @pytest.mark.asyncio
    async def test_ec2_tag_attribute(self, provider):
        result = await provider.list_ec2_instance_attribute(None, "Tags.Team", {})

        assert values(result) == ["sysops", "web"]

    @pytest.mark.asyncio
    async def test_resource_arns_filtered_by_tags(self, provider):
        matching = await provider.list_resource_arns(
            "us-east-1", "rds:db", {"Environment": ["prod", "staging"]}
        )
        missing = await provider.list_resource_arns(
            "us-east-1", "rds:db", {"Environment": ["dev"]}
        )

        assert values(matching) == ["arn:aws:rds:us-east-1:123456789012:db:orders"]
        assert missing == []

    @pytest.mark.asyncio
    async def test_resource_arns_numeric_tag_matches_as_string(self, tmp_path):
        path = tmp_path / "tags.yaml"
        path.write_text(
            "resources:\n"
            "  - arn: arn:aws:ec2:::instance/i-1\n"
            "    type: ec2:instance\n"
            "    tags: {Team: 42}\n"
        )
        provider = FixtureMetricsProvider.from_yaml(path)

        result = await provider.list_resource_arns(None, "ec2:instance", {"Team": ["42"]})

        assert values(result) == ["arn:aws:ec2:::instance/i-1"]

    @pytest.mark.asyncio
    async def test_resource_arns_missing_tag_does_not_match(self):
        provider = FixtureMetricsProvider(
            {
                "resources": [
                    {"arn": "arn:aws:ec2:::instance/i-1", "type": "ec2:instance", "tags": {"Team": None}}
                ]
            }
        )

        assert await provider.list_resource_arns(None, "ec2:instance", {"Team": ["None"]}) == []
        assert await provider.list_resource_arns(None, "ec2:instance", {"Owner": ["x"]}) == []

    @pytest.mark.asyncio
    async def test_resource_without_arn_raises(self):
        provider = FixtureMetricsProvider({"resources": [{"type": "ec2:instance"}]})

        with pytest.raises(ProviderError) as exc_info:
            await provider.list_resource_arns(None, "ec2:instance", {})

        assert exc_info.value.details == {"resource_type": "ec2:instance"}
        assert exc_info.value.exit_code == ExitCode.PROVIDER_ERROR


@pytest.mark.asyncio
async def test_demo_provider_resolves_every_type():
    resolver = VariableQueryResolver(create_demo_provider())
    queries = [
        VariableQuery(VariableQueryType.REGIONS),
        VariableQuery(VariableQueryType.NAMESPACES),
        VariableQuery(VariableQueryType.METRICS, namespace="AWS/EC2"),
        VariableQuery(VariableQueryType.DIMENSION_KEYS, namespace="AWS/EC2"),
        VariableQuery(
            VariableQueryType.DIMENSION_VALUES,
            namespace="AWS/EC2",
            metric_name="CPUUtilization",
            dimension_key="InstanceId",
        ),
        VariableQuery(VariableQueryType.EBS_VOLUME_IDS, instance_id="i-0a1b2c3d"),
        VariableQuery(
            VariableQueryType.EC2_INSTANCE_ATTRIBUTES,
            region="us-east-1",
            attribute_name="InstanceId",
            ec2_filters='{"tag:Environment": ["prod"]}',
        ),
        VariableQuery(
            VariableQueryType.RESOURCE_ARNS,
            region="us-east-1",
            resource_type="ec2:instance",
            tags='{"Environment": ["staging"]}',
        ),
        VariableQuery(VariableQueryType.STATISTICS),
    ]

    for query in queries:
        result = await resolver.execute(query)
        assert result.ok, query.query_type
        assert result.options, query.query_type

    ec2 = await resolver.resolve(queries[6])
    assert [o.value for o in ec2] == ["i-0a1b2c3d"]
    arns = await resolver.resolve(queries[7])
    assert [o.value for o in arns] == ["arn:aws:ec2:us-east-1:123456789012:instance/i-0e4f5a6b"]

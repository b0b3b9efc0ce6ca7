"""Root test configuration."""

import logging
from unittest.mock import AsyncMock, MagicMock

import pytest
import structlog

from cwvariables.providers import STANDARD_STATISTICS


def configure_test_logging():
    """Configure structlog for tests to suppress debug/info output."""
    logging.basicConfig(level=logging.WARNING, force=True)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


def pytest_configure(config):
    configure_test_logging()


@pytest.fixture(autouse=True)
def quiet_logging():
    """Undo logging configuration applied by CLI entry points."""
    yield
    configure_test_logging()


def selectable(*values):
    return [{"label": v, "value": v} for v in values]


@pytest.fixture
def mock_provider():
    """Metrics provider double with one result per lookup."""
    provider = MagicMock()
    provider.list_regions = AsyncMock(return_value=selectable("us-east-1"))
    provider.list_namespaces = AsyncMock(return_value=selectable("AWS/EC2"))
    provider.list_metrics = AsyncMock(return_value=selectable("CPUUtilization"))
    provider.list_dimension_keys = AsyncMock(return_value=selectable("InstanceId"))
    provider.list_dimension_values = AsyncMock(return_value=selectable("i-0abc"))
    provider.list_ebs_volume_ids = AsyncMock(return_value=selectable("vol-01"))
    provider.list_ec2_instance_attribute = AsyncMock(return_value=selectable("t3.micro"))
    provider.list_resource_arns = AsyncMock(
        return_value=selectable("arn:aws:ec2:us-east-1:123456789012:instance/i-0abc")
    )
    provider.standard_statistics = list(STANDARD_STATISTICS)
    return provider

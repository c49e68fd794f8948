import pytest
from prometheus_client import CollectorRegistry

from hub_analytics.metrics import QueryMetrics


@pytest.fixture()
def registry() -> "CollectorRegistry":
    """
    fresh Prometheus registry to avoid cross-test state.
    """
    return CollectorRegistry()


@pytest.fixture()
def metrics(registry: "CollectorRegistry") -> "QueryMetrics":
    return QueryMetrics(registry=registry)

"""
Unit tests for Prometheus metrics.
"""

import pytest
from prometheus_client import CollectorRegistry

from print_queue.observability.metrics import MetricsCollector


@pytest.fixture
def collector() -> MetricsCollector:
    return MetricsCollector(registry=CollectorRegistry())


class TestMetricsCollector:
    """Tests for MetricsCollector."""

    def test_claims_split_by_outcome(self, collector: MetricsCollector):
        collector.record_claim(1, claimed=True)
        collector.record_claim(1, claimed=False)
        collector.record_claim(1, claimed=False)

        registry = collector._registry
        assert registry.get_sample_value("jobs_claimed_total", {"tenant_id": "1"}) == 1
        assert registry.get_sample_value("claim_empty_total", {"tenant_id": "1"}) == 2

    def test_store_errors_labelled(self, collector: MetricsCollector):
        collector.record_store_error("claim_next", transient=True)

        value = collector._registry.get_sample_value(
            "store_errors_total",
            {"operation": "claim_next", "transient": "true"},
        )
        assert value == 1

    def test_queue_depth(self, collector: MetricsCollector):
        collector.update_queue_depth(2, 5)

        assert collector._registry.get_sample_value("job_queue_depth", {"tenant_id": "2"}) == 5
        assert b"job_queue_depth" in collector.get_metrics()

"""
Prometheus metrics collection.
"""

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    REGISTRY,
    CollectorRegistry,
    Counter,
    Gauge,
    generate_latest,
)

from print_queue.constants import (
    METRIC_CLAIM_EMPTY,
    METRIC_JOBS_CLAIMED,
    METRIC_JOBS_COMPLETED,
    METRIC_JOBS_ENQUEUED,
    METRIC_JOBS_REPRINTED,
    METRIC_QUEUE_DEPTH,
    METRIC_STORE_ERRORS,
)

# Collectors register on a process-wide registry, so only one may exist
_metrics: "MetricsCollector | None" = None


class MetricsCollector:
    """
    Prometheus metrics for the print queue.

    Collects metrics for:
    - Enqueued, claimed, completed and reprinted jobs per tenant
    - Claims that found nothing to print
    - Store failures per operation
    - Pending queue depth per tenant
    """

    def __init__(self, registry: CollectorRegistry | None = None):
        """
        Initialize the metrics collector.

        Args:
            registry: Optional custom registry. Uses default if not provided.
        """
        self._registry = registry or REGISTRY

        self.jobs_enqueued = Counter(
            METRIC_JOBS_ENQUEUED,
            "Total number of print jobs enqueued",
            ["tenant_id"],
            registry=self._registry,
        )
        self.jobs_claimed = Counter(
            METRIC_JOBS_CLAIMED,
            "Total number of print jobs claimed",
            ["tenant_id"],
            registry=self._registry,
        )
        self.claim_empty = Counter(
            METRIC_CLAIM_EMPTY,
            "Total number of claims that found no pending job",
            ["tenant_id"],
            registry=self._registry,
        )
        self.jobs_completed = Counter(
            METRIC_JOBS_COMPLETED,
            "Total number of print jobs completed",
            ["tenant_id"],
            registry=self._registry,
        )
        self.jobs_reprinted = Counter(
            METRIC_JOBS_REPRINTED,
            "Total number of reprints requested",
            ["tenant_id"],
            registry=self._registry,
        )
        self.store_errors = Counter(
            METRIC_STORE_ERRORS,
            "Total number of failed store operations",
            ["operation", "transient"],
            registry=self._registry,
        )
        self.queue_depth = Gauge(
            METRIC_QUEUE_DEPTH,
            "Number of pending print jobs",
            ["tenant_id"],
            registry=self._registry,
        )

    def record_enqueued(self, tenant_id: int) -> None:
        """Record a new pending job."""
        self.jobs_enqueued.labels(tenant_id=str(tenant_id)).inc()

    def record_claim(self, tenant_id: int, claimed: bool) -> None:
        """Record a claim attempt and whether it returned a job."""
        if claimed:
            self.jobs_claimed.labels(tenant_id=str(tenant_id)).inc()
        else:
            self.claim_empty.labels(tenant_id=str(tenant_id)).inc()

    def record_completed(self, tenant_id: int) -> None:
        """Record a completed job."""
        self.jobs_completed.labels(tenant_id=str(tenant_id)).inc()

    def record_reprinted(self, tenant_id: int) -> None:
        """Record a reprint."""
        self.jobs_reprinted.labels(tenant_id=str(tenant_id)).inc()

    def record_store_error(self, operation: str, transient: bool) -> None:
        """Record a failed store operation."""
        self.store_errors.labels(
            operation=operation,
            transient=str(transient).lower(),
        ).inc()

    def update_queue_depth(self, tenant_id: int, depth: int) -> None:
        """Update pending job count for a tenant."""
        self.queue_depth.labels(tenant_id=str(tenant_id)).set(depth)

    def get_metrics(self) -> bytes:
        """Get all metrics in Prometheus format."""
        return generate_latest(self._registry)

    def get_content_type(self) -> str:
        """Get the content type for metrics response."""
        return CONTENT_TYPE_LATEST


def get_metrics() -> MetricsCollector:
    """
    Get the metrics collector, creating it on first use.

    Returns:
        MetricsCollector: The metrics collector instance.
    """
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics

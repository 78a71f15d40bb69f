"""
Prometheus metrics for monitoring the scoring batches.

Defines and exposes metrics for:
- Authority (PageRank) runs and non-convergence
- Mindshare snapshot writes
- Batch unit failures and latency

Metrics are exposed via HTTP endpoint for Prometheus scraping.
"""

import logging

from prometheus_client import (
    REGISTRY,
    Counter,
    Histogram,
    start_http_server,
)

from arc_scoring.config.settings import get_settings

logger = logging.getLogger(__name__)

# Buckets for batch unit latency (in seconds)
LATENCY_BUCKETS = (0.01, 0.05, 0.1, 0.5, 1.0, 5.0, 15.0, 60.0, 300.0)


class MetricsCollector:
    """
    Prometheus metrics collector for the scoring engines.

    Usage:
        metrics = get_metrics()
        metrics.start_server()

        metrics.record_unit("mindshare", "success", latency=0.3)
        metrics.record_non_convergence("authority")
    """

    def __init__(self):
        """Initialize Prometheus metrics."""

        self.authority_runs = Counter(
            "arc_scoring_authority_runs_total",
            "Total authority (PageRank) computations",
            ["status"],  # converged, capped
        )

        self.non_convergence = Counter(
            "arc_scoring_non_convergence_total",
            "Iterative computations that hit the iteration cap",
            ["component"],
        )

        self.pagerank_iterations = Histogram(
            "arc_scoring_pagerank_iterations",
            "Iterations used per PageRank run",
            buckets=(1, 5, 10, 20, 50, 100, 200, 500),
        )

        self.snapshots_written = Counter(
            "arc_scoring_snapshots_written_total",
            "Snapshot rows upserted",
            ["kind"],  # authority, smart_followers, mindshare
        )

        self.batch_units = Counter(
            "arc_scoring_batch_units_total",
            "Batch work units executed",
            ["batch", "status"],  # status: success, error, timeout
        )

        self.batch_unit_latency = Histogram(
            "arc_scoring_batch_unit_latency_seconds",
            "Time to compute a single batch work unit",
            ["batch"],
            buckets=LATENCY_BUCKETS,
        )

    def start_server(self, port: int | None = None) -> None:
        """
        Start Prometheus metrics HTTP server.

        Args:
            port: Port to expose metrics on (default from settings)
        """
        settings = get_settings()
        port = port or settings.metrics_port

        start_http_server(port, registry=REGISTRY)
        logger.info("Prometheus metrics server started on port %d", port)

    # Convenience methods

    def record_unit(self, batch: str, status: str, latency: float | None = None) -> None:
        """Record the outcome of one batch work unit."""
        self.batch_units.labels(batch=batch, status=status).inc()
        if latency is not None:
            self.batch_unit_latency.labels(batch=batch).observe(latency)

    def record_non_convergence(self, component: str) -> None:
        """Record an iteration-capped computation."""
        self.non_convergence.labels(component=component).inc()

    def record_pagerank(self, iterations: int, converged: bool) -> None:
        """Record a PageRank run."""
        self.pagerank_iterations.observe(iterations)
        self.authority_runs.labels(status="converged" if converged else "capped").inc()

    def record_snapshots(self, kind: str, count: int) -> None:
        """Record upserted snapshot rows."""
        if count > 0:
            self.snapshots_written.labels(kind=kind).inc(count)


# Global metrics instance
_metrics: MetricsCollector | None = None


def get_metrics() -> MetricsCollector:
    """Get global metrics collector instance."""
    global _metrics
    if _metrics is None:
        _metrics = MetricsCollector()
    return _metrics

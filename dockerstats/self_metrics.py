"""Self-monitoring metrics for the collector, using prometheus_client."""
from typing import Optional
from prometheus_client import Counter, Histogram, CollectorRegistry, start_http_server
import logging

logger = logging.getLogger(__name__)


class SelfMetrics:
    """Counters describing the collector's own polling."""

    def __init__(self, registry=None, prefix="dockerstats_"):
        if registry is None:
            # Private registry keeps default Python/process metrics out
            registry = CollectorRegistry()
        self.registry = registry

        self.containers_polled_total = Counter(
            f"{prefix}containers_polled_total",
            "Total number of containers whose stats were fetched",
            registry=registry
        )

        self.lines_emitted_total = Counter(
            f"{prefix}lines_emitted_total",
            "Total number of metric lines written",
            registry=registry
        )

        self.errors_total = Counter(
            f"{prefix}errors_total",
            "Total number of containers or passes that failed, by error kind",
            ["kind"],
            registry=registry
        )

        self.poll_duration_seconds = Histogram(
            f"{prefix}poll_duration_seconds",
            "Duration of each collection pass in seconds",
            buckets=[0.01, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0],
            registry=registry
        )

    def record_poll(self):
        self.containers_polled_total.inc()

    def record_line(self):
        self.lines_emitted_total.inc()

    def record_error(self, kind: str):
        """Record a failure by exception class name."""
        self.errors_total.labels(kind=kind).inc()

    def record_pass_duration(self, duration: float):
        self.poll_duration_seconds.observe(duration)

    def serve(self, port: int, addr: str = "0.0.0.0"):
        """Expose the registry over HTTP."""
        try:
            start_http_server(port, addr=addr, registry=self.registry)
            logger.info(f"Self metrics listening on {addr}:{port}/metrics")
        except Exception as e:
            logger.error(f"Failed to start self metrics HTTP server: {e}")
            raise


def create_self_metrics(port: Optional[int]) -> SelfMetrics:
    """Build self metrics, serving them when a port is configured."""
    self_metrics = SelfMetrics()
    if port:
        self_metrics.serve(port)
    return self_metrics

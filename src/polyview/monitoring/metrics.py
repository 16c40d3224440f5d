"""
Metrics Collection
Prometheus metrics for compile, dispatch and render tracking
"""

import time
from contextlib import contextmanager
from typing import Callable

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Gauge, Histogram, generate_latest


class MetricsCollector:
    """
    Collects and exposes Prometheus metrics for the runtime.

    Pass a fresh ``CollectorRegistry`` to keep instances independent (tests
    do this); the default registry allows only one collector per process.
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry if registry is not None else REGISTRY

        # Render metrics
        self.render_total = Counter(
            "polyview_render_total",
            "Total number of per-platform render calls",
            ["platform", "status"],
            registry=self.registry,
        )
        self.render_duration = Histogram(
            "polyview_render_duration_seconds",
            "Per-platform render duration in seconds",
            ["platform"],
            buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0],
            registry=self.registry,
        )

        # Dispatch metrics
        self.dispatch_total = Counter(
            "polyview_dispatch_total",
            "Total number of dispatched events",
            ["kind", "outcome"],
            registry=self.registry,
        )

        # Compile metrics
        self.compile_total = Counter(
            "polyview_compile_total",
            "Total number of document compilations",
            ["cache"],
            registry=self.registry,
        )
        self.compile_cache_size = Gauge(
            "polyview_compile_cache_entries",
            "Compiled documents currently cached",
            registry=self.registry,
        )

        # Error metrics
        self.errors_total = Counter(
            "polyview_errors_total",
            "Total number of contained errors",
            ["error_type", "component"],
            registry=self.registry,
        )

    def record_render(self, platform: str, status: str, duration: float) -> None:
        """Record one platform's render outcome."""
        self.render_total.labels(platform=platform, status=status).inc()
        self.render_duration.labels(platform=platform).observe(duration)

    def record_dispatch(self, kind: str, outcome: str) -> None:
        self.dispatch_total.labels(kind=kind, outcome=outcome).inc()

    def record_compile(self, cache: str) -> None:
        """Record a compilation (cache is "hit", "miss" or "disabled")."""
        self.compile_total.labels(cache=cache).inc()

    def set_cache_size(self, entries: int) -> None:
        self.compile_cache_size.set(entries)

    def record_error(self, error_type: str, component: str) -> None:
        """Record an error."""
        self.errors_total.labels(error_type=error_type, component=component).inc()

    @contextmanager
    def measure_duration(self, callback: Callable[[float], None]):
        """Context manager to measure operation duration."""
        start = time.perf_counter()
        try:
            yield
        finally:
            callback(time.perf_counter() - start)

    def get_metrics(self) -> bytes:
        """Get metrics in Prometheus format."""
        return generate_latest(self.registry)


# Global metrics collector instance
metrics_collector = MetricsCollector()

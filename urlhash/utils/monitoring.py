"""
Metrics collection for fetch runs.
"""

import time
import logging
from typing import Dict, Optional, Any

from prometheus_client import Counter, Histogram, Gauge, CollectorRegistry, generate_latest
from prometheus_client import start_http_server


class MetricsCollector:
    """Owns the Prometheus registry and the metrics a run reports into."""

    def __init__(self, enable_prometheus: bool = False, prometheus_port: int = 8000):
        self.logger = logging.getLogger(__name__)
        self.enable_prometheus = enable_prometheus
        self.prometheus_port = prometheus_port
        self.registry = CollectorRegistry()

        self.requests_total = Counter(
            'urlhash_requests_total',
            'Total number of URLs processed',
            registry=self.registry
        )
        self.errors_total = Counter(
            'urlhash_errors_total',
            'Total number of failed URLs',
            ['error_type'],
            registry=self.registry
        )
        self.request_duration = Histogram(
            'urlhash_request_duration_seconds',
            'Time spent fetching and hashing a URL',
            registry=self.registry
        )
        self.in_flight = Gauge(
            'urlhash_in_flight',
            'Number of fetches currently in flight',
            registry=self.registry
        )
        self.bytes_hashed_total = Counter(
            'urlhash_bytes_hashed_total',
            'Total response bytes hashed',
            registry=self.registry
        )

    def start_prometheus_server(self):
        """Expose the registry over HTTP when enabled."""
        if not self.enable_prometheus:
            return
        try:
            start_http_server(self.prometheus_port, registry=self.registry)
            self.logger.info(f"Prometheus metrics server started on port {self.prometheus_port}")
        except OSError as e:
            self.logger.error(f"Failed to start Prometheus server: {e}")

    def get_value(self, name: str, labels: Optional[Dict[str, str]] = None) -> float:
        """Current value of a sample, 0.0 when it has not been recorded yet."""
        value = self.registry.get_sample_value(name, labels or {})
        return value if value is not None else 0.0

    def export_text(self) -> str:
        """Registry contents in the Prometheus text format."""
        return generate_latest(self.registry).decode('utf-8')


class FetchMonitor:
    """High-level monitoring interface used by the task runner."""

    def __init__(self, metrics_collector: Optional[MetricsCollector] = None):
        self.metrics = metrics_collector or MetricsCollector()
        self.start_time = time.time()
        self._max_in_flight = 0
        self._current_in_flight = 0

    def task_started(self):
        self._current_in_flight += 1
        self._max_in_flight = max(self._max_in_flight, self._current_in_flight)
        self.metrics.in_flight.inc()

    def task_finished(self, duration: float):
        self._current_in_flight -= 1
        self.metrics.in_flight.dec()
        self.metrics.requests_total.inc()
        self.metrics.request_duration.observe(duration)

    def record_success(self, size: int):
        self.metrics.bytes_hashed_total.inc(size)

    def record_error(self, error_type: str):
        self.metrics.errors_total.labels(error_type=error_type).inc()

    @property
    def max_in_flight(self) -> int:
        """Highest number of simultaneous fetches observed."""
        return self._max_in_flight

    def get_summary(self) -> Dict[str, Any]:
        """Get a summary of the run's metrics."""
        runtime = time.time() - self.start_time
        requests = self.metrics.get_value('urlhash_requests_total')
        errors = sum(
            sample.value
            for metric in self.metrics.errors_total.collect()
            for sample in metric.samples
            if sample.name == 'urlhash_errors_total'
        )
        return {
            'runtime_seconds': runtime,
            'requests': requests,
            'errors': errors,
            'bytes_hashed': self.metrics.get_value('urlhash_bytes_hashed_total'),
            'max_in_flight': self._max_in_flight,
            'urls_per_second': requests / runtime if runtime > 0 else 0,
        }

from __future__ import annotations

from collections import defaultdict
from typing import Protocol

from prometheus_client import CollectorRegistry, Gauge, generate_latest


class EstimatorMetricCollector(Protocol):
    def increment_estimate(self, operation: str, source: str) -> None: ...

    def increment_provider_error(self, operation: str, code: str) -> None: ...


class InMemoryEstimatorMetricsCollector:
    def __init__(self) -> None:
        self.estimates_total: dict[tuple[str, str], int] = defaultdict(int)
        self.provider_errors_total: dict[tuple[str, str], int] = defaultdict(int)

    def increment_estimate(self, operation: str, source: str) -> None:
        self.estimates_total[(operation, source)] += 1

    def increment_provider_error(self, operation: str, code: str) -> None:
        self.provider_errors_total[(operation, code)] += 1


class EstimatorPrometheusExporter:
    def __init__(self) -> None:
        self._registry = CollectorRegistry()
        self._estimates_total = Gauge(
            "dispatch_route_estimates_total",
            "Route estimates grouped by operation and source",
            labelnames=("operation", "source"),
            registry=self._registry,
        )
        self._provider_errors_total = Gauge(
            "dispatch_directions_provider_errors_total",
            "Directions provider errors grouped by operation and code",
            labelnames=("operation", "code"),
            registry=self._registry,
        )

    def render(self, metrics: InMemoryEstimatorMetricsCollector) -> str:
        for (operation, source), count in metrics.estimates_total.items():
            self._estimates_total.labels(operation=operation, source=source).set(count)
        for (operation, code), count in metrics.provider_errors_total.items():
            self._provider_errors_total.labels(operation=operation, code=code).set(count)
        return generate_latest(self._registry).decode("utf-8")

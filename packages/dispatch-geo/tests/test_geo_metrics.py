from dispatch_geo.metrics import EstimatorPrometheusExporter, InMemoryEstimatorMetricsCollector


def test_prometheus_exporter_renders_estimator_counts() -> None:
    metrics = InMemoryEstimatorMetricsCollector()
    metrics.increment_estimate("route", "remote")
    metrics.increment_estimate("route", "local")
    metrics.increment_estimate("route", "local")
    metrics.increment_provider_error("route", "PROVIDER_TIMEOUT")

    rendered = EstimatorPrometheusExporter().render(metrics)

    assert 'dispatch_route_estimates_total{operation="route",source="local"} 2.0' in rendered
    assert 'dispatch_route_estimates_total{operation="route",source="remote"} 1.0' in rendered
    assert 'dispatch_directions_provider_errors_total{operation="route",code="PROVIDER_TIMEOUT"} 1.0' in rendered

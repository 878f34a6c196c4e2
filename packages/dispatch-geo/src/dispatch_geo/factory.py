from __future__ import annotations

from collections.abc import Callable

import httpx
from dispatch_devkit.config import DispatchSettings

from dispatch_geo.directions_client import DirectionsClient
from dispatch_geo.distance_matrix import DistanceMatrixEstimator
from dispatch_geo.metrics import EstimatorMetricCollector
from dispatch_geo.nearest import NearestResponderSelector
from dispatch_geo.route_estimator import RouteEstimator


def build_directions_client(
    settings: DispatchSettings,
    client_factory: Callable[[], httpx.AsyncClient] | None = None,
) -> DirectionsClient | None:
    if not settings.GOOGLE_MAPS_API_KEY:
        return None
    return DirectionsClient(
        api_key=settings.GOOGLE_MAPS_API_KEY,
        base_url=settings.DIRECTIONS_BASE_URL,
        timeout_seconds=settings.DIRECTIONS_TIMEOUT_SECONDS,
        client_factory=client_factory,
    )


def build_route_estimator(
    settings: DispatchSettings,
    metrics: EstimatorMetricCollector | None = None,
    client_factory: Callable[[], httpx.AsyncClient] | None = None,
) -> RouteEstimator:
    return RouteEstimator(
        directions_client=build_directions_client(settings, client_factory),
        average_speed_kmh=settings.AVERAGE_SPEED_KMH,
        metrics=metrics,
    )


def build_distance_matrix_estimator(
    settings: DispatchSettings,
    metrics: EstimatorMetricCollector | None = None,
    client_factory: Callable[[], httpx.AsyncClient] | None = None,
) -> DistanceMatrixEstimator:
    return DistanceMatrixEstimator(
        directions_client=build_directions_client(settings, client_factory),
        average_speed_kmh=settings.AVERAGE_SPEED_KMH,
        metrics=metrics,
    )


def build_nearest_selector(
    settings: DispatchSettings,
    metrics: EstimatorMetricCollector | None = None,
    max_distance_meters: float | None = None,
    client_factory: Callable[[], httpx.AsyncClient] | None = None,
) -> NearestResponderSelector:
    return NearestResponderSelector(
        route_estimator=build_route_estimator(settings, metrics, client_factory),
        max_distance_meters=max_distance_meters,
    )

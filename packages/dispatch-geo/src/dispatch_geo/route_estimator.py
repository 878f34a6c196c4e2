from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from dispatch_geo.bounds import is_valid_coordinate
from dispatch_geo.directions_client import DirectionsClient
from dispatch_geo.distance import estimate_travel_seconds, haversine_distance_meters
from dispatch_geo.errors import DirectionsProviderError
from dispatch_geo.metrics import EstimatorMetricCollector
from dispatch_geo.models import EstimateSource, GeoPoint, RouteEstimate
from dispatch_geo.polyline import decode_polyline

logger = logging.getLogger(__name__)

DEFAULT_AVERAGE_SPEED_KMH = 30.0


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class LocalEstimator:
    """Haversine distance plus a constant average speed."""

    def __init__(
        self,
        average_speed_kmh: float = DEFAULT_AVERAGE_SPEED_KMH,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        if average_speed_kmh <= 0:
            raise ValueError("average_speed_kmh must be > 0")
        self._average_speed_kmh = average_speed_kmh
        self._clock = clock

    def estimate(self, origin: GeoPoint, destination: GeoPoint) -> RouteEstimate:
        distance_meters = haversine_distance_meters(origin, destination)
        duration_seconds = estimate_travel_seconds(distance_meters, self._average_speed_kmh)
        return build_estimate(
            distance_meters,
            duration_seconds,
            (origin, destination),
            EstimateSource.LOCAL,
            self._clock(),
        )


def build_estimate(
    distance_meters: float,
    duration_seconds: float,
    path: tuple[GeoPoint, ...],
    source: EstimateSource,
    now: datetime,
) -> RouteEstimate:
    return RouteEstimate(
        distance_meters=distance_meters,
        duration_seconds=duration_seconds,
        eta=now + timedelta(seconds=duration_seconds),
        path=path,
        source=source,
    )


class RouteEstimator:
    def __init__(
        self,
        directions_client: DirectionsClient | None = None,
        average_speed_kmh: float = DEFAULT_AVERAGE_SPEED_KMH,
        metrics: EstimatorMetricCollector | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._directions_client = directions_client
        self._local = LocalEstimator(average_speed_kmh=average_speed_kmh, clock=clock)
        self._metrics = metrics
        self._clock = clock
        self._missing_config_warned = False

    async def estimate(self, origin: GeoPoint, destination: GeoPoint) -> RouteEstimate | None:
        if not (is_valid_coordinate(origin) and is_valid_coordinate(destination)):
            logger.warning(
                "route_estimate_invalid_coordinate",
                extra={"component": "dispatch_geo", "origin": origin, "destination": destination},
            )
            return None

        if self._directions_client is None:
            self._warn_missing_config()
            return self._local_estimate(origin, destination)

        try:
            route = await self._directions_client.route(origin, destination)
        except DirectionsProviderError as exc:
            logger.warning(
                "route_estimate_fallback",
                extra={"component": "dispatch_geo", "code": exc.code, "reason": exc.message},
            )
            if self._metrics:
                self._metrics.increment_provider_error("route", exc.code)
            return self._local_estimate(origin, destination)

        path = tuple(decode_polyline(route.encoded_polyline))
        if len(path) < 2:
            path = (origin, destination)
        if self._metrics:
            self._metrics.increment_estimate("route", EstimateSource.REMOTE)
        return build_estimate(
            route.distance_meters,
            route.duration_seconds,
            path,
            EstimateSource.REMOTE,
            self._clock(),
        )

    def _local_estimate(self, origin: GeoPoint, destination: GeoPoint) -> RouteEstimate:
        if self._metrics:
            self._metrics.increment_estimate("route", EstimateSource.LOCAL)
        return self._local.estimate(origin, destination)

    def _warn_missing_config(self) -> None:
        if self._missing_config_warned:
            return
        logger.warning(
            "directions_provider_not_configured",
            extra={"component": "dispatch_geo"},
        )
        self._missing_config_warned = True

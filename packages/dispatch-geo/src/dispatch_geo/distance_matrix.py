from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import datetime

from dispatch_geo.bounds import is_valid_coordinate
from dispatch_geo.directions_client import DirectionsClient
from dispatch_geo.errors import DirectionsProviderError
from dispatch_geo.metrics import EstimatorMetricCollector
from dispatch_geo.models import EstimateSource, GeoPoint, MatrixEntry
from dispatch_geo.route_estimator import DEFAULT_AVERAGE_SPEED_KMH, LocalEstimator, build_estimate, utc_now

logger = logging.getLogger(__name__)


class DistanceMatrixEstimator:
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

    async def estimate_all(
        self,
        origins: Sequence[GeoPoint],
        destinations: Sequence[GeoPoint],
    ) -> list[MatrixEntry]:
        if not origins or not destinations:
            return []
        if self._directions_client is None:
            return self._local_matrix(origins, destinations)

        try:
            elements = await self._directions_client.distance_matrix(origins, destinations)
        except DirectionsProviderError as exc:
            logger.warning(
                "distance_matrix_fallback",
                extra={
                    "component": "dispatch_geo",
                    "code": exc.code,
                    "reason": exc.message,
                    "pairs": len(origins) * len(destinations),
                },
            )
            if self._metrics:
                self._metrics.increment_provider_error("matrix", exc.code)
            return self._local_matrix(origins, destinations)

        now = self._clock()
        entries: list[MatrixEntry] = []
        for element in elements:
            origin = origins[element.origin_index]
            destination = destinations[element.destination_index]
            estimate = build_estimate(
                element.distance_meters,
                element.duration_seconds,
                (origin, destination),
                EstimateSource.REMOTE,
                now,
            )
            entries.append(MatrixEntry(origin=origin, destination=destination, estimate=estimate))
        if self._metrics:
            self._metrics.increment_estimate("matrix", EstimateSource.REMOTE)
        return entries

    def _local_matrix(
        self,
        origins: Sequence[GeoPoint],
        destinations: Sequence[GeoPoint],
    ) -> list[MatrixEntry]:
        entries = [
            MatrixEntry(origin=origin, destination=destination, estimate=self._local.estimate(origin, destination))
            for origin in origins
            for destination in destinations
            if is_valid_coordinate(origin) and is_valid_coordinate(destination)
        ]
        if self._metrics:
            self._metrics.increment_estimate("matrix", EstimateSource.LOCAL)
        return entries

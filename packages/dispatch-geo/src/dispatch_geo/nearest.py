from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence

from dispatch_geo.bounds import is_valid_coordinate
from dispatch_geo.models import (
    Candidate,
    CandidateCategory,
    GeoPoint,
    NearestResponders,
    NearestResult,
    RouteEstimate,
)
from dispatch_geo.route_estimator import RouteEstimator

logger = logging.getLogger(__name__)


class NearestResponderSelector:
    """Pick the closest helper and responder to an incident.

    Every candidate is estimated on each call (linear scan, no spatial
    index), so pools are expected to hold tens of candidates, not millions.
    """

    def __init__(
        self,
        route_estimator: RouteEstimator,
        max_concurrency: int = 10,
        max_distance_meters: float | None = None,
    ) -> None:
        if max_concurrency <= 0:
            raise ValueError("max_concurrency must be > 0")
        if max_distance_meters is not None and max_distance_meters < 0:
            raise ValueError("max_distance_meters must be >= 0")
        self._route_estimator = route_estimator
        self._semaphore = asyncio.Semaphore(max_concurrency)
        self._max_distance_meters = max_distance_meters

    async def find_nearest(
        self,
        incident: GeoPoint,
        helpers: Sequence[Candidate],
        responders: Sequence[Candidate],
    ) -> NearestResponders:
        if not is_valid_coordinate(incident):
            logger.warning("nearest_invalid_incident", extra={"component": "dispatch_geo"})
            return NearestResponders()

        ranked = await self._estimate_all(incident, [*helpers, *responders])
        return NearestResponders(
            nearest_helper=_first_of(ranked, CandidateCategory.HELPER),
            nearest_responder=_first_of(ranked, CandidateCategory.RESPONDER),
        )

    async def rank(self, incident: GeoPoint, candidates: Sequence[Candidate]) -> list[NearestResult]:
        if not is_valid_coordinate(incident):
            return []
        return await self._estimate_all(incident, candidates)

    async def _estimate_all(self, incident: GeoPoint, candidates: Sequence[Candidate]) -> list[NearestResult]:
        if not candidates:
            return []
        tasks = [self._estimate_with_limit(incident, candidate) for candidate in candidates]
        estimates = await asyncio.gather(*tasks, return_exceptions=True)

        results: list[NearestResult] = []
        for candidate, estimate in zip(candidates, estimates):
            if isinstance(estimate, BaseException):
                if not isinstance(estimate, Exception):
                    raise estimate
                logger.warning(
                    "nearest_candidate_failed",
                    extra={"component": "dispatch_geo", "candidate_id": candidate.id, "error": repr(estimate)},
                )
                continue
            if estimate is None:
                continue
            if self._max_distance_meters is not None and estimate.distance_meters > self._max_distance_meters:
                continue
            results.append(
                NearestResult(category=candidate.category, candidate_id=candidate.id, estimate=estimate)
            )
        # sorted() is stable: equal distances keep input order
        results = sorted(results, key=lambda item: item.estimate.distance_meters)
        logger.info(
            "nearest_candidates_ranked",
            extra={"component": "dispatch_geo", "candidates": len(candidates), "eligible": len(results)},
        )
        return results

    async def _estimate_with_limit(self, incident: GeoPoint, candidate: Candidate) -> RouteEstimate | None:
        async with self._semaphore:
            return await self._route_estimator.estimate(incident, candidate.location)


def _first_of(results: list[NearestResult], category: CandidateCategory) -> NearestResult | None:
    return next((item for item in results if item.category == category), None)

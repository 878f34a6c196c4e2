from __future__ import annotations

import asyncio

import pytest

from dispatch_geo.models import Candidate, CandidateCategory, GeoPoint, RouteEstimate
from dispatch_geo.nearest import NearestResponderSelector
from dispatch_geo.route_estimator import RouteEstimator

INCIDENT = GeoPoint(latitude=22.3072, longitude=73.1812)
# one degree of latitude is ~111.2 km
TEN_KM_NORTH = GeoPoint(latitude=22.3072 + 0.08993, longitude=73.1812)
TWO_KM_NORTH = GeoPoint(latitude=22.3072 + 0.017986, longitude=73.1812)
FIVE_KM_NORTH = GeoPoint(latitude=22.3072 + 0.04497, longitude=73.1812)


def helper(candidate_id: str, location: GeoPoint) -> Candidate:
    return Candidate(id=candidate_id, location=location, category=CandidateCategory.HELPER)


def responder(candidate_id: str, location: GeoPoint) -> Candidate:
    return Candidate(id=candidate_id, location=location, category=CandidateCategory.RESPONDER)


class FlakyEstimator:
    def __init__(self, failing_location: GeoPoint) -> None:
        self._failing_location = failing_location
        self._inner = RouteEstimator()

    async def estimate(self, origin: GeoPoint, destination: GeoPoint) -> RouteEstimate | None:
        if destination == self._failing_location:
            raise RuntimeError("unexpected estimator failure")
        return await self._inner.estimate(origin, destination)


class TrackingEstimator:
    def __init__(self) -> None:
        self.active = 0
        self.peak = 0
        self._inner = RouteEstimator()

    async def estimate(self, origin: GeoPoint, destination: GeoPoint) -> RouteEstimate | None:
        self.active += 1
        self.peak = max(self.peak, self.active)
        await asyncio.sleep(0)
        self.active -= 1
        return await self._inner.estimate(origin, destination)


@pytest.mark.asyncio
async def test_find_nearest_picks_closest_helper() -> None:
    selector = NearestResponderSelector(route_estimator=RouteEstimator())
    result = await selector.find_nearest(
        INCIDENT,
        helpers=[helper("H1", TEN_KM_NORTH), helper("H2", TWO_KM_NORTH)],
        responders=[],
    )

    assert result.nearest_helper is not None
    assert result.nearest_helper.candidate_id == "H2"
    assert result.nearest_helper.category == CandidateCategory.HELPER
    assert 1900 < result.nearest_helper.estimate.distance_meters < 2100
    assert result.nearest_responder is None


@pytest.mark.asyncio
async def test_find_nearest_handles_both_pools() -> None:
    selector = NearestResponderSelector(route_estimator=RouteEstimator())
    result = await selector.find_nearest(
        INCIDENT,
        helpers=[helper("H1", FIVE_KM_NORTH)],
        responders=[responder("R1", TEN_KM_NORTH), responder("R2", TWO_KM_NORTH)],
    )

    assert result.nearest_helper is not None
    assert result.nearest_helper.candidate_id == "H1"
    assert result.nearest_responder is not None
    assert result.nearest_responder.candidate_id == "R2"


@pytest.mark.asyncio
async def test_find_nearest_tie_keeps_input_order() -> None:
    selector = NearestResponderSelector(route_estimator=RouteEstimator())
    result = await selector.find_nearest(
        INCIDENT,
        helpers=[helper("first", TWO_KM_NORTH), helper("second", TWO_KM_NORTH)],
        responders=[],
    )

    assert result.nearest_helper is not None
    assert result.nearest_helper.candidate_id == "first"


@pytest.mark.asyncio
async def test_failing_candidate_is_excluded() -> None:
    selector = NearestResponderSelector(route_estimator=FlakyEstimator(failing_location=TWO_KM_NORTH))
    result = await selector.find_nearest(
        INCIDENT,
        helpers=[helper("H1", TEN_KM_NORTH), helper("H2", TWO_KM_NORTH)],
        responders=[],
    )

    assert result.nearest_helper is not None
    assert result.nearest_helper.candidate_id == "H1"


@pytest.mark.asyncio
async def test_invalid_candidate_location_is_excluded() -> None:
    selector = NearestResponderSelector(route_estimator=RouteEstimator())
    result = await selector.find_nearest(
        INCIDENT,
        helpers=[],
        responders=[responder("broken", GeoPoint(latitude=95.0, longitude=0.0))],
    )

    assert result.nearest_responder is None


@pytest.mark.asyncio
async def test_invalid_incident_returns_empty_result() -> None:
    selector = NearestResponderSelector(route_estimator=RouteEstimator())
    result = await selector.find_nearest(
        GeoPoint(latitude=-91.0, longitude=0.0),
        helpers=[helper("H1", TWO_KM_NORTH)],
        responders=[],
    )

    assert result.nearest_helper is None
    assert result.nearest_responder is None


@pytest.mark.asyncio
async def test_max_distance_excludes_far_candidates() -> None:
    selector = NearestResponderSelector(route_estimator=RouteEstimator(), max_distance_meters=5_000)
    result = await selector.find_nearest(
        INCIDENT,
        helpers=[helper("H1", TEN_KM_NORTH)],
        responders=[responder("R1", TWO_KM_NORTH)],
    )

    assert result.nearest_helper is None
    assert result.nearest_responder is not None
    assert result.nearest_responder.candidate_id == "R1"


@pytest.mark.asyncio
async def test_rank_orders_by_distance() -> None:
    selector = NearestResponderSelector(route_estimator=RouteEstimator())
    ranked = await selector.rank(
        INCIDENT,
        [responder("far", TEN_KM_NORTH), responder("near", TWO_KM_NORTH), responder("mid", FIVE_KM_NORTH)],
    )

    assert [item.candidate_id for item in ranked] == ["near", "mid", "far"]


@pytest.mark.asyncio
async def test_estimates_respect_max_concurrency() -> None:
    estimator = TrackingEstimator()
    selector = NearestResponderSelector(route_estimator=estimator, max_concurrency=2)
    await selector.find_nearest(
        INCIDENT,
        helpers=[helper(f"H{i}", TWO_KM_NORTH) for i in range(6)],
        responders=[],
    )

    assert estimator.peak <= 2


def test_invalid_selector_options_raise() -> None:
    with pytest.raises(ValueError):
        NearestResponderSelector(route_estimator=RouteEstimator(), max_concurrency=0)
    with pytest.raises(ValueError):
        NearestResponderSelector(route_estimator=RouteEstimator(), max_distance_meters=-1)

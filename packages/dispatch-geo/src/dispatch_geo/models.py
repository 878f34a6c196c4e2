from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float
    address: str | None = None


class EstimateSource(StrEnum):
    REMOTE = "remote"
    LOCAL = "local"


@dataclass(frozen=True)
class RouteEstimate:
    distance_meters: float
    duration_seconds: float
    eta: datetime
    path: tuple[GeoPoint, ...]
    source: EstimateSource = EstimateSource.LOCAL


@dataclass(frozen=True)
class MatrixEntry:
    origin: GeoPoint
    destination: GeoPoint
    estimate: RouteEstimate


class CandidateCategory(StrEnum):
    HELPER = "helper"
    RESPONDER = "responder"


@dataclass(frozen=True)
class Candidate:
    id: str
    location: GeoPoint
    category: CandidateCategory


@dataclass(frozen=True)
class NearestResult:
    category: CandidateCategory
    candidate_id: str
    estimate: RouteEstimate


@dataclass(frozen=True)
class NearestResponders:
    nearest_helper: NearestResult | None = None
    nearest_responder: NearestResult | None = None

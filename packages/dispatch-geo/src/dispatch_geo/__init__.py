"""Distance, ETA and nearest-responder estimation."""

from dispatch_geo.bounds import bounding_box, is_valid_coordinate
from dispatch_geo.directions_client import DirectionsClient
from dispatch_geo.distance import estimate_travel_seconds, haversine_distance_meters, is_point_inside_radius
from dispatch_geo.distance_matrix import DistanceMatrixEstimator
from dispatch_geo.errors import DirectionsProviderError
from dispatch_geo.formatting import format_distance, format_duration, format_eta
from dispatch_geo.models import (
    Candidate,
    CandidateCategory,
    EstimateSource,
    GeoPoint,
    MatrixEntry,
    NearestResponders,
    NearestResult,
    RouteEstimate,
)
from dispatch_geo.nearest import NearestResponderSelector
from dispatch_geo.polyline import decode_polyline, encode_polyline
from dispatch_geo.route_estimator import RouteEstimator

__all__ = [
    "Candidate",
    "CandidateCategory",
    "DirectionsClient",
    "DirectionsProviderError",
    "DistanceMatrixEstimator",
    "EstimateSource",
    "GeoPoint",
    "MatrixEntry",
    "NearestResponderSelector",
    "NearestResponders",
    "NearestResult",
    "RouteEstimate",
    "RouteEstimator",
    "bounding_box",
    "decode_polyline",
    "encode_polyline",
    "estimate_travel_seconds",
    "format_distance",
    "format_duration",
    "format_eta",
    "haversine_distance_meters",
    "is_point_inside_radius",
    "is_valid_coordinate",
]

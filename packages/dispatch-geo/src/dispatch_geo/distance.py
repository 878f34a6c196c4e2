import math

from dispatch_geo.models import GeoPoint

EARTH_RADIUS_METERS = 6_371_000


def haversine_distance_meters(start: GeoPoint, end: GeoPoint) -> float:
    start_lat = math.radians(start.latitude)
    end_lat = math.radians(end.latitude)
    delta_lat = math.radians(end.latitude - start.latitude)
    delta_lng = math.radians(end.longitude - start.longitude)

    a = (
        math.sin(delta_lat / 2) ** 2
        + math.cos(start_lat) * math.cos(end_lat) * math.sin(delta_lng / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_METERS * c


def estimate_travel_seconds(distance_meters: float, average_speed_kmh: float) -> float:
    if average_speed_kmh <= 0:
        raise ValueError("average_speed_kmh must be > 0")
    meters_per_second = (average_speed_kmh * 1000) / 3600
    return distance_meters / meters_per_second


def is_point_inside_radius(center: GeoPoint, point: GeoPoint, radius_meters: float) -> bool:
    if radius_meters < 0:
        raise ValueError("radius_meters must be >= 0")
    return haversine_distance_meters(center, point) <= radius_meters

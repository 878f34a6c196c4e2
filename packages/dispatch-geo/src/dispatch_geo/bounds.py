from __future__ import annotations

from collections.abc import Iterable

from dispatch_geo.models import GeoPoint


def is_valid_coordinate(point: GeoPoint) -> bool:
    lat, lng = point.latitude, point.longitude
    # NaN fails both comparisons
    return -90.0 <= lat <= 90.0 and -180.0 <= lng <= 180.0


def bounding_box(points: Iterable[GeoPoint]) -> tuple[GeoPoint, GeoPoint]:
    """Return the (south-west, north-east) corners enclosing ``points``.

    An empty input yields ``(0, 0), (0, 0)`` instead of raising.
    """
    items = list(points)
    if not items:
        return GeoPoint(0.0, 0.0), GeoPoint(0.0, 0.0)
    lats = [item.latitude for item in items]
    lngs = [item.longitude for item in items]
    return GeoPoint(min(lats), min(lngs)), GeoPoint(max(lats), max(lngs))

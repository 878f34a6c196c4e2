import pytest

from dispatch_geo.models import GeoPoint
from dispatch_geo.polyline import decode_polyline, encode_polyline

REFERENCE_POLYLINE = "_p~iF~ps|U_ulLnnqC_mqNvxq`@"


def test_decode_reference_polyline() -> None:
    points = decode_polyline(REFERENCE_POLYLINE)

    assert [(p.latitude, p.longitude) for p in points] == [
        pytest.approx((38.5, -120.2)),
        pytest.approx((40.7, -120.95)),
        pytest.approx((43.252, -126.453)),
    ]


def test_encode_reference_points() -> None:
    points = [
        GeoPoint(latitude=38.5, longitude=-120.2),
        GeoPoint(latitude=40.7, longitude=-120.95),
        GeoPoint(latitude=43.252, longitude=-126.453),
    ]
    assert encode_polyline(points) == REFERENCE_POLYLINE


def test_polyline_round_trip_within_precision() -> None:
    points = [
        GeoPoint(latitude=22.3072, longitude=73.1812),
        GeoPoint(latitude=22.315049, longitude=73.175001),
        GeoPoint(latitude=-33.868820, longitude=151.209296),
    ]
    decoded = decode_polyline(encode_polyline(points))

    assert len(decoded) == len(points)
    for original, restored in zip(points, decoded):
        assert abs(original.latitude - restored.latitude) <= 1e-5
        assert abs(original.longitude - restored.longitude) <= 1e-5


def test_decode_truncated_polyline_keeps_complete_points() -> None:
    points = decode_polyline("_p~iF~ps|U_ulL")
    assert len(points) == 1
    assert points[0].latitude == pytest.approx(38.5)


def test_decode_garbage_returns_empty() -> None:
    assert decode_polyline("   ") == []
    assert decode_polyline("") == []

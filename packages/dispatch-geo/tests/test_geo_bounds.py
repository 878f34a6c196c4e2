from dispatch_geo.bounds import bounding_box, is_valid_coordinate
from dispatch_geo.models import GeoPoint


def test_is_valid_coordinate_accepts_range_edges() -> None:
    assert is_valid_coordinate(GeoPoint(latitude=90.0, longitude=180.0))
    assert is_valid_coordinate(GeoPoint(latitude=-90.0, longitude=-180.0))


def test_is_valid_coordinate_rejects_out_of_range_and_nan() -> None:
    assert not is_valid_coordinate(GeoPoint(latitude=90.5, longitude=0.0))
    assert not is_valid_coordinate(GeoPoint(latitude=0.0, longitude=-180.1))
    assert not is_valid_coordinate(GeoPoint(latitude=float("nan"), longitude=0.0))


def test_bounding_box_of_points() -> None:
    south_west, north_east = bounding_box(
        [
            GeoPoint(latitude=22.3072, longitude=73.1812),
            GeoPoint(latitude=22.3150, longitude=73.1750),
            GeoPoint(latitude=22.2900, longitude=73.2000),
        ]
    )
    assert south_west == GeoPoint(latitude=22.29, longitude=73.175)
    assert north_east == GeoPoint(latitude=22.315, longitude=73.2)


def test_bounding_box_of_empty_input_is_origin() -> None:
    assert bounding_box([]) == (GeoPoint(0.0, 0.0), GeoPoint(0.0, 0.0))

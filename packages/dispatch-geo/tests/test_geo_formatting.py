from datetime import datetime, timedelta, timezone

from dispatch_geo.formatting import format_distance, format_duration, format_eta


def test_format_distance() -> None:
    assert format_distance(850.4) == "850m"
    assert format_distance(1240) == "1.2km"


def test_format_duration() -> None:
    assert format_duration(720) == "12m"
    assert format_duration(3900) == "1h 5m"


def test_format_eta() -> None:
    now = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)
    assert format_eta(now + timedelta(seconds=30), now) == "Now"
    assert format_eta(now + timedelta(minutes=12), now) == "12m"
    assert format_eta(now + timedelta(minutes=65), now) == "1h 5m"

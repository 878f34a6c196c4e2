"""Google encoded polyline codec (precision 1e5).

Decoding is permissive: a truncated chunk or a character outside the
encoding alphabet ends the decode, and the points completed before it are
returned. Callers that render partial routes rely on this, so the decoder
never raises.
"""

from __future__ import annotations

from collections.abc import Iterable

from dispatch_geo.models import GeoPoint

PRECISION = 1e5

_OFFSET = 63
_CHUNK_BITS = 5
_CHUNK_MASK = 0x1F
_CONTINUATION = 0x20


def decode_polyline(encoded: str) -> list[GeoPoint]:
    points: list[GeoPoint] = []
    index = 0
    lat = 0
    lng = 0
    length = len(encoded)

    while index < length:
        dlat, index = _read_value(encoded, index)
        if dlat is None:
            break
        dlng, index = _read_value(encoded, index)
        if dlng is None:
            break
        lat += dlat
        lng += dlng
        points.append(GeoPoint(latitude=lat / PRECISION, longitude=lng / PRECISION))
    return points


def encode_polyline(points: Iterable[GeoPoint]) -> str:
    chunks: list[str] = []
    prev_lat = 0
    prev_lng = 0
    for point in points:
        lat = round(point.latitude * PRECISION)
        lng = round(point.longitude * PRECISION)
        chunks.append(_encode_value(lat - prev_lat))
        chunks.append(_encode_value(lng - prev_lng))
        prev_lat, prev_lng = lat, lng
    return "".join(chunks)


def _read_value(encoded: str, index: int) -> tuple[int | None, int]:
    result = 0
    shift = 0
    while True:
        if index >= len(encoded):
            return None, index
        value = ord(encoded[index]) - _OFFSET
        index += 1
        if value < 0 or value > 0x3F:
            return None, index
        result |= (value & _CHUNK_MASK) << shift
        shift += _CHUNK_BITS
        if value < _CONTINUATION:
            break
    delta = ~(result >> 1) if result & 1 else result >> 1
    return delta, index


def _encode_value(value: int) -> str:
    value = ~(value << 1) if value < 0 else value << 1
    out: list[str] = []
    while value >= _CONTINUATION:
        out.append(chr((_CONTINUATION | (value & _CHUNK_MASK)) + _OFFSET))
        value >>= _CHUNK_BITS
    out.append(chr(value + _OFFSET))
    return "".join(out)

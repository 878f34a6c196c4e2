from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

import httpx
from opentelemetry import trace

from dispatch_geo.errors import DirectionsProviderError
from dispatch_geo.models import GeoPoint

DEFAULT_BASE_URL = "https://maps.googleapis.com/maps/api"

tracer = trace.get_tracer(__name__)


@dataclass(frozen=True)
class DirectionsRoute:
    distance_meters: float
    duration_seconds: float
    encoded_polyline: str


@dataclass(frozen=True)
class MatrixElement:
    origin_index: int
    destination_index: int
    distance_meters: float
    duration_seconds: float


class DirectionsClient:
    """Thin client over a Google-compatible directions / distance-matrix API.

    Every failure is raised as ``DirectionsProviderError`` so callers can
    absorb a single exception type.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = 10.0,
        client_factory: Callable[[], httpx.AsyncClient] | None = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds
        self._client_factory = client_factory

    async def route(self, origin: GeoPoint, destination: GeoPoint) -> DirectionsRoute:
        params = {
            "origin": _format_point(origin),
            "destination": _format_point(destination),
            "key": self._api_key,
        }
        with tracer.start_as_current_span("directions.route"):
            payload = await self._get("/directions/json", params)
        _ensure_ok(payload)
        try:
            route = payload["routes"][0]
            leg = route["legs"][0]
            return DirectionsRoute(
                distance_meters=float(leg["distance"]["value"]),
                duration_seconds=float(leg["duration"]["value"]),
                encoded_polyline=str(route.get("overview_polyline", {}).get("points", "")),
            )
        except (KeyError, IndexError, TypeError, ValueError, AttributeError) as exc:
            raise DirectionsProviderError("PROVIDER_BAD_RESPONSE", "Unexpected directions payload") from exc

    async def distance_matrix(
        self,
        origins: Sequence[GeoPoint],
        destinations: Sequence[GeoPoint],
    ) -> list[MatrixElement]:
        params = {
            "origins": "|".join(_format_point(item) for item in origins),
            "destinations": "|".join(_format_point(item) for item in destinations),
            "key": self._api_key,
        }
        with tracer.start_as_current_span("directions.distance_matrix"):
            payload = await self._get("/distancematrix/json", params)
        _ensure_ok(payload)
        try:
            rows = payload["rows"]
            if len(rows) != len(origins):
                raise ValueError("row count does not match origins")
            elements: list[MatrixElement] = []
            for origin_index, row in enumerate(rows):
                cells = row["elements"]
                if len(cells) != len(destinations):
                    raise ValueError("element count does not match destinations")
                for destination_index, cell in enumerate(cells):
                    if cell.get("status") != "OK":
                        continue
                    elements.append(
                        MatrixElement(
                            origin_index=origin_index,
                            destination_index=destination_index,
                            distance_meters=float(cell["distance"]["value"]),
                            duration_seconds=float(cell["duration"]["value"]),
                        )
                    )
            return elements
        except (KeyError, TypeError, ValueError, AttributeError) as exc:
            raise DirectionsProviderError("PROVIDER_BAD_RESPONSE", "Unexpected distance matrix payload") from exc

    async def _get(self, path: str, params: dict[str, Any]) -> dict[str, Any]:
        try:
            factory = self._client_factory or (lambda: httpx.AsyncClient(timeout=self._timeout_seconds))
            async with factory() as client:
                response = await client.get(f"{self._base_url}{path}", params=params)
                response.raise_for_status()
        except httpx.TimeoutException as exc:
            raise DirectionsProviderError("PROVIDER_TIMEOUT", "Directions provider timeout") from exc
        except httpx.HTTPStatusError as exc:
            raise DirectionsProviderError(
                "PROVIDER_HTTP_ERROR",
                f"Directions provider returned {exc.response.status_code}",
            ) from exc
        except httpx.HTTPError as exc:
            raise DirectionsProviderError("PROVIDER_UNAVAILABLE", "Directions provider request failed") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise DirectionsProviderError("PROVIDER_BAD_RESPONSE", "Directions provider returned invalid JSON") from exc
        if not isinstance(payload, dict):
            raise DirectionsProviderError("PROVIDER_BAD_RESPONSE", "Directions provider returned non-object JSON")
        return payload


def _format_point(point: GeoPoint) -> str:
    return f"{point.latitude},{point.longitude}"


def _ensure_ok(payload: dict[str, Any]) -> None:
    status = payload.get("status")
    if status != "OK":
        raise DirectionsProviderError("PROVIDER_STATUS", f"Directions provider status {status}")

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from datetime import datetime, timezone
from enum import StrEnum
from typing import Any

import httpx
from opentelemetry import trace
from pydantic import ValidationError

from orchestrator_client.schemas import (
    ConnectionProbe,
    ConnectivityReport,
    EmergencyStatusValue,
    EndpointKind,
    HealthReport,
    OrchestratorResult,
)

logger = logging.getLogger(__name__)
tracer = trace.get_tracer(__name__)

CORS_MARKERS = ("CORS", "Access-Control-Allow-Origin")
CORS_ERROR_MESSAGE = "CORS Error: The orchestrator endpoint does not allow requests from this origin."


class CallState(StrEnum):
    TRYING_PRIMARY = "trying_primary"
    TRYING_FALLBACK = "trying_fallback"
    DONE = "done"


def is_cors_failure(result: OrchestratorResult) -> bool:
    if result.success or not result.error:
        return False
    return any(marker in result.error for marker in CORS_MARKERS)


def next_call_state(state: CallState, result: OrchestratorResult, has_fallback: bool) -> CallState:
    """Only a CORS-flavoured primary failure earns a second attempt."""
    if state is CallState.TRYING_PRIMARY and has_fallback and is_cors_failure(result):
        return CallState.TRYING_FALLBACK
    return CallState.DONE


def normalize_response(body: Any, endpoint: EndpointKind) -> OrchestratorResult:
    if not isinstance(body, dict):
        return OrchestratorResult(success=False, error="Malformed response: expected a JSON object", endpoint=endpoint)
    success = body.get("success") is True
    nested = body.get("data")
    if isinstance(nested, dict):
        data = dict(nested)
    else:
        data = {key: value for key, value in body.items() if key not in {"success", "error", "data"}}
    error = None
    if not success:
        error = str(body.get("error") or body.get("message") or "Orchestrator reported failure")
    return OrchestratorResult(success=success, data=data, error=error, endpoint=endpoint)


class OrchestratorClient:
    def __init__(
        self,
        endpoint: str,
        auth_token: str,
        fallback_endpoint: str | None = None,
        timeout_seconds: float = 8.0,
        client_factory: Callable[[], httpx.AsyncClient] | None = None,
    ) -> None:
        self._endpoint = endpoint
        self._fallback_endpoint = fallback_endpoint
        self._auth_token = auth_token
        self._timeout_seconds = timeout_seconds
        self._client_factory = client_factory

    @property
    def endpoint(self) -> str:
        return self._endpoint

    async def call(self, action: str, payload: dict[str, Any] | None = None) -> OrchestratorResult:
        body = {**(payload or {}), "action": action}
        state = CallState.TRYING_PRIMARY
        result = OrchestratorResult(success=False, error="Orchestrator request not attempted")
        while state is not CallState.DONE:
            if state is CallState.TRYING_PRIMARY:
                result = await self._try_endpoint(self._endpoint, EndpointKind.PRIMARY, body)
            else:
                result = await self._try_endpoint(self._fallback_endpoint or "", EndpointKind.FALLBACK, body)
            next_state = next_call_state(state, result, has_fallback=bool(self._fallback_endpoint))
            if next_state is CallState.TRYING_FALLBACK:
                logger.info(
                    "orchestrator_cors_fallback",
                    extra={"component": "orchestrator_client", "action": action},
                )
            state = next_state
        return result

    async def health_check(self) -> HealthReport:
        result = await self.call("health_check")
        now_iso = datetime.now(timezone.utc).isoformat()
        if not result.success:
            return HealthReport.unhealthy(timestamp=now_iso, endpoint=result.endpoint)
        fields = {key: value for key, value in result.data.items() if value is not None}
        fields.update({"success": True, "endpoint": result.endpoint})
        try:
            report = HealthReport.model_validate(fields)
        except ValidationError as exc:
            # unparseable fields fall back to their defaults, the rest is kept
            rejected = {error["loc"][0] for error in exc.errors() if error["loc"]}
            logger.warning(
                "orchestrator_health_fields_defaulted",
                extra={"component": "orchestrator_client", "fields": sorted(str(item) for item in rejected)},
            )
            kept = {key: value for key, value in fields.items() if key not in rejected}
            report = HealthReport.model_validate(kept)
        if report.timestamp is None:
            report = report.model_copy(update={"timestamp": now_iso})
        return report

    async def get_status(self, sos_id: str) -> OrchestratorResult:
        if not sos_id:
            return _invalid("sos_id is required")
        return await self.call("get_status", {"sos_id": sos_id})

    async def update_status(self, sos_id: str, status: str, message: str) -> OrchestratorResult:
        if not sos_id:
            return _invalid("sos_id is required")
        try:
            parsed = EmergencyStatusValue(status)
        except ValueError:
            allowed = ", ".join(item.value for item in EmergencyStatusValue)
            return _invalid(f"status must be one of: {allowed}")
        return await self.call(
            "status_update",
            {"sos_id": sos_id, "status": parsed.value, "message": message},
        )

    async def resolve(self, sos_id: str, resolution_notes: str) -> OrchestratorResult:
        if not sos_id:
            return _invalid("sos_id is required")
        return await self.call(
            "end_emergency",
            {"sos_id": sos_id, "resolution_notes": resolution_notes},
        )

    async def test_connection(self) -> ConnectionProbe:
        started = time.perf_counter()
        report = await self.health_check()
        latency_ms = round((time.perf_counter() - started) * 1000, 2)
        if not report.success:
            error = f"Health check failed: {report.status}"
        elif report.status != "healthy":
            error = f"System status is {report.status}, expected 'healthy'"
        else:
            error = None
        return ConnectionProbe(success=error is None, latency_ms=latency_ms, endpoint=report.endpoint, error=error)

    async def check_connectivity(self) -> ConnectivityReport:
        """Send an OPTIONS preflight to the primary endpoint without invoking an action."""
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self._auth_token:
            headers["Authorization"] = f"Bearer {self._auth_token}"
        started = time.perf_counter()
        try:
            factory = self._client_factory or (lambda: httpx.AsyncClient(timeout=self._timeout_seconds))
            async with factory() as client:
                response = await client.options(self._endpoint, headers=headers)
        except httpx.HTTPError as exc:
            latency_ms = round((time.perf_counter() - started) * 1000, 2)
            if any(marker in str(exc) for marker in CORS_MARKERS):
                error = "CORS Error: Endpoint does not allow cross-origin requests."
            else:
                error = f"Connectivity check failed: {exc}"
            logger.warning(
                "orchestrator_connectivity_failed",
                extra={"component": "orchestrator_client", "error": error},
            )
            return ConnectivityReport(success=False, latency_ms=latency_ms, error=error)

        latency_ms = round((time.perf_counter() - started) * 1000, 2)
        return ConnectivityReport(
            success=response.is_success,
            latency_ms=latency_ms,
            status_code=response.status_code,
            headers=dict(response.headers),
            error=None if response.is_success else f"HTTP {response.status_code}: {response.reason_phrase}",
        )

    async def _try_endpoint(self, url: str, kind: EndpointKind, body: dict[str, Any]) -> OrchestratorResult:
        action = body.get("action")
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self._auth_token:
            headers["Authorization"] = f"Bearer {self._auth_token}"
        if kind is EndpointKind.FALLBACK:
            headers["X-Requested-With"] = "XMLHttpRequest"

        logger.info(
            "orchestrator_request",
            extra={"component": "orchestrator_client", "action": action, "endpoint": kind.value},
        )
        try:
            factory = self._client_factory or (lambda: httpx.AsyncClient(timeout=self._timeout_seconds))
            with tracer.start_as_current_span("orchestrator.call") as span:
                span.set_attribute("orchestrator.action", str(action))
                span.set_attribute("orchestrator.endpoint", kind.value)
                async with factory() as client:
                    response = await client.post(url, json=body, headers=headers)
        except httpx.TimeoutException:
            return self._failure(
                kind,
                action,
                f"Network error: orchestrator request timed out after {self._timeout_seconds}s",
            )
        except httpx.HTTPError as exc:
            if any(marker in str(exc) for marker in CORS_MARKERS):
                return self._failure(kind, action, CORS_ERROR_MESSAGE)
            return self._failure(kind, action, f"Network error: Unable to reach orchestrator endpoint ({exc})")

        if not response.is_success:
            return self._failure(
                kind,
                action,
                f"HTTP {response.status_code}: {response.reason_phrase} - {response.text}",
            )
        try:
            payload = response.json()
        except ValueError:
            return self._failure(kind, action, "Malformed response: orchestrator returned invalid JSON")

        result = normalize_response(payload, kind)
        if not result.success:
            logger.warning(
                "orchestrator_rejected",
                extra={"component": "orchestrator_client", "action": action, "endpoint": kind.value},
            )
        return result

    def _failure(self, kind: EndpointKind, action: Any, message: str) -> OrchestratorResult:
        logger.warning(
            "orchestrator_request_failed",
            extra={"component": "orchestrator_client", "action": action, "endpoint": kind.value, "error": message},
        )
        return OrchestratorResult(success=False, error=message, endpoint=kind)


def _invalid(message: str) -> OrchestratorResult:
    return OrchestratorResult(success=False, error=f"Invalid request: {message}")

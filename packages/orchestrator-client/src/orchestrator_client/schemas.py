from __future__ import annotations

from enum import StrEnum
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from orchestrator_client.errors import OrchestratorError

ModelT = TypeVar("ModelT", bound=BaseModel)


class EndpointKind(StrEnum):
    PRIMARY = "primary"
    FALLBACK = "fallback"


class EmergencyStatusValue(StrEnum):
    ACTIVE = "active"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CANCELLED = "cancelled"


class OrchestratorResult(BaseModel):
    success: bool
    data: dict[str, Any] = Field(default_factory=dict)
    error: str | None = None
    endpoint: EndpointKind = EndpointKind.PRIMARY

    def raise_for_failure(self) -> OrchestratorResult:
        if not self.success:
            raise OrchestratorError(self.error or "Orchestrator request failed", endpoint=self.endpoint)
        return self

    def to_model(self, model_type: type[ModelT]) -> ModelT:
        return model_type.model_validate(self.raise_for_failure().data)


def _all_up() -> dict[str, str]:
    return {"database": "up", "realtime": "up", "storage": "up", "auth": "up"}


def _all_down() -> dict[str, str]:
    return {"database": "down", "realtime": "down", "storage": "down", "auth": "down"}


class HealthReport(BaseModel):
    model_config = ConfigDict(extra="ignore")

    success: bool = True
    status: str = "healthy"
    timestamp: str | None = None
    services: dict[str, Any] = Field(default_factory=_all_up)
    uptime: float | str = 100
    version: str = "1.0.0"
    endpoint: EndpointKind = EndpointKind.PRIMARY

    @classmethod
    def unhealthy(cls, timestamp: str, endpoint: EndpointKind) -> HealthReport:
        return cls(
            success=False,
            status="unhealthy",
            timestamp=timestamp,
            services=_all_down(),
            uptime=0,
            version="unknown",
            endpoint=endpoint,
        )


class EmergencyLocation(BaseModel):
    latitude: float
    longitude: float
    address: str | None = None


class EmergencyStatus(BaseModel):
    model_config = ConfigDict(extra="allow")

    sos_id: str
    status: str
    priority: str | None = None
    emergency_type: str | None = None
    description: str | None = None
    location: EmergencyLocation | None = None
    user_id: str | None = None
    assigned_helper_id: str | None = None
    assigned_responder_id: str | None = None
    created_at: str | None = None
    updated_at: str | None = None
    resolved_at: str | None = None
    media_count: int = 0
    has_live_stream: bool = False


class StatusUpdate(BaseModel):
    model_config = ConfigDict(extra="allow")

    sos_id: str
    previous_status: str | None = None
    new_status: str | None = None
    message: str | None = None
    updated_at: str | None = None


class Resolution(BaseModel):
    model_config = ConfigDict(extra="allow")

    sos_id: str
    status: str = EmergencyStatusValue.RESOLVED
    resolution_notes: str | None = None
    resolved_at: str | None = None
    response_time: float | None = None


class ConnectivityReport(BaseModel):
    success: bool
    latency_ms: float
    status_code: int | None = None
    headers: dict[str, str] = Field(default_factory=dict)
    error: str | None = None


class ConnectionProbe(BaseModel):
    success: bool
    latency_ms: float
    endpoint: EndpointKind
    error: str | None = None

"""Client for the remote SOS orchestrator endpoint."""

from orchestrator_client.client import CallState, OrchestratorClient, next_call_state, normalize_response
from orchestrator_client.errors import OrchestratorError
from orchestrator_client.factory import build_orchestrator_client
from orchestrator_client.schemas import (
    ConnectionProbe,
    ConnectivityReport,
    EmergencyStatus,
    EmergencyStatusValue,
    EndpointKind,
    HealthReport,
    OrchestratorResult,
    Resolution,
    StatusUpdate,
)

__all__ = [
    "CallState",
    "ConnectionProbe",
    "ConnectivityReport",
    "EmergencyStatus",
    "EmergencyStatusValue",
    "EndpointKind",
    "HealthReport",
    "OrchestratorClient",
    "OrchestratorError",
    "OrchestratorResult",
    "Resolution",
    "StatusUpdate",
    "build_orchestrator_client",
    "next_call_state",
    "normalize_response",
]

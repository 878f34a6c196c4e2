from __future__ import annotations

from collections.abc import Callable

import httpx
from dispatch_devkit.config import DispatchSettings

from orchestrator_client.client import OrchestratorClient


def build_orchestrator_client(
    settings: DispatchSettings,
    client_factory: Callable[[], httpx.AsyncClient] | None = None,
) -> OrchestratorClient:
    return OrchestratorClient(
        endpoint=settings.ORCHESTRATOR_ENDPOINT,
        auth_token=settings.ORCHESTRATOR_AUTH_TOKEN,
        fallback_endpoint=settings.ORCHESTRATOR_FALLBACK_ENDPOINT,
        timeout_seconds=settings.ORCHESTRATOR_TIMEOUT_SECONDS,
        client_factory=client_factory,
    )

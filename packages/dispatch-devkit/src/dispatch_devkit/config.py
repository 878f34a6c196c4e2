from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class DispatchSettings(BaseSettings):
    model_config = SettingsConfigDict(extra="ignore")

    SERVICE_NAME: str = "sos-dispatch"
    LOG_LEVEL: str = "INFO"
    GOOGLE_MAPS_API_KEY: str | None = None
    DIRECTIONS_BASE_URL: str = "https://maps.googleapis.com/maps/api"
    DIRECTIONS_TIMEOUT_SECONDS: float = 10.0
    AVERAGE_SPEED_KMH: float = 30.0
    ORCHESTRATOR_ENDPOINT: str = "http://localhost:54321/functions/v1/orchestrator"
    ORCHESTRATOR_FALLBACK_ENDPOINT: str | None = None
    ORCHESTRATOR_AUTH_TOKEN: str = ""
    ORCHESTRATOR_TIMEOUT_SECONDS: float = 8.0


def load_settings(service_name: str) -> DispatchSettings:
    return DispatchSettings(SERVICE_NAME=service_name)

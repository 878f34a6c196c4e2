from __future__ import annotations

import logging

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

_configured = False
_logging_configured = False


def configure_otel(service_name: str) -> None:
    global _configured
    if _configured:
        return
    provider = TracerProvider(resource=Resource.create({"service.name": service_name}))
    trace.set_tracer_provider(provider)
    _configured = True


def configure_logging(level: str = "INFO") -> None:
    global _logging_configured
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        raise ValueError(f"unknown log level '{level}'")
    if _logging_configured:
        return
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
    _logging_configured = True

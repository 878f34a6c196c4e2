"""Runtime devkit: settings, logging and tracing setup."""

from dispatch_devkit.config import DispatchSettings, load_settings
from dispatch_devkit.observability import configure_logging, configure_otel

__all__ = [
    "DispatchSettings",
    "configure_logging",
    "configure_otel",
    "load_settings",
]

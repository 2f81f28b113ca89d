"""Configuration management for the user service."""

from .settings import (
    BuildConfig,
    ObservabilityConfig,
    ServiceConfig,
    Settings,
    get_settings,
)

__all__ = [
    "BuildConfig",
    "ObservabilityConfig",
    "ServiceConfig",
    "Settings",
    "get_settings",
]

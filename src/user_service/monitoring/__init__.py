"""Metrics collection and export for the user service."""

from .exporter import (
    AppMetricsExporter,
    BuildInfo,
    DURATION_BUCKETS,
    create_metrics_exporter,
)
from .middleware import UNKNOWN_LABEL, instrument, resolve_endpoint
from .sampler import DEFAULT_SAMPLE_INTERVAL, SystemMetricsSampler

__all__ = [
    "AppMetricsExporter",
    "BuildInfo",
    "DURATION_BUCKETS",
    "DEFAULT_SAMPLE_INTERVAL",
    "SystemMetricsSampler",
    "UNKNOWN_LABEL",
    "create_metrics_exporter",
    "instrument",
    "resolve_endpoint",
]

"""Shared fixtures for the user service test suite."""

from __future__ import annotations

from typing import Callable

import pytest

from user_service.config import Settings, get_settings
from user_service.monitoring import AppMetricsExporter, BuildInfo


@pytest.fixture
def build_info() -> BuildInfo:
    return BuildInfo(version="1.0.0", runtime_version="3.12.0", commit_hash="abc123")


@pytest.fixture
def exporter(build_info: BuildInfo):
    """Exporter with its own registry and the sampler left stopped."""
    metrics_exporter = AppMetricsExporter(build_info=build_info, start_sampler=False)
    try:
        yield metrics_exporter
    finally:
        metrics_exporter.stop()


@pytest.fixture
def metric_value(exporter: AppMetricsExporter) -> Callable[..., float]:
    """Read one sample from the exporter registry, 0.0 when the series is absent."""

    def _read(name: str, **labels: str) -> float:
        value = exporter.registry.get_sample_value(name, labels)
        return 0.0 if value is None else value

    return _read


@pytest.fixture
def settings(monkeypatch) -> Settings:
    for var in ("SERVICE__PORT", "OBSERVABILITY__METRICS_PORT", "OBSERVABILITY__LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
    get_settings.cache_clear()
    return Settings()

"""
Application metrics exporter backed by a dedicated Prometheus registry.

The exporter owns every instrument the service publishes: HTTP request
counters and latency histograms, business event counters, process gauges
refreshed by a background sampler, and a static build info series.
"""

from __future__ import annotations

import platform
from dataclasses import dataclass
from datetime import timedelta
from typing import Callable, Optional, Union

from fastapi import Request, Response
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    GCCollector,
    Histogram,
    PlatformCollector,
    ProcessCollector,
    generate_latest,
)

from ..exceptions import MetricsConfigurationError
from ..logging import get_logger
from .middleware import UNKNOWN_LABEL, instrument
from .sampler import DEFAULT_SAMPLE_INTERVAL, SystemMetricsSampler

logger = get_logger(__name__)

NAMESPACE = "app"
HTTP_LABELS = ("status", "method", "endpoint")
BUSINESS_LABELS = ("event_type", "user_id")
BUILD_LABELS = ("version", "runtime_version", "commit_hash")
DURATION_BUCKETS = (0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1, 2.5, 5, 10)

Duration = Union[float, int, timedelta]


@dataclass(frozen=True)
class BuildInfo:
    """Labels published once through ``app_build_info``."""

    version: str = "1.0.0"
    runtime_version: str = platform.python_version()
    commit_hash: str = "unknown"


class AppMetricsExporter:
    """Central collection point for the service's operational telemetry.

    Recording methods are safe to call from any number of request handlers
    concurrently and never raise into the caller.
    """

    def __init__(
        self,
        build_info: Optional[BuildInfo] = None,
        registry: Optional[CollectorRegistry] = None,
        sample_interval: float = DEFAULT_SAMPLE_INTERVAL,
        start_sampler: bool = True,
    ):
        self.registry = registry if registry is not None else CollectorRegistry()
        self.build_info = build_info or BuildInfo()

        try:
            self._register_default_collectors()
            self._init_metrics()
        except ValueError as exc:
            # prometheus_client reports name collisions as ValueError
            raise MetricsConfigurationError(
                f"Failed to register metrics: {exc}",
                details={"reason": str(exc)},
            ) from exc

        self.build_info_gauge.labels(
            version=self.build_info.version,
            runtime_version=self.build_info.runtime_version,
            commit_hash=self.build_info.commit_hash,
        ).set(1)

        self.sampler = SystemMetricsSampler(
            uptime=self.uptime_seconds,
            memory_bytes=self.memory_bytes,
            threads=self.threads,
            interval_seconds=sample_interval,
        )
        if start_sampler:
            self.sampler.start()

        logger.info(
            "Metrics exporter initialized",
            version=self.build_info.version,
            sample_interval=sample_interval,
        )

    def _register_default_collectors(self) -> None:
        ProcessCollector(registry=self.registry)
        PlatformCollector(registry=self.registry)
        GCCollector(registry=self.registry)

    def _init_metrics(self) -> None:
        # HTTP metrics
        self.http_requests_total = Counter(
            "requests_total",
            "Total count of HTTP requests by status, method, and endpoint",
            HTTP_LABELS,
            namespace=NAMESPACE,
            subsystem="http",
            registry=self.registry,
        )
        self.http_request_duration = Histogram(
            "request_duration_seconds",
            "Duration of HTTP requests in seconds",
            HTTP_LABELS,
            namespace=NAMESPACE,
            subsystem="http",
            buckets=DURATION_BUCKETS,
            registry=self.registry,
        )

        # Business metrics
        self.business_events = Counter(
            "events_total",
            "Total count of business events by type and user",
            BUSINESS_LABELS,
            namespace=NAMESPACE,
            subsystem="business",
            registry=self.registry,
        )

        # System metrics, written only by the sampler
        self.memory_bytes = Gauge(
            "memory_bytes",
            "Current memory usage in bytes",
            namespace=NAMESPACE,
            subsystem="system",
            registry=self.registry,
        )
        self.threads = Gauge(
            "threads",
            "Current number of live threads",
            namespace=NAMESPACE,
            subsystem="system",
            registry=self.registry,
        )
        self.uptime_seconds = Counter(
            "uptime_seconds",
            "The uptime of the application in seconds, exposed as app_system_uptime_seconds_total",
            namespace=NAMESPACE,
            subsystem="system",
            registry=self.registry,
        )

        self.build_info_gauge = Gauge(
            "build_info",
            "Build information about the application",
            BUILD_LABELS,
            namespace=NAMESPACE,
            registry=self.registry,
        )

    def observe_http_request(
        self, status: int, method: str, endpoint: str, duration: Duration
    ) -> None:
        """Record one HTTP request for the (status, method, endpoint) series."""
        try:
            if isinstance(duration, timedelta):
                duration = duration.total_seconds()
            labels = {
                "status": str(status),
                "method": method or UNKNOWN_LABEL,
                "endpoint": endpoint or UNKNOWN_LABEL,
            }
            self.http_requests_total.labels(**labels).inc()
            self.http_request_duration.labels(**labels).observe(duration)
        except Exception as exc:  # pylint: disable=broad-exception-caught
            logger.warning(
                "Failed to record HTTP metrics",
                error_type=type(exc).__name__,
                endpoint=endpoint,
            )

    def record_business_event(self, event_type: str, user_id: str) -> None:
        """Count a domain event performed by ``user_id``."""
        try:
            self.business_events.labels(
                event_type=event_type or UNKNOWN_LABEL,
                user_id=user_id or UNKNOWN_LABEL,
            ).inc()
        except Exception as exc:  # pylint: disable=broad-exception-caught
            logger.warning(
                "Failed to record business event",
                error_type=type(exc).__name__,
                event_type=event_type,
            )

    def generate_latest(self) -> bytes:
        """Serialize the registry in the Prometheus text format."""
        return generate_latest(self.registry)

    def metrics_handler(self) -> Callable:
        """Return an endpoint serving the registry for scrapes."""

        async def metrics(request: Request) -> Response:
            try:
                data = self.generate_latest()
            except Exception as exc:  # pylint: disable=broad-exception-caught
                logger.error("Metrics serialization failed", error_type=type(exc).__name__)
                return Response(
                    content="metrics serialization failed\n",
                    status_code=500,
                    media_type="text/plain",
                )
            return Response(content=data, media_type=CONTENT_TYPE_LATEST)

        return metrics

    def interception_middleware(self) -> Callable:
        """Return an ``async (request, call_next)`` HTTP middleware."""

        async def middleware(request: Request, call_next: Callable) -> Response:
            return await instrument(call_next, self.observe_http_request)(request)

        return middleware

    def stop(self) -> None:
        """Cancel the background sampler."""
        self.sampler.stop()


def create_metrics_exporter(
    build_info: Optional[BuildInfo] = None,
    sample_interval: float = DEFAULT_SAMPLE_INTERVAL,
    start_sampler: bool = True,
) -> AppMetricsExporter:
    """Build an exporter with a fresh registry."""
    return AppMetricsExporter(
        build_info=build_info,
        sample_interval=sample_interval,
        start_sampler=start_sampler,
    )

"""Run the user API and the metrics exporter on separate ports."""

from __future__ import annotations

import asyncio
from typing import List, Optional

import uvicorn

from .api import create_app, create_metrics_app
from .config import Settings
from .logging import get_logger
from .monitoring import AppMetricsExporter, BuildInfo, create_metrics_exporter

logger = get_logger(__name__)

SHUTDOWN_TIMEOUT_SECONDS = 5


def build_exporter(settings: Settings) -> AppMetricsExporter:
    """Create the process exporter from build and sampling settings."""
    return create_metrics_exporter(
        build_info=BuildInfo(
            version=settings.build.version,
            commit_hash=settings.build.commit_hash,
        ),
        sample_interval=settings.observability.sample_interval_seconds,
    )


def build_servers(settings: Settings, exporter: AppMetricsExporter) -> List[uvicorn.Server]:
    """Create the API server and, when enabled, the metrics server."""
    api_config = uvicorn.Config(
        create_app(exporter, settings),
        host=settings.service.host,
        port=settings.service.port,
        log_config=None,
        timeout_graceful_shutdown=SHUTDOWN_TIMEOUT_SECONDS,
    )
    servers = [uvicorn.Server(api_config)]

    if settings.observability.metrics_enabled:
        metrics_config = uvicorn.Config(
            create_metrics_app(exporter, settings.observability.metrics_path),
            host=settings.observability.metrics_host,
            port=settings.observability.metrics_port,
            log_config=None,
            timeout_graceful_shutdown=SHUTDOWN_TIMEOUT_SECONDS,
        )
        servers.append(uvicorn.Server(metrics_config))
    return servers


async def serve(settings: Settings, exporter: Optional[AppMetricsExporter] = None) -> None:
    """Serve until a signal stops either server, then stop the other one too."""
    exporter = exporter or build_exporter(settings)
    servers = build_servers(settings, exporter)

    logger.info(
        "Starting user service",
        port=settings.service.port,
        metrics_port=settings.observability.metrics_port,
        metrics_enabled=settings.observability.metrics_enabled,
    )

    tasks = [asyncio.create_task(server.serve()) for server in servers]
    try:
        _, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
        for server in servers:
            server.should_exit = True
        if pending:
            await asyncio.gather(*pending)
        for task in tasks:
            # surface startup failures such as a port already in use
            task.result()
    finally:
        exporter.stop()
        logger.info("User service stopped")


def run(settings: Settings) -> None:
    asyncio.run(serve(settings))

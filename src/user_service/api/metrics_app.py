"""Standalone application serving the metrics exposition on its own port."""

from fastapi import FastAPI

from ..monitoring import AppMetricsExporter


def create_metrics_app(exporter: AppMetricsExporter, path: str = "/metrics") -> FastAPI:
    """Expose only the scrape endpoint, without docs or request metrics."""
    app = FastAPI(docs_url=None, redoc_url=None, openapi_url=None)
    app.add_api_route(path, exporter.metrics_handler(), methods=["GET"])
    return app

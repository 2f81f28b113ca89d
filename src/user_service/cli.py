"""Command-line interface for the user service."""

import json
from typing import Optional

import click

from .config import get_settings
from .exceptions import MetricsConfigurationError
from .logging import get_logger, setup_logging


@click.group()
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
)
@click.pass_context
def main(ctx: click.Context, log_level: Optional[str]) -> None:
    """User service with a Prometheus metrics exporter."""
    ctx.ensure_object(dict)

    settings = get_settings().model_copy(deep=True)
    if log_level:
        settings.observability.log_level = log_level
    ctx.obj["settings"] = settings

    setup_logging(
        log_level=settings.observability.log_level,
        log_format=settings.observability.log_format,
    )


@main.command()
@click.option("--host", default=None, help="Host for the user API")
@click.option("--port", type=int, default=None, help="Port for the user API")
@click.option("--metrics-port", type=int, default=None, help="Port for the metrics exporter")
@click.pass_context
def serve(
    ctx: click.Context,
    host: Optional[str],
    port: Optional[int],
    metrics_port: Optional[int],
) -> None:
    """Run the user API and the metrics exporter."""
    from .server import run

    settings = ctx.obj["settings"]
    if host:
        settings.service.host = host
    if port:
        settings.service.port = port
    if metrics_port:
        settings.observability.metrics_port = metrics_port
    if settings.service.port == settings.observability.metrics_port:
        raise click.BadParameter("metrics port must differ from the API port")

    logger = get_logger(__name__)
    try:
        run(settings)
    except MetricsConfigurationError as exc:
        logger.critical("Metrics configuration error", **exc.to_dict())
        ctx.exit(1)


@main.command("show-config")
@click.pass_context
def show_config(ctx: click.Context) -> None:
    """Print the effective configuration."""
    click.echo(json.dumps(ctx.obj["settings"].model_dump(mode="json"), indent=2))


if __name__ == "__main__":
    main()  # pylint: disable=no-value-for-parameter

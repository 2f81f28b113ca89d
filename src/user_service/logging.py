"""
Structured logging configuration for the user service.

Credentials passing through the login and register handlers must never reach
a log sink, so every event dict is scrubbed of secret-looking keys before it
is rendered.
"""

import logging
import sys
from typing import Any, Dict, cast

import structlog
from structlog.types import FilteringBoundLogger


class RedactSecretsProcessor:
    """
    Structlog processor that masks secret values.

    Any key whose lowercase name appears in ``SECRET_KEYS`` is replaced by a
    fixed placeholder; the rest of the event passes through untouched.
    """

    SECRET_KEYS = {
        "password",
        "passwd",
        "secret",
        "token",
        "authorization",
        "api_key",
    }

    PLACEHOLDER = "***REDACTED***"

    def __call__(
        self, logger: FilteringBoundLogger, method_name: str, event_dict: Dict[str, Any]
    ) -> Dict[str, Any]:
        for key in list(event_dict.keys()):
            if key.lower() in self.SECRET_KEYS:
                event_dict[key] = self.PLACEHOLDER
        return event_dict


def setup_logging(log_level: str = "INFO", log_format: str = "json") -> None:
    """
    Set up structured logging.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Log format (json, console)
    """
    level = getattr(logging, log_level.upper())

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        RedactSecretsProcessor(),
    ]

    if log_format == "json":
        processors.extend(
            [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]
        )
    else:
        processors.extend([structlog.dev.ConsoleRenderer(colors=True)])

    structlog.configure(
        processors=processors,  # type: ignore[arg-type]
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter("%(message)s"))

    logging.basicConfig(level=level, handlers=[console_handler], force=True)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a structured logger.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger
    """
    return cast(FilteringBoundLogger, structlog.get_logger(name))

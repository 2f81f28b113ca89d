"""
User service: login, registration and user listing instrumented with a
self-registered Prometheus metrics exporter served on a separate port.
"""

__version__ = "1.0.0"

from .logging import get_logger, setup_logging

__all__ = ["__version__", "get_logger", "setup_logging"]

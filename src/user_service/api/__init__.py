"""HTTP surface of the user service."""

from .app import build_user_router, create_app
from .metrics_app import create_metrics_app
from .store import InMemoryUserStore, UserStore

__all__ = [
    "InMemoryUserStore",
    "UserStore",
    "build_user_router",
    "create_app",
    "create_metrics_app",
]

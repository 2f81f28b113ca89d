"""Request interception for HTTP metrics.

``instrument`` is the framework-neutral contract: it wraps any async
``handler(request) -> response`` and reports one observation per call once the
handler has finished, whether it returned or raised.
"""

from __future__ import annotations

import time
from functools import wraps
from typing import Any, Awaitable, Callable

from fastapi import Request
from starlette.routing import Match

from ..logging import get_logger

logger = get_logger(__name__)

UNKNOWN_LABEL = "unknown"
_NO_RESPONSE = object()

ObserveFn = Callable[[int, str, str, float], None]
Handler = Callable[[Any], Awaitable[Any]]


def resolve_endpoint(request: Request) -> str:
    """Return the route pattern that matched ``request``, or ``"unknown"``."""
    route = request.scope.get("route")
    if route is not None:
        pattern = getattr(route, "path_format", None) or getattr(route, "path", None)
        return pattern or UNKNOWN_LABEL

    app = request.scope.get("app")
    for candidate in getattr(app, "routes", None) or []:
        match, _ = candidate.matches(request.scope)
        if match == Match.FULL:
            return getattr(candidate, "path_format", None) or UNKNOWN_LABEL
    return UNKNOWN_LABEL


def _method_of(request: Any) -> str:
    return request.method


def _status_of(response: Any) -> int:
    return response.status_code


def instrument(
    handler: Handler,
    observe: ObserveFn,
    endpoint_of: Callable[[Any], str] = resolve_endpoint,
    method_of: Callable[[Any], str] = _method_of,
    status_of: Callable[[Any], int] = _status_of,
) -> Handler:
    """Wrap ``handler`` so every call is reported to ``observe``.

    The endpoint is resolved after the handler runs, when the router has
    already matched the request. A raising handler is reported as status 500
    and the exception is re-raised. Failures while deriving or reporting the
    observation are logged and never reach the caller.
    """

    @wraps(handler)
    async def wrapper(request: Any) -> Any:
        start = time.perf_counter()
        response = _NO_RESPONSE
        try:
            response = await handler(request)
            return response
        finally:
            elapsed = time.perf_counter() - start
            try:
                status = 500 if response is _NO_RESPONSE else status_of(response)
                observe(status, method_of(request), endpoint_of(request), elapsed)
            except Exception as exc:  # pylint: disable=broad-exception-caught
                logger.warning(
                    "Failed to derive request observation", error_type=type(exc).__name__
                )

    return wrapper


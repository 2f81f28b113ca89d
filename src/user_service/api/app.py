"""FastAPI application for the user API."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import Settings, get_settings
from ..exceptions import InvalidCredentialsError, UserAlreadyExistsError
from ..logging import get_logger
from ..monitoring import AppMetricsExporter
from .models import MessageResponse, UserCredentials, UserListResponse
from .store import InMemoryUserStore, UserStore

logger = get_logger(__name__)


def _message(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


def build_user_router(
    exporter: AppMetricsExporter, store: UserStore, prefix: str = ""
) -> APIRouter:
    """Routes for login, registration and user listing.

    The prefix belongs to the router itself so every route carries its full
    path template, which is what the request metrics are labelled with.
    """

    router = APIRouter(prefix=prefix, tags=["user"])

    @router.get("/")
    async def index():
        return "OK"

    @router.post("/login", response_model=MessageResponse)
    async def login(credentials: UserCredentials):
        """Validate credentials and log the user in."""
        try:
            user = store.authenticate(credentials)
        except InvalidCredentialsError as exc:
            logger.info("Login rejected", username=credentials.username)
            return _message(400, exc.message)

        exporter.record_business_event("login", user.username)
        return MessageResponse(message=f"{user.username} login successfully")

    @router.post("/register", response_model=MessageResponse)
    async def register(credentials: UserCredentials):
        """Register a new user."""
        try:
            user = store.create(credentials)
        except UserAlreadyExistsError:
            logger.info("Registration rejected", username=credentials.username)
            return _message(400, "Invalid Username and Password")

        exporter.record_business_event("register", user.username)
        return MessageResponse(message=f"{user.username} register successfully")

    @router.get("/users", response_model=UserListResponse)
    async def get_users():
        """Return every registered user."""
        users = store.list_users()
        if not users:
            return _message(500, "data not insert yet")

        exporter.record_business_event("get_users", "system")
        return UserListResponse(data=users)

    return router


def create_app(
    exporter: AppMetricsExporter,
    settings: Optional[Settings] = None,
    store: Optional[UserStore] = None,
) -> FastAPI:
    """Create the user API with metrics interception installed."""
    settings = settings or get_settings()
    store = store or InMemoryUserStore()

    app = FastAPI(
        title="User Service",
        description="Login, registration and user listing with Prometheus metrics",
        version=__version__,
        debug=settings.service.debug,
    )

    # Last added runs first: CORS answers preflights before they are measured.
    app.middleware("http")(exporter.interception_middleware())
    app.add_middleware(CORSMiddleware, **settings.get_cors_config())

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(_request: Request, exc: RequestValidationError):
        logger.info("Malformed request body", error_count=len(exc.errors()))
        return _message(422, "invalid format json")

    app.include_router(
        build_user_router(exporter, store, prefix=settings.service.api_prefix)
    )
    app.add_api_route(
        settings.observability.metrics_path,
        exporter.metrics_handler(),
        methods=["GET"],
        include_in_schema=False,
    )

    app.state.exporter = exporter
    app.state.store = store
    return app

"""PulseBoard REST API.

Split into domain modules under pulseboard/api/. Each module exports a
register_routes(router, svc, auth=...) function that adds its endpoints.
"""

from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, APIRouter, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from pulseboard import __version__
from pulseboard.api.utils import build_auth
from pulseboard.core.services import Services
from pulseboard.core.utils import AuthenticationError, ConflictError, NotFoundError, ValidationError
from pulseboard.core.window import InvalidRange

logger = logging.getLogger(__name__)

_ERROR_STATUS = {
    InvalidRange: 400,
    ValidationError: 400,
    AuthenticationError: 401,
    NotFoundError: 404,
    ConflictError: 409,
}


def _register_error_handlers(app: FastAPI) -> None:
    def _handler(status_code: int):
        async def handle(request: Request, exc: Exception):
            return JSONResponse(status_code=status_code, content={"detail": str(exc)})
        return handle

    for exc_type, status_code in _ERROR_STATUS.items():
        app.add_exception_handler(exc_type, _handler(status_code))

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def create_api(svc: Services) -> FastAPI:
    """Build the REST API as a FastAPI app. All routes live under /api."""
    db = svc.db
    config = svc.config

    def _release_db_conn():
        """Release whatever DB connection the request thread still holds."""
        yield
        db.release_if_held()

    app = FastAPI(
        title="PulseBoard API",
        version=__version__,
        description="Analytics dashboard API: auth, dashboard, analytics explorer, settings.",
        docs_url="/api/swagger",
        openapi_url="/api/openapi.json",
        redoc_url=None,
        dependencies=[Depends(_release_db_conn)],
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH"],
        allow_headers=["*"],
    )
    _register_error_handlers(app)

    auth = build_auth(svc.tokens)
    router = APIRouter()

    from pulseboard.api.core import register_routes as reg_core
    from pulseboard.api.auth import register_routes as reg_auth
    from pulseboard.api.dashboard import register_routes as reg_dashboard
    from pulseboard.api.analytics import register_routes as reg_analytics
    from pulseboard.api.events import register_routes as reg_events
    from pulseboard.api.settings import register_routes as reg_settings

    reg_core(router, svc, auth=auth)
    reg_auth(router, svc, auth=auth)
    reg_dashboard(router, svc, auth=auth)
    reg_analytics(router, svc, auth=auth)
    reg_events(router, svc, auth=auth)
    reg_settings(router, svc, auth=auth)

    app.include_router(router, prefix="/api")
    return app

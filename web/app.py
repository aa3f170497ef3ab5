"""
FastAPI application for the Lead Desk web service.

Public lead intake and listing catalogue, plus the admin dashboard API.
Production deployment configuration via environment variables.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from utils.config import Config
from web.messages import message_for

from web.admin_routes import router as admin_router
from web.property_routes import router as property_router
from web.settings_routes import router as settings_router
from web.submission_routes import router as submission_router
from web.upload_routes import router as upload_router


logger = logging.getLogger(__name__)

VERSION = "0.1.0"

# Development fallback only
DEV_ORIGINS = ["http://localhost:8000", "http://127.0.0.1:8000"]


def _register_error_handlers(app: FastAPI) -> None:
    """Render every error as ``{"error": <message>}``."""

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        headers = dict(exc.headers or {})
        detail = exc.detail

        if exc.status_code == 405:
            detail = message_for(request, "method_not_allowed")

        return JSONResponse({"error": detail}, status_code=exc.status_code, headers=headers or None)

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse({"error": message_for(request, "server_error")}, status_code=500)


def create_app(config: Config = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    config = config or Config.load()
    is_production = config.is_production

    app = FastAPI(
        title="Lead Desk",
        description="Real-estate lead intake and listing management",
        version=VERSION,
        # Production settings: disable docs/redoc for private deployment
        docs_url=None if is_production else "/docs",
        redoc_url=None if is_production else "/redoc",
        openapi_url=None if is_production else "/openapi.json",
        # Debug mode - NEVER enabled in production
        debug=config.debug and not is_production,
    )

    # Healthcheck endpoints first. No dependencies, no IO.
    @app.get("/", include_in_schema=False)
    def root():
        return {"status": "ok"}

    @app.get("/health", include_in_schema=False)
    def health():
        return {"status": "healthy"}

    @app.get("/api/health")
    async def api_health():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "version": VERSION,
            "environment": "production" if is_production else "development",
        }

    allowed_origins = config.allowed_origins or ([] if is_production else DEV_ORIGINS)
    if allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=allowed_origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "DELETE"],
            allow_headers=["*"],
        )

    _register_error_handlers(app)

    app.include_router(admin_router)
    app.include_router(submission_router)
    app.include_router(property_router)
    app.include_router(settings_router)
    app.include_router(upload_router)

    @app.on_event("startup")
    def on_startup():
        if not config.is_admin_configured:
            logger.warning(
                "Admin login disabled: ADMIN_PASSWORD_HASH and SESSION_SECRET must be set"
            )
        logger.info(
            "Lead Desk started (store=%s, production=%s)",
            config.store_backend,
            is_production,
        )

    return app


# Create app instance for uvicorn
app = create_app()

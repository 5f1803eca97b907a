"""
Name: FastAPI Application Entry Point

Responsibilities:
  - Initialize FastAPI application with metadata (title, version)
  - Configure middleware (body limit, security headers, request context, CORS)
  - Mount the HTTP router (users, casos, uploads, comunas, config)
  - Expose health and readiness endpoints

Collaborators:
  - FastAPI / Starlette middleware
  - interfaces.api.http.router.build_router
  - infrastructure.db.pool (lifespan)
  - api.exception_handlers (RFC7807)

Notes:
  - In APP_ENV=test the pool is not initialized (in-memory repositories)
  - /healthz is liveness only; /readyz pings the database
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from ..application.attachments import too_large_message
from ..container import get_case_repository
from ..crosscutting.config import get_settings
from ..crosscutting.logger import logger
from ..crosscutting.middleware import BodyLimitMiddleware, RequestContextMiddleware
from ..crosscutting.security import SecurityHeadersMiddleware
from ..infrastructure.db.pool import close_pool, init_pool
from ..interfaces.api.http.router import build_router
from .exception_handlers import register_exception_handlers

CORS_METHODS = ["GET", "HEAD", "PUT", "PATCH", "POST", "DELETE"]
# POST multipart con PDF: un body excedido se informa como rechazo del adjunto.
UPLOAD_ROUTES = ("/casos", "/upload", "/casos/upload")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle. Initializes the DB pool outside test env."""
    settings = get_settings()
    use_pool = not settings.is_test()

    if use_pool:
        init_pool(
            database_url=settings.database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
        )

    try:
        logger.info(
            "Gabinete Obras API starting up",
            extra={
                "app_env": settings.app_env,
                "upload_dir": settings.upload_dir,
                "db_pool_min": settings.db_pool_min_size,
                "db_pool_max": settings.db_pool_max_size,
            },
        )
        yield
    finally:
        if use_pool:
            close_pool()
        logger.info("Gabinete Obras API shutting down")


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title="Gabinete Obras API",
        version="0.1.0",
        lifespan=lifespan,
        openapi_tags=[
            {"name": "users", "description": "Registro y login de usuarios"},
            {"name": "casos", "description": "Ciclo de vida de los casos de obra"},
            {"name": "uploads", "description": "Adjuntos PDF"},
            {"name": "comunas", "description": "Catálogo de comunas"},
            {"name": "config", "description": "Bootstrap del frontend"},
        ],
    )

    # R: Middleware order (last added = first to execute):
    # 1. CORSMiddleware - handles preflight
    # 2. RequestContextMiddleware - sets request_id
    # 3. SecurityHeadersMiddleware - CSP, X-Frame-Options, ...
    # 4. BodyLimitMiddleware - rejects oversized bodies early
    app.add_middleware(
        BodyLimitMiddleware,
        upload_paths=UPLOAD_ROUTES,
        upload_detail=too_large_message(settings.max_upload_bytes),
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_allowed_origins_list(),
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=CORS_METHODS,
        allow_headers=["Content-Type", "X-Request-Id"],
        expose_headers=["X-Request-Id", "X-Total-Count", "X-Total-Pages"],
    )

    app.include_router(build_router())
    register_exception_handlers(app)

    @app.get("/healthz", include_in_schema=False)
    def healthz(request: Request):
        return {"ok": True, "request_id": getattr(request.state, "request_id", None)}

    @app.get("/readyz", include_in_schema=False)
    def readyz(request: Request):
        db_status = "disconnected"
        try:
            if get_case_repository().ping():
                db_status = "connected"
        except Exception as exc:
            logger.warning("Ready check: DB unavailable", extra={"error": str(exc)})

        return {
            "ok": db_status == "connected",
            "db": db_status,
            "request_id": getattr(request.state, "request_id", None),
        }

    return app


app = create_app()

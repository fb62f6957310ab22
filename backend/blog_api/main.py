"""
Blog API Backend — FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   uvicorn (`uvicorn blog_api.main:app`) and the `blog-api` console script.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware:  CORS → Request ID → Access Log → GZip │
    │                                                     │
    │  Routes ({prefix} = /api by default):               │
    │    {prefix}            API index                    │
    │    {prefix}/health     health probe                 │
    │    {prefix}/blogs...   post CRUD                    │
    │                                                     │
    │  Exception Handlers:                                │
    │    BlogApiError          → its own status/envelope  │
    │    RequestValidationError→ 400 Validation Error     │
    │    HTTPException 404     → endpoint list            │
    │    Exception             → 500 Internal server error│
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging → store (Database + schema, or in-memory gateway)
    Shutdown: dispose the engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from blog_api import __version__
from blog_api.config import Settings, settings
from blog_api.database import Database
from blog_api.exceptions import BlogApiError, internal_error_envelope
from blog_api.middleware.access_log import AccessLogMiddleware
from blog_api.middleware.request_id import RequestIDMiddleware, request_id_var
from blog_api.routes import blogs, health
from blog_api.schemas.blog import ApiIndexResponse
from blog_api.services.memory_gateway import InMemoryPostGateway

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(app_settings: Settings) -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s to stdout.
    Called once during startup, before any other initialization.
    """
    logging.basicConfig(
        level=getattr(logging, app_settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Reduce noise from third-party libraries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Create the process-wide store on startup and release it on shutdown.

    The store is placed on `app.state` (database or memory_gateway) and read
    only by routes/dependencies.py.
    """
    app_settings: Settings = app.state.settings
    setup_logging(app_settings)
    logger.info("=" * 60)
    logger.info("Blog API starting up (environment=%s)", app_settings.environment)

    database: Optional[Database] = None
    if app_settings.storage_backend == "memory":
        app.state.memory_gateway = InMemoryPostGateway()
        logger.warning("Using in-memory storage: data is lost on restart")
    else:
        logger.info("Connecting to database: %s", app_settings.masked_database_url)
        database = Database(app_settings)
        try:
            await database.create_schema()
        except Exception as e:
            logger.error("Database connection failed: %s", str(e))
            await database.dispose()
            raise
        app.state.database = database
        logger.info("Database connected, schema ready")

    prefix = app_settings.api_prefix
    logger.info("Server ready at http://%s:%d%s", app_settings.backend_host,
                app_settings.backend_port, prefix or "/")
    for endpoint in health.endpoint_catalog(prefix):
        logger.info("  %s", endpoint)
    logger.info("=" * 60)

    yield

    logger.info("Blog API shutting down...")
    if database is not None:
        await database.dispose()
        logger.info("Database connection closed")
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to the JSON envelope.

    Every response produced here has `success: false`. Handlers log with the
    request id so a client-reported X-Request-ID can be found in the logs.
    """

    @app.exception_handler(BlogApiError)
    async def handle_blog_api_error(request: Request, exc: BlogApiError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_envelope())

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        """Malformed JSON or wrongly typed fields."""
        details = []
        for error in exc.errors():
            location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
            message = error.get("msg", "Invalid value")
            details.append(f"{location}: {message}" if location else message)
        logger.warning("[%s] Request validation failed: %s", request_id_var.get(""), details)
        return JSONResponse(
            status_code=400,
            content={"success": False, "error": "Validation Error", "details": details},
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            prefix = request.app.state.settings.api_prefix
            return JSONResponse(
                status_code=404,
                content={
                    "success": False,
                    "error": "API endpoint not found",
                    "path": request.url.path,
                    "method": request.method,
                    "availableEndpoints": list(health.endpoint_catalog(prefix)),
                },
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "error": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """
        Faults raised by the middleware itself.

        Route faults are rendered by AccessLogMiddleware; this handler runs
        outside every middleware, so it sets X-Request-ID on its own.
        """
        rid = getattr(request.state, "request_id", "") or request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content=internal_error_envelope(exc, request.app.state.settings.is_development),
            headers={"X-Request-ID": rid},
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings: Settings to use; defaults to the module singleton.
                      Tests pass their own instance.
    """
    app_settings = app_settings or settings

    app = FastAPI(
        title="Blog API",
        description="CRUD API for short text blog posts.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = app_settings

    # Middleware executes in REVERSE order of addition; CORS is outermost so
    # the 500 rendered by AccessLogMiddleware still gets its headers
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    register_exception_handlers(app)

    prefix = app_settings.api_prefix
    app.add_api_route(
        prefix or "/",
        health.api_index,
        methods=["GET"],
        response_model=ApiIndexResponse,
        tags=["Health"],
        summary="API index",
    )
    app.include_router(health.router, prefix=prefix)
    app.include_router(blogs.router, prefix=prefix)

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve `app` with uvicorn on the configured port."""
    import uvicorn

    uvicorn.run(
        "blog_api.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )

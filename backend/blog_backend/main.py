"""
Blog Backend — FastAPI Application Factory
============================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() assembles middleware, exception handlers, routers and
       the /uploads static mount; lifespan() handles startup and shutdown.
Who:   uvicorn (`uvicorn blog_backend.main:app`) and the test client.

Application Architecture:
    ┌──────────────────────────────────────────────────────┐
    │                    FastAPI App                       │
    │                                                      │
    │  Middleware:  Request ID → Logging → GZip → CORS     │
    │                                                      │
    │  Routes:                                             │
    │  ┌─────────┐ ┌─────────┐ ┌─────────┐ ┌────────────┐  │
    │  │ / health│ │ /user   │ │ /blog   │ │ /file      │  │
    │  └─────────┘ └─────────┘ └─────────┘ └────────────┘  │
    │  Static:  /uploads/<name>     Docs:  /api-docs       │
    │                                                      │
    │  Exception Handlers → {code, message, data: null}    │
    └──────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  logging, configuration check (aborts on failure), upload root
    Shutdown: dispose the database engine
"""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from blog_backend import __version__
from blog_backend.config import settings
from blog_backend.database import dispose_engine
from blog_backend.exceptions import BlogPlatformError
from blog_backend.middleware.logging import RequestLoggingMiddleware
from blog_backend.middleware.request_id import RequestIDMiddleware, request_id_var
from blog_backend.routes import blogs, files, system, users

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "An internal error occurred. Please try again later."


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure the root logger once for the whole application.

    Format: 2024-05-01T12:00:00 [INFO] blog_backend.services.user_service: User logged in: ...
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party loggers that are chatty at INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.WARNING)
    logging.getLogger("multipart").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("Blog Backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        logger.error("Configuration error: %s", str(e))
        logger.error("Fix the configuration and restart the server.")
        raise

    upload_root = Path(settings.upload_root)
    upload_root.mkdir(parents=True, exist_ok=True)
    logger.info("Upload directory: %s", upload_root.resolve())

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("API docs: http://%s:%d/api-docs", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Blog Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def error_body(code: int, message: str) -> dict:
    return {"code": code, "message": message, "data": None}


def _describe_validation_errors(exc: RequestValidationError) -> str:
    fields = []
    for err in exc.errors():
        # loc of a JSON decode error is ("body", <char offset>)
        if err.get("type") == "json_invalid":
            return "Malformed JSON body"
        # loc is e.g. ("body", "username") or ("query", "page")
        loc = [str(part) for part in err.get("loc", ()) if part not in ("body", "query", "path")]
        if loc:
            fields.append(".".join(loc))
    if not fields:
        return "Invalid request parameters"
    return f"Invalid request parameters: {', '.join(dict.fromkeys(fields))}"


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to `{code, message, data: null}` responses.

    Handler hierarchy:
        BlogPlatformError       → its status_code (400/401/403/404/409/500)
        RequestValidationError  → 400 (malformed or missing input)
        StarletteHTTPException  → its status (unknown route, wrong method)
        Exception (fallback)    → 500

    5xx bodies never carry internal details. The context dict and stack
    traces are logged server-side only.
    """

    @app.exception_handler(BlogPlatformError)
    async def handle_platform_error(request: Request, exc: BlogPlatformError):
        rid = request_id_var.get("")
        if exc.status_code >= 500:
            logger.error(
                "[%s] %s: %s | Context: %s",
                rid,
                type(exc).__name__,
                exc.message,
                exc.context,
            )
            message = INTERNAL_ERROR_MESSAGE
        else:
            logger.info("[%s] %s: %s", rid, type(exc).__name__, exc.message)
            message = exc.message
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.status_code, message),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        message = _describe_validation_errors(exc)
        logger.info("[%s] Request validation failed: %s", rid, message)
        return JSONResponse(status_code=400, content=error_body(400, message))

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        headers: Optional[dict] = getattr(exc, "headers", None)
        return JSONResponse(
            status_code=exc.status_code,
            content=error_body(exc.status_code, str(exc.detail)),
            headers=headers,
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content=error_body(500, "An unexpected error occurred"),
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """Assemble the application. Returns a FastAPI instance ready to serve."""
    app = FastAPI(
        title="Blog Platform API",
        description=(
            "Blog platform backend: user accounts with role levels, "
            "role-gated blog management and file uploads."
        ),
        version=__version__,
        docs_url="/api-docs",
        redoc_url=None,
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added runs first: RequestID → Logging → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=settings.cors_origins_list != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(system.router)
    app.include_router(users.router)
    app.include_router(users.account_router)
    app.include_router(blogs.router)
    app.include_router(files.router)

    # ── Static Uploads ────────────────────────────────────────────────────
    upload_root = Path(settings.upload_root)
    upload_root.mkdir(parents=True, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=str(upload_root)), name="uploads")

    return app


# ── Application Instance ─────────────────────────────────────────────────
app = create_app()

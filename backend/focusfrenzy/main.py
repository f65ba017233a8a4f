"""
Focus Frenzy Capture Service — FastAPI Application Factory
============================================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes middleware registration, route mounting, exception
       handling and lifecycle logging in one place.
How:   Factory pattern: create_app(settings) returns a configured FastAPI
       instance with its own CaptureStore on app.state.
Who:   uvicorn (`uvicorn focusfrenzy.main:app`), the `focusfrenzy` console
       script, and the test suite (one app per temporary directory).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌─────────┐ ┌──────┐ ┌──────┐         │
    │  │ Req ID   │→│ Logging │→│ GZip │→│ CORS │         │
    │  └──────────┘ └─────────┘ └──────┘ └──────┘         │
    │                                                     │
    │  Routes:                                            │
    │  POST /capture     GET /view-captures               │
    │  GET /captures-json   GET /health                   │
    │  GET /captures/{filename}   GET / (+ public/)       │
    │                                                     │
    │  Exception Handlers:                                │
    │  Validation→400 │ TooLarge→413 │ NotFound→404 │     │
    │  Storage→500 │ anything else→500                    │
    └─────────────────────────────────────────────────────┘

Every error body has the shape {"success": false, "error": "<message>"}.
"""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from focusfrenzy import __version__
from focusfrenzy.config import Settings, settings as default_settings
from focusfrenzy.exceptions import (
    CaptureServiceError,
    MissingPayloadError,
    NotFoundError,
    PayloadTooLargeError,
    StorageError,
    ValidationError,
)
from focusfrenzy.middleware.logging import RequestLoggingMiddleware
from focusfrenzy.middleware.request_id import RequestIDMiddleware, request_id_var
from focusfrenzy.routes import assets, capture, captures, health
from focusfrenzy.services.capture_store import CaptureStore

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(log_level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Output goes to stdout so it shows up next to the uvicorn banner.
    """
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Our own access middleware replaces uvicorn's access log
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Log the startup banner with management links, and a shutdown line.

    The captures directory is NOT created here; the store creates it on
    the first upload so listings can tell "no captures yet" apart.
    """
    app_settings: Settings = app.state.settings
    setup_logging(app_settings.log_level)

    base = f"http://localhost:{app_settings.port}"
    logger.info("=" * 60)
    logger.info("FOCUS FRENZY - LOCAL CAPTURE EDITION")
    logger.info("Server running on port %d", app_settings.port)
    logger.info("Captures will be saved to: %s", Path(app_settings.captures_dir).resolve())
    logger.info("Play Game:     %s", base)
    logger.info("View Captures: %s/view-captures", base)
    logger.info("JSON API:      %s/captures-json", base)
    logger.info("Health Check:  %s/health", base)
    logger.info("=" * 60)

    yield

    logger.info("Focus Frenzy capture service shutting down.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error(status_code: int, message: str, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message},
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to status codes and the shared error body.

    Handler hierarchy:
        ValidationError (incl. MissingPayload) → 400 Bad Request
        RequestValidationError (bad form)     → 400 Bad Request
        PayloadTooLargeError                   → 413 Payload Too Large
        NotFoundError                          → 404 Not Found
        StorageError                           → 500 (generic message)
        CaptureServiceError (base)             → 500
        Exception (fallback)                   → 500

    Context dicts and stack traces are logged, never returned.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s | Context: %s", rid, exc.message, exc.context)
        return _error(400, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        # An `image` field sent as plain text instead of a file part
        rid = request_id_var.get("")
        errors = exc.errors()
        logger.warning("[%s] Request validation failed: %s", rid, errors)
        if any(tuple(error.get("loc", ()))[-1:] == ("image",) for error in errors):
            return _error(400, MissingPayloadError().message)
        return _error(400, "Invalid request")

    @app.exception_handler(PayloadTooLargeError)
    async def handle_payload_too_large(request: Request, exc: PayloadTooLargeError):
        rid = request_id_var.get("")
        logger.warning(
            "[%s] Capture rejected: %d bytes exceeds %d", rid, exc.actual_size, exc.max_size
        )
        return _error(413, exc.message)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error(404, exc.message)

    @app.exception_handler(StorageError)
    async def handle_storage_error(request: Request, exc: StorageError):
        rid = request_id_var.get("")
        logger.error("[%s] Storage error: %s | Context: %s", rid, exc.message, exc.context)
        return _error(500, exc.message)

    @app.exception_handler(CaptureServiceError)
    async def handle_service_error(request: Request, exc: CaptureServiceError):
        rid = request_id_var.get("")
        logger.error("[%s] Service error: %s | Context: %s", rid, exc.message, exc.context)
        return _error(500, exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return _error(500, "An unexpected error occurred")


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_settings: Settings to build the app from. Defaults to the
                      module-level singleton read from the environment.

    The CaptureStore is constructed here from the settings and stored on
    app.state, so routes never read the captures directory from globals.
    """
    app_settings = app_settings or default_settings

    app = FastAPI(
        title="Focus Frenzy Capture API",
        description=(
            "Stores webcam captures uploaded by the Focus Frenzy game and "
            "lists them as an HTML gallery or JSON."
        ),
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = app_settings
    app.state.capture_store = CaptureStore(
        root=app_settings.captures_dir,
        max_size=app_settings.max_capture_size,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added = first to execute
    origins = app_settings.cors_origins_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
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
    app.include_router(capture.router)
    app.include_router(captures.router)
    app.include_router(health.router)
    app.include_router(assets.router)

    # Remaining game assets (scripts, sounds, images) at the site root.
    # Mounted last so the routes above take precedence.
    public_dir = Path(app_settings.public_dir)
    if public_dir.is_dir():
        app.mount("/", StaticFiles(directory=str(public_dir)), name="public")
    else:
        logger.warning("Public directory not found, game assets disabled: %s", public_dir)

    return app


def run() -> None:
    """Console entry point: serve the app on the configured host and port."""
    uvicorn.run(
        "focusfrenzy.main:app",
        host=default_settings.host,
        port=default_settings.port,
        log_level=default_settings.log_level.lower(),
    )


# uvicorn expects `focusfrenzy.main:app` to be importable
app = create_app()

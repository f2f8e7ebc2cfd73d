"""
Bus Pass Backend - FastAPI Application Factory
================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn buspass.main:app --port 5001).

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────────┐ ┌──────────┐ ┌─────────────────┐  │
    │  │  Rate Limit  │→│ Req ID   │→│  Logging        │  │
    │  └──────────────┘ └──────────┘ └─────────────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────────┐ ┌───────────────┐ ┌────────────┐  │
    │  │ POST bus-pass│ │ GET locations │ │ GET price  │  │
    │  └──────────────┘ └───────────────┘ └────────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ InvalidRoute→400 │ NotFound→404 │ Fault→500  │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Create the photo storage directory
    3. Create missing tables (AUTO_CREATE_TABLES)
    4. Replace the location table with the seed edges (SEED_ON_STARTUP)

    Shutdown:
    1. Dispose database engine (close all connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from buspass import __version__
from buspass.config import settings
from buspass.database import create_tables, dispose_engine
from buspass.exceptions import (
    BackendFault,
    InvalidRouteError,
    NotFoundError,
    ValidationError,
)
from buspass.middleware.logging import RequestLoggingMiddleware
from buspass.middleware.rate_limit import RateLimitMiddleware
from buspass.middleware.request_id import RequestIDMiddleware, request_id_var
from buspass.routes import bus_pass, health, locations, uploads
from buspass.services.location_service import bootstrap_locations

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    When:   Called once during app startup, before any other initialization.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
        force=True,
    )

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Run startup before serving and cleanup after shutdown.

    Startup failures of table creation or seeding are logged and the server
    still starts, so /health can report the problem.
    """
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("Bus Pass Backend starting up...")

    storage = Path(settings.storage_root)
    storage.mkdir(parents=True, exist_ok=True)
    logger.info("Photo storage directory: %s", storage.resolve())

    if settings.auto_create_tables:
        try:
            await create_tables()
        except Exception as e:
            logger.error("Could not create database tables: %s", str(e))

    if settings.seed_on_startup:
        await bootstrap_locations()

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Bus Pass Backend shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and response bodies.

    Handler hierarchy:
        InvalidRouteError   → 400 {"error": "Invalid source or destination"}
        ValidationError     → 400 {"error": "validation_error", "message", "details"}
        NotFoundError       → 404 {"error": "not_found", "message"}
        BackendFault        → 500 {"message": <operation>, "error": <underlying error>}
        Exception           → 500 {"message": "Internal server error", "error": <text>}
    """

    @app.exception_handler(InvalidRouteError)
    async def handle_invalid_route(request: Request, exc: InvalidRouteError):
        return JSONResponse(status_code=400, content={"error": exc.message})

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Validation error: %s", rid, exc.message)
        return JSONResponse(
            status_code=400,
            content={
                "error": "validation_error",
                "message": exc.message,
                "details": exc.context,
                "request_id": rid,
            },
        )

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        rid = request_id_var.get("")
        return JSONResponse(
            status_code=404,
            content={
                "error": "not_found",
                "message": exc.message,
                "request_id": rid,
            },
        )

    @app.exception_handler(BackendFault)
    async def handle_backend_fault(request: Request, exc: BackendFault):
        """Store or file-system failure: the underlying error text is passed through."""
        rid = request_id_var.get("")
        logger.error("[%s] %s: %s | Context: %s", rid, exc.message, exc.error, exc.context)
        return JSONResponse(
            status_code=500,
            content={"message": exc.message, "error": exc.error},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"message": "Internal server error", "error": str(exc)},
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns: Fully configured FastAPI instance ready to receive requests.
    """
    app = FastAPI(
        title="Bus Pass API",
        description=(
            "Bus pass registration: fare table, price quotes, photo upload "
            "and pass submission."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in reverse order of addition:
    # RateLimit → RequestID → Logging → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(RateLimitMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(bus_pass.router)
    app.include_router(locations.router)
    app.include_router(uploads.router)
    app.include_router(health.router)

    return app


# uvicorn expects `buspass.main:app` to be importable
app = create_app()

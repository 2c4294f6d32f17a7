"""
P4P MIS Backend — FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn (uvicorn p4pmis.main:app) or the `p4pmis` console script.
When:  Once at server startup; the returned app handles all subsequent requests.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌──────────┐ ┌──────┐ ┌──────┐        │
    │  │  Req ID  │→│ Logging  │→│ GZip │→│ CORS │        │
    │  └──────────┘ └──────────┘ └──────┘ └──────┘        │
    │                                                     │
    │  Routes:                                            │
    │  ┌────────────┐ ┌─────────────────┐ ┌────────────┐  │
    │  │ POST login │ │ GET collections │ │ GET /api/* │  │
    │  └────────────┘ └─────────────────┘ └────────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ Auth+Body→401 │ Allow-list→403 │ DB→500     │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Validate configuration (logged, not fatal)
    3. Open the MongoDB client and store it on app.state

    Shutdown:
    1. Close the MongoDB client
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from p4pmis import __version__
from p4pmis.config import settings
from p4pmis.database import close_database, open_database
from p4pmis.exceptions import (
    AuthenticationError,
    CollectionNotAllowedError,
    DatabaseError,
    P4PError,
    SchemaDiscoveryError,
)
from p4pmis.middleware.logging import RequestLoggingMiddleware
from p4pmis.middleware.request_id import RequestIDMiddleware, request_id_var
from p4pmis.routes import auth, collections, dashboard, health

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    When:    Called once during app startup, before anything else logs.
    Format:  %(asctime)s [%(levelname)s] %(name)s: %(message)s
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party loggers that log every operation at DEBUG/INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("pymongo").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup opens the MongoDB client; shutdown closes it.

    The client is the only resource shared between requests. Routes get the
    database through `get_database`, never by importing a global.
    """
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("P4P MIS Backend %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving: /health reports the database as disconnected
        logger.error("Configuration error: %s", str(e))

    await open_database(app, settings)
    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("P4P MIS Backend shutting down...")
    await close_database(app)
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _failure(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to status codes and response bodies.

    Handler hierarchy:
        RequestValidationError     → 401 (only the login route takes a body)
        AuthenticationError        → 401 Unauthorized
        CollectionNotAllowedError  → 403 Forbidden
        SchemaDiscoveryError       → 500 {"error": ...}
        DatabaseError              → 500 {"success": false, "message": ...}
        P4PError (base)            → 500
        Exception (fallback)       → 500 "Server error"

    Handlers never expose driver errors or stack traces; those are logged.
    """

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        # Log locations only; inputs may contain passwords
        fields = [".".join(str(part) for part in err.get("loc", ())) for err in exc.errors()]
        logger.warning("[%s] Unreadable request body for %s: %s", rid, request.url.path, fields)
        # Answered like any other failed login
        return _failure(401, AuthenticationError().message)

    @app.exception_handler(AuthenticationError)
    async def handle_authentication_error(request: Request, exc: AuthenticationError):
        return _failure(401, exc.message)

    @app.exception_handler(CollectionNotAllowedError)
    async def handle_collection_not_allowed(request: Request, exc: CollectionNotAllowedError):
        rid = request_id_var.get("")
        logger.warning("[%s] Collection not allowed: %s", rid, exc.collection)
        return _failure(403, exc.message)

    @app.exception_handler(SchemaDiscoveryError)
    async def handle_schema_discovery_error(request: Request, exc: SchemaDiscoveryError):
        rid = request_id_var.get("")
        logger.error("[%s] Schema discovery error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(status_code=500, content={"error": exc.message})

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        rid = request_id_var.get("")
        logger.error("[%s] Database error: %s | Context: %s", rid, exc.message, exc.context)
        return _failure(500, exc.message)

    @app.exception_handler(P4PError)
    async def handle_application_error(request: Request, exc: P4PError):
        rid = request_id_var.get("")
        logger.error("[%s] Application error: %s | Context: %s", rid, exc.message, exc.context)
        return _failure(500, exc.message)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return _failure(500, "Server error")


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns: Fully configured FastAPI instance. The MongoDB client is opened
    by the lifespan, not here, so creating an app has no side effects.
    """
    app = FastAPI(
        title="P4P MIS API",
        description=(
            "Read access to the P4P MIS collections (participants, dealers, "
            "cooperatives, leverages, market surveys, productivity, A2F, A2M) "
            "and the dashboard login."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition:
    # RequestID → Logging → GZip → CORS → route

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )

    # Full-collection reads are large JSON payloads
    app.add_middleware(GZipMiddleware, minimum_size=500)

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(auth.router)
    app.include_router(collections.router)
    app.include_router(dashboard.router)
    app.include_router(health.router)

    return app


def run() -> None:
    """Console-script entry point: serve the app with uvicorn on the configured port."""
    import uvicorn

    uvicorn.run(
        "p4pmis.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )


# uvicorn expects `p4pmis.main:app` to be importable
app = create_app()

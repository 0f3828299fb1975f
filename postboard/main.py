"""
Postboard Backend - FastAPI Application Factory
================================================

What:  Creates and configures the FastAPI application instance.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   Called by uvicorn to start the server (uvicorn postboard.main:app).
When:  Once at server startup; the returned app handles all subsequent requests.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌──────────┐ ┌──────────┐ ┌─────────┐ ┌─────────┐  │
    │  │  Req ID  │→│ Logging  │→│ Session │→│  GZip   │  │
    │  └──────────┘ └──────────┘ └─────────┘ └─────────┘  │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────┐ ┌──────────┐ ┌─────────┐ ┌─────────┐  │
    │  │  posts   │ │  auth    │ │ profile │ │ health  │  │
    │  └──────────┘ └──────────┘ └─────────┘ └─────────┘  │
    │                                                     │
    │  Exception Handlers (JSON routes):                  │
    │  ┌───────────────────────────────────────────────┐  │
    │  │ Validation→400 │ Unauth→401 │ NotFound→404    │  │
    │  │ Store→500      │ anything else→500            │  │
    │  └───────────────────────────────────────────────┘  │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Startup:  configure logging, report the images directory.
    Shutdown: dispose the database engine (close all connections).
"""

import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from postboard import __version__
from postboard.config import settings
from postboard.database import dispose_engine
from postboard.exceptions import PostboardError, StoreError
from postboard.middleware.logging import RequestLoggingMiddleware
from postboard.middleware.request_id import RequestIDMiddleware, request_id_var
from postboard.middleware.session import SessionMiddleware
from postboard.routes import auth, health, posts, profile
from postboard.sessions import SessionStore
from postboard.views import render_error

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Called once during app startup, before any other initialization.
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),  # Docker captures stdout
        ],
        force=True,
    )

    # Third-party libraries log every operation at DEBUG/INFO
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("multipart").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    # ── Startup ───────────────────────────────────────────────────────────
    setup_logging()
    logger.info("=" * 60)
    logger.info("Postboard %s starting up...", __version__)

    images = Path(settings.images_dir)
    if images.is_dir():
        logger.info("Serving images from %s", images.resolve())
    else:
        logger.warning("Images directory %s does not exist; /images will 404", images.resolve())

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    # ── Shutdown ──────────────────────────────────────────────────────────
    logger.info("Postboard shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map application exceptions to JSON error responses.

    Page routes catch their errors and render a view, so these handlers
    mostly serve the comment and like endpoints. Every body has the shape
    {"error": <message>}; internal details stay in the server log.

    Handler hierarchy:
        RequestValidationError  → error view (GET) or 400
        StoreError              → 500, message logged with context
        PostboardError subclass → exc.status_code
        Exception (fallback)    → 500, stack trace logged
    """

    @app.exception_handler(StoreError)
    async def handle_store_error(request: Request, exc: StoreError):
        rid = request_id_var.get("")
        logger.error("[%s] Store error: %s | Context: %s", rid, exc.message, exc.context)
        return JSONResponse(status_code=500, content={"error": exc.message})

    @app.exception_handler(PostboardError)
    async def handle_app_error(request: Request, exc: PostboardError):
        rid = request_id_var.get("")
        if exc.status_code >= 500:
            logger.error("[%s] %s: %s", rid, type(exc).__name__, exc.message)
        else:
            logger.info("[%s] %s: %s", rid, type(exc).__name__, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        """
        Malformed path or query values, such as /post/abc.

        Pages render the error view; JSON endpoints answer 400 {"error": ...}.
        """
        rid = request_id_var.get("")
        bad_postid = any(tuple(err.get("loc", ()))[:2] == ("path", "postid") for err in exc.errors())
        logger.info("[%s] Invalid request %s %s: %s", rid, request.method, request.url.path, exc.errors())

        if request.method == "GET":
            return render_error(request, "Post not found" if bad_postid else "Invalid request")
        return JSONResponse(
            status_code=400,
            content={"error": "Invalid post id" if bad_postid else "Invalid request"},
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"error": "An unexpected error occurred. Please try again."},
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Each call builds a fresh SessionStore, so separate app instances (for
    example one per test) never share logins.
    """
    app = FastAPI(
        title="Postboard",
        description="Server-rendered social posting site: posts, comments, likes and search.",
        version=__version__,
        lifespan=lifespan,
    )

    store = SessionStore(max_age=settings.session_max_age)
    app.state.session_store = store

    # ── Register Middleware ───────────────────────────────────────────────
    # Middleware executes in REVERSE order of addition (last added runs first)
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(
        SessionMiddleware,
        store=store,
        cookie_name=settings.session_cookie_name,
        max_age=settings.session_max_age,
        secure=settings.session_cookie_secure,
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.include_router(posts.router)
    app.include_router(auth.router)
    app.include_router(profile.router)
    app.include_router(health.router)

    app.mount(
        "/images",
        StaticFiles(directory=settings.images_dir, check_dir=False),
        name="images",
    )

    return app


# ── Application Instance ─────────────────────────────────────────────────
# uvicorn expects `postboard.main:app` to be importable
app = create_app()

"""
Snippetbox — FastAPI Application Factory
==========================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes wiring of configuration, database engine, session manager,
       template cache, middleware, routes and lifecycle in one place.
How:   Factory pattern: create_app(settings) returns a configured FastAPI
       instance. The CLI (cli.py) builds Settings from flags and passes them in;
       `uvicorn --factory snippetbox.main:create_app` uses environment settings.

Application Architecture:
    ┌─────────────────────────────────────────────────────┐
    │                   FastAPI App                       │
    │                                                     │
    │  Middleware Chain:                                  │
    │  ┌────────┐ ┌───────────┐ ┌─────────┐ ┌─────────┐   │
    │  │ Req ID │→│ Sec. Hdrs │→│ Logging │→│ Session │   │
    │  └────────┘ └───────────┘ └─────────┘ └─────────┘   │
    │                                                     │
    │  Routes:                                            │
    │  ┌──────────┐ ┌──────────┐ ┌──────────┐ ┌────────┐  │
    │  │ snippets │ │  users   │ │ /static  │ │ health │  │
    │  └──────────┘ └──────────┘ └──────────┘ └────────┘  │
    │                                                     │
    │  Exception Handlers:                                │
    │  ┌──────────────────────────────────────────────┐   │
    │  │ NoRecord→404 │ AuthRequired→303 │ other→500  │   │
    │  └──────────────────────────────────────────────┘   │
    └─────────────────────────────────────────────────────┘

Lifecycle:
    Construction (fatal on failure):
    1. Build the database engine and session factory
    2. Build the template cache (compiles every page)
    3. Mount static assets (directory must exist)

    Startup:
    1. Initialize logging
    2. Report insecure configuration
    3. Ping the database (fatal on failure)

    Shutdown:
    1. Dispose database engine (close all connections)
"""

import logging
import secrets
import sys
from contextlib import asynccontextmanager
from http import HTTPStatus
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from snippetbox import __version__
from snippetbox.config import Settings, settings as default_settings
from snippetbox.database import create_engine, create_session_factory, dispose_engine, ping
from snippetbox.exceptions import AuthenticationRequired, NoRecordError
from snippetbox.middleware.logging import RequestLoggingMiddleware
from snippetbox.middleware.request_id import RequestIDMiddleware, request_id_var
from snippetbox.middleware.secure_headers import SecureHeadersMiddleware
from snippetbox.routes import health, snippets, users
from snippetbox.templates import build_templates

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging(level: str = "INFO") -> None:
    """
    Configure logging for the entire application.

    Format: %(asctime)s [%(levelname)s] %(name)s: %(message)s
    Everything goes to stdout; the process supervisor captures it.
    """
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Our access log replaces uvicorn's; SQL echo only when explicitly asked for
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def _status_text(status_code: int) -> str:
    try:
        return HTTPStatus(status_code).phrase
    except ValueError:
        return str(status_code)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan (Startup & Shutdown)
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup: logging, configuration report, database ping.
    Shutdown: dispose the engine.

    An unreachable database is fatal: the exception propagates and uvicorn
    aborts startup.
    """
    settings: Settings = app.state.settings
    setup_logging(settings.log_level)
    logger.info("Snippetbox %s starting up...", __version__)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Not fatal: development runs without a secret key or certificates
        logger.warning("%s", str(e))

    try:
        await ping(app.state.engine)
    except Exception:
        logger.error("Database unreachable at startup", exc_info=True)
        await dispose_engine(app.state.engine)
        raise
    logger.info("Database connection verified")

    yield

    logger.info("Snippetbox shutting down...")
    await dispose_engine(app.state.engine)
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exceptions to plain-text HTML-site responses.

    Handler hierarchy:
        NoRecordError             → 404 Not Found
        AuthenticationRequired    → 303 See Other → /user/login
        RequestValidationError    → 400 Bad Request
        StarletteHTTPException    → its own status (unknown route 404, 405, ...)
        Exception (fallback)      → 500 Internal Server Error, traceback logged
                                    (only for errors raised outside RequestLoggingMiddleware,
                                    which answers handler errors itself)

    Responses carry only the status text; details stay in the server log.
    """

    @app.exception_handler(NoRecordError)
    async def handle_no_record(request: Request, exc: NoRecordError):
        return PlainTextResponse(_status_text(404), status_code=404)

    @app.exception_handler(AuthenticationRequired)
    async def handle_authentication_required(request: Request, exc: AuthenticationRequired):
        return RedirectResponse("/user/login", status_code=303)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        rid = request_id_var.get("")
        logger.warning("[%s] Bad request: %s", rid, exc.errors())
        return PlainTextResponse(_status_text(400), status_code=400)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return PlainTextResponse(
            _status_text(exc.status_code),
            status_code=exc.status_code,
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        """Prevents raw stack traces from reaching the client; logs them instead."""
        rid = request_id_var.get("")
        logger.error("[%s] Unexpected error: %s", rid, str(exc), exc_info=exc)
        return PlainTextResponse(_status_text(500), status_code=500)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Raises (construction-time, all fatal for the CLI):
        FileNotFoundError / jinja2.TemplateError: template cache can't be built
        RuntimeError: static directory does not exist
    """
    settings = settings or default_settings

    app = FastAPI(
        title="Snippetbox",
        version=__version__,
        # Server-rendered site: no interactive API docs
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )

    # ── Shared State ──────────────────────────────────────────────────────
    engine = create_engine(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.templates = build_templates(settings.templates_dir)

    # ── Register Middleware ───────────────────────────────────────────────
    # Last added = outermost; SessionMiddleware sits closest to the routes
    secret_key = settings.session_secret_key
    if not secret_key:
        logger.warning("SESSION_SECRET_KEY not set; using a random per-process key")
        secret_key = secrets.token_urlsafe(32)

    app.add_middleware(
        SessionMiddleware,
        secret_key=secret_key,
        session_cookie="session",
        max_age=settings.session_lifetime,
        same_site="strict",
        https_only=settings.session_cookie_secure,
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(SecureHeadersMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # ── Register Exception Handlers ───────────────────────────────────────
    register_exception_handlers(app)

    # ── Register Routes ───────────────────────────────────────────────────
    app.mount("/static", StaticFiles(directory=settings.static_dir), name="static")
    app.include_router(snippets.router)
    app.include_router(users.router)
    app.include_router(health.router)

    return app

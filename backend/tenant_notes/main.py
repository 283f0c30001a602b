"""
Tenant Notes Backend — FastAPI Application Factory
==================================================

What:  Creates and configures the FastAPI application instance.
Why:   Centralizes middleware registration, route mounting, exception
       handlers and lifecycle management in one place.
How:   Factory pattern: create_app() returns a configured FastAPI instance.
Who:   `uvicorn tenant_notes.main:app`, serverless hosts importing `app`,
       or the `tenant-notes` console script (run()).

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │                                                          │
    │  Middleware:  [Request ID] → [Logging] → [CORS]          │
    │                                                          │
    │  Routes:                                                 │
    │    /health   /login   /notes[/{id}]                      │
    │    /tenants/{slug}/upgrade                               │
    │                                                          │
    │  Exception Handlers:                                     │
    │    Validation→400  Auth→401  Quota→402  Forbidden→403    │
    │    NotFound→404    Database/unexpected→500               │
    └──────────────────────────────────────────────────────────┘

Lifecycle:
    Startup:
    1. Initialize logging
    2. Build the token codec (fails fast if JWT_SECRET is missing and
       insecure mode is not enabled; warns if insecure mode is on)
    Shutdown:
    1. Dispose database engine (close all connections)
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Dict, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tenant_notes import __version__
from tenant_notes.auth.tokens import get_token_codec
from tenant_notes.config import settings
from tenant_notes.database import dispose_engine
from tenant_notes.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DatabaseError,
    NotFoundError,
    QuotaExceededError,
    ValidationError,
)
from tenant_notes.middleware.logging import RequestLoggingMiddleware
from tenant_notes.middleware.request_id import RequestIDMiddleware, request_id_var
from tenant_notes.routes import auth, health, notes, tenants

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """
    Configure logging for the entire application.

    Format: 2025-01-15T12:00:00 [INFO] tenant_notes.services.note_service: ...
    Output: stdout (captured by the container runtime / serverless host)
    """
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Our access middleware replaces uvicorn's access log
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("Tenant Notes API %s starting up...", __version__)

    # Resolving the codec here makes a missing JWT_SECRET a startup failure
    # instead of a 500 on the first login.
    codec = get_token_codec()
    logger.info("Bearer tokens: %s, expire after %s", codec.algorithm, codec.expires_in)

    yield

    logger.info("Tenant Notes API shutting down...")
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error_response(
    status_code: int,
    error: str,
    message: str,
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": error,
            "message": message,
            "request_id": request_id_var.get(""),
        },
        headers=headers,
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map exception types to HTTP status codes and the shared error body
    {error, message, request_id}.

    Security: 500 responses NEVER expose internal details (stack traces,
    SQL). Details are logged server-side with the request ID.
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return _error_response(400, "validation_error", exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        """Malformed JSON or wrongly typed fields are client errors like any other 400."""
        logger.warning("[%s] Request validation failed: %s", request_id_var.get(""), exc.errors())
        return _error_response(400, "validation_error", "Invalid request body")

    @app.exception_handler(AuthenticationError)
    async def handle_authentication_error(request: Request, exc: AuthenticationError):
        if exc.context:
            logger.info("[%s] Authentication failed: %s", request_id_var.get(""), exc.context)
        return _error_response(401, "unauthorized", exc.message, headers={"WWW-Authenticate": "Bearer"})

    @app.exception_handler(QuotaExceededError)
    async def handle_quota_exceeded(request: Request, exc: QuotaExceededError):
        return _error_response(402, "quota_exceeded", exc.message)

    @app.exception_handler(AuthorizationError)
    async def handle_authorization_error(request: Request, exc: AuthorizationError):
        logger.warning("[%s] Forbidden: %s | Context: %s", request_id_var.get(""), exc.message, exc.context)
        return _error_response(403, "forbidden", exc.message)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error_response(404, "not_found", exc.message)

    @app.exception_handler(DatabaseError)
    async def handle_database_error(request: Request, exc: DatabaseError):
        logger.error("[%s] Database error: %s | Context: %s", request_id_var.get(""), exc.message, exc.context)
        return _error_response(500, "server_error", INTERNAL_ERROR_MESSAGE)

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error("[%s] Unexpected error: %s", request_id_var.get(""), str(exc), exc_info=True)
        return _error_response(500, "internal_server_error", INTERNAL_ERROR_MESSAGE)


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app() -> FastAPI:
    app = FastAPI(
        title="Tenant Notes API",
        description=(
            "Multi-tenant notes with FREE/PRO plans. FREE tenants are limited to "
            "3 notes; tenant admins can upgrade their own tenant to PRO."
        ),
        version=__version__,
        lifespan=lifespan,
    )

    # Middleware executes in REVERSE order of addition:
    # RequestID → Logging → CORS → routes
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID"],
    )
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(notes.router)
    app.include_router(tenants.router)

    return app


app = create_app()


def run() -> None:
    """
    Console entry point (`tenant-notes`).

    Binds uvicorn on HOST:PORT. Under a serverless host (VERCEL / SERVERLESS
    set) the platform imports `app` itself, so nothing is bound here.
    """
    setup_logging()
    if settings.serverless:
        logger.info("Serverless host detected; exporting ASGI app without binding a socket")
        return
    logger.info("Server listening on http://%s:%d", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()

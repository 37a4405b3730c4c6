"""
main.py — FastAPI application assembly

Builds the app, wires middleware, error handlers and routers.

Business Rules:
- Every response carries X-Request-ID, X-API-Version and security headers
- /api/v1/... is rewritten to /api/... before routing
- Every failure is answered by error_handlers.error_response
- Schema is managed by Alembic, never created here

Called by: uvicorn (app.main:app), tests
Depends on: config, logging_config, error_handlers, rate_limit, routers
"""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from loguru import logger
from starlette.middleware.sessions import SessionMiddleware

from .config import APP_VERSION, settings
from .error_handlers import error_response, register_error_handlers
from .http_client import close_clients
from .logging_config import setup_logging
from .rate_limit import limiter
from .routers import general

setup_logging()

API_VERSION = "v1"
_VERSIONED_PREFIX = f"/api/{API_VERSION}/"

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Starting General API v{}", APP_VERSION)
    yield
    await close_clients()
    logger.info("Shutdown complete")


app = FastAPI(title="General API", version=APP_VERSION, lifespan=lifespan)
app.state.limiter = limiter
register_error_handlers(app)

app.add_middleware(SessionMiddleware, secret_key=settings.secret_key)


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    """Request ID, version rewrite, timing log, last-resort error reply."""
    request_id = str(uuid.uuid4())[:8]
    request.state.request_id = request_id

    path = request.scope["path"]
    if path.startswith(_VERSIONED_PREFIX):
        request.scope["path"] = "/api/" + path[len(_VERSIONED_PREFIX):]

    start = time.perf_counter()
    with logger.contextualize(request_id=request_id):
        try:
            response = await call_next(request)
        except Exception as exc:
            response = error_response(request, exc)
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "{} {} -> {} ({:.0f}ms)",
            request.method, path, response.status_code, elapsed_ms,
        )

    response.headers["X-Request-ID"] = request_id
    response.headers["X-API-Version"] = API_VERSION
    for name, value in SECURITY_HEADERS.items():
        response.headers[name] = value
    return response


app.include_router(general.router)


@app.get("/health")
async def health():
    return {"status": "ok", "version": APP_VERSION}

"""
error_handlers.py — The single "return error" routine

error_response() turns any exception into an ErrorResponse JSON reply.
It is registered as the FastAPI handler for AppError, HTTPException and
RequestValidationError, and called by the request middleware in main.py
for anything else, so no route lets an exception escape.

Business Rules:
- AppError subclasses keep their own status, message and detail
- Body/type parse failures become ParseError (422), never 400
- HTTPException (404 route miss, 405, slowapi 429) keeps its status
- Everything else is a 500 with a generic message; traceback is logged
- 5xx logged at ERROR, 4xx at WARNING

Called by: app/main.py
Depends on: exceptions.py, schemas/errors.py
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from .exceptions import AppError, ParseError
from .schemas.errors import ErrorResponse


def _parse_detail(exc: RequestValidationError) -> list[dict]:
    # errors() may carry non-JSON values under "input"/"ctx"
    return [
        {"loc": [str(p) for p in err.get("loc", ())], "msg": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]


def _classify(exc: Exception) -> tuple[int, str, list | None]:
    if isinstance(exc, AppError):
        return exc.status_code, exc.message, exc.detail
    if isinstance(exc, RequestValidationError):
        return ParseError.status_code, ParseError.message, _parse_detail(exc)
    if isinstance(exc, StarletteHTTPException):
        return exc.status_code, str(exc.detail), None
    return 500, "Internal server error", None


def error_response(request: Request, exc: Exception) -> JSONResponse:
    """Map an exception to a JSON error reply."""
    status_code, message, detail = _classify(exc)
    request_id = getattr(request.state, "request_id", "")

    if status_code >= 500:
        logger.opt(exception=exc).error(
            "{} {} failed: {}", request.method, request.url.path, exc
        )
    else:
        logger.warning(
            "{} {} -> {}: {}", request.method, request.url.path, status_code, message
        )

    body = ErrorResponse(
        error=message, status_code=status_code, request_id=request_id, detail=detail
    )
    return JSONResponse(
        body.model_dump(),
        status_code=status_code,
        headers=getattr(exc, "headers", None),
    )


async def _handle(request: Request, exc: Exception) -> JSONResponse:
    return error_response(request, exc)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, _handle)
    app.add_exception_handler(RequestValidationError, _handle)
    app.add_exception_handler(StarletteHTTPException, _handle)

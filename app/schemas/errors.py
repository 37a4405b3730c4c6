"""
schemas/errors.py — Structured error response model

Built by error_handlers.error_response for every non-2xx JSON reply.
"""

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    error: str
    status_code: int
    request_id: str = ""
    detail: list | None = None

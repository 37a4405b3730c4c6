"""
exceptions.py — Application error hierarchy

Every error a route can raise on purpose derives from AppError and
carries the HTTP status it maps to. Anything else reaching the error
handlers is treated as an unexpected 500.

Business Rules:
- ValidationError (400): a required field is missing or empty
- ParseError (422): the body could not be read into the payload model
- NotFoundError (404): the target record does not exist
- DownstreamError (502): a collaborator failed in a way worth naming

Called by: routers, services, utils/validation.py, error_handlers.py
Depends on: nothing
"""


class AppError(Exception):
    status_code = 500
    message = "Internal server error"

    def __init__(self, message: str | None = None, detail: list | None = None):
        self.message = message or self.message
        self.detail = detail
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    message = "Validation failed"

    def __init__(self, field: str, rule: str = "required", message: str | None = None):
        self.field = field
        self.rule = rule
        super().__init__(
            message or f"{field} is {rule}",
            detail=[{"field": field, "rule": rule}],
        )


class ParseError(AppError):
    status_code = 422
    message = "Malformed request body"


class AuthenticationError(AppError):
    status_code = 401
    message = "Not authenticated"


class NotFoundError(AppError):
    status_code = 404
    message = "Not found"


class DownstreamError(AppError):
    status_code = 502
    message = "Upstream service failed"

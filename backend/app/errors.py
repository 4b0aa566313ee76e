"""도메인 예외와 {"error": message} 형태로 응답하는 FastAPI 예외 핸들러입니다."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class PortalError(Exception):
    status_code = 500
    message = "Internal server error"

    def __init__(self, message: str | None = None, status_code: int | None = None):
        self.message = message or self.message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ValidationError(PortalError):
    status_code = 400
    message = "Required fields missing"


class Unauthenticated(PortalError):
    status_code = 401
    message = "Access token required"


class InvalidToken(Unauthenticated):
    status_code = 403
    message = "Invalid or expired token"


class InvalidCredentials(PortalError):
    status_code = 401
    message = "Invalid credentials"


class Forbidden(PortalError):
    status_code = 403
    message = "Insufficient permissions"


class NotFound(PortalError):
    status_code = 404
    message = "Not found"


class DuplicateIdentity(PortalError):
    status_code = 400
    message = "Username or email already exists"


class AlreadyEnrolled(PortalError):
    status_code = 400
    message = "Already enrolled"


class DuplicateReport(PortalError):
    status_code = 400
    message = "Report already exists"


class BatchFull(PortalError):
    status_code = 400
    message = "Batch is full"


class NotEnrolled(PortalError):
    status_code = 403
    message = "Not enrolled in this batch"


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return ValidationError.message
    first = errors[0]
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    if first.get("type") == "missing":
        return ValidationError.message
    field = ".".join(loc)
    return f"{field}: {first.get('msg')}" if field else str(first.get("msg"))


async def portal_error_handler(request: Request, exc: PortalError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"error": _describe_validation_error(exc)})


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PortalError, portal_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

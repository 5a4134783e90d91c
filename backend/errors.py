"""
Update failures and their mapping to HTTP responses

Every failure reaches the client as an ErrorMessage with a fixed message.
The detail of what went wrong only ever goes to the server log.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from models import ErrorMessage

logger = logging.getLogger("uvicorn")

UNHANDLED_MESSAGE = "UNHANDLED_REJECTION"


class UpdateError(Exception):
    """Base class for a configuration update that did not complete"""

    status_code = 500
    message = UNHANDLED_MESSAGE

    def __init__(self, detail: str = ""):
        super().__init__(detail)
        self.detail = detail


class AuthenticationFailed(UpdateError):
    status_code = 401
    message = "Not authorized to update configuration"


class PersistError(UpdateError):
    status_code = 500
    message = "Could not write config. Please check the server logs"


class ReloadError(UpdateError):
    status_code = 500
    message = "Could not restart service. Please check the server logs"


def error_response(status_code: int, message: str) -> JSONResponse:
    body = ErrorMessage(code=status_code, message=message)
    return JSONResponse(status_code=status_code, content=body.model_dump())


async def handle_update_error(request: Request, exc: UpdateError) -> JSONResponse:
    if isinstance(exc, AuthenticationFailed):
        logger.warning(f"Rejected update from {_client(request)}: invalid signature")
    else:
        logger.error(f"{type(exc).__name__} while updating config: {exc.detail}")
    return error_response(exc.status_code, exc.message)


async def handle_http_error(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    if exc.status_code == 404:
        return error_response(404, "")
    logger.error(f"Unhandled rejection: {request.method} {request.url.path} -> {exc!r}")
    return error_response(500, UNHANDLED_MESSAGE)


async def handle_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    problems = [f"{e.get('loc')}: {e.get('msg')}" for e in exc.errors()]
    logger.error(f"Unhandled rejection: invalid body for {request.url.path}: {problems}")
    return error_response(500, UNHANDLED_MESSAGE)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled rejection: {request.method} {request.url.path}")
    return error_response(500, UNHANDLED_MESSAGE)


def register_error_handlers(app: FastAPI):
    """Install the error handlers that turn failures into ErrorMessage replies"""
    app.add_exception_handler(UpdateError, handle_update_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)


def _client(request: Request) -> str:
    return request.client.host if request.client else "unknown client"

"""Exception handlers producing {success: false, message} bodies."""

import logging
import traceback

import orjson
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from cargo_tracker.config import settings
from cargo_tracker.core.errors import ApiError

logger = logging.getLogger(__name__)


def _error_response(err: ApiError, exc: Exception | None = None) -> Response:
    body = {"success": False, "message": err.message}
    if settings.environment == "development":
        body["operational"] = err.is_operational
        source = exc or err
        body["stack"] = "".join(traceback.format_exception(type(source), source, source.__traceback__))
    return Response(
        content=orjson.dumps(body),
        status_code=err.status_code,
        media_type="application/json",
    )


def _format_validation_error(error: dict) -> str:
    loc = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
    msg = error.get("msg", "Invalid value")
    return f"{loc}: {msg}" if loc else msg


async def api_error_handler(request: Request, exc: ApiError) -> Response:
    return _error_response(exc)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> Response:
    message = ". ".join(_format_validation_error(e) for e in exc.errors())
    return _error_response(ApiError(400, message), exc)


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> Response:
    if exc.status_code == 404 and exc.detail == "Not Found":
        message = f"Route {request.url.path} not found"
    else:
        message = str(exc.detail)
    return _error_response(ApiError(exc.status_code, message), exc)


async def unhandled_error_handler(request: Request, exc: Exception) -> Response:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _error_response(ApiError(500, "Internal Server Error", is_operational=False), exc)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

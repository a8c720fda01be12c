"""Exception handlers producing the ``{success: false, ...}`` envelope."""

from __future__ import annotations

import logging
import traceback

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..models.envelope import ErrorResponse
from .config import Config
from .exceptions import ApiError
from .middleware import REQUEST_ID_HEADER

logger = logging.getLogger(__name__)

HTTP_ERROR_CODES = {
    401: "UNAUTHORIZED",
    403: "FORBIDDEN",
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
}


def error_response(status_code: int, body: ErrorResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.to_content())


def register_error_handlers(app: FastAPI, config: Config) -> None:
    """Attach the JSON error handlers to ``app``"""

    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error(
                "Error caught by middleware",
                extra={"error": exc.message, "code": exc.code, "url": str(request.url), "method": request.method},
            )
        return error_response(
            exc.status_code,
            ErrorResponse(error=exc.message, code=exc.code, details=exc.details),
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
            message = "Endpoint not found"
        else:
            message = str(exc.detail)
        response = error_response(
            exc.status_code,
            ErrorResponse(error=message, code=HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR")),
        )
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        details = [
            {
                "field": ".".join(str(part) for part in err.get("loc", ())[1:]) or None,
                "message": err.get("msg"),
                "value": err.get("input"),
            }
            for err in exc.errors()
        ]
        logger.warning(
            "Request validation failed",
            extra={"url": str(request.url), "method": request.method, "errors": details},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=ErrorResponse(
                error="Validation failed", code="VALIDATION_ERROR", details=details
            ).model_dump(mode="json", exclude_none=True),
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Global exception handler"""
        logger.error(
            f"Unhandled exception: {exc}",
            exc_info=exc,
            extra={"url": str(request.url), "method": request.method},
        )
        stack = None
        if config.is_development():
            stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        response = error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            ErrorResponse(error="Internal Server Error", code="INTERNAL_ERROR", stack=stack),
        )
        # runs outside the request middleware, so the id is copied from request state
        request_id = getattr(request.state, "request_id", None)
        if request_id:
            response.headers[REQUEST_ID_HEADER] = request_id
        return response

"""Request tracking middleware: request ids, parsed headers and access logs."""

from __future__ import annotations

import logging
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def parse_headers(request: Request) -> dict:
    """Commonly used headers, with the authorization value hidden"""
    headers = request.headers
    return {
        "content_type": headers.get("content-type"),
        "user_agent": headers.get("user-agent"),
        "accept_language": headers.get("accept-language"),
        "authorization": "present" if headers.get("authorization") else "missing",
    }


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id and log it on the way in and out"""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
        request.state.parsed_headers = parse_headers(request)
        context = {
            "request_id": request_id,
            "method": request.method,
            "url": str(request.url),
            "user_agent": request.state.parsed_headers["user_agent"],
            "ip": request.client.host if request.client else None,
        }

        logger.info("Incoming request", extra=context)

        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            # rendered by the catch-all handler, which also sets the request id header
            self._log_completion(context, 500, start)
            raise

        response.headers[REQUEST_ID_HEADER] = request_id
        self._log_completion(context, response.status_code, start)
        return response

    @staticmethod
    def _log_completion(context: dict, status_code: int, start: float) -> None:
        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            "HTTP Request",
            extra={**context, "status_code": status_code, "duration": f"{duration_ms:.0f}ms"},
        )

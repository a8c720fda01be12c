"""FastAPI dependencies that gate route handlers on schema validation.

Usage::

    @router.post("/users")
    async def create_user(payload: dict = Depends(validate_body(CommonSchemas.USER))):
        ...

On success the dependency returns the validated payload. On failure it logs
one diagnostic record and raises :class:`ApiError`, which the application's
error handlers turn into the JSON failure envelope.
"""

from __future__ import annotations

import json
import logging
import math
from typing import Any, Awaitable, Callable, Dict, List, Mapping

from fastapi import Request

from ..core.exceptions import ApiError, InternalValidationError
from ..utils.text import truncate_text
from .schema import Schema, ValidationOutcome, parse_schema
from .validator import check_query_schema, evaluate_body, evaluate_query

logger = logging.getLogger(__name__)

MAX_LOGGED_VALUE_LENGTH = 200


def _loggable(value: Any) -> Any:
    if isinstance(value, str):
        return truncate_text(value, MAX_LOGGED_VALUE_LENGTH)
    if isinstance(value, Mapping):
        return {k: _loggable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_loggable(v) for v in value]
    return value


def _details(outcome: ValidationOutcome, key: str) -> List[Dict[str, Any]]:
    return [issue.to_dict(key) for issue in outcome.issues]


def _reject_constant(token: str) -> Any:
    raise ValueError(f"{token} is not valid JSON")


def _finite_float(token: str) -> float:
    number = float(token)
    if not math.isfinite(number):
        raise ValueError(f"{token} is out of range")
    return number


async def read_json_body(request: Request) -> Any:
    """Decode the request body; an empty body is treated as ``{}``.

    ``NaN``, ``Infinity`` and floats that overflow (``1e400``) are refused
    like any other malformed JSON, so every decoded value can be echoed back.
    """

    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        return json.loads(raw, parse_constant=_reject_constant, parse_float=_finite_float)
    except ValueError as exc:
        raise ApiError(
            "Malformed JSON in request body", status_code=400, code="INVALID_JSON"
        ) from exc


def validate_body(schema: Mapping[str, Any]) -> Callable[[Request], Awaitable[Dict[str, Any]]]:
    """Build a dependency validating the JSON body against ``schema``."""

    rules: Schema = parse_schema(schema)

    async def dependency(request: Request) -> Dict[str, Any]:
        payload = await read_json_body(request)

        try:
            outcome = evaluate_body(rules, payload)
        except InternalValidationError as exc:
            logger.error(
                "Validation middleware error",
                exc_info=True,
                extra={"error": str(exc), "url": str(request.url), "method": request.method},
            )
            raise ApiError(
                "Internal server error during validation",
                status_code=500,
                code="VALIDATION_MIDDLEWARE_ERROR",
            ) from exc

        if not outcome.is_valid:
            details = _details(outcome, "field")
            logger.warning(
                "Request validation failed",
                extra={
                    "url": str(request.url),
                    "method": request.method,
                    "errors": _loggable(details),
                    "body": _loggable(payload),
                },
            )
            raise ApiError(
                "Validation failed", status_code=400, code="VALIDATION_ERROR", details=details
            )

        return payload

    return dependency


def validate_query(schema: Mapping[str, Any]) -> Callable[[Request], Awaitable[Dict[str, Any]]]:
    """Build a dependency validating query parameters against ``schema``.

    Raises:
        SchemaError: at declaration time, for rule types that query
            validation does not enforce (email, array).
    """

    rules: Schema = check_query_schema(parse_schema(schema))

    async def dependency(request: Request) -> Dict[str, Any]:
        params = dict(request.query_params)

        try:
            outcome = evaluate_query(rules, params)
        except InternalValidationError as exc:
            logger.error(
                "Query validation middleware error",
                exc_info=True,
                extra={"error": str(exc), "url": str(request.url), "method": request.method},
            )
            raise ApiError(
                "Internal server error during query validation",
                status_code=500,
                code="QUERY_VALIDATION_MIDDLEWARE_ERROR",
            ) from exc

        if not outcome.is_valid:
            details = _details(outcome, "param")
            logger.warning(
                "Query validation failed",
                extra={
                    "url": str(request.url),
                    "method": request.method,
                    "errors": _loggable(details),
                    "query": _loggable(params),
                },
            )
            raise ApiError(
                "Query validation failed",
                status_code=400,
                code="QUERY_VALIDATION_ERROR",
                details=details,
            )

        return params

    return dependency

"""Typed models shared across the API."""

from .envelope import ErrorResponse, HealthResponse, Pagination, SuccessResponse
from .user import User

__all__ = [
    "ErrorResponse",
    "HealthResponse",
    "Pagination",
    "SuccessResponse",
    "User",
]

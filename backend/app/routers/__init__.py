"""API routers exposed by the backend."""

from . import system, users  # noqa: F401

__all__ = [
    "system",
    "users",
]

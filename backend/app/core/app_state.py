"""Application state accessors for route dependencies"""

from fastapi import Request

from ..services.user_store import UserStore
from .config import Config


def get_config(request: Request) -> Config:
    """Configuration loaded at startup"""
    return request.app.state.config


def get_user_store(request: Request) -> UserStore:
    """In-memory user store owned by the application"""
    return request.app.state.user_store

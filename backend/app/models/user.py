"""User records served from the in-memory store."""

from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel


class User(BaseModel):
    """A user as returned by the API"""

    id: int
    name: str
    email: str
    role: str = "member"
    age: Optional[Union[int, float]] = None

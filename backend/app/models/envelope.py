"""Response envelopes shared by every endpoint."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Failure envelope: ``{success: false, error, code, details?}``"""

    success: bool = False
    error: str
    code: str
    details: Optional[List[Dict[str, Any]]] = None
    stack: Optional[str] = None

    def to_content(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class HealthResponse(BaseModel):
    """Liveness payload"""

    success: bool = True
    message: str = "Server is running"
    timestamp: str
    version: str
    environment: str


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class SuccessResponse(BaseModel):
    """Success envelope wrapping ``data``"""

    success: bool = True
    data: Any = None
    message: Optional[str] = None
    pagination: Optional[Pagination] = None

"""Service information, health and diagnostics endpoints"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from ..core.app_state import get_config
from ..core.config import Config
from ..core.exceptions import ApiError
from ..models.envelope import HealthResponse

API_VERSION = "1.0.0"

router = APIRouter()


@router.get("/")
async def root():
    """Root endpoint with service information"""
    return {
        "success": True,
        "message": "Demo Users API",
        "version": API_VERSION,
        "documentation": "/docs",
        "health": "/health",
        "endpoints": {
            "users": "/api/v1/users",
            "search": "/api/v1/users/search",
        },
    }


@router.get("/health", response_model=HealthResponse)
async def health_check(config: Config = Depends(get_config)):
    """Health check endpoint"""
    return HealthResponse(
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=API_VERSION,
        environment=config.environment,
    )


@router.get("/api/v1/test-error")
async def test_error():
    """Always fails; exercises the error envelope end to end"""
    raise ApiError("This is a test error", status_code=500, code="TEST_ERROR")

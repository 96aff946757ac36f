"""
Health check endpoint
"""

from datetime import datetime, timezone
from fastapi import APIRouter, Depends

from ai_caller.api.dependencies import get_app_settings
from ai_caller.core.config import Settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(settings: Settings = Depends(get_app_settings)):
    """
    Basic health check endpoint
    """
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "environment": settings.environment,
        "checks": {
            "openai": settings.openai_configured
        }
    }

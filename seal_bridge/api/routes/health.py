"""
Health API Routes
"""
from fastapi import APIRouter, Depends

from seal_bridge.api.dependencies import get_app_settings
from seal_bridge.config import Settings

router = APIRouter()


@router.get("/")
@router.get("/health")
async def health_check(settings: Settings = Depends(get_app_settings)) -> dict:
    """Static liveness payload; never touches Seal and needs no auth."""
    return {
        "ok": True,
        "service": settings.app_name,
        "environment": settings.app_env,
        "seal_token_configured": settings.seal_token_configured,
    }

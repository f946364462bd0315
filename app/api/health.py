from fastapi import APIRouter, Depends

from app.config import Settings, get_settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(settings: Settings = Depends(get_settings)) -> dict:
    return {
        "status": "ok",
        "ml_api_url": settings.ml_api_url,
        "ml_api_configured": bool(settings.ml_api_url),
    }

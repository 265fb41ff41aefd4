"""
Health Check Routes
===================

GET /health is a liveness check: it never touches a backend store (a
saved connection being down does not make this service unhealthy). It
reports the registry's live sessions for debugging.
"""

from datetime import datetime, timezone

from fastapi import APIRouter

from redis_web_manager.application.api.dependencies import RegistryDep, SettingsDep
from redis_web_manager.application.api.models import ERROR_RESPONSES, envelope

router = APIRouter(prefix="/health", tags=["Health"], responses=ERROR_RESPONSES)


@router.get("")
async def health_check(registry: RegistryDep, settings: SettingsDep):
    return envelope(
        {
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": settings.app.APP_VERSION,
            "registry": registry.stats(),
        }
    )

"""Health check endpoints."""
from fastapi import APIRouter, Depends
from typing import Dict, Any
import psutil
import time

from ...core.config import Settings, get_settings
from ...core.security import verify_api_key
from ...services.store import ToolStore
from ..dependencies import get_tool_store


router = APIRouter()


@router.get("/health", summary="Basic health check")
async def health_check(settings: Settings = Depends(get_settings)) -> Dict[str, Any]:
    """Basic health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": time.time(),
        "version": settings.APP_VERSION,
        "service": settings.APP_NAME
    }


@router.get("/health/detailed", summary="Detailed health check")
async def detailed_health_check(
    settings: Settings = Depends(get_settings),
    store: ToolStore = Depends(get_tool_store),
    api_key: str = Depends(verify_api_key)
) -> Dict[str, Any]:
    """Detailed health check with system metrics."""
    memory = psutil.virtual_memory()
    disk = psutil.disk_usage('/')

    return {
        "status": "healthy",
        "timestamp": time.time(),
        "version": settings.APP_VERSION,
        "service": settings.APP_NAME,
        "system": {
            "memory_percent": memory.percent,
            "cpu_percent": psutil.cpu_percent(interval=0.1),
            "disk_percent": disk.percent
        },
        "storage": {
            "database": settings.DATABASE_PATH,
            "tools": store.count_tools()
        },
        "configuration": {
            "debug": settings.DEBUG,
            "headless": settings.CRAWLER_HEADLESS,
            "page_timeout": settings.CRAWLER_PAGE_TIMEOUT,
            "gemini_model": settings.GEMINI_MODEL,
            "gemini_configured": bool(settings.GEMINI_API_KEY)
        }
    }


@router.get("/health/ready", summary="Readiness check")
async def readiness_check(store: ToolStore = Depends(get_tool_store)) -> Dict[str, Any]:
    """Readiness check for load balancers; the tool store must answer."""
    return {
        "status": "ready",
        "timestamp": time.time(),
        "tools": store.count_tools()
    }

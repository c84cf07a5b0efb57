"""
Health check endpoint.

Provides a lightweight probe for load balancers, uptime monitors,
and deployment readiness checks.
"""

import time
from typing import Any

from fastapi import APIRouter, Depends

from lead_engine.config import Settings, get_settings
from lead_engine.engine.catalog import DEFAULT_CATALOG
from lead_engine.engine.templates import MESSAGE_TEMPLATES

router = APIRouter(tags=["Health"])

# Record server start time for uptime calculation
_start_time = time.time()


@router.get(
    "/health",
    summary="Health Check",
    description="Returns service status plus the size of the loaded catalog and template table.",
    response_model=dict[str, Any],
)
async def health_check(settings: Settings = Depends(get_settings)) -> dict[str, Any]:
    """Return service health, version, environment, uptime and config sizes."""
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.environment,
        "uptime_seconds": round(time.time() - _start_time, 2),
        "catalog_services": len(DEFAULT_CATALOG.entries),
        "message_templates": len(MESSAGE_TEMPLATES),
    }

"""
Home/Root API endpoints
Service information and welcome endpoints
"""

from fastapi import APIRouter, Request

from app.core.config import config

router = APIRouter()


@router.get("/")
async def root(request: Request):
    """
    Root endpoint - Service information.
    Returns basic service metadata and status.
    """
    return {
        "service": getattr(request.app.state, "service_name", config.service_name),
        "version": config.service_version,
        "environment": config.environment,
        "eventTransport": config.event_transport,
        "status": "operational",
    }


@router.get("/version")
def get_version():
    """
    Get service version information.
    Used for deployment tracking and version verification.
    """
    return {
        "version": config.service_version,
        "apiVersion": config.api_version,
    }

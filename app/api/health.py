"""
Health and operational API endpoints
"""

import asyncio
import time
from datetime import datetime, timezone
from typing import Any, Dict, List

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from app.core.config import config
from app.core.logger import logger
from app.db.database import ping_database

router = APIRouter()

# Track service start time
start_time = time.time()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _service_name(request: Request) -> str:
    return getattr(request.app.state, "service_name", config.service_name)


@router.get("/health")
def health_check(request: Request):
    """Basic health check endpoint"""
    return {
        "status": "healthy",
        "service": _service_name(request),
        "timestamp": _now(),
        "version": config.api_version,
    }


@router.get("/health/ready")
async def readiness_check(request: Request):
    """Readiness probe - check if service is ready to serve traffic"""
    health_checks = await perform_health_checks(request)
    failed_checks = [check for check in health_checks if check["status"] != "healthy"]

    if not failed_checks:
        return {
            "status": "ready",
            "service": _service_name(request),
            "timestamp": _now(),
            "checks": health_checks,
        }

    logger.warning(
        f"Readiness check failed - {len(failed_checks)} checks failed",
        metadata={
            "failed_checks": [check["name"] for check in failed_checks],
            "event": "readiness_check_failed",
        },
    )
    return JSONResponse(
        status_code=503,
        content={
            "status": "not ready",
            "service": _service_name(request),
            "timestamp": _now(),
            "checks": health_checks,
            "errors": [f"{check['name']}: {check.get('error', 'Unknown error')}" for check in failed_checks],
        },
    )


@router.get("/health/live")
def liveness_check(request: Request):
    """Liveness probe - check if the app is running"""
    return {
        "status": "alive",
        "service": _service_name(request),
        "timestamp": _now(),
        "uptime": time.time() - start_time,
    }


async def perform_health_checks(request: Request) -> List[Dict[str, Any]]:
    """Run the checks that apply to the hosting application concurrently"""
    state = request.app.state
    check_tasks = []
    if getattr(state, "uses_database", False):
        check_tasks.append(check_database_health())
    transport = getattr(state, "event_transport", None)
    if transport is not None:
        check_tasks.append(check_transport_health(transport))

    return list(await asyncio.gather(*check_tasks))


async def check_database_health() -> Dict[str, Any]:
    """Check relational database connectivity"""
    check_start = time.time()

    try:
        connected = await ping_database()
        response_time_ms = round((time.time() - check_start) * 1000, 2)
        if not connected:
            return {
                "name": "database",
                "status": "unhealthy",
                "error": "Database engine is not initialized",
                "timestamp": _now(),
            }
        return {
            "name": "database",
            "status": "healthy",
            "response_time_ms": response_time_ms,
            "timestamp": _now(),
        }
    except Exception as e:
        logger.error(
            f"Database health check failed: {e}",
            metadata={"error": str(e), "event": "health_check_database_failed"},
        )
        return {
            "name": "database",
            "status": "unhealthy",
            "error": str(e),
            "response_time_ms": round((time.time() - check_start) * 1000, 2),
            "timestamp": _now(),
        }


async def check_transport_health(transport) -> Dict[str, Any]:
    """Check the pub/sub transport (Dapr sidecar, RabbitMQ connection or Service Bus client)"""
    check_start = time.time()
    name = f"{transport.name}_transport"

    try:
        healthy = await transport.is_healthy()
    except Exception as e:
        healthy = False
        logger.warning(
            f"Transport health check failed: {e}",
            metadata={"transport": transport.name, "event": "health_check_transport_failed"},
        )

    result = {
        "name": name,
        "status": "healthy" if healthy else "unhealthy",
        "response_time_ms": round((time.time() - check_start) * 1000, 2),
        "timestamp": _now(),
    }
    if not healthy:
        result["error"] = f"{transport.name} transport is not reachable"
    return result

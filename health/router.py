# ============================================================================
# HEALTH CHECK ROUTER
# ============================================================================
# STATUS: Infrastructure - FastAPI health check endpoints
# PURPOSE: Liveness/readiness probes and full health status
# CREATED: 09 SEP 2026
# ============================================================================
"""
Health Check Router

Endpoints:
    GET /livez   - Liveness probe. Always 200 while the process answers.

    GET /readyz  - Readiness probe. 200 if every check marked
                   required_for_ready passes, else 503.

    GET /health  - All checks with details.
                   200 healthy, 206 degraded, 503 unhealthy.
"""

import logging
from typing import List, Sequence

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from health.core import HealthCheckPlugin, HealthStatus, run_checks
from __version__ import __version__, BUILD_DATE

logger = logging.getLogger(__name__)

health_router = APIRouter(tags=["Health"])

_checks: List[HealthCheckPlugin] = []


def set_health_checks(checks: Sequence[HealthCheckPlugin]) -> None:
    """Install the checks run by /readyz and /health."""
    global _checks
    _checks = list(checks)


def _status_to_http_code(status: HealthStatus) -> int:
    return {
        HealthStatus.HEALTHY: 200,
        HealthStatus.DEGRADED: 206,
        HealthStatus.UNHEALTHY: 503,
    }[status]


@health_router.get("/livez")
async def liveness_probe():
    """Process is alive. No external dependencies."""
    return {"status": "alive", "version": __version__, "build_date": BUILD_DATE}


@health_router.get("/readyz")
async def readiness_probe():
    """Ready to serve: the required checks pass."""
    required = [c for c in _checks if c.required_for_ready]
    if not required:
        return {"status": "ready", "message": "No checks registered"}

    results = await run_checks(required)
    failed = {
        name: result.to_dict()
        for name, result in results.items()
        if result.status == HealthStatus.UNHEALTHY
    }
    if failed:
        logger.warning(f"Readiness failed: {', '.join(failed)}")
        return JSONResponse(status_code=503, content={"status": "not_ready", "checks": failed})

    return {"status": "ready", "checks_passed": len(results)}


@health_router.get("/health")
async def full_health_check():
    """Every check, with per-check status and timing."""
    results = await run_checks(_checks)
    status = HealthStatus.aggregate([r.status for r in results.values()])

    return JSONResponse(
        status_code=_status_to_http_code(status),
        content={
            "status": status.value,
            "version": __version__,
            "build_date": BUILD_DATE,
            "checks": {name: result.to_dict() for name, result in results.items()},
        },
    )

# ============================================================================
# HEALTH CHECK MODULE
# ============================================================================
# STATUS: Infrastructure - Health probes
# PURPOSE: Liveness, readiness and full health endpoints
# CREATED: 09 SEP 2026
# ============================================================================
"""
Health Check Module

- /livez: process alive
- /readyz: stores reachable
- /health: all checks, including the catalog source

Usage:
    from health import health_router, set_health_checks

    set_health_checks([KeyValueStoreCheck("counters", store)])
    app.include_router(health_router)
"""

from health.core import (
    HealthStatus,
    HealthCheckResult,
    HealthCheckPlugin,
    run_check,
    run_checks,
)
from health.probes import KeyValueStoreCheck, CatalogSourceCheck
from health.router import health_router, set_health_checks

__all__ = [
    "HealthStatus",
    "HealthCheckResult",
    "HealthCheckPlugin",
    "run_check",
    "run_checks",
    "KeyValueStoreCheck",
    "CatalogSourceCheck",
    "health_router",
    "set_health_checks",
]

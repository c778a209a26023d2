# ============================================================================
# HEALTH CHECK CORE TYPES
# ============================================================================
# STATUS: Infrastructure - Base classes for health checks
# PURPOSE: Health check interface, result types, timed execution
# CREATED: 09 SEP 2026
# ============================================================================
"""
Health Check Core Types

Status hierarchy (worst wins):
- healthy: all checks passed
- degraded: an optional check failed
- unhealthy: a check required for readiness failed
"""

import asyncio
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence


class HealthStatus(str, Enum):
    """Health check status values."""
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"

    @property
    def severity(self) -> int:
        return {"healthy": 0, "degraded": 1, "unhealthy": 2}[self.value]

    @classmethod
    def aggregate(cls, statuses: List["HealthStatus"]) -> "HealthStatus":
        """Aggregate multiple statuses (worst wins)."""
        if not statuses:
            return cls.HEALTHY
        return max(statuses, key=lambda s: s.severity)


@dataclass
class HealthCheckResult:
    """Result from a single health check."""
    status: HealthStatus
    message: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)
    duration_ms: float = 0.0
    checked_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def healthy(cls, message: str = None, **details) -> "HealthCheckResult":
        return cls(status=HealthStatus.HEALTHY, message=message, details=details)

    @classmethod
    def unhealthy(cls, message: str, **details) -> "HealthCheckResult":
        return cls(status=HealthStatus.UNHEALTHY, message=message, details=details)

    @classmethod
    def from_exception(cls, e: Exception) -> "HealthCheckResult":
        return cls(
            status=HealthStatus.UNHEALTHY,
            message=str(e) or type(e).__name__,
            details={"exception_type": type(e).__name__},
        )

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "status": self.status.value,
            "duration_ms": round(self.duration_ms, 2),
        }
        if self.message:
            result["message"] = self.message
        if self.details:
            result["details"] = self.details
        return result


class HealthCheckPlugin(ABC):
    """
    Base class for health checks.

    Attributes:
        name: unique identifier for the check
        timeout_seconds: max execution time before the check counts as failed
        required_for_ready: if True, failure blocks /readyz; otherwise a
            failure only degrades /health
    """

    name: str = "unnamed"
    timeout_seconds: float = 5.0
    required_for_ready: bool = True

    @abstractmethod
    async def check(self) -> HealthCheckResult:
        """Execute the check."""


async def run_check(plugin: HealthCheckPlugin) -> HealthCheckResult:
    """Run one check with its timeout; exceptions become unhealthy results."""
    start = time.perf_counter()
    try:
        result = await asyncio.wait_for(plugin.check(), timeout=plugin.timeout_seconds)
    except asyncio.TimeoutError:
        result = HealthCheckResult.unhealthy(f"Timed out after {plugin.timeout_seconds}s")
    except Exception as e:
        result = HealthCheckResult.from_exception(e)

    if result.status == HealthStatus.UNHEALTHY and not plugin.required_for_ready:
        result.status = HealthStatus.DEGRADED
    result.duration_ms = (time.perf_counter() - start) * 1000
    return result


async def run_checks(plugins: Sequence[HealthCheckPlugin]) -> Dict[str, HealthCheckResult]:
    """Run checks in parallel, keyed by check name."""
    results = await asyncio.gather(*(run_check(p) for p in plugins))
    return {p.name: r for p, r in zip(plugins, results)}

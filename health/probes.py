# ============================================================================
# HEALTH CHECKS
# ============================================================================
# STATUS: Infrastructure - Store and catalog source checks
# PURPOSE: Concrete checks wired up in main.py
# CREATED: 09 SEP 2026
# ============================================================================
"""
Health Checks

- KeyValueStoreCheck: counter and rate-limit stores answer (required)
- CatalogSourceCheck: the catalog snapshot can be loaded (optional; the
  snapshot lives on GitHub and an outage there only degrades the service)
"""

from health.core import HealthCheckPlugin, HealthCheckResult
from infrastructure.kv_store import KeyValueStore


class KeyValueStoreCheck(HealthCheckPlugin):
    """Store connectivity."""

    def __init__(self, name: str, store: KeyValueStore):
        self.name = name
        self.store = store

    async def check(self) -> HealthCheckResult:
        if await self.store.ping():
            return HealthCheckResult.healthy(backend=type(self.store).__name__)
        return HealthCheckResult.unhealthy("Store did not answer", backend=type(self.store).__name__)


class CatalogSourceCheck(HealthCheckPlugin):
    """Catalog snapshot availability (served from cache when fresh)."""

    name = "catalog"
    timeout_seconds = 10.0
    required_for_ready = False

    def __init__(self, catalog_service):
        self.catalog_service = catalog_service

    async def check(self) -> HealthCheckResult:
        catalog = await self.catalog_service.load_catalog()
        return HealthCheckResult.healthy(items=len(catalog.items))

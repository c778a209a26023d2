# ============================================================================
# SRM EDGE API - MAIN APPLICATION
# ============================================================================
# STATUS: Core - FastAPI application entry point
# PURPOSE: App factory, service wiring, error envelope
# CREATED: 09 SEP 2026
# ============================================================================
"""
SRM Edge API Main Application

FastAPI application that:
1. Serves the approved catalog merged with live counters
2. Records likes, ratings and downloads under per-client rate limits
3. Accepts submissions into GitHub releases and tracking issues
4. Proxies asset downloads from allow-listed GitHub hosts

Usage:
    uvicorn main:app --host 0.0.0.0 --port 8000
"""

import os
from contextlib import asynccontextmanager
from typing import Optional, Tuple

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from __version__ import __version__, BUILD_DATE, SERVICE_NAME, USER_AGENT
from core.config import DOWNLOADS, GITHUB, TIMEOUTS, EdgeConfig, get_config
from core.errors import EdgeError
from core.logging import configure_logging, get_logger
from infrastructure import (
    CaptchaVerifier,
    GitHubClient,
    KeyValueStore,
    MemoryKeyValueStore,
    PostgresKeyValueStore,
)
from repositories import CounterRepository, RateLimitRepository
from repositories.database import close_pool, init_pool
from services import (
    CatalogService,
    DownloadService,
    InteractionService,
    SubmissionService,
)
from api import EdgeMiddleware, router, set_services
from health import (
    CatalogSourceCheck,
    KeyValueStoreCheck,
    health_router,
    set_health_checks,
)

configure_logging(
    level=os.environ.get("LOG_LEVEL", "INFO"),
    json_output=os.environ.get("LOG_FORMAT", "").lower() == "json",
)
logger = get_logger(__name__)


async def open_stores(config: EdgeConfig) -> Tuple[KeyValueStore, KeyValueStore]:
    """Counter store and rate-limit store for the configured backend."""
    if config.store_backend == "memory":
        logger.warning("Using in-memory stores; counters reset on restart")
        return MemoryKeyValueStore(), MemoryKeyValueStore()

    if config.store_backend == "postgres":
        pool = await init_pool()
        counts = PostgresKeyValueStore(pool, namespace="counts")
        limits = PostgresKeyValueStore(pool, namespace="ratelimit")
        await counts.ensure_schema()
        return counts, limits

    raise ValueError(f"Unknown STORE_BACKEND: {config.store_backend}")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Initializes clients and services on startup, cleans up on shutdown.
    """
    config: EdgeConfig = app.state.config
    logger.info(
        f"Starting {SERVICE_NAME} v{__version__} (Build {BUILD_DATE}) "
        f"for {config.gh_owner}/{config.gh_repo}, store={config.store_backend}"
    )

    http = httpx.AsyncClient(
        timeout=TIMEOUTS.api,
        headers={"user-agent": USER_AGENT},
    )
    counts, limits = await open_stores(config)

    github = GitHubClient(
        http,
        owner=config.gh_owner,
        repo=config.gh_repo,
        token=config.gh_token,
        branch=config.gh_branch,
        catalog_path=config.catalog_path,
    )
    captcha = CaptchaVerifier(http, secret=config.hcaptcha_secret)
    if not captcha.enabled:
        logger.warning("HCAPTCHA_SECRET not set - captcha verification disabled")

    counter_repo = CounterRepository(counts)
    catalog_service = CatalogService(
        github, counter_repo, cache_seconds=config.catalog_cache_seconds
    )

    set_services(
        catalog_service=catalog_service,
        interaction_service=InteractionService(counter_repo, RateLimitRepository(limits)),
        download_service=DownloadService(http, counter_repo, DOWNLOADS.allowed_hosts),
        submission_service=SubmissionService(
            github, captcha, max_file_bytes=config.max_file_bytes
        ),
    )
    set_health_checks([
        KeyValueStoreCheck("counter_store", counts),
        KeyValueStoreCheck("rate_limit_store", limits),
        CatalogSourceCheck(catalog_service),
    ])
    logger.info(f"Services initialized (release prefix {GITHUB.release_tag_prefix})")

    yield

    logger.info(f"Shutting down {SERVICE_NAME}...")
    set_services(None, None, None, None)
    set_health_checks([])
    await http.aclose()
    await counts.close()
    await limits.close()
    await close_pool()
    logger.info(f"{SERVICE_NAME} stopped")


# ============================================================================
# ERROR ENVELOPE
# ============================================================================

async def edge_error_handler(request: Request, exc: EdgeError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"ok": False, "error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"ok": False, "error": "Invalid request"})


def create_app(config: Optional[EdgeConfig] = None) -> FastAPI:
    """Build the application. ``config`` defaults to the environment."""
    config = config or get_config()

    app = FastAPI(
        title="SRM Edge API",
        description="Community content catalog, interactions, downloads and submissions",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = config

    app.middleware("http")(EdgeMiddleware(config.origin_patterns))

    app.add_exception_handler(EdgeError, edge_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)

    # Health check routes (/livez, /readyz, /health)
    app.include_router(health_router)

    app.include_router(router)

    @app.get("/", include_in_schema=False)
    async def root():
        return {
            "service": SERVICE_NAME,
            "version": __version__,
            "build_date": BUILD_DATE,
            "status": "running",
            "docs": "/docs",
        }

    return app


app = create_app()


# ============================================================================
# MAIN ENTRY POINT
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", "8000"))

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=os.environ.get("RELOAD", "false").lower() == "true",
    )

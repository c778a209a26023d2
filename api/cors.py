# ============================================================================
# CORS AND REQUEST CONTEXT MIDDLEWARE
# ============================================================================
# STATUS: Core - HTTP middleware
# PURPOSE: Per-request CORS headers, preflight, log context, 500 fallback
# CREATED: 07 SEP 2026
# ============================================================================
"""
CORS and request context

Every response, errors and preflights included, carries the same four
CORS headers. The allow-origin value echoes the request origin when it
matches the configured allow-list (``*``, an exact origin, or a pattern
with ``*`` wildcards) and is ``*`` otherwise.

The middleware also wraps each request in a log context (request id,
client address) and turns any exception that escaped the route handlers
into a 500 JSON body.
"""

import re
import uuid
from typing import Dict, Iterable, List, Optional

from fastapi import Request
from fastapi.responses import JSONResponse, Response

from core.config import ANONYMOUS_CLIENT
from core.logging import get_logger, log_context

logger = get_logger(__name__)

ALLOW_HEADERS = "authorization,content-type"
ALLOW_METHODS = "GET,POST,OPTIONS"
MAX_AGE = "600"


def client_identity(request: Request) -> str:
    """
    Client address used for rate limiting.

    ``cf-connecting-ip`` when present, else the first ``x-forwarded-for``
    entry, else the anonymous placeholder.
    """
    ip = (request.headers.get("cf-connecting-ip") or "").strip()
    if ip:
        return ip
    forwarded = request.headers.get("x-forwarded-for") or ""
    first = forwarded.split(",")[0].strip()
    return first or ANONYMOUS_CLIENT


def _compile(pattern: str) -> "re.Pattern[str]":
    return re.compile("^" + ".*".join(re.escape(part) for part in pattern.split("*")) + "$")


def origin_allowed(origin: Optional[str], patterns: Iterable[str]) -> bool:
    if not origin:
        return False
    for pattern in patterns:
        if pattern == "*" or pattern == origin:
            return True
        if "*" in pattern and _compile(pattern).match(origin):
            return True
    return False


def cors_headers(origin: Optional[str], patterns: Iterable[str]) -> Dict[str, str]:
    """The CORS header set for one request."""
    return {
        "access-control-allow-origin": origin if origin_allowed(origin, patterns) else "*",
        "access-control-allow-headers": ALLOW_HEADERS,
        "access-control-allow-methods": ALLOW_METHODS,
        "access-control-max-age": MAX_AGE,
    }


class EdgeMiddleware:
    """
    HTTP middleware, registered with ``app.middleware("http")``.

    Args:
        origin_patterns: allow-list entries from config
    """

    def __init__(self, origin_patterns: List[str]):
        self.origin_patterns = list(origin_patterns) or ["*"]

    async def __call__(self, request: Request, call_next) -> Response:
        headers = cors_headers(request.headers.get("origin"), self.origin_patterns)

        if request.method == "OPTIONS":
            return Response(status_code=204, headers=headers)

        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex[:12]
        with log_context(request_id=request_id, client_ip=client_identity(request)):
            try:
                response = await call_next(request)
            except Exception as e:
                logger.exception(f"Unhandled error on {request.method} {request.url.path}: {e}")
                response = JSONResponse(status_code=500, content={"ok": False, "error": str(e)})

        response.headers.update(headers)
        return response


__all__ = [
    "ALLOW_HEADERS",
    "ALLOW_METHODS",
    "MAX_AGE",
    "EdgeMiddleware",
    "client_identity",
    "cors_headers",
    "origin_allowed",
]

# ============================================================================
# API MODULE
# ============================================================================
# STATUS: Core - HTTP surface
# PURPOSE: FastAPI router, middleware and response schemas
# CREATED: 07 SEP 2026
# ============================================================================
"""
API Module

FastAPI routes and request middleware for the edge API.
"""

from .routes import router, set_services
from .cors import EdgeMiddleware, client_identity, cors_headers

__all__ = [
    "router",
    "set_services",
    "EdgeMiddleware",
    "client_identity",
    "cors_headers",
]

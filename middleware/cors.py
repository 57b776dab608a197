"""CORS middleware configuration for FastMCP server."""

import os

from starlette.middleware import Middleware
from starlette.middleware.cors import CORSMiddleware

MCP_INSPECTOR_ORIGIN = "http://localhost:6274"


def allowed_origins() -> list[str]:
    """MCP Inspector plus any comma-separated origins in CORS_ALLOW_ORIGINS."""
    extra = os.getenv("CORS_ALLOW_ORIGINS", "")
    origins = [MCP_INSPECTOR_ORIGIN]
    origins.extend(o.strip() for o in extra.split(",") if o.strip() and o.strip() not in origins)
    return origins


def get_cors_middleware() -> Middleware:
    """
    Create and return CORS middleware configuration.

    Returns:
        Middleware: Configured CORS middleware for FastMCP server
    """
    return Middleware(
        CORSMiddleware,
        allow_origins=allowed_origins(),
        allow_methods=["POST", "OPTIONS", "GET"],
        allow_headers=["*"],
        expose_headers=["Mcp-Session-Id"],
        allow_credentials=True,
    )

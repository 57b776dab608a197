"""Starlette middleware for the MCP HTTP app."""

from middleware.cors import get_cors_middleware

__all__ = ["get_cors_middleware"]

"""JSON response envelopes shared by all tools."""

from typing import Any


def success_response(**data: Any) -> dict[str, Any]:
    """Build a success envelope: {"success": True, **data}."""
    return {"success": True, **data}


def error_response(error: str, **context: Any) -> dict[str, Any]:
    """
    Build an error envelope.

    Args:
        error: Human-readable error message.
        **context: Extra fields identifying what the failed call operated on.

    Returns:
        {"success": False, "error": error, **context}
    """
    return {"success": False, "error": error, **context}

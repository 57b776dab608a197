"""Langfuse client utility."""

import logging

from langfuse import Langfuse

from util.config import get_secret_setting

logger = logging.getLogger(__name__)

_langfuse_client: Langfuse | None = None
_initialized: bool = False


def get_langfuse() -> Langfuse | None:
    """
    Get the Langfuse client instance.

    Returns None if Langfuse fails to initialize (e.g., missing credentials).
    Uses lazy initialization with caching.
    """
    global _langfuse_client, _initialized

    if _initialized:
        return _langfuse_client

    try:
        secret_key = get_secret_setting("LANGFUSE_SECRET_KEY", "langfuse-secret-key")
        _langfuse_client = Langfuse(secret_key=secret_key) if secret_key else Langfuse()
        _initialized = True
    except Exception as e:
        logger.warning("Failed to initialize Langfuse: %s", e)
        _langfuse_client = None
        _initialized = True

    return _langfuse_client


def tag_error(error_type: str, message: str, **metadata) -> None:
    """Tag the current trace as failed, if tracing is available."""
    client = get_langfuse()
    if client is None:
        return
    try:
        client.update_current_trace(
            tags=["error", error_type],
            metadata={
                "error_type": error_type,
                "message": message,
                "success": False,
                **metadata,
            },
        )
    except Exception as e:
        logger.debug("Could not update Langfuse trace: %s", e)


def flush_langfuse() -> None:
    """Flush any pending Langfuse events."""
    if _langfuse_client:
        _langfuse_client.flush()


def _reset():
    """Forget the cached client (for testing only)."""
    global _langfuse_client, _initialized
    _langfuse_client = None
    _initialized = False

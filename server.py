"""MCP server exposing every tool family over stdio or streamable HTTP."""

import os
import sys
import logging
import uvicorn
from dotenv import load_dotenv
from fastmcp import FastMCP
from loader import load_tools_from_directory
from middleware import get_cors_middleware
from tools.filesystem.tool import configure as configure_filesystem
from util.langfuse import flush_langfuse

load_dotenv()

# Logs go to stderr; stdout carries the stdio transport
logger = logging.getLogger(__name__)
logging.basicConfig(level=os.getenv("LOG_LEVEL", "DEBUG").upper(), stream=sys.stderr)

HOST = os.getenv("MCP_HOST", "127.0.0.1")
PORT = int(os.getenv("MCP_PORT", "5001"))
MODES = ("stdio", "http", "sse")

mcp = FastMCP("zipe-mcps")

cors = get_cors_middleware()

try:
    result = load_tools_from_directory(mcp)
    logger.info(
        "Loaded %d tools (%d failed)", len(result["loaded"]), len(result["failed"])
    )
except Exception as e:
    logger.error("Failed to load tools: %s", e)
    raise

app = mcp.http_app(path="/mcp", middleware=[cors])


def main():
    """
    Run the server.

    Usage: server.py [stdio|http|sse] [allowed_dir ...]

    The directories after the mode are the roots the filesystem tools may
    access; without them FILESYSTEM_ALLOWED_PATHS is used.
    """
    mode = sys.argv[1] if len(sys.argv) > 1 else "http"
    if mode not in MODES:
        raise ValueError(f"Unknown mode: {mode}")

    configure_filesystem(sys.argv[2:])

    try:
        if mode == "stdio":
            print("Running MCP in stdio mode...", file=sys.stderr)
            mcp.run()
        else:
            print("Running MCP over HTTP streaming...")
            uvicorn.run(app, host=HOST, port=PORT)
    finally:
        flush_langfuse()


if __name__ == "__main__":
    main()

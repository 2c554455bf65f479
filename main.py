"""
Command line entry point for the Perplexity code search MCP server.

Loads API keys from environment variables (via `.env`), builds the
Perplexity configuration and serves the `search` tool over stdio.
"""

import os
import sys
import logging
from dotenv import load_dotenv


from agents.perplexity_client import PerplexityConfig
from mcp_servers.perplexity_server import run_server

# --- Logging configuration ---
# stdout carries the MCP protocol, so log records go to stderr.
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


def main() -> int:
    """Start the MCP server; returns the process exit status."""
    load_dotenv()

    try:
        config = PerplexityConfig.from_env()
    except EnvironmentError as exc:
        logger.error("Failed to start server: %s", exc)
        return 1

    try:
        run_server(config)
    except Exception as exc:
        logger.exception("Unhandled error: %s", exc)
        return 1

    logger.info("Server stopped. Goodbye!")
    return 0


if __name__ == "__main__":
    sys.exit(main())

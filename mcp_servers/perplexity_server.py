"""
MCP server exposing Perplexity-backed coding help as a single `search` tool.

Run it with:

    python main.py

Make sure `PERPLEXITY_API_KEY` is set in your environment (or `.env`). The
server speaks MCP over stdio, so all logging goes to stderr.
"""

from __future__ import annotations

import logging
from typing import Annotated, Optional

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from pydantic import Field

from agents.perplexity_client import PerplexityClient, PerplexityConfig
from agents.search_handler import SEARCH_TOOL_NAME, SearchHandler

logger = logging.getLogger(__name__)

SERVER_NAME = "perplexity-server"
SERVER_VERSION = "0.1.0"


def create_server(handler: SearchHandler) -> FastMCP:
    app = FastMCP(name=SERVER_NAME, version=SERVER_VERSION)

    @app.tool(name=SEARCH_TOOL_NAME, description="Search Perplexity for coding help")
    async def search(
        query: Annotated[str, Field(description="The error or coding question to analyze")],
        code: Annotated[
            Optional[str], Field(description="Code snippet to analyze (optional)")
        ] = None,
        language: Annotated[
            str, Field(description="Programming language of the code snippet (optional)")
        ] = "auto",
    ) -> str:
        arguments = {"query": query, "language": language}
        if code is not None:
            arguments["code"] = code
        result = await handler.dispatch(SEARCH_TOOL_NAME, arguments)
        if result.is_error:
            # FastMCP turns ToolError into an isError result carrying this text.
            raise ToolError(result.text)
        return result.text

    return app


def run_server(config: PerplexityConfig) -> None:
    client = PerplexityClient(config=config)
    app = create_server(SearchHandler(client))
    logger.info("Perplexity MCP server running on stdio")
    try:
        app.run(transport="stdio")
    except KeyboardInterrupt:
        logger.info("Shutting down Perplexity MCP server.")
    finally:
        client.close()

"""SearchHandler: answers one `search` tool invocation."""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Protocol

from mcp.shared.exceptions import McpError
from mcp.types import INVALID_PARAMS, METHOD_NOT_FOUND, ErrorData
from pydantic import ValidationError

from domain.code_patterns import analyze_code, render_canned_report
from domain.report_formatter import build_sections, format_report
from domain.search import SearchRequest, SearchResult

from .perplexity_client import CompletionResult, PerplexityAPIError
from .search_prompts import SYSTEM_PROMPT, search_prompt

logger = logging.getLogger(__name__)

SEARCH_TOOL_NAME = "search"


class CompletionClient(Protocol):
    async def complete(self, prompt: str, *, system_prompt: str) -> CompletionResult: ...


class SearchHandler:
    """Routes a tool call to the canned analyzer or to Perplexity and formats the answer."""

    def __init__(self, client: CompletionClient) -> None:
        self._client = client

    async def dispatch(self, name: str, arguments: Optional[Dict[str, Any]]) -> SearchResult:
        """Validate a tool call and run it.

        Unknown tools raise ``METHOD_NOT_FOUND`` and bad arguments raise
        ``INVALID_PARAMS``. Over stdio FastMCP reports any exception raised
        by a tool as an ``isError`` result, so callers there see only the
        message, not the code.
        """
        if name != SEARCH_TOOL_NAME:
            raise McpError(ErrorData(code=METHOD_NOT_FOUND, message=f"Unknown tool: {name}"))
        try:
            request = SearchRequest.model_validate(arguments or {})
        except ValidationError as exc:
            raise McpError(ErrorData(code=INVALID_PARAMS, message=_invalid_argument(exc))) from exc
        return await self.search(request)

    async def search(self, request: SearchRequest) -> SearchResult:
        logger.info("SearchHandler processing query: %s", request.query)

        if request.code:
            analysis = analyze_code(request.code)
            if analysis is not None:
                logger.info("Snippet matched a canned pattern; skipping Perplexity.")
                return SearchResult(
                    text=render_canned_report(
                        code=request.code,
                        analysis=analysis,
                        language=request.language,
                    )
                )

        prompt = search_prompt(query=request.query, code=request.code, language=request.language)
        try:
            completion = await self._client.complete(prompt, system_prompt=SYSTEM_PROMPT)
        except PerplexityAPIError as exc:
            logger.warning("Perplexity call failed: %s", exc)
            return SearchResult(text=f"Perplexity API error: {exc}", is_error=True)

        logger.info("Received %d characters from Perplexity.", len(completion.text))
        sections = build_sections(completion.text, request.query, request.code)
        return SearchResult(text=format_report(sections, request.language))


def _invalid_argument(exc: ValidationError) -> str:
    errors = exc.errors()
    field = str(errors[0]["loc"][0]) if errors and errors[0].get("loc") else "arguments"
    if field == "query":
        return "Argument 'query' is required."
    return f"Argument '{field}' is invalid."

import pytest
from fastmcp import Client

from agents.perplexity_client import EmptyCompletionError
from mcp_servers.perplexity_server import SERVER_NAME, create_server


@pytest.mark.asyncio
async def test_server_advertises_only_search(make_handler) -> None:
    handler, _ = make_handler()
    app = create_server(handler)

    async with Client(app) as client:
        tools = await client.list_tools()

    assert app.name == SERVER_NAME
    assert [tool.name for tool in tools] == ["search"]
    schema = tools[0].inputSchema
    assert tools[0].description == "Search Perplexity for coding help"
    assert schema["required"] == ["query"]
    assert schema["properties"]["language"]["default"] == "auto"
    assert set(schema["properties"]) == {"query", "code", "language"}


@pytest.mark.asyncio
async def test_search_returns_formatted_report_as_text(make_handler) -> None:
    handler, stub = make_handler(text="• Technical Cause: mixed types\n")
    app = create_server(handler)

    async with Client(app) as client:
        result = await client.call_tool_mcp("search", {"query": "why"})

    assert not result.isError
    assert result.content[0].text.startswith("Root Cause Analysis\n----------------\n")
    assert "• Technical Cause: mixed types" in result.content[0].text
    assert len(stub.calls) == 1


@pytest.mark.asyncio
async def test_upstream_failure_is_an_error_envelope(make_handler) -> None:
    handler, _ = make_handler(error=EmptyCompletionError("No analysis received from Perplexity"))
    app = create_server(handler)

    async with Client(app) as client:
        result = await client.call_tool_mcp("search", {"query": "why does 'a'+1 fail"})

    assert result.isError
    assert "Perplexity API error: No analysis received from Perplexity" in result.content[0].text


@pytest.mark.asyncio
async def test_unknown_tool_is_rejected_before_the_handler(make_handler) -> None:
    handler, stub = make_handler(text="Technical Cause: x")
    app = create_server(handler)

    async with Client(app) as client:
        result = await client.call_tool_mcp("lookup", {"query": "why"})

    assert result.isError
    assert stub.calls == []


@pytest.mark.asyncio
async def test_empty_query_reports_short_argument_error(make_handler) -> None:
    handler, stub = make_handler(text="Technical Cause: x")
    app = create_server(handler)

    async with Client(app) as client:
        result = await client.call_tool_mcp("search", {"query": ""})

    assert result.isError
    assert "Argument 'query' is required." in result.content[0].text
    assert "validation error" not in result.content[0].text
    assert stub.calls == []

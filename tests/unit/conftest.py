"""Shared fixtures for unit tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, List, Optional

import pytest
import requests
from requests.adapters import BaseAdapter

from agents.perplexity_client import CompletionResult, PerplexityClient, PerplexityConfig
from agents.search_handler import SearchHandler

DATA_DIR = Path(__file__).parent / "data"


class StubCompletionClient:
    """Completion client that records prompts and replays a canned answer."""

    def __init__(self, text: str = "", error: Optional[Exception] = None) -> None:
        self.text = text
        self.error = error
        self.calls: List[str] = []

    async def complete(self, prompt: str, *, system_prompt: str) -> CompletionResult:
        self.calls.append(prompt)
        if self.error is not None:
            raise self.error
        return CompletionResult(text=self.text)


class StubAdapter(BaseAdapter):
    """Transport adapter that answers every request with one JSON body or error."""

    def __init__(self, body: Any = None, status: int = 200, error: Optional[Exception] = None) -> None:
        super().__init__()
        self.body = body
        self.status = status
        self.error = error
        self.requests: List[requests.PreparedRequest] = []

    def send(self, request, **kwargs):
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        response = requests.Response()
        response.status_code = self.status
        response._content = json.dumps(self.body).encode("utf-8")
        response.headers["Content-Type"] = "application/json"
        response.encoding = "utf-8"
        response.url = request.url
        response.request = request
        return response

    def close(self) -> None:
        pass


@pytest.fixture
def make_handler():
    """Build a SearchHandler wired to a StubCompletionClient."""

    def factory(text: str = "", error: Optional[Exception] = None):
        client = StubCompletionClient(text=text, error=error)
        return SearchHandler(client), client

    return factory


@pytest.fixture
def config() -> PerplexityConfig:
    return PerplexityConfig(api_key="test-key", base_url="https://api.example.test")


@pytest.fixture
def mount_adapter(config: PerplexityConfig):
    """Build a PerplexityClient whose session is served by a StubAdapter."""

    clients: List[PerplexityClient] = []

    def factory(body: Any = None, status: int = 200, error: Optional[Exception] = None):
        client = PerplexityClient(config=config)
        adapter = StubAdapter(body=body, status=status, error=error)
        client.session.mount("https://", adapter)
        clients.append(client)
        return client, adapter

    yield factory
    for client in clients:
        client.close()


@pytest.fixture
def canned_price_report() -> str:
    """Expected canned report for ``total = total + item['price']`` in language ``auto``."""
    text = (DATA_DIR / "canned_price_report.txt").read_text(encoding="utf-8")
    return text.removesuffix("\n")

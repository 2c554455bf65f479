"""
Thin client for the Perplexity chat-completions API.

One POST per call, no retries and no explicit timeout. The blocking
`requests` call runs in a worker thread so the MCP event loop stays free
while the answer is generated.
"""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.perplexity.ai"
DEFAULT_MODEL = "llama-3.1-sonar-huge-128k-online"


class PerplexityAPIError(RuntimeError):
    """Raised when the Perplexity API cannot be reached or returns an error."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class EmptyCompletionError(PerplexityAPIError):
    """Raised when the API answers without any usable completion."""


@dataclass(slots=True, frozen=True)
class PerplexityConfig:
    """Connection details for the Perplexity API."""

    api_key: str
    base_url: str = DEFAULT_BASE_URL
    model: str = DEFAULT_MODEL

    @classmethod
    def from_env(cls) -> "PerplexityConfig":
        api_key = os.getenv("PERPLEXITY_API_KEY")
        if not api_key:
            raise EnvironmentError("PERPLEXITY_API_KEY environment variable is required")
        return cls(
            api_key=api_key,
            base_url=os.getenv("PERPLEXITY_API_BASE_URL", DEFAULT_BASE_URL),
            model=os.getenv("PERPLEXITY_MODEL", DEFAULT_MODEL),
        )


@dataclass(slots=True)
class CompletionResult:
    text: str
    model: Optional[str] = None
    completion_id: Optional[str] = None


class PerplexityClient:
    """Issues chat-completion requests on a shared, pre-authorised session."""

    def __init__(self, *, config: PerplexityConfig) -> None:
        self._config = config
        self._session = requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {config.api_key}",
                "Content-Type": "application/json",
            }
        )
        self._url = f"{config.base_url.rstrip('/')}/chat/completions"
        logger.info("Initialising PerplexityClient for %s (model %s)", self._url, config.model)

    @property
    def session(self) -> requests.Session:
        return self._session

    async def complete(self, prompt: str, *, system_prompt: str) -> CompletionResult:
        if not prompt or not prompt.strip():
            raise ValueError("Prompt must be a non-empty string.")
        payload = {
            "model": self._config.model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
        }
        data = await asyncio.to_thread(self._post, payload)
        return self._first_choice(data)

    def close(self) -> None:
        self._session.close()

    def _post(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        logger.debug("Perplexity request payload: %s", payload)
        try:
            response = self._session.post(self._url, json=payload)
            logger.info("Perplexity response status: %s", response.status_code)
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as exc:
            logger.error("Perplexity request failed: %s", exc)
            status = exc.response.status_code if exc.response is not None else None
            raise PerplexityAPIError(_error_detail(exc), status_code=status) from exc
        logger.debug("Perplexity response payload: %s", data)
        return data

    @staticmethod
    def _first_choice(data: Any) -> CompletionResult:
        choices = data.get("choices") if isinstance(data, dict) else None
        content = None
        if choices and isinstance(choices, list):
            first = choices[0] if isinstance(choices[0], dict) else {}
            message = first.get("message")
            content = message.get("content") if isinstance(message, dict) else None
        if not content:
            raise EmptyCompletionError("No analysis received from Perplexity")
        return CompletionResult(
            text=content,
            model=data.get("model"),
            completion_id=data.get("id"),
        )


def _error_detail(exc: requests.exceptions.RequestException) -> str:
    """Prefer the API's own error message over the transport's."""
    response = exc.response
    if response is not None:
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict) and isinstance(body.get("error"), dict):
            message = body["error"].get("message")
            if message:
                return str(message)
    return str(exc)

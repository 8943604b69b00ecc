"""Completion client: the single seam between the pipeline and the service.

Strategy:
- One request per generation, no retry and no fallback to the other
  endpoint; failures propagate to the caller immediately.
- Credentials come from ``CompletionConfig``, injected at construction; a
  missing key fails here, before any network call is possible.
"""

from __future__ import annotations

import logging
from typing import Literal

import httpx

from settlesmart.agent.prompts import PromptPayload
from settlesmart.config import CompletionConfig, get_completion_config
from settlesmart.llm.base import LLMAdapter
from settlesmart.llm.chat import ChatCompletionsAdapter
from settlesmart.llm.errors import ConfigurationError
from settlesmart.llm.responses import ResponsesAdapter


logger = logging.getLogger(__name__)

ADAPTERS: dict[str, type[LLMAdapter]] = {
    "chat": ChatCompletionsAdapter,
    "responses": ResponsesAdapter,
}


class CompletionClient:
    """Sends a rendered prompt to the configured endpoint and returns raw text."""

    def __init__(
        self,
        config: CompletionConfig,
        endpoint: Literal["chat", "responses"] | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        if not config.api_key:
            logger.error("Missing OPENAI_API_KEY in environment")
            raise ConfigurationError("OpenAI API key not configured")

        self.endpoint = endpoint or config.endpoint
        if self.endpoint not in ADAPTERS:
            raise ValueError(f"Unknown completion endpoint: {self.endpoint}")

        self._adapter = ADAPTERS[self.endpoint](config, http_client=http_client)

    @property
    def adapter(self) -> LLMAdapter:
        return self._adapter

    async def complete(self, payload: PromptPayload) -> str:
        """Return the raw completion text for ``payload``.

        Raises:
            UpstreamError: non-success status from the service
            TransportError: the call could not complete
        """
        logger.info(
            f"Requesting plan via {self.endpoint}/{self._adapter.default_model} "
            f"(contract={payload.contract.value})"
        )
        response = await self._adapter.complete(payload)
        return response.content

    async def close(self) -> None:
        await self._adapter.close()


# Process-wide instance
_client: CompletionClient | None = None


def get_completion_client() -> CompletionClient:
    """Get the global completion client, creating it on first use.

    Raises ``ConfigurationError`` on every call while the key is missing.
    """
    global _client
    if _client is None:
        _client = CompletionClient(get_completion_config())
    return _client


async def close_completion_client() -> None:
    """Close the global completion client, if one was created."""
    global _client
    if _client is not None:
        await _client.close()
        _client = None

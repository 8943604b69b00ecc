"""Abstract base class for completion endpoint adapters."""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from typing import Any

import httpx

from settlesmart.agent.prompts import PromptPayload
from settlesmart.config import CompletionConfig
from settlesmart.llm.envelope import detect_envelope, extract_text
from settlesmart.llm.errors import ConfigurationError, TransportError, UpstreamError
from settlesmart.schemas import LLMResponse


logger = logging.getLogger(__name__)

# Upstream bodies are logged, never returned; keep log lines bounded
MAX_LOGGED_BODY = 2000


class LLMAdapter(ABC):
    """Base class for OpenAI-compatible endpoint adapters.

    Both endpoint integrations (chat completions and structured responses)
    share authentication, transport error mapping and envelope extraction;
    subclasses only decide the request path and body.
    """

    def __init__(
        self,
        config: CompletionConfig,
        http_client: httpx.AsyncClient | None = None,
    ):
        if not config.api_key:
            raise ConfigurationError("OpenAI API key not configured")

        self.config = config
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            base_url=config.base_url,
            timeout=config.timeout,
        )

    @property
    @abstractmethod
    def endpoint(self) -> str:
        """Return the endpoint name (e.g., 'chat', 'responses')."""
        ...

    @property
    @abstractmethod
    def path(self) -> str:
        """Request path relative to the base URL."""
        ...

    @property
    def default_model(self) -> str:
        return self.config.model

    @abstractmethod
    def _build_request(self, payload: PromptPayload, model: str) -> dict[str, Any]:
        """Build the API request body for this endpoint."""
        ...

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json",
        }

    async def complete(
        self,
        payload: PromptPayload,
        model: str | None = None,
    ) -> LLMResponse:
        """Send one request and return the first completion text.

        Raises:
            UpstreamError: the service answered with a non-2xx status
            TransportError: the request did not complete
        """
        model = model or self.default_model
        body = self._build_request(payload, model)

        start_time = time.perf_counter()

        try:
            response = await self._client.post(self.path, json=body, headers=self._headers())
        except httpx.HTTPError as e:
            logger.error(f"Transport error calling {self.endpoint}: {e!r}")
            raise TransportError(str(e) or type(e).__name__) from e

        latency_ms = int((time.perf_counter() - start_time) * 1000)

        if not response.is_success:
            text = response.text
            logger.error(
                f"Completion service error ({self.endpoint}) "
                f"HTTP {response.status_code}: {text[:MAX_LOGGED_BODY]}"
            )
            raise UpstreamError(response.status_code, text)

        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Undecodable response envelope from {self.endpoint}: {e}")
            raise TransportError("Response envelope is not JSON") from e

        envelope = detect_envelope(data)
        if envelope is None:
            logger.warning(f"No completion text in {self.endpoint} response, using empty object")

        logger.info(f"{self.endpoint}/{model} answered in {latency_ms}ms (envelope={envelope})")

        # Only the completion text decides the outcome; metadata of the wrong
        # type is dropped
        envelope_data = data if isinstance(data, dict) else {}
        reported_model = envelope_data.get("model")
        usage = envelope_data.get("usage")

        return LLMResponse(
            content=extract_text(data),
            model=reported_model if isinstance(reported_model, str) and reported_model else model,
            endpoint=self.endpoint,
            usage=usage if isinstance(usage, dict) else {},
            latency_ms=latency_ms,
            raw_response=envelope_data or None,
        )

    async def close(self) -> None:
        """Close the HTTP client if this adapter created it."""
        if self._owns_client:
            await self._client.aclose()

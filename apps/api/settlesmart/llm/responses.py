"""Structured-responses adapter.

``POST /responses`` takes a single combined ``input`` instruction; the
output contract goes into ``text.format``.
"""

from __future__ import annotations

from typing import Any

from settlesmart.agent.prompts import PromptPayload
from settlesmart.llm.base import LLMAdapter


class ResponsesAdapter(LLMAdapter):
    """OpenAI-compatible structured responses endpoint."""

    @property
    def endpoint(self) -> str:
        return "responses"

    @property
    def path(self) -> str:
        return "/responses"

    @property
    def default_model(self) -> str:
        return self.config.responses_model

    def _build_request(self, payload: PromptPayload, model: str) -> dict[str, Any]:
        return {
            "model": model,
            "input": payload.combined,
            "text": {"format": payload.text_format()},
            "temperature": self.config.temperature,
            "max_output_tokens": self.config.max_tokens,
        }

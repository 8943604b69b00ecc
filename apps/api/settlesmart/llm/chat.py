"""Chat-completions adapter.

``POST /chat/completions`` with system + user messages and a
``response_format`` (``json_schema`` or ``json_object``).
"""

from __future__ import annotations

from typing import Any

from settlesmart.agent.prompts import PromptPayload
from settlesmart.llm.base import LLMAdapter


class ChatCompletionsAdapter(LLMAdapter):
    """OpenAI-compatible chat completions endpoint."""

    @property
    def endpoint(self) -> str:
        return "chat"

    @property
    def path(self) -> str:
        return "/chat/completions"

    @property
    def default_model(self) -> str:
        return self.config.chat_model

    def _build_request(self, payload: PromptPayload, model: str) -> dict[str, Any]:
        return {
            "model": model,
            "messages": [m.model_dump() for m in payload.messages()],
            "response_format": payload.response_format(),
            "temperature": self.config.temperature,
            "max_tokens": self.config.max_tokens,
        }

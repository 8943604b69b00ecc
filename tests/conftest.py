from __future__ import annotations

import json
from typing import Any, Callable, List, Optional

import httpx
import pytest

from settlesmart.agent.prompts import PromptPayload
from settlesmart.config import CompletionConfig
from settlesmart.llm.client import CompletionClient


def make_config(**overrides: Any) -> CompletionConfig:
    values = dict(
        api_key="sk-test",
        base_url="https://api.example.test/v1",
        endpoint="chat",
        chat_model="gpt-4o-mini",
        responses_model="gpt-4.1-mini",
        temperature=0.2,
        max_tokens=512,
        timeout=5.0,
    )
    values.update(overrides)
    return CompletionConfig(**values)


class RecordingTransport:
    """httpx handler that records requests and replies with a fixed response."""

    def __init__(self, responder: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: List[httpx.Request] = []
        self._responder = responder

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self._responder(request)

    def last_json(self) -> dict:
        return json.loads(self.requests[-1].content)

    def client(self, config: CompletionConfig) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=config.base_url,
            transport=httpx.MockTransport(self),
        )


def chat_envelope(content: Any) -> dict:
    return {
        "model": "gpt-4o-mini",
        "choices": [{"index": 0, "message": {"role": "assistant", "content": content}}],
        "usage": {"prompt_tokens": 10, "completion_tokens": 20},
    }


def responses_envelope(text: Any) -> dict:
    return {
        "model": "gpt-4.1-mini",
        "output": [
            {"type": "message", "content": [{"type": "output_text", "text": text}]}
        ],
    }


class FakeCompletionClient(CompletionClient):
    def __init__(self, payload: str = "{}", error: Optional[Exception] = None) -> None:
        # Bypass credential checks and adapter creation; only complete() is used.
        self.endpoint = "chat"
        self._payload = payload
        self._error = error
        self.calls: List[PromptPayload] = []

    async def complete(self, payload: PromptPayload) -> str:  # type: ignore[override]
        self.calls.append(payload)
        if self._error is not None:
            raise self._error
        return self._payload

    async def close(self) -> None:  # type: ignore[override]
        return None


SAMPLE_PLAN = {
    "weeks": [
        {
            "title": "Week 1",
            "items": [
                {"label": "Buy a local SIM", "daysOffset": 0, "category": "phone"},
                {"label": "Move 2FA to new number", "daysOffset": 2, "category": "phone"},
            ],
        },
        {
            "title": "Week 2",
            "items": [
                {"label": "Open a bank account", "daysOffset": 8, "category": "banking"},
                {"label": "Get proof of address", "daysOffset": 10, "category": "housing"},
            ],
        },
        {
            "title": "Week 3",
            "items": [
                {"label": "Apply for SSN", "daysOffset": 15, "category": "id"},
                {"label": "Enroll in health insurance", "daysOffset": 18, "category": "health"},
            ],
        },
    ],
    "countryNotes": "Carry your passport and I-94 to every appointment.",
}


@pytest.fixture
def sample_plan_json() -> str:
    return json.dumps(SAMPLE_PLAN)

"""Text extraction from completion response envelopes.

Two envelope shapes are known:
- structured responses: ``{"output": [{"content": [{"text": "..."}]}]}``
- chat completions:     ``{"choices": [{"message": {"content": "..."}}]}``

Extractors are tried in order and the first non-empty text wins. When
neither shape yields text the empty JSON object literal is returned, which
the plan normalizer turns into a degraded plan.
"""

from __future__ import annotations

from typing import Any, Callable


EMPTY_COMPLETION = "{}"


def _responses_text(data: dict[str, Any]) -> str | None:
    output = data.get("output")
    if not isinstance(output, list):
        return None
    for item in output:
        if not isinstance(item, dict) or not isinstance(item.get("content"), list):
            continue
        for part in item["content"]:
            if isinstance(part, dict):
                text = part.get("text")
                if isinstance(text, str) and text:
                    return text
    return None


def _chat_text(data: dict[str, Any]) -> str | None:
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    choice = choices[0]
    if not isinstance(choice, dict):
        return None
    message = choice.get("message")
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    if isinstance(content, str) and content:
        return content
    return None


ENVELOPE_EXTRACTORS: tuple[tuple[str, Callable[[dict[str, Any]], str | None]], ...] = (
    ("responses", _responses_text),
    ("chat", _chat_text),
)


def detect_envelope(data: Any) -> str | None:
    """Return the name of the first envelope shape that carries text."""
    if not isinstance(data, dict):
        return None
    for name, extract in ENVELOPE_EXTRACTORS:
        if extract(data):
            return name
    return None


def extract_text(data: Any) -> str:
    """Return the first non-empty completion text, or ``"{}"``."""
    if not isinstance(data, dict):
        return EMPTY_COMPLETION
    for _name, extract in ENVELOPE_EXTRACTORS:
        text = extract(data)
        if text:
            return text
    return EMPTY_COMPLETION

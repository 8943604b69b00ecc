"""Typed failures raised by the completion client.

Only ``public_message`` is ever shown to end users; status codes and
response bodies are kept on the exception for logging.
"""

from __future__ import annotations


class CompletionError(Exception):
    """Base class for failures that happen before a raw completion exists."""

    public_message = "Unexpected server error."


class ConfigurationError(CompletionError):
    """The completion service API key is not configured."""

    public_message = "Server is missing OpenAI API key."


class UpstreamError(CompletionError):
    """The service answered with a non-success status."""

    public_message = "OpenAI error from backend."

    def __init__(self, status_code: int, body: str = ""):
        super().__init__(f"Completion service returned HTTP {status_code}")
        self.status_code = status_code
        self.body = body


class TransportError(CompletionError):
    """The call could not complete (timeout, connection reset, bad envelope)."""

    public_message = "Could not reach the plan generation service."

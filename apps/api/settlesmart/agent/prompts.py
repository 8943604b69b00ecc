"""Prompt templates for relocation plan generation.

Two output contracts are supported:
- ``json_schema``: the instruction plus a formal JSON schema that the
  completion service enforces (preferred, stricter).
- ``json_object``: the instruction spells out the JSON shape and the service
  is only asked for "some JSON object" (fallback).

Everything in this module is pure: the same profile always yields the same
prompt.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from enum import Enum
from typing import Any

from settlesmart.schemas import LLMMessage, Profile


class OutputContract(str, Enum):
    """How the expected output shape is communicated to the service."""
    JSON_SCHEMA = "json_schema"
    JSON_OBJECT = "json_object"


# =============================================================================
# Categories & Schema
# =============================================================================

REQUIRED_CATEGORIES: tuple[str, ...] = (
    "Phone/SIM and 2FA",
    "Banking and payments",
    "Housing and address proof",
    "Local IDs (SSN, SIN, national ID, etc.) where applicable",
    "Health insurance and care",
    "School/university or employer onboarding if relevant",
    "Taxes and basic legal registrations",
)

SCHEMA_NAME = "RelocationPlan"

PLAN_JSON_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "weeks": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "title": {"type": "string"},
                    "items": {
                        "type": "array",
                        "items": {
                            "type": "object",
                            "properties": {
                                "label": {"type": "string"},
                                "daysOffset": {"type": "number"},
                                "category": {"type": "string"},
                            },
                            "required": ["label", "daysOffset"],
                        },
                    },
                },
                "required": ["title", "items"],
            },
        },
        "countryNotes": {"type": "string"},
    },
    "required": ["weeks"],
}


# =============================================================================
# Prompts
# =============================================================================

def _bullets(lines: tuple[str, ...]) -> str:
    return "\n".join(f"- {line}" for line in lines)


SYSTEM_PROMPT = """You are an immigration and relocation onboarding assistant.
You create practical 4 week checklists for newcomers that cover:

{categories}

Return JSON only. No prose, no extra text.
JSON shape:
{{
  "weeks": [
    {{ "title": "Week 1", "items": [ {{ "label": "...", "daysOffset": 0, "category": "phone" }} ] }},
    ...
  ],
  "countryNotes": "short practical tips for this corridor"
}}""".format(categories=_bullets(REQUIRED_CATEGORIES))


USER_PROMPT = """Phase: {phase}
From: {origin}
To: {destination}
Visa type: {visa_type}
Anchor date: {anchor_date}

Create a 4 week plan aligned to their first 30-60 days ({phase} arrival).
Use sensible daysOffset (0-30) relative to the anchor date.
Tasks must be clear and atomic, and each task label must be unique.
Add a short countryNotes paragraph with practical tips for the destination."""


COMBINED_PROMPT = """{system}

## User profile
{user}"""


# =============================================================================
# Payload
# =============================================================================

@dataclass(frozen=True)
class PromptPayload:
    """Rendered prompt plus the output contract to request."""
    system: str
    user: str
    contract: OutputContract
    schema_name: str = SCHEMA_NAME

    @property
    def combined(self) -> str:
        """Single instruction for endpoints that take one ``input`` string."""
        return COMBINED_PROMPT.format(system=self.system, user=self.user)

    @property
    def schema(self) -> dict[str, Any] | None:
        """A private copy of the plan schema; callers may mutate it."""
        if self.contract is OutputContract.JSON_SCHEMA:
            return copy.deepcopy(PLAN_JSON_SCHEMA)
        return None

    def messages(self) -> list[LLMMessage]:
        return [
            LLMMessage(role="system", content=self.system),
            LLMMessage(role="user", content=self.user),
        ]

    def response_format(self) -> dict[str, Any]:
        """``response_format`` for the chat-completions endpoint."""
        if self.contract is OutputContract.JSON_SCHEMA:
            return {
                "type": "json_schema",
                "json_schema": {"name": self.schema_name, "schema": self.schema},
            }
        return {"type": "json_object"}

    def text_format(self) -> dict[str, Any]:
        """``text.format`` for the structured-responses endpoint."""
        if self.contract is OutputContract.JSON_SCHEMA:
            return {
                "type": "json_schema",
                "name": self.schema_name,
                "schema": self.schema,
            }
        return {"type": "json_object"}


# =============================================================================
# Helper Functions
# =============================================================================

def format_user_prompt(profile: Profile) -> str:
    """Format the user prompt with the profile fields."""
    return USER_PROMPT.format(
        phase=profile.phase.value,
        origin=profile.origin,
        destination=profile.destination,
        visa_type=profile.visa_type.value,
        anchor_date=profile.anchor_date,
    )


def build_prompt(
    profile: Profile,
    contract: OutputContract | str = OutputContract.JSON_SCHEMA,
) -> PromptPayload:
    """Render the prompt payload for a validated profile."""
    return PromptPayload(
        system=SYSTEM_PROMPT,
        user=format_user_prompt(profile),
        contract=OutputContract(contract),
    )

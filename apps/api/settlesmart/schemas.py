"""Pydantic schemas for all pipeline I/O contracts.

These schemas define the strict contracts between:
- API endpoints and clients
- The completion service adapters
- The plan normalizer and the checklist projection

Wire names are camelCase (``visaType``, ``daysOffset``, ``countryNotes``);
Python attributes are snake_case.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterator, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# Enums
# =============================================================================

class Phase(str, Enum):
    """Whether the plan covers the weeks before or after arrival."""
    BEFORE = "before"
    AFTER = "after"


class VisaType(str, Enum):
    """Supported visa categories."""
    STUDENT = "student"
    WORK = "work"
    FAMILY = "family"
    STARTUP = "startup"


DEFAULT_PHASE = Phase.AFTER
DEFAULT_VISA_TYPE = VisaType.WORK


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


def _text(value: Any) -> str:
    """Lenient string coercion for model-produced fields."""
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


# =============================================================================
# Profile Schemas
# =============================================================================

class ProfileRequest(_CamelModel):
    """Raw request body for plan generation.

    Every field is optional and loosely typed; the profile validator
    coerces whatever arrives instead of rejecting it.
    """
    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        json_schema_extra={
            "example": {
                "phase": "after",
                "origin": "India",
                "destination": "United States",
                "visaType": "work",
                "anchorDate": "2026-09-01",
            }
        },
    )

    phase: Any = None
    origin: Any = None
    destination: Any = None
    visa_type: Any = Field(default=None, alias="visaType")
    anchor_date: Any = Field(default=None, alias="anchorDate")


class Profile(_CamelModel):
    """Validated relocation scenario. Built once per generation attempt."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    phase: Phase = DEFAULT_PHASE
    origin: str = ""
    destination: str = ""
    visa_type: VisaType = Field(default=DEFAULT_VISA_TYPE, alias="visaType")
    anchor_date: str = Field(default="", alias="anchorDate")


# =============================================================================
# Plan Schemas
# =============================================================================

class Task(_CamelModel):
    """Single checklist entry.

    ``id`` is assigned at normalization time from the task's position and is
    the key used for completion tracking; ``label`` is for display only.
    """
    id: str = Field(default="", description="Stable identifier, e.g. 'w1-t3'")
    label: str = Field(default="", description="Human-readable task text")
    days_offset: int | None = Field(
        default=None,
        alias="daysOffset",
        description="Advisory day offset from the anchor date (0-30)",
    )
    category: str | None = Field(default=None)

    @field_validator("id", "label", mode="before")
    @classmethod
    def _as_text(cls, value: Any) -> str:
        return _text(value)

    @field_validator("days_offset", mode="before")
    @classmethod
    def _as_offset(cls, value: Any) -> int | None:
        # Advisory only: unparseable offsets are dropped, out-of-range kept
        if value is None or isinstance(value, bool):
            return None
        try:
            return int(float(value))
        except (TypeError, ValueError, OverflowError):
            return None

    @field_validator("category", mode="before")
    @classmethod
    def _as_optional_text(cls, value: Any) -> str | None:
        return None if value is None else _text(value)


class Week(_CamelModel):
    """One week of the plan."""
    title: str = ""
    items: list[Task] = Field(default_factory=list)

    @field_validator("title", mode="before")
    @classmethod
    def _as_title(cls, value: Any) -> str:
        return _text(value)

    @field_validator("items", mode="before")
    @classmethod
    def _as_items(cls, value: Any) -> list[Any]:
        if not isinstance(value, list):
            return []
        # Bare strings (or other scalars) become the task label
        return [
            item if isinstance(item, (dict, Task)) else {"label": item}
            for item in value
        ]


class Plan(_CamelModel):
    """Normalized 4-week checklist returned by the pipeline."""
    weeks: list[Week] = Field(default_factory=list)
    country_notes: str = Field(default="", alias="countryNotes")
    degraded: bool = Field(default=False, exclude=True)

    @field_validator("weeks", mode="before")
    @classmethod
    def _as_weeks(cls, value: Any) -> list[Any]:
        if not isinstance(value, list):
            return []
        weeks: list[Any] = []
        # Non-object entries are skipped; untitled weeks are named by position
        for week in value:
            if isinstance(week, dict):
                if not week.get("title"):
                    week = {**week, "title": f"Week {len(weeks) + 1}"}
                weeks.append(week)
            elif isinstance(week, Week):
                weeks.append(week)
        return weeks

    @field_validator("country_notes", mode="before")
    @classmethod
    def _as_notes(cls, value: Any) -> str:
        return _text(value)

    def iter_tasks(self) -> Iterator[Task]:
        """Yield every task across all weeks, in order."""
        for week in self.weeks:
            yield from week.items

    def to_wire(self) -> dict[str, Any]:
        """Serialize with camelCase keys as returned over HTTP."""
        return self.model_dump(by_alias=True)


# =============================================================================
# Checklist Schemas
# =============================================================================

class ChecklistProgress(_CamelModel):
    """Derived progress for a plan and a caller-owned completion set."""
    done_count: int = Field(default=0, alias="doneCount")
    total_count: int = Field(default=0, alias="totalCount")
    percent: int = Field(default=0, ge=0, le=100)


class ProgressRequest(_CamelModel):
    """API request to compute checklist progress."""
    plan: Plan
    completed: dict[str, bool] = Field(default_factory=dict)


# =============================================================================
# API Response Schemas
# =============================================================================

class ErrorResponse(BaseModel):
    """Generic error body. Never carries upstream diagnostics."""
    error: str


# =============================================================================
# LLM Schemas
# =============================================================================

class LLMMessage(BaseModel):
    """A single message in an LLM conversation."""
    role: Literal["system", "user", "assistant"] = Field(...)
    content: str = Field(...)


class LLMResponse(BaseModel):
    """Response from the completion service."""
    content: str
    model: str
    endpoint: str
    usage: dict[str, Any] = Field(default_factory=dict)
    latency_ms: int | None = None
    raw_response: dict[str, Any] | None = None

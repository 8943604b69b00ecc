"""Profile validation.

Turns whatever the caller sent into a ``Profile``. Nothing here rejects
input: unknown ``phase`` / ``visaType`` values fall back to the defaults
(``after`` / ``work``) so that a plan can always be generated.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from enum import Enum
from typing import Any, Mapping, TypeVar

from settlesmart.schemas import (
    DEFAULT_PHASE,
    DEFAULT_VISA_TYPE,
    Phase,
    Profile,
    ProfileRequest,
    VisaType,
)


logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


def _coerce_choice(value: Any, choices: type[E], default: E, field: str) -> E:
    if isinstance(value, choices):
        return value
    if isinstance(value, str):
        token = value.strip().lower()
        for choice in choices:
            if choice.value == token:
                return choice
    logger.warning(f"Unrecognized {field} {value!r}, using {default.value!r}")
    return default


def _coerce_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _coerce_anchor_date(value: Any) -> str:
    """Return the anchor date as a ``YYYY-MM-DD`` token when it parses.

    Unparseable values are passed through as-is; no date arithmetic
    happens in the pipeline.
    """
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()

    token = _coerce_text(value)
    if not token:
        return ""
    try:
        return date.fromisoformat(token[:10]).isoformat()
    except ValueError:
        logger.warning(f"Anchor date {token!r} is not a calendar date, passing through")
        return token


def validate_profile(raw: ProfileRequest | Mapping[str, Any] | None) -> Profile:
    """Normalize a raw request into a ``Profile``. Never raises."""
    if raw is None:
        raw = ProfileRequest()
    elif not isinstance(raw, ProfileRequest):
        raw = ProfileRequest.model_validate(dict(raw))

    return Profile(
        phase=_coerce_choice(raw.phase, Phase, DEFAULT_PHASE, "phase"),
        origin=_coerce_text(raw.origin),
        destination=_coerce_text(raw.destination),
        visa_type=_coerce_choice(raw.visa_type, VisaType, DEFAULT_VISA_TYPE, "visaType"),
        anchor_date=_coerce_anchor_date(raw.anchor_date),
    )

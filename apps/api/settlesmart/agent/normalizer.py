"""Plan normalization.

``normalize_plan`` is total: for any input text it returns a ``Plan``.
Output that cannot be interpreted becomes the degraded plan (no weeks plus a
diagnostic ``countryNotes``). Otherwise the structure is passed through with
the lenient coercion the plan models apply; task fields are not range-checked.
"""

from __future__ import annotations

import json
import logging
import re
from collections import Counter
from typing import Any

from pydantic import ValidationError

from settlesmart.schemas import Plan


logger = logging.getLogger(__name__)

DEGRADED_NOTE = (
    "We could not parse the AI response. Please try again or contact support."
)

_FENCE_RE = re.compile(r"^```[a-zA-Z]*\s*\n?(.*?)\n?```$", re.S)


def degraded_plan(note: str = DEGRADED_NOTE) -> Plan:
    """The canonical empty-but-valid plan."""
    return Plan(weeks=[], country_notes=note, degraded=True)


def task_id(week_index: int, item_index: int) -> str:
    """Stable identifier for the task at a (0-based) position."""
    return f"w{week_index + 1}-t{item_index + 1}"


def _strip_fences(raw: str) -> str:
    """Remove a surrounding ```json ... ``` fence, if present."""
    s = raw.strip()
    m = _FENCE_RE.match(s)
    return m.group(1).strip() if m else s


def normalize_plan(raw: Any) -> Plan:
    """Turn a raw completion into a ``Plan``. Never raises."""
    text = raw if isinstance(raw, str) else ""

    try:
        data = json.loads(_strip_fences(text))
    except (ValueError, RecursionError) as e:
        logger.warning(f"Completion is not JSON ({e}); first 200 chars: {text[:200]!r}")
        return degraded_plan()

    if not isinstance(data, dict):
        logger.warning(f"Completion JSON is a {type(data).__name__}, not an object")
        return degraded_plan()

    if not isinstance(data.get("weeks"), list):
        logger.warning("Completion JSON has no usable 'weeks' list")
        return degraded_plan()

    # Field-level lenience lives on the models; "degraded" is never model-supplied
    data.pop("degraded", None)
    try:
        plan = Plan.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Completion JSON does not fit the plan shape: {e}")
        return degraded_plan()

    # Week positions count only object entries, so ids stay dense
    for wi, week in enumerate(plan.weeks):
        for ti, task in enumerate(week.items):
            task.id = task_id(wi, ti)

    duplicates = [
        label
        for label, count in Counter(t.label for t in plan.iter_tasks()).items()
        if count > 1
    ]
    if duplicates:
        logger.warning(f"Plan has duplicated task labels: {duplicates}")

    return plan

"""Checklist progress projection.

The completion set is owned by the caller (task key -> bool). Keys are task
ids; label keys from older clients are still honored.
"""

from __future__ import annotations

import math
from typing import Mapping, MutableMapping

from settlesmart.schemas import ChecklistProgress, Plan, Task


def is_done(task: Task, completed: Mapping[str, bool]) -> bool:
    if task.id and completed.get(task.id):
        return True
    return bool(task.label) and bool(completed.get(task.label))


def project(plan: Plan, completed: Mapping[str, bool] | None = None) -> ChecklistProgress:
    """Compute done/total counts and the rounded completion percentage."""
    completed = completed or {}
    tasks = list(plan.iter_tasks())
    total = len(tasks)
    done = sum(1 for task in tasks if is_done(task, completed))
    # Round half up, like the browser's Math.round
    percent = math.floor(100 * done / total + 0.5) if total else 0
    return ChecklistProgress(done_count=done, total_count=total, percent=percent)


def toggle(completed: MutableMapping[str, bool], key: str) -> bool:
    """Flip one entry of the caller's completion set and return its new value."""
    completed[key] = not completed.get(key, False)
    return completed[key]

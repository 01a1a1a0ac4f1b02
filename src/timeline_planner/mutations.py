"""
Explicit mutation API over an immutable task collection.

Each operation returns the updated collection together with the reminder
commands the caller must hand to the ReminderScheduler. Nothing here talks to
the notification facility or to storage.
"""
from __future__ import annotations

import datetime as dt
import random
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from scheduling.reminders import CancelReminders, ReminderCommand, RescheduleReminders
from scheduling.time_of_day import format_time_of_day, parse_time_of_day, shift_time_of_day
from timeline_planner.config import DEFAULT_REMINDER_MINUTES
from timeline_planner.errors import DuplicateTaskError, MalformedTime, TaskNotFoundError
from timeline_planner.models import NoRecurrence, Task, TaskCandidate, generate_task_id

DEFAULT_DURATION_MIN = 60

Tasks = Tuple[Task, ...]


@dataclass(frozen=True)
class MutationResult:
    tasks: Tasks
    commands: Tuple[ReminderCommand, ...] = ()


def _find(tasks: Tasks, task_id: int) -> Task:
    for t in tasks:
        if t.id == task_id:
            return t
    raise TaskNotFoundError(task_id)


def create_task(tasks: Tasks, task: Task) -> MutationResult:
    if any(t.id == task.id for t in tasks):
        raise DuplicateTaskError(task.id)
    return MutationResult(tasks=tuple(tasks) + (task,), commands=(RescheduleReminders(task),))


def update_task(tasks: Tasks, task: Task) -> MutationResult:
    _find(tasks, task.id)
    updated = tuple(task if t.id == task.id else t for t in tasks)
    return MutationResult(tasks=updated, commands=(RescheduleReminders(task),))


def delete_series(tasks: Tasks, task_id: int) -> MutationResult:
    _find(tasks, task_id)
    remaining = tuple(t for t in tasks if t.id != task_id)
    return MutationResult(tasks=remaining, commands=(CancelReminders(task_id),))


def delete_occurrence(tasks: Tasks, task_id: int, day: dt.date) -> MutationResult:
    """
    Hide one occurrence of a recurring task by recording an exception.

    Weekly reminders are keyed by weekday, not by date, so no reminder command
    is issued and the reminder for that weekday still fires. Deleting the
    occurrence of a one-off task deletes the task.
    """
    task = _find(tasks, task_id)
    if not task.is_recurring:
        return delete_series(tasks, task_id)

    updated_task = task.model_copy(update={"exceptions": tuple(sorted(set(task.exceptions) | {day}))})
    updated = tuple(updated_task if t.id == task_id else t for t in tasks)
    return MutationResult(tasks=updated)


def default_end(start: str, duration_min: int = DEFAULT_DURATION_MIN) -> str:
    try:
        end, _ = shift_time_of_day(parse_time_of_day(start), duration_min)
    except MalformedTime:
        return start
    return format_time_of_day(end)


def task_from_candidate(
    candidate: TaskCandidate,
    today: dt.date,
    existing_ids: Iterable[int],
    reminder_minutes: int = DEFAULT_REMINDER_MINUTES,
    keep_recurrence: bool = False,
    rng: Optional[random.Random] = None,
) -> Task:
    """Turn an extracted candidate into a task with a fresh id and defaults."""
    recurring = candidate.recurring if keep_recurrence and candidate.recurring else NoRecurrence()
    data = {
        "id": generate_task_id(existing_ids, rng=rng),
        "title": candidate.title,
        "start": candidate.start,
        "end": candidate.end or default_end(candidate.start),
        "date": candidate.date or today,
        "recurring": recurring,
        "exceptions": (),
        "reminder_minutes": reminder_minutes,
    }
    if candidate.category:
        data["category"] = candidate.category
    if candidate.priority is not None:
        data["priority"] = candidate.priority
    return Task(**data)


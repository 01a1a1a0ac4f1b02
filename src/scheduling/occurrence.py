from __future__ import annotations

from datetime import date, time
from typing import Iterable, List

from scheduling.time_of_day import parse_time_of_day
from timeline_planner.errors import MalformedTime
from timeline_planner.models import Task, sunday_weekday


def occurs_on(task: Task, day: date) -> bool:
    """Whether `task` has an occurrence on `day`.

    Exceptions win over everything, the anchor date always counts, nothing
    happens before the anchor, and after it the recurrence rule decides by
    weekday.
    """
    if day in task.exceptions:
        return False
    if day == task.date:
        return True
    if day < task.date:
        return False
    return task.recurring.matches(sunday_weekday(day))


def _start_key(task: Task):
    try:
        return (0, parse_time_of_day(task.start), task.title)
    except MalformedTime:
        return (1, time.max, task.title)


def occurrences_on(tasks: Iterable[Task], day: date) -> List[Task]:
    """Tasks visible on the timeline for `day`, ordered by start time."""
    return sorted((t for t in tasks if occurs_on(t, day)), key=_start_key)

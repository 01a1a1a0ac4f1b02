from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable, Iterable, List, Union

from notifications.base import NotificationFacility
from scheduling.time_of_day import parse_time_of_day, shift_time_of_day
from timeline_planner.errors import MalformedTime, NotificationFacilityUnavailable, PlannerError
from timeline_planner.models import (
    NOTIFICATION_ID_CEILING,
    AtFireRule,
    ReminderInstance,
    Task,
    WeeklyFireRule,
)

logger = logging.getLogger(__name__)


def single_reminder_id(task_id: int) -> int:
    return task_id % NOTIFICATION_ID_CEILING


def weekday_reminder_id(task_id: int, weekday: int) -> int:
    return (task_id + weekday + 1) % NOTIFICATION_ID_CEILING


def reserved_reminder_ids(task_id: int) -> List[int]:
    """Every identifier a task could have used under any recurrence rule."""
    ids = [task_id % NOTIFICATION_ID_CEILING]
    for i in range(1, 8):
        ids.append((task_id + i) % NOTIFICATION_ID_CEILING)
    return ids


def reminder_body(task: Task) -> str:
    return f"Starts in {task.reminder_minutes}m"


def build_reminders(task: Task, now: datetime) -> List[ReminderInstance]:
    """
    Reminder instances for `task` as of `now`.

    Single tasks get one absolute reminder unless it would already be in the
    past. Recurring tasks get one weekly reminder per weekday the rule fires
    on, keyed by that weekday; when the lead time crosses midnight the
    reminder fires on the previous weekday.

    Raises MalformedTime if the start time cannot be parsed.
    """
    if task.reminder_minutes == 0:
        return []

    try:
        start = parse_time_of_day(task.start)
    except MalformedTime as e:
        raise MalformedTime(e.value, task_id=task.id) from e

    body = reminder_body(task)

    if not task.is_recurring:
        try:
            fire_at = datetime.combine(task.date, start) - timedelta(minutes=task.reminder_minutes)
        except (OverflowError, ValueError) as e:
            # lead time reaches outside the representable calendar
            raise MalformedTime(task.start, task_id=task.id) from e
        if fire_at <= now:
            return []
        return [
            ReminderInstance(
                identifier=single_reminder_id(task.id),
                title=task.title,
                body=body,
                fire=AtFireRule(at=fire_at),
            )
        ]

    remind_at, day_offset = shift_time_of_day(start, -task.reminder_minutes)
    reminders = []
    for day in task.recurring.weekdays():
        reminders.append(
            ReminderInstance(
                identifier=weekday_reminder_id(task.id, day),
                title=task.title,
                body=body,
                fire=WeeklyFireRule(
                    weekday=(day + day_offset) % 7,
                    hour=remind_at.hour,
                    minute=remind_at.minute,
                ),
            )
        )
    return reminders


@dataclass
class ReminderReport:
    task_id: int
    cancelled: List[int] = field(default_factory=list)
    scheduled: List[ReminderInstance] = field(default_factory=list)
    errors: List[PlannerError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


@dataclass(frozen=True)
class RescheduleReminders:
    task: Task


@dataclass(frozen=True)
class CancelReminders:
    task_id: int


ReminderCommand = Union[RescheduleReminders, CancelReminders]


class ReminderScheduler:
    """Keeps the notification facility in step with the task collection.

    Every call cancels the task's whole reserved identifier range before
    installing anything, so repeated calls are idempotent and the last one wins.
    """

    def __init__(self, facility: NotificationFacility, clock: Callable[[], datetime] = datetime.now):
        self.facility = facility
        self.clock = clock

    def _cancel_range(self, report: ReminderReport) -> bool:
        ids = reserved_reminder_ids(report.task_id)
        try:
            self.facility.cancel(ids)
        except NotificationFacilityUnavailable as e:
            logger.error(f"Could not cancel reminders for task {report.task_id}: {e}")
            report.errors.append(e)
            return False
        report.cancelled = ids
        return True

    def schedule(self, task: Task) -> ReminderReport:
        report = ReminderReport(task_id=task.id)
        if not self._cancel_range(report):
            # Scheduling on top of a range we could not clear risks duplicates.
            return report

        try:
            reminders = build_reminders(task, self.clock())
        except MalformedTime as e:
            logger.warning(f"Skipping reminders for task {task.id}: {e}")
            report.errors.append(e)
            return report

        if not reminders:
            return report

        try:
            self.facility.schedule(reminders)
        except NotificationFacilityUnavailable as e:
            logger.error(f"Could not schedule reminders for task {task.id}: {e}")
            report.errors.append(e)
            return report

        report.scheduled = reminders
        logger.info(f"Scheduled {len(reminders)} reminder(s) for task {task.id}")
        return report

    def cancel(self, task_id: int) -> ReminderReport:
        report = ReminderReport(task_id=task_id)
        self._cancel_range(report)
        return report

    def schedule_all(self, tasks: Iterable[Task]) -> List[ReminderReport]:
        return [self.schedule(t) for t in tasks]

    def execute(self, commands: Iterable[ReminderCommand]) -> List[ReminderReport]:
        reports = []
        for cmd in commands:
            if isinstance(cmd, RescheduleReminders):
                reports.append(self.schedule(cmd.task))
            elif isinstance(cmd, CancelReminders):
                reports.append(self.cancel(cmd.task_id))
            else:
                raise TypeError(f"unknown reminder command {cmd!r}")
        return reports

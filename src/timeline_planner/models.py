from __future__ import annotations

import datetime as dt
import logging
import random
from typing import Annotated, Iterable, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from timeline_planner.config import DEFAULT_REMINDER_MINUTES
from timeline_planner.errors import InvalidRecurrenceShape

logger = logging.getLogger(__name__)

# Notification identifiers must stay below 2^31 - 1 and have no namespacing.
NOTIFICATION_ID_CEILING = 2147483647
# A task owns its id plus the seven following identifiers (one per weekday).
RESERVED_ID_SPAN = 8

ALL_DAYS: Tuple[int, ...] = (0, 1, 2, 3, 4, 5, 6)
WORK_DAYS: Tuple[int, ...] = (1, 2, 3, 4, 5)


def sunday_weekday(day: dt.date) -> int:
    """Weekday of `day` counted from Sunday (0) to Saturday (6)."""
    return day.isoweekday() % 7


class _Rule(BaseModel):
    model_config = ConfigDict(frozen=True)

    def weekdays(self) -> Tuple[int, ...]:
        return ()

    def matches(self, weekday: int) -> bool:
        return weekday in self.weekdays()


class NoRecurrence(_Rule):
    type: Literal["none"] = "none"


class DailyRecurrence(_Rule):
    type: Literal["daily"] = "daily"

    def weekdays(self) -> Tuple[int, ...]:
        return ALL_DAYS


class WeekdaysRecurrence(_Rule):
    type: Literal["weekdays"] = "weekdays"

    def weekdays(self) -> Tuple[int, ...]:
        return WORK_DAYS


class CustomRecurrence(_Rule):
    type: Literal["custom"] = "custom"
    days: Tuple[int, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def missing_days_mean_anchor_only(cls, data):
        if isinstance(data, dict) and data.get("days") is None:
            logger.warning("custom recurrence without a day set, treating it as anchor-only")
            data = {**data, "days": ()}
        return data

    @field_validator("days", mode="before")
    @classmethod
    def normalise_days(cls, v):
        if not isinstance(v, (list, tuple, set, frozenset)):
            raise InvalidRecurrenceShape(f"custom days must be a list, got {v!r}")
        days = set()
        for raw in v:
            try:
                d = int(raw)
            except (TypeError, ValueError):
                raise InvalidRecurrenceShape(f"weekday {raw!r} is not an integer")
            if not 0 <= d <= 6:
                raise InvalidRecurrenceShape(f"weekday {d} outside 0..6")
            days.add(d)
        return tuple(sorted(days))

    def weekdays(self) -> Tuple[int, ...]:
        return self.days


Recurrence = Annotated[
    Union[NoRecurrence, DailyRecurrence, WeekdaysRecurrence, CustomRecurrence],
    Field(discriminator="type"),
]


def _recurrence_or_none(v):
    if v is None:
        return {"type": "none"}
    return v


class Task(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int = Field(..., ge=1)
    title: str = Field(..., min_length=1)
    # Wall-clock "HH:MM" strings, parsed lazily by the reminder scheduler.
    start: str
    end: str
    category: str = "Personal"
    priority: int = 2

    date: dt.date
    recurring: Recurrence = Field(default_factory=NoRecurrence)
    exceptions: Tuple[dt.date, ...] = ()
    reminder_minutes: int = Field(DEFAULT_REMINDER_MINUTES, ge=0, alias="reminderMinutes")

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        v2 = v.strip()
        if not v2:
            raise ValueError("title must not be blank")
        return v2

    @field_validator("start", "end")
    @classmethod
    def strip_time(cls, v: str) -> str:
        return v.strip()

    @field_validator("recurring", mode="before")
    @classmethod
    def default_recurrence(cls, v):
        return _recurrence_or_none(v)

    @field_validator("exceptions", mode="before")
    @classmethod
    def exceptions_or_empty(cls, v):
        return () if v is None else v

    @field_validator("exceptions")
    @classmethod
    def sorted_exceptions(cls, v: Tuple[dt.date, ...]) -> Tuple[dt.date, ...]:
        return tuple(sorted(set(v)))

    @property
    def is_recurring(self) -> bool:
        return self.recurring.type != "none"


class AtFireRule(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["at"] = "at"
    at: dt.datetime


class WeeklyFireRule(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["weekly"] = "weekly"
    weekday: int = Field(..., ge=0, le=6)
    hour: int = Field(..., ge=0, le=23)
    minute: int = Field(..., ge=0, le=59)


FireRule = Annotated[Union[AtFireRule, WeeklyFireRule], Field(discriminator="kind")]


class ReminderInstance(BaseModel):
    """A concrete notification derived from a task; never persisted."""

    model_config = ConfigDict(frozen=True)

    identifier: int = Field(..., ge=0, lt=NOTIFICATION_ID_CEILING)
    title: str
    body: str = Field(..., min_length=1)
    fire: FireRule


class TaskCandidate(BaseModel):
    """
    Partial task record produced by the quick-add or image extraction
    collaborators. Ids, exceptions and reminder settings are assigned later.
    """

    title: str = Field(..., min_length=1)
    start: str
    end: Optional[str] = None
    date: Optional[dt.date] = None
    category: Optional[str] = None
    priority: Optional[int] = None
    recurring: Optional[Recurrence] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        v2 = v.strip()
        if not v2:
            raise ValueError("title must not be blank")
        return v2

    @field_validator("date", "end", "category", mode="before")
    @classmethod
    def blank_is_missing(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v


def _ranges_overlap(a: int, b: int) -> bool:
    distance = min((a - b) % NOTIFICATION_ID_CEILING, (b - a) % NOTIFICATION_ID_CEILING)
    return distance < RESERVED_ID_SPAN


def generate_task_id(existing_ids: Iterable[int], rng: Optional[random.Random] = None) -> int:
    """
    Draw a random task id whose reserved notification range does not overlap
    the range of any existing task.
    """
    rng = rng or random.Random()
    taken = [i % NOTIFICATION_ID_CEILING for i in existing_ids]
    while True:
        candidate = rng.randrange(1, NOTIFICATION_ID_CEILING)
        if not any(_ranges_overlap(candidate, t) for t in taken):
            return candidate

from __future__ import annotations


class PlannerError(Exception):
    """Base class for errors raised by the planner engine."""


class MalformedTime(PlannerError, ValueError):
    """A start time or date string could not be parsed into a fire moment."""

    def __init__(self, value: object, task_id: int | None = None):
        self.value = value
        self.task_id = task_id
        super().__init__(f"malformed time {value!r}")


class InvalidRecurrenceShape(PlannerError, ValueError):
    pass


class NotificationFacilityUnavailable(PlannerError):
    """The external notification facility rejected or failed a request."""


class TaskNotFoundError(PlannerError, KeyError):
    def __init__(self, task_id: int):
        self.task_id = task_id
        super().__init__(f"task {task_id} not found")

    def __str__(self) -> str:
        return self.args[0]


class DuplicateTaskError(PlannerError):
    def __init__(self, task_id: int):
        self.task_id = task_id
        super().__init__(f"task {task_id} already exists")


class ExtractionError(PlannerError):
    """The extraction collaborator could not be reached."""

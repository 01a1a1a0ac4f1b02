from __future__ import annotations

import logging
import threading
from datetime import date, datetime, timedelta
from typing import Any, Callable, Dict, List, Optional

from extraction.dedup import merge_candidates
from extraction.task_extractor import TaskExtractor
from llm.providers.base import ImageInput
from notifications.base import NotificationFacility
from notifications.gateway_facility import HttpNotificationFacility
from notifications.memory_facility import InMemoryNotificationFacility
from scheduling.occurrence import occurrences_on
from scheduling.reminders import ReminderReport, ReminderScheduler
from storage.task_store import TaskStore
from timeline_planner import mutations
from timeline_planner.config import (
    DEFAULT_REMINDER_MINUTES,
    NOTIFICATION_GATEWAY_TIMEOUT_S,
    NOTIFICATION_GATEWAY_URL,
)
from timeline_planner.errors import TaskNotFoundError
from timeline_planner.models import AtFireRule, ReminderInstance, Task, generate_task_id
from api.metrics import (
    CANDIDATES_DEDUPLICATED_TOTAL,
    REMINDER_FAILURES_TOTAL,
    REMINDERS_CANCELLED_TOTAL,
    REMINDERS_SCHEDULED_TOTAL,
    TASKS_EXTRACTED_TOTAL,
    TASKS_GAUGE,
)

logger = logging.getLogger(__name__)

TEST_NOTIFICATION_ID = 12345


def build_facility() -> NotificationFacility:
    if NOTIFICATION_GATEWAY_URL:
        return HttpNotificationFacility(NOTIFICATION_GATEWAY_URL, timeout_s=NOTIFICATION_GATEWAY_TIMEOUT_S)
    return InMemoryNotificationFacility()


def _record(reports: List[ReminderReport]) -> None:
    for report in reports:
        REMINDERS_SCHEDULED_TOTAL.inc(len(report.scheduled))
        REMINDERS_CANCELLED_TOTAL.inc(len(report.cancelled))
        for err in report.errors:
            REMINDER_FAILURES_TOTAL.labels(kind=type(err).__name__).inc()


class PlannerBackend:
    """Application layer around the task collection.

    Applies mutations, persists the resulting collection and hands the
    reminder commands to the scheduler. Mutations are serialised with a lock
    because request handlers run in a thread pool.
    """

    def __init__(
        self,
        store: Optional[TaskStore] = None,
        scheduler: Optional[ReminderScheduler] = None,
        extractor: Optional[TaskExtractor] = None,
        clock: Callable[[], datetime] = datetime.now,
        default_reminder_minutes: int = DEFAULT_REMINDER_MINUTES,
    ):
        self.clock = clock
        self.store = store or TaskStore()
        self.scheduler = scheduler or ReminderScheduler(build_facility(), clock=clock)
        self._extractor = extractor
        self.default_reminder_minutes = default_reminder_minutes
        self._lock = threading.Lock()
        self.tasks: mutations.Tasks = tuple(self.store.load())
        TASKS_GAUGE.set(len(self.tasks))

    @property
    def extractor(self) -> TaskExtractor:
        if self._extractor is None:
            self._extractor = TaskExtractor()
        return self._extractor

    def _apply(self, result: mutations.MutationResult) -> List[ReminderReport]:
        self.tasks = result.tasks
        self.store.save(self.tasks)
        TASKS_GAUGE.set(len(self.tasks))
        reports = self.scheduler.execute(result.commands)
        _record(reports)
        return reports

    # -- queries -----------------------------------------------------------

    def list_tasks(self) -> List[Task]:
        return list(self.tasks)

    def get_task(self, task_id: int) -> Task:
        for t in self.tasks:
            if t.id == task_id:
                return t
        raise TaskNotFoundError(task_id)

    def timeline(self, day: date) -> List[Task]:
        return occurrences_on(self.tasks, day)

    def pending_reminders(self) -> List[ReminderInstance]:
        return self.scheduler.facility.pending()

    # -- mutations ---------------------------------------------------------

    def create(self, fields: Dict[str, Any]) -> Task:
        with self._lock:
            data = {
                "date": self.clock().date(),
                "reminder_minutes": self.default_reminder_minutes,
                **fields,
                "id": generate_task_id(t.id for t in self.tasks),
            }
            task = Task(**data)
            self._apply(mutations.create_task(self.tasks, task))
        logger.info(f"Created task {task.id} ({task.title!r})")
        return task

    def update(self, task_id: int, changes: Dict[str, Any]) -> Task:
        with self._lock:
            current = self.get_task(task_id)
            task = Task(**{**current.model_dump(), **changes, "id": task_id})
            self._apply(mutations.update_task(self.tasks, task))
        logger.info(f"Updated task {task_id}")
        return task

    def delete_series(self, task_id: int) -> None:
        with self._lock:
            self._apply(mutations.delete_series(self.tasks, task_id))
        logger.info(f"Deleted task {task_id}")

    def delete_occurrence(self, task_id: int, day: date) -> Optional[Task]:
        """Returns the task with the new exception, or None if the task itself was removed."""
        with self._lock:
            self._apply(mutations.delete_occurrence(self.tasks, task_id, day))
            remaining = [t for t in self.tasks if t.id == task_id]
        return remaining[0] if remaining else None

    def quick_add(self, text: str) -> Optional[Task]:
        now = self.clock()
        candidate = self.extractor.quick_add(text, now=now)
        if candidate is None:
            return None
        TASKS_EXTRACTED_TOTAL.inc()
        with self._lock:
            task = mutations.task_from_candidate(
                candidate,
                now.date(),
                (t.id for t in self.tasks),
                reminder_minutes=self.default_reminder_minutes,
                keep_recurrence=True,
            )
            self._apply(mutations.create_task(self.tasks, task))
        return task

    def import_from_image(self, image: ImageInput) -> List[Task]:
        now = self.clock()
        candidates = self.extractor.extract_from_image(image, now=now)
        TASKS_EXTRACTED_TOTAL.inc(len(candidates))
        with self._lock:
            new_tasks = merge_candidates(
                self.tasks, candidates, now.date(), reminder_minutes=self.default_reminder_minutes
            )
            CANDIDATES_DEDUPLICATED_TOTAL.inc(len(candidates) - len(new_tasks))
            for task in new_tasks:
                self._apply(mutations.create_task(self.tasks, task))
        if not new_tasks and candidates:
            logger.info("No new tasks found, all extracted entries already exist")
        return new_tasks

    # -- reminders ---------------------------------------------------------

    def reschedule_all(self) -> List[ReminderReport]:
        with self._lock:
            reports = self.scheduler.schedule_all(self.tasks)
        _record(reports)
        failed = [r for r in reports if not r.ok]
        if failed:
            logger.warning(f"Reminders failed for {len(failed)} of {len(reports)} task(s)")
        return reports

    def send_test_notification(self) -> ReminderInstance:
        reminder = ReminderInstance(
            identifier=TEST_NOTIFICATION_ID,
            title="Test System",
            body="Reminders are active!",
            fire=AtFireRule(at=self.clock() + timedelta(seconds=3)),
        )
        self.scheduler.facility.schedule([reminder])
        return reminder

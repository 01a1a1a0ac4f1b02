from __future__ import annotations

import datetime as dt
import logging
import random
from typing import Iterable, List, Optional, Tuple

from timeline_planner.config import DEFAULT_REMINDER_MINUTES
from timeline_planner.models import Task, TaskCandidate
from timeline_planner.mutations import task_from_candidate

logger = logging.getLogger(__name__)

DedupKey = Tuple[str, str, dt.date]


def dedup_key(title: str, start: str, day: dt.date) -> DedupKey:
    # end, category and priority are deliberately not part of the key
    return (title.strip().casefold(), start.strip(), day)


def merge_candidates(
    existing: Iterable[Task],
    candidates: Iterable[TaskCandidate],
    today: dt.date,
    reminder_minutes: int = DEFAULT_REMINDER_MINUTES,
    rng: Optional[random.Random] = None,
) -> List[Task]:
    """
    New tasks for the extracted candidates that do not duplicate an existing
    task (same title ignoring case, same start string, same resolved date).
    Candidates are only compared against `existing`, so two identical rows in
    one batch both become tasks.

    Kept candidates get fresh ids, no recurrence, no exceptions and the default
    reminder lead time.
    """
    existing = list(existing)
    seen = {dedup_key(t.title, t.start, t.date) for t in existing}
    ids = [t.id for t in existing]

    new_tasks: List[Task] = []
    for c in candidates:
        key = dedup_key(c.title, c.start, c.date or today)
        if key in seen:
            logger.debug("Dropping duplicate candidate %r at %s on %s", c.title, c.start, key[2])
            continue
        task = task_from_candidate(c, today, ids, reminder_minutes=reminder_minutes, rng=rng)
        ids.append(task.id)
        new_tasks.append(task)
    return new_tasks

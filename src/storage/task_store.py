from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, List

from pydantic import ValidationError

from timeline_planner.config import TASKS_PATH
from timeline_planner.models import Task

logger = logging.getLogger(__name__)


class TaskStore:
    def __init__(self, path: str = TASKS_PATH):
        self.path = Path(path)

    def load(self) -> List[Task]:
        """
        Load the task list from disk. Returns an empty list if the file is missing or unreadable.
        Records that fail validation are skipped; the rest of the list is kept.
        """
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            records = list(data.get("tasks", []))
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logger.warning("Could not read task list from %s: %s", self.path, e)
            return []

        tasks = []
        for item in records:
            try:
                tasks.append(Task(**item))
            except (TypeError, ValidationError) as e:
                logger.warning("Skipping invalid task record %r in %s: %s", item, self.path, e)
        return tasks

    def save(self, tasks: Iterable[Task]) -> None:
        """
        Save the full task list to disk. Dates are ISO strings, times stay "HH:MM".
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = {"tasks": [t.model_dump(mode="json", by_alias=True) for t in tasks]}
        self.path.write_text(
            json.dumps(data, ensure_ascii=False, indent=2),
            encoding="utf-8",
        )

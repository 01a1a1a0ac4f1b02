from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Iterable, List, Optional

from pydantic import ValidationError

from llm.llm_client import LLMClient
from llm.providers.base import ImageInput
from timeline_planner.models import TaskCandidate

logger = logging.getLogger(__name__)


def _to_candidates(records: Iterable[dict[str, Any]]) -> List[TaskCandidate]:
    candidates = []
    for record in records:
        try:
            candidates.append(TaskCandidate(**record))
        except (TypeError, ValidationError) as e:
            logger.warning(f"Dropping invalid extracted task {record!r}: {e}")
    return candidates


class TaskExtractor:

    def __init__(self, llm_client: Optional[LLMClient] = None):
        self.llm = llm_client or LLMClient()

    def quick_add(self, text: str, now: Optional[datetime] = None) -> Optional[TaskCandidate]:
        record = self.llm.parse_task(text, now=now)
        if record is None:
            return None
        candidates = _to_candidates([record])
        return candidates[0] if candidates else None

    def extract_from_image(self, image: ImageInput, now: Optional[datetime] = None) -> List[TaskCandidate]:
        return _to_candidates(self.llm.extract_tasks_from_image(image, now=now))

from __future__ import annotations
from typing import Dict, List, Tuple

from notifications.base import NotificationFacility
from timeline_planner.models import ReminderInstance


class InMemoryNotificationFacility(NotificationFacility):
    """Keeps pending reminders in process. Records every call in `calls`."""

    def __init__(self):
        self._pending: Dict[int, ReminderInstance] = {}
        self.calls: List[Tuple[str, list]] = []

    def schedule(self, reminders: List[ReminderInstance]) -> None:
        self.calls.append(("schedule", [r.identifier for r in reminders]))
        for r in reminders:
            self._pending[r.identifier] = r

    def cancel(self, identifiers: List[int]) -> None:
        self.calls.append(("cancel", list(identifiers)))
        for i in identifiers:
            self._pending.pop(i, None)

    def pending(self) -> List[ReminderInstance]:
        return sorted(self._pending.values(), key=lambda r: r.identifier)

    def pending_ids(self) -> set:
        return set(self._pending)

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import List

from timeline_planner.models import ReminderInstance


class NotificationFacility(ABC):
    """Host scheduling facility for local reminders.

    Identifiers are plain integers below 2^31 - 1 shared by every task, so
    callers are responsible for keeping them apart.
    """

    @abstractmethod
    def schedule(self, reminders: List[ReminderInstance]) -> None:
        """
        Install the reminders; an existing reminder with the same identifier is replaced.
        Must raise NotificationFacilityUnavailable when the request fails.
        """
        raise NotImplementedError

    @abstractmethod
    def cancel(self, identifiers: List[int]) -> None:
        raise NotImplementedError

    @abstractmethod
    def pending(self) -> List[ReminderInstance]:
        raise NotImplementedError

from datetime import date, datetime

import pytest

from notifications.memory_facility import InMemoryNotificationFacility
from scheduling.reminders import ReminderScheduler
from timeline_planner.models import Task

NOW = datetime(2024, 1, 1, 8, 0)  # a Monday


class FakeProvider:
    def __init__(self, response_text: str):
        self._response_text = response_text
        self.prompts = []

    def generate(self, *, system: str, user: str, image=None) -> str:
        self.prompts.append((user, image))
        return self._response_text


class SequenceRng:
    def __init__(self, values):
        self._values = list(values)

    def randrange(self, start, stop):
        return self._values.pop(0)


@pytest.fixture
def fake_provider_factory():
    def _make(response_text: str):
        return FakeProvider(response_text)
    return _make


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def facility():
    return InMemoryNotificationFacility()


@pytest.fixture
def scheduler(facility):
    return ReminderScheduler(facility, clock=lambda: NOW)


@pytest.fixture
def make_task():
    def _make(**overrides):
        data = {
            "id": 1000,
            "title": "Standup",
            "start": "09:00",
            "end": "09:15",
            "date": date(2024, 1, 1),
            "reminder_minutes": 15,
        }
        data.update(overrides)
        return Task(**data)
    return _make

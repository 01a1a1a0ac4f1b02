from datetime import date

import pytest

from conftest import SequenceRng
from scheduling.reminders import CancelReminders, RescheduleReminders
from timeline_planner import mutations
from timeline_planner.errors import DuplicateTaskError, TaskNotFoundError
from timeline_planner.models import TaskCandidate


def test_create_appends_and_schedules(make_task):
    t = make_task()
    result = mutations.create_task((), t)
    assert result.tasks == (t,)
    assert result.commands == (RescheduleReminders(t),)


def test_create_rejects_duplicate_id(make_task):
    with pytest.raises(DuplicateTaskError):
        mutations.create_task((make_task(),), make_task(title="Other"))


def test_update_replaces_in_place(make_task):
    a, b = make_task(id=1), make_task(id=50)
    edited = b.model_copy(update={"title": "Retro"})
    result = mutations.update_task((a, b), edited)
    assert [t.title for t in result.tasks] == ["Standup", "Retro"]
    assert result.commands == (RescheduleReminders(edited),)


def test_update_unknown_task(make_task):
    with pytest.raises(TaskNotFoundError):
        mutations.update_task((), make_task())


def test_delete_series_cancels(make_task):
    result = mutations.delete_series((make_task(recurring={"type": "daily"}),), 1000)
    assert result.tasks == ()
    assert result.commands == (CancelReminders(1000),)


def test_delete_occurrence_records_exception_only(make_task):
    original = (make_task(recurring={"type": "daily"}),)
    result = mutations.delete_occurrence(original, 1000, date(2024, 1, 3))
    assert result.tasks[0].exceptions == (date(2024, 1, 3),)
    # weekly reminders are weekday-keyed and stay as they are
    assert result.commands == ()
    assert original[0].exceptions == ()


def test_delete_occurrence_of_single_task_deletes_it(make_task):
    result = mutations.delete_occurrence((make_task(),), 1000, date(2024, 1, 1))
    assert result.tasks == ()
    assert result.commands == (CancelReminders(1000),)


def test_delete_occurrence_unknown_task():
    with pytest.raises(TaskNotFoundError):
        mutations.delete_occurrence((), 5, date(2024, 1, 1))


def test_task_from_candidate_defaults():
    c = TaskCandidate(title="Dentist", start="15:30", recurring={"type": "daily"})
    t = mutations.task_from_candidate(c, date(2024, 1, 1), [], reminder_minutes=5, rng=SequenceRng([77]))
    assert t.id == 77
    assert t.end == "16:30"
    assert t.date == date(2024, 1, 1)
    assert not t.is_recurring
    assert t.exceptions == ()
    assert t.reminder_minutes == 5


def test_task_from_candidate_can_keep_recurrence():
    c = TaskCandidate(title="Walk", start="07:00", end="07:30", category="Health",
                      recurring={"type": "custom", "days": [6, 0]})
    t = mutations.task_from_candidate(c, date(2024, 1, 1), [], keep_recurrence=True)
    assert t.recurring.days == (0, 6)
    assert t.category == "Health"
    assert t.end == "07:30"

from datetime import date

import pytest
from pydantic import ValidationError

from conftest import SequenceRng
from timeline_planner.models import (
    NOTIFICATION_ID_CEILING,
    CustomRecurrence,
    NoRecurrence,
    Task,
    TaskCandidate,
    generate_task_id,
    sunday_weekday,
)


def test_custom_days_sorted_and_deduplicated():
    rule = CustomRecurrence(days=[3, 1, 3, 0])
    assert rule.days == (0, 1, 3)


def test_custom_days_missing_means_anchor_only(make_task):
    t = make_task(recurring={"type": "custom"})
    assert t.recurring.days == ()
    t2 = make_task(recurring={"type": "custom", "days": None})
    assert t2.recurring.weekdays() == ()


def test_custom_days_out_of_range_rejected(make_task):
    with pytest.raises(ValidationError):
        make_task(recurring={"type": "custom", "days": [1, 7]})


def test_unknown_recurrence_type_rejected(make_task):
    with pytest.raises(ValidationError):
        make_task(recurring={"type": "monthly"})


def test_missing_recurrence_is_none(make_task):
    t = make_task(recurring=None)
    assert isinstance(t.recurring, NoRecurrence)
    assert not t.is_recurring


def test_task_empty_title():
    with pytest.raises(ValidationError):
        Task(id=1, title="   ", start="09:00", end="10:00", date=date(2024, 1, 1))


def test_negative_reminder_rejected(make_task):
    with pytest.raises(ValidationError):
        make_task(reminder_minutes=-5)


def test_task_id_must_be_positive(make_task):
    with pytest.raises(ValidationError):
        make_task(id=0)
    assert make_task(id=1).id == 1


def test_exceptions_normalised(make_task):
    t = make_task(exceptions=["2024-01-08", "2024-01-03", "2024-01-08"])
    assert t.exceptions == (date(2024, 1, 3), date(2024, 1, 8))


def test_task_is_immutable(make_task):
    t = make_task()
    with pytest.raises(ValidationError):
        t.title = "Other"


def test_json_dump_uses_record_shape(make_task):
    data = make_task(recurring={"type": "custom", "days": [5, 1]}).model_dump(mode="json", by_alias=True)
    assert data["reminderMinutes"] == 15
    assert data["date"] == "2024-01-01"
    assert data["recurring"] == {"type": "custom", "days": [1, 5]}
    assert Task(**data).recurring.days == (1, 5)


def test_sunday_weekday():
    assert sunday_weekday(date(2024, 1, 7)) == 0
    assert sunday_weekday(date(2024, 1, 1)) == 1
    assert sunday_weekday(date(2024, 1, 6)) == 6


def test_candidate_blank_date_is_missing():
    c = TaskCandidate(title="Lunch", start="13:00", date="")
    assert c.date is None


def test_generated_id_keeps_reminder_ranges_apart():
    rng = SequenceRng([103, 95, 92])
    assert generate_task_id([100], rng=rng) == 92


def test_generated_id_range_wraps_at_ceiling():
    rng = SequenceRng([3, 20])
    assert generate_task_id([NOTIFICATION_ID_CEILING - 2], rng=rng) == 20
